"""Tests for directory enumeration."""

import os

import pytest

from reproducible_layer.exceptions import EnumerationError
from reproducible_layer.tar.models import EntryType
from reproducible_layer.tar.walker import DirectoryWalker
from tests.helpers import make_tree


def relative_names(root, entries):
    return sorted(str(entry.path.relative_to(root)) for entry in entries)


def test_walk_yields_all_descendants_but_not_root(tmp_path):
    root = make_tree(tmp_path / "root", {"a": b"1", "b/c": b"2", "b/d/e": b"3"})

    entries = list(DirectoryWalker(root).walk())

    assert relative_names(root, entries) == ["a", "b", "b/c", "b/d", "b/d/e"]
    assert all(entry.path != root for entry in entries)


def test_walk_reports_entry_types(tmp_path):
    root = make_tree(tmp_path / "root", {"file": b"x", "dir/inner": b"y"})
    os.symlink("file", root / "link")

    types = {entry.path.name: entry.entry_type for entry in DirectoryWalker(root)}

    assert types["file"] is EntryType.FILE
    assert types["dir"] is EntryType.DIRECTORY
    assert types["link"] is EntryType.SYMLINK


def test_walk_does_not_follow_symlinked_directories(tmp_path):
    make_tree(tmp_path / "outside", {"secret": b"s"})
    root = make_tree(tmp_path / "root", {"keep": b"k"})
    os.symlink(tmp_path / "outside", root / "escape")

    entries = list(DirectoryWalker(root).walk())

    assert relative_names(root, entries) == ["escape", "keep"]
    escape = next(entry for entry in entries if entry.path.name == "escape")
    assert escape.link_target == str(tmp_path / "outside")


def test_walk_is_restartable(tmp_path):
    root = make_tree(tmp_path / "root", {"a": b"1", "b/c": b"2"})
    walker = DirectoryWalker(root)

    assert relative_names(root, walker.walk()) == relative_names(root, walker.walk())


def test_walk_empty_directory(tmp_path):
    assert list(DirectoryWalker(tmp_path).walk()) == []


def test_walk_missing_root_raises(tmp_path):
    walker = DirectoryWalker(tmp_path / "missing")

    with pytest.raises(EnumerationError, match="Cannot list directory"):
        list(walker.walk())


def test_walk_is_lazy(tmp_path):
    # Creating the walker on a missing root must not fail until iteration
    walker = DirectoryWalker(tmp_path / "later")
    make_tree(tmp_path / "later", {"x": b"1"})

    assert [entry.path.name for entry in walker] == ["x"]
