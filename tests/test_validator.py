"""Tests for extraction path and entry name validation."""

import pytest

from reproducible_layer.exceptions import InvalidPathError
from reproducible_layer.utils.validator import (
    has_empty_or_dot_segment,
    has_illegal_characters,
    has_traversal_segment,
    is_absolute,
    is_utf8_encodable,
    validate_entry_name,
    validate_extraction_path,
)


def test_predicates():
    assert is_absolute("/app")
    assert not is_absolute("app")
    assert has_illegal_characters("/a\x00")
    assert not has_illegal_characters("/a b")
    assert has_traversal_segment("/a/../b")
    assert not has_traversal_segment("/a/..b")
    assert has_empty_or_dot_segment("/a//b")
    assert has_empty_or_dot_segment("/a/./b")
    assert not has_empty_or_dot_segment("/a/.b")
    assert is_utf8_encodable("/données")
    assert not is_utf8_encodable("/bad\udcff")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/app", "/app"),
        ("/app/", "/app"),
        ("/app/lib//", "/app/lib"),
        ("/", ""),
        ("/opt/my app", "/opt/my app"),
    ],
)
def test_validate_extraction_path_normalizes(path, expected):
    assert validate_extraction_path(path) == expected


@pytest.mark.parametrize(
    "path", ["", "app", "./app", "/app/..", "/app/../etc", "/a\x00", "/a//b", "/a/./b", "/bad\udcff"]
)
def test_validate_extraction_path_rejects(path):
    with pytest.raises(InvalidPathError):
        validate_extraction_path(path)


def test_validate_entry_name():
    assert validate_entry_name("/app/lib/util.jar") == "/app/lib/util.jar"

    for name in ["", "/", "app/x", "/app/", "/app/../x"]:
        with pytest.raises(InvalidPathError):
            validate_entry_name(name)
