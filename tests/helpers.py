"""Test helper functions for building source trees and reading layers."""

import io
import os
import tarfile
from pathlib import Path


def make_tree(root: Path, files: dict[str, bytes]) -> Path:
    """Create files (and their parent directories) under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return root


def read_members(data: bytes) -> list[tarfile.TarInfo]:
    """Read tar members from layer bytes in stream order."""
    with tarfile.open(fileobj=io.BytesIO(data), mode="r") as tar:
        return tar.getmembers()


def read_names(data: bytes) -> list[str]:
    return [member.name for member in read_members(data)]


def read_file(data: bytes, name: str) -> bytes:
    with tarfile.open(fileobj=io.BytesIO(data), mode="r") as tar:
        return tar.extractfile(name).read()


def touch_tree(root: Path, mtime: int) -> None:
    """Set the modification time of root and everything below it."""
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            os.utime(os.path.join(dirpath, name), (mtime, mtime), follow_symlinks=False)
    os.utime(root, (mtime, mtime))
