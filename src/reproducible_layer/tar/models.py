"""Data models for layer tar entries."""

import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..exceptions import EnumerationError
from ..utils.digest import calculate_digest


class EntryType(Enum):
    """Kind of filesystem entry carried into the layer."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "EntryType":
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER


@dataclass(frozen=True)
class SourceEntry:
    """A filesystem entry as seen on the build host."""

    path: Path
    stat: os.stat_result
    link_target: Optional[str] = None

    @property
    def entry_type(self) -> EntryType:
        return EntryType.from_mode(self.stat.st_mode)

    @classmethod
    def from_path(cls, path: Path) -> "SourceEntry":
        """Read metadata for a single path without following symlinks.

        Raises:
            EnumerationError: If the path cannot be stat'ed or its link read
        """
        try:
            st = os.lstat(path)
            link_target = os.readlink(path) if stat.S_ISLNK(st.st_mode) else None
        except OSError as e:
            raise EnumerationError(f"Cannot read source file {path}: {e}") from e
        return cls(path=Path(path), stat=st, link_target=link_target)


@dataclass(frozen=True)
class ArchiveEntryRecord:
    """Normalized tar entry, ready for serialization."""

    name: str  # Absolute Unix-style path inside the image
    entry_type: EntryType
    size: int
    mode: int  # Permission bits only
    source_path: Path
    link_target: Optional[str] = None
    mtime: int = 0
    uid: int = 0
    gid: int = 0
    uname: str = ""
    gname: str = ""

    @property
    def sort_key(self) -> bytes:
        return self.name.encode("utf-8")


@dataclass(frozen=True)
class LayerBlob:
    """Serialized layer tar plus the source paths it was built from."""

    data: bytes = field(repr=False)
    source_files: List[Path] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def digest(self) -> str:
        """sha256 digest of the uncompressed layer (its diff ID)."""
        return calculate_digest(self.data)

    def __bytes__(self) -> bytes:
        return self.data
