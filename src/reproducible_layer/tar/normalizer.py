"""Normalization of source entries into reproducible archive records."""

import stat

from ..utils.validator import validate_entry_name
from .models import ArchiveEntryRecord, EntryType, SourceEntry

# Values forced onto every record regardless of the build host
NORMALIZED_MTIME = 0
NORMALIZED_UID = 0
NORMALIZED_GID = 0
NORMALIZED_UNAME = ""
NORMALIZED_GNAME = ""


def normalize_entry(source: SourceEntry, name: str) -> ArchiveEntryRecord:
    """Build a reproducible archive record for a source entry.

    Modification time and ownership are replaced by fixed values. Type,
    permission bits, size and content source pass through untouched.

    Args:
        source: Entry as read from the build host
        name: Absolute Unix-style path of the entry inside the image

    Returns:
        A new ArchiveEntryRecord

    Raises:
        InvalidPathError: If name is not absolute or contains '..'
    """
    validate_entry_name(name)

    entry_type = source.entry_type
    return ArchiveEntryRecord(
        name=name,
        entry_type=entry_type,
        size=source.stat.st_size if entry_type is EntryType.FILE else 0,
        mode=stat.S_IMODE(source.stat.st_mode),
        source_path=source.path,
        link_target=source.link_target,
        mtime=NORMALIZED_MTIME,
        uid=NORMALIZED_UID,
        gid=NORMALIZED_GID,
        uname=NORMALIZED_UNAME,
        gname=NORMALIZED_GNAME,
    )
