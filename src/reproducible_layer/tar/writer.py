"""Tar stream serialization for normalized layer entries."""

import io
import logging
import os
import tarfile
from typing import Iterable, Optional

from ..exceptions import EnumerationError, SerializationError
from .models import ArchiveEntryRecord, EntryType

logger = logging.getLogger(__name__)

ARCHIVE_FORMATS = {
    "pax": tarfile.PAX_FORMAT,
    "gnu": tarfile.GNU_FORMAT,
    "ustar": tarfile.USTAR_FORMAT,
}

_TAR_TYPES = {
    EntryType.FILE: tarfile.REGTYPE,
    EntryType.DIRECTORY: tarfile.DIRTYPE,
    EntryType.SYMLINK: tarfile.SYMTYPE,
}


def to_tarinfo(record: ArchiveEntryRecord) -> tarfile.TarInfo:
    """Convert a record into a TarInfo header.

    The leading slash is dropped from the member name; tar members are
    relative to the extraction root.

    Raises:
        SerializationError: If the record type cannot be stored in a layer
    """
    tar_type = _TAR_TYPES.get(record.entry_type)
    if tar_type is None:
        raise SerializationError(
            f"Unsupported entry type {record.entry_type.value!r} for {record.name} "
            f"(source: {record.source_path})"
        )

    info = tarfile.TarInfo(record.name.lstrip("/"))
    info.type = tar_type
    info.size = record.size if tar_type == tarfile.REGTYPE else 0
    info.mode = record.mode
    info.linkname = record.link_target or ""
    info.mtime = record.mtime
    info.uid = record.uid
    info.gid = record.gid
    info.uname = record.uname
    info.gname = record.gname
    return info


class TarStreamBuilder:
    """Writes records into an in-memory tar stream in insertion order."""

    def __init__(self, archive_format: str = "pax") -> None:
        """Initialize builder.

        Args:
            archive_format: One of "pax", "gnu" or "ustar"
        """
        if archive_format not in ARCHIVE_FORMATS:
            raise ValueError(f"Unsupported archive format: {archive_format}")

        self._buffer = io.BytesIO()
        self._tar: Optional[tarfile.TarFile] = tarfile.open(
            fileobj=self._buffer,
            mode="w",
            format=ARCHIVE_FORMATS[archive_format],
            encoding="utf-8",
        )
        self.entry_count = 0

    def add_entry(self, record: ArchiveEntryRecord) -> None:
        """Append one record to the stream.

        Raises:
            SerializationError: If the tar backend rejects the record
            EnumerationError: If a regular file's content cannot be read
        """
        if self._tar is None:
            raise SerializationError("Tar stream already finished")

        info = to_tarinfo(record)
        try:
            if info.isreg():
                with open(record.source_path, "rb") as f:
                    current_size = os.fstat(f.fileno()).st_size
                    if current_size != record.size:
                        raise EnumerationError(
                            f"{record.source_path} changed size during the build "
                            f"({record.size} -> {current_size} bytes)"
                        )
                    self._tar.addfile(info, fileobj=f)
            else:
                self._tar.addfile(info)
        except (tarfile.TarError, ValueError) as e:
            raise SerializationError(f"Cannot add {record.name} to layer: {e}") from e
        except OSError as e:
            raise EnumerationError(
                f"Cannot read content of {record.source_path}: {e}"
            ) from e

        self.entry_count += 1

    def add_entries(self, records: Iterable[ArchiveEntryRecord]) -> "TarStreamBuilder":
        for record in records:
            self.add_entry(record)
        return self

    def finish(self) -> bytes:
        """Close the archive and return its bytes.

        Raises:
            SerializationError: If the stream cannot be finalized
        """
        if self._tar is None:
            raise SerializationError("Tar stream already finished")

        try:
            self._tar.close()
        except (tarfile.TarError, OSError) as e:
            raise SerializationError(f"Cannot finalize layer tar: {e}") from e
        finally:
            self._tar = None

        data = self._buffer.getvalue()
        logger.debug("Wrote %d entries, %d bytes", self.entry_count, len(data))
        return data
