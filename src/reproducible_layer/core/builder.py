"""Reproducible layer builder.

Reproducibility comes from two steps: every entry has its modification time
and ownership stripped, and the flattened entry list is sorted by name before
it is written. Neither the host's directory enumeration order nor the order
of registration can then leak into the layer bytes.
"""

import filecmp
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from ..exceptions import AmbiguousEntryError, EnumerationError
from ..tar.models import ArchiveEntryRecord, EntryType, LayerBlob, SourceEntry
from ..tar.normalizer import normalize_entry
from ..tar.walker import DirectoryWalker
from ..tar.writer import TarStreamBuilder
from .types import LayerConfig, PathLike, SourceGroup

logger = logging.getLogger(__name__)


def expand_group(group: SourceGroup) -> List[ArchiveEntryRecord]:
    """Expand one source group into normalized archive records.

    Directories contribute all of their descendants (but not themselves),
    named relative to the directory's parent so the directory name is kept.
    Anything else contributes a single entry named after its file name.

    Raises:
        EnumerationError: If a source cannot be read or traversed
        InvalidPathError: If a computed name is malformed
    """
    records = []
    for source_file in group.source_files:
        root = Path(os.path.abspath(source_file))
        source = SourceEntry.from_path(root)

        if source.entry_type is EntryType.DIRECTORY:
            for entry in DirectoryWalker(root).walk():
                relative = entry.path.relative_to(root.parent)
                name = "/".join((group.extraction_path, *relative.parts))
                records.append(normalize_entry(entry, name))
        else:
            name = f"{group.extraction_path}/{root.name}"
            records.append(normalize_entry(source, name))

    logger.debug(
        "Expanded %d source files at %s into %d entries",
        len(group.source_files),
        group.extraction_path or "/",
        len(records),
    )
    return records


def _is_equivalent(first: ArchiveEntryRecord, second: ArchiveEntryRecord) -> bool:
    """Check whether two same-named records would write identical bytes."""
    if (first.entry_type, first.mode, first.size, first.link_target) != (
        second.entry_type,
        second.mode,
        second.size,
        second.link_target,
    ):
        return False

    if first.entry_type is not EntryType.FILE:
        return True
    if first.source_path == second.source_path:
        return True

    try:
        return filecmp.cmp(first.source_path, second.source_path, shallow=False)
    except OSError as e:
        raise EnumerationError(
            f"Cannot compare {first.source_path} with {second.source_path}: {e}"
        ) from e


def sort_entries(records: Iterable[ArchiveEntryRecord]) -> List[ArchiveEntryRecord]:
    """Sort records byte-wise by name and collapse identical duplicates.

    Raises:
        AmbiguousEntryError: If two records share a name but differ in content
    """
    ordered = sorted(records, key=lambda record: record.sort_key)

    unique: List[ArchiveEntryRecord] = []
    for record in ordered:
        if unique and unique[-1].name == record.name:
            if not _is_equivalent(unique[-1], record):
                raise AmbiguousEntryError(
                    f"Conflicting entries for {record.name}: "
                    f"{unique[-1].source_path} and {record.source_path}"
                )
            logger.warning(
                "Collapsing duplicate entry %s (%s, %s)",
                record.name,
                unique[-1].source_path,
                record.source_path,
            )
            continue
        unique.append(record)
    return unique


def build_layer_entries(groups: Iterable[SourceGroup]) -> List[ArchiveEntryRecord]:
    """Expand, normalize and sort every group into the final entry order."""
    records: List[ArchiveEntryRecord] = []
    for group in groups:
        records.extend(expand_group(group))
    return sort_entries(records)


def serialize_entries(
    records: Iterable[ArchiveEntryRecord], config: Optional[LayerConfig] = None
) -> bytes:
    """Write already-sorted records into a tar byte stream.

    Raises:
        SerializationError: If the tar backend rejects a record
        EnumerationError: If file content cannot be read
    """
    config = config or LayerConfig()
    return TarStreamBuilder(config.archive_format).add_entries(records).finish()


class ReproducibleLayerBuilder:
    """Builds a reproducible layer from registered files and directories.

    The builder is immutable: :meth:`register` returns a new builder, so one
    instance can be built repeatedly or shared without copying.
    """

    def __init__(
        self,
        groups: Sequence[SourceGroup] = (),
        config: Optional[LayerConfig] = None,
    ) -> None:
        """Initialize the builder.

        Args:
            groups: Source groups to build from
            config: Layer configuration (defaults to LayerConfig())
        """
        self._groups: Tuple[SourceGroup, ...] = tuple(groups)
        self.config = config or LayerConfig()

    @property
    def groups(self) -> Tuple[SourceGroup, ...]:
        return self._groups

    def register(
        self, source_files: Sequence[PathLike], extraction_path: str
    ) -> "ReproducibleLayerBuilder":
        """Add source files to be extracted at extraction_path in the image.

        Registration never touches the filesystem.

        Args:
            source_files: Files and directories to add; directories add their
                contents under their own name
            extraction_path: Unix-style absolute directory in the image

        Returns:
            A new builder with the group appended

        Raises:
            TypeError: If source_files is a single path
            InvalidPathError: If extraction_path is malformed
        """
        group = SourceGroup.create(source_files, extraction_path)
        return ReproducibleLayerBuilder(self._groups + (group,), self.config)

    def build(self) -> LayerBlob:
        """Build the layer.

        Returns:
            LayerBlob with the tar bytes and the registered source files

        Raises:
            EnumerationError: If walking or reading a source fails
            SerializationError: If an entry cannot be written
            AmbiguousEntryError: If two sources conflict on one entry name
        """
        records = build_layer_entries(self._groups)
        blob = LayerBlob(
            data=serialize_entries(records, self.config),
            source_files=self.source_files(),
        )
        logger.info(
            "Built layer with %d entries (%d bytes, %s)",
            len(records),
            blob.size,
            blob.digest,
        )
        return blob

    def source_files(self) -> List[Path]:
        """Return every registered source path in registration order."""
        return [path for group in self._groups for path in group.source_files]
