"""Recursive directory enumeration for layer sources."""

import logging
import os
from pathlib import Path
from typing import Iterator, Union

from ..exceptions import EnumerationError
from .models import EntryType, SourceEntry

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Lazily walks every descendant of a directory, excluding the root.

    Symlinks are yielded as entries and never followed. Each call to
    :meth:`walk` starts a fresh traversal, so a walker can be reused across
    builds.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        """Initialize walker.

        Args:
            root: Directory to enumerate
        """
        self.root = Path(root)

    def __iter__(self) -> Iterator[SourceEntry]:
        return self.walk()

    def walk(self) -> Iterator[SourceEntry]:
        """Yield a :class:`SourceEntry` for every descendant of the root.

        Traversal is depth-first; callers must not rely on the order.

        Raises:
            EnumerationError: If any directory cannot be listed or any entry
                cannot be stat'ed
        """
        pending = [self.root]
        while pending:
            directory = pending.pop()
            for entry in self._scan(directory):
                yield entry
                if entry.entry_type is EntryType.DIRECTORY:
                    pending.append(entry.path)

    def _scan(self, directory: Path) -> list[SourceEntry]:
        try:
            with os.scandir(directory) as it:
                dir_entries = list(it)
        except OSError as e:
            raise EnumerationError(f"Cannot list directory {directory}: {e}") from e

        entries = []
        for dir_entry in dir_entries:
            path = Path(dir_entry.path)
            try:
                st = dir_entry.stat(follow_symlinks=False)
                link_target = (
                    os.readlink(dir_entry.path) if dir_entry.is_symlink() else None
                )
            except OSError as e:
                raise EnumerationError(f"Cannot read {path}: {e}") from e
            entries.append(SourceEntry(path=path, stat=st, link_target=link_target))

        logger.debug("Scanned %s: %d entries", directory, len(entries))
        return entries
