"""Core types for layer building."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ..tar.writer import ARCHIVE_FORMATS
from ..utils.validator import validate_extraction_path

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SourceGroup:
    """Source files extracted together at one path in the image."""

    source_files: Tuple[Path, ...]
    extraction_path: str  # Never ends with '/'; '/' itself is stored as ''

    @classmethod
    def create(
        cls, source_files: Sequence[PathLike], extraction_path: str
    ) -> "SourceGroup":
        """Create a group, validating and normalizing the extraction path.

        Raises:
            TypeError: If source_files is a single path instead of a sequence
            InvalidPathError: If extraction_path is malformed
        """
        if isinstance(source_files, (str, bytes, Path)):
            raise TypeError(
                f"source_files must be a sequence of paths, not a single path: "
                f"{source_files!r}"
            )
        return cls(
            source_files=tuple(Path(p) for p in source_files),
            extraction_path=validate_extraction_path(extraction_path),
        )


@dataclass(frozen=True)
class LayerConfig:
    """Layer build configuration."""

    archive_format: str = "pax"
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.archive_format not in ARCHIVE_FORMATS:
            raise ValueError(
                f"Unsupported archive format: {self.archive_format} "
                f"(expected one of {', '.join(sorted(ARCHIVE_FORMATS))})"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "LayerConfig":
        """Build configuration from LAYER_ARCHIVE_FORMAT and LAYER_MAX_WORKERS."""
        max_workers = os.getenv("LAYER_MAX_WORKERS")
        return cls(
            archive_format=os.getenv("LAYER_ARCHIVE_FORMAT", "pax").lower(),
            max_workers=int(max_workers) if max_workers else None,
        )
