"""Reproducible Layer - Byte-for-byte reproducible container image layers."""

__version__ = "0.1.0"

from .core.builder import ReproducibleLayerBuilder, build_layer_entries
from .core.types import LayerConfig, SourceGroup
from .exceptions import (
    AmbiguousEntryError,
    EnumerationError,
    InvalidPathError,
    LayerError,
    SerializationError,
    TarReadError,
)
from .layer import build_layer, build_layer_to_file, write_layer
from .tar.models import ArchiveEntryRecord, EntryType, LayerBlob, SourceEntry
from .tar.reader import LayerTarReader, read_layer_names

__all__ = [
    # Builder
    "ReproducibleLayerBuilder",
    "build_layer_entries",
    "SourceGroup",
    "LayerConfig",
    # Async operations
    "build_layer",
    "build_layer_to_file",
    "write_layer",
    # Models
    "ArchiveEntryRecord",
    "EntryType",
    "LayerBlob",
    "SourceEntry",
    # Reading
    "LayerTarReader",
    "read_layer_names",
    # Exceptions
    "LayerError",
    "InvalidPathError",
    "AmbiguousEntryError",
    "EnumerationError",
    "SerializationError",
    "TarReadError",
]
