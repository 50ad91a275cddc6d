"""Custom exceptions for the reproducible layer builder."""


class LayerError(Exception):
    """Base exception for all layer-building errors."""

    pass


class InvalidPathError(LayerError):
    """Raised when an extraction path or entry name is malformed."""

    pass


class AmbiguousEntryError(InvalidPathError):
    """Raised when two sources produce conflicting entries for one name."""

    pass


class EnumerationError(LayerError):
    """Raised when a source file or directory cannot be read or traversed."""

    pass


class SerializationError(LayerError):
    """Raised when the archive backend rejects an entry."""

    pass


class TarReadError(LayerError):
    """Raised when unable to read or parse a layer tar file."""

    pass
