"""Path validation utilities for layer extraction paths and entry names."""

from ..exceptions import InvalidPathError

ILLEGAL_CHARACTERS = ("\x00",)


def is_absolute(path: str) -> bool:
    """Check if a Unix-style path is absolute."""
    return path.startswith("/")


def has_illegal_characters(path: str) -> bool:
    """Check if path contains characters a tar header cannot carry."""
    return any(char in path for char in ILLEGAL_CHARACTERS)


def is_utf8_encodable(path: str) -> bool:
    """Check if path can be written as UTF-8 into the archive."""
    try:
        path.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def has_traversal_segment(path: str) -> bool:
    """Check if any path component is a parent reference."""
    return ".." in path.split("/")


def has_empty_or_dot_segment(path: str) -> bool:
    """Check for `//` or `/./` style components after the leading slash."""
    return any(segment in ("", ".") for segment in path.split("/")[1:])


def _check_common(path: str, kind: str) -> None:
    if not path:
        raise InvalidPathError(f"{kind} must not be empty")
    if not is_absolute(path):
        raise InvalidPathError(f"{kind} must be an absolute Unix-style path: {path!r}")
    if has_illegal_characters(path):
        raise InvalidPathError(f"{kind} contains illegal characters: {path!r}")
    if not is_utf8_encodable(path):
        raise InvalidPathError(f"{kind} is not valid UTF-8: {path!r}")
    if has_traversal_segment(path):
        raise InvalidPathError(f"{kind} must not contain '..': {path!r}")


def validate_extraction_path(extraction_path: str) -> str:
    """Validate an extraction path and return it without trailing slashes.

    The root path ``/`` normalizes to the empty prefix, so entries registered
    there are named ``/<file>``.

    Args:
        extraction_path: Unix-style directory inside the image filesystem

    Returns:
        The normalized extraction path

    Raises:
        InvalidPathError: If the path is empty, relative or malformed
    """
    _check_common(extraction_path, "Extraction path")

    normalized = extraction_path.rstrip("/")
    if has_empty_or_dot_segment(normalized):
        raise InvalidPathError(
            f"Extraction path has empty or '.' components: {extraction_path!r}"
        )
    return normalized


def validate_entry_name(name: str) -> str:
    """Validate a computed archive entry name.

    Raises:
        InvalidPathError: If the name is not absolute or contains bad segments
    """
    _check_common(name, "Entry name")

    if name == "/" or has_empty_or_dot_segment(name):
        raise InvalidPathError(f"Entry name has empty or '.' components: {name!r}")
    return name
