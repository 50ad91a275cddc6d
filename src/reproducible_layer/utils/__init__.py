"""Utility functions for the reproducible layer builder."""

from .digest import (
    calculate_digest,
    calculate_file_digest,
    validate_digest,
    verify_digest,
)
from .validator import validate_entry_name, validate_extraction_path

__all__ = [
    "calculate_digest",
    "calculate_file_digest",
    "validate_digest",
    "verify_digest",
    "validate_entry_name",
    "validate_extraction_path",
]
