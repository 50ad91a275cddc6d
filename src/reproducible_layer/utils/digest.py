"""Layer digest helpers."""

import hashlib
import re
from pathlib import Path
from typing import Union

# Content-addressable digest as used for layer diff IDs (algorithm:hex)
DIGEST_PATTERN = re.compile(r"^(sha256|sha512):([a-f0-9]+)$")

_HEX_LENGTHS = {"sha256": 64, "sha512": 128}


def calculate_digest(data: Union[bytes, bytearray], algorithm: str = "sha256") -> str:
    """Calculate the digest of in-memory layer bytes.

    Args:
        data: Layer bytes
        algorithm: Hash algorithm, ``sha256`` or ``sha512``

    Returns:
        Digest string in format "algorithm:hex"

    Raises:
        ValueError: If algorithm is not supported or data is not bytes-like
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError("Data must be bytes or bytearray")

    if algorithm not in _HEX_LENGTHS:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    return f"{algorithm}:{hashlib.new(algorithm, data).hexdigest()}"


def calculate_file_digest(
    path: Union[str, Path], algorithm: str = "sha256", chunk_size: int = 65536
) -> str:
    """Calculate the digest of a layer file on disk without loading it whole."""
    if algorithm not in _HEX_LENGTHS:
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return f"{algorithm}:{hasher.hexdigest()}"


def validate_digest(digest: str) -> bool:
    """Check that a digest string is well formed.

    Args:
        digest: Digest string to validate

    Returns:
        True if the algorithm is known and the hex part has its exact length
    """
    if not isinstance(digest, str):
        return False

    match = DIGEST_PATTERN.match(digest)
    if not match:
        return False

    algorithm, hex_part = match.groups()
    return len(hex_part) == _HEX_LENGTHS[algorithm]


def verify_digest(data: Union[bytes, bytearray], expected_digest: str) -> bool:
    """Verify layer bytes match an expected digest.

    Raises:
        ValueError: If digest format is invalid
    """
    if not validate_digest(expected_digest):
        raise ValueError(f"Invalid digest format: {expected_digest}")

    algorithm, _ = expected_digest.split(":", 1)
    return calculate_digest(data, algorithm) == expected_digest
