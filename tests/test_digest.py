"""Tests for digest utilities and layer blobs."""

import hashlib

import pytest

from reproducible_layer.tar.models import LayerBlob
from reproducible_layer.utils.digest import (
    calculate_digest,
    calculate_file_digest,
    validate_digest,
    verify_digest,
)

EMPTY_SHA256 = "sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_calculate_digest():
    assert calculate_digest(b"") == EMPTY_SHA256
    assert calculate_digest(b"layer", "sha512") == (
        f"sha512:{hashlib.sha512(b'layer').hexdigest()}"
    )


def test_calculate_digest_rejects_bad_input():
    with pytest.raises(ValueError):
        calculate_digest("not bytes")
    with pytest.raises(ValueError):
        calculate_digest(b"x", "md5")


def test_calculate_file_digest(tmp_path):
    path = tmp_path / "layer.tar"
    path.write_bytes(b"x" * 200_000)

    assert calculate_file_digest(path, chunk_size=4096) == calculate_digest(b"x" * 200_000)


def test_validate_and_verify_digest():
    assert validate_digest(EMPTY_SHA256)
    assert not validate_digest("sha256:abc")
    assert not validate_digest("md5:" + "0" * 32)
    assert not validate_digest(None)

    assert verify_digest(b"", EMPTY_SHA256)
    assert not verify_digest(b"other", EMPTY_SHA256)
    with pytest.raises(ValueError):
        verify_digest(b"", "invalid")


def test_layer_blob_properties():
    blob = LayerBlob(data=b"", source_files=[])

    assert blob.size == 0
    assert blob.digest == EMPTY_SHA256
    assert bytes(blob) == b""
