"""Test configuration and fixtures."""

import pytest

from reproducible_layer import ReproducibleLayerBuilder
from tests.helpers import make_tree


@pytest.fixture
def app_tree(tmp_path):
    """Source tree with a single jar and a lib directory."""
    src = tmp_path / "src"
    make_tree(
        src,
        {
            "app.jar": b"application jar",
            "lib/util.jar": b"utility jar",
        },
    )
    return src


@pytest.fixture
def nested_tree(tmp_path):
    """Directory d with d/a and d/b/c."""
    root = tmp_path / "nested"
    make_tree(root, {"d/a": b"a", "d/b/c": b"c"})
    return root / "d"


@pytest.fixture
def builder():
    return ReproducibleLayerBuilder()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
