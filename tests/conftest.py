"""
Pytest configuration and shared fixtures for esbuildkit tests.
"""

import pytest
from pathlib import Path

from tests.mocks.esbuild import (
    PACKAGE_NAME,
    REGISTRY_URL,
    build_esbuild_tarball,
    registry_payload,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    """Empty esbuild cache root."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def esbuild_tarball() -> bytes:
    """npm-style tarball holding package/bin/esbuild."""
    return build_esbuild_tarball()


@pytest.fixture
def linux_x64_metadata() -> dict:
    """Registry payload for @esbuild/linux-x64 with two published versions."""
    return registry_payload(
        PACKAGE_NAME,
        versions=["0.19.10", "0.19.11"],
        latest="0.19.11",
        registry_url=REGISTRY_URL,
    )
