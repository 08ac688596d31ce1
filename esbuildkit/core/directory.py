"""
Cache directory layout for esbuildkit.

Directory Structure:
    Cache root (default: <system temp dir>/esbuildkit/):
        - <version>/esbuild : Provisioned executable for a resolved version
        - .locks/           : Per-version lock files
"""

import tempfile
from pathlib import Path

CACHE_DIR_NAME = "esbuildkit"
EXECUTABLE_NAME = "esbuild"
LOCK_DIR_NAME = ".locks"


def get_default_cache_dir() -> Path:
    """
    Get the default cache root.

    Returns:
        Path: <system temp dir>/esbuildkit

    Example:
        >>> get_default_cache_dir()
        PosixPath('/tmp/esbuildkit')  # on Linux
    """
    return Path(tempfile.gettempdir()) / CACHE_DIR_NAME


def get_cache_path(directory: Path, version: str) -> Path:
    """
    Get the cache path of the executable for a resolved version.

    Args:
        directory: Cache root
        version: Resolved version string (e.g. '0.19.11')

    Returns:
        Path: <directory>/<version>/esbuild
    """
    return Path(directory) / version / EXECUTABLE_NAME


def get_lock_dir(directory: Path) -> Path:
    """Get the directory holding lock files for a cache root."""
    return Path(directory) / LOCK_DIR_NAME


__all__ = [
    "CACHE_DIR_NAME",
    "EXECUTABLE_NAME",
    "LOCK_DIR_NAME",
    "get_default_cache_dir",
    "get_cache_path",
    "get_lock_dir",
]
