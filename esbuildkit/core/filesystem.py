"""
File system utilities for esbuildkit.

This module provides:
- Archive extraction through the system `tar` command
- Placement of an extracted executable into the cache (chmod + move)
"""

import errno
import logging
import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Optional, Union

from esbuildkit.core.exceptions import ArchiveExtractionError, InstallationError
from esbuildkit.core.interfaces import Extractor

logger = logging.getLogger(__name__)


class TarExtractor(Extractor):
    """
    Extracts archives with the external `tar` utility.

    The archive is extracted into its own parent directory. On failure
    whatever tar already wrote stays on disk.
    """

    def __init__(self, tar_command: str = "tar", logger: Optional[logging.Logger] = None):
        self.tar_command = tar_command
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, archive_path: Path) -> None:
        archive_path = Path(archive_path)
        cmd = [self.tar_command, "-xf", archive_path.name]
        self.logger.debug(f"Extracting {archive_path} in {archive_path.parent}")

        try:
            subprocess.run(
                cmd,
                cwd=str(archive_path.parent),
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise ArchiveExtractionError(
                f"tar failed with status {e.returncode} extracting {archive_path}: "
                f"{(e.stderr or '').strip()}"
            ) from e
        except OSError as e:
            raise ArchiveExtractionError(
                f"Could not run {self.tar_command} to extract {archive_path}: {e}"
            ) from e


def make_executable(path: Union[str, Path]) -> None:
    """
    Add execute permission for user, group and others.

    Args:
        path: File to mark executable
    """
    path = Path(path)
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def install_executable(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Mark an extracted executable runnable and move it to its cache path.

    Parent directories of destination are created as needed. When source and
    destination share a filesystem the move is an atomic rename, so the cache
    path never holds a partially written file.

    Args:
        source: Extracted executable
        destination: Final cache path

    Returns:
        destination

    Raises:
        InstallationError: If source is missing or can't be moved
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise InstallationError(f"Expected executable not found in archive: {source}")

    try:
        make_executable(source)
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(source, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            _copy_across_devices(source, destination)
    except OSError as e:
        raise InstallationError(
            f"Failed to install {source.name} to {destination}: {e}"
        ) from e

    logger.debug(f"Installed executable: {destination}")
    return destination


def _copy_across_devices(source: Path, destination: Path) -> None:
    """Copy next to the destination, then rename; never leaves the staging file."""
    staging = destination.with_name(f".{destination.name}.partial")
    try:
        shutil.copy2(source, staging)
        os.replace(staging, destination)
    except OSError:
        staging.unlink(missing_ok=True)
        raise


__all__ = [
    "TarExtractor",
    "make_executable",
    "install_executable",
]
