"""
Core interfaces for esbuildkit.

The provisioning pipeline depends on these abstract capabilities rather than
on concrete classes. Each has one production implementation; tests swap in
doubles.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from esbuildkit.core.platform import Architecture
    from esbuildkit.esbuild.versions import ESBuildVersion


class ArchitectureDetector(ABC):
    """Reports the CPU architecture of the host."""

    @abstractmethod
    def detect(self) -> Optional["Architecture"]:
        """
        Detect the host architecture.

        Returns:
            The detected Architecture, or None if it can't be determined
        """
        pass


class Extractor(ABC):
    """Extracts an archive into the directory that contains it."""

    @abstractmethod
    def extract(self, archive_path: Path) -> None:
        """
        Extract the archive next to itself.

        Args:
            archive_path: Path to the compressed archive

        Raises:
            ArchiveExtractionError: If extraction fails
        """
        pass


class BinaryDownloader(ABC):
    """Provisions the esbuild executable and returns its path."""

    @abstractmethod
    def download(
        self,
        version: Optional["ESBuildVersion"] = None,
        directory: Optional[Path] = None,
    ) -> Path:
        """
        Ensure the requested version is present under directory.

        Args:
            version: Version to provision (default: latest)
            directory: Cache root (default: platform temp dir)

        Returns:
            Path to the executable
        """
        pass


class ProcessExecutor(ABC):
    """Runs an executable and streams its output."""

    @abstractmethod
    def run(self, executable_path: Path, directory: Path, arguments: List[str]) -> None:
        """
        Run the executable and wait for it to exit.

        Args:
            executable_path: Absolute path to the executable
            directory: Working directory for the process
            arguments: Arguments passed after the executable path

        Raises:
            ProcessLaunchError: If the process can't be started
            ProcessExitError: If the process exits with a non-zero status
        """
        pass


__all__ = [
    "ArchitectureDetector",
    "Extractor",
    "BinaryDownloader",
    "ProcessExecutor",
]
