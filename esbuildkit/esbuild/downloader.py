"""
esbuild download and provisioning.

This module resolves which esbuild package and version to fetch, downloads
the tarball from the npm registry, extracts it and places the executable at
a deterministic cache path:

    <cache root>/<resolved version>/esbuild

The existence of that path is the only cache signal. Once present it is
reused without re-validation.
"""

import logging
import tempfile
from pathlib import Path
from typing import Callable, Optional

from esbuildkit.core.directory import (
    EXECUTABLE_NAME,
    get_cache_path,
    get_default_cache_dir,
    get_lock_dir,
)
from esbuildkit.core.download import (
    DownloadProgress,
    ExpectedDigest,
    StreamingHasher,
    download_file,
)
from esbuildkit.core.exceptions import (
    ArchitectureUnresolvedError,
    ChecksumError,
    PackageNameUnresolvedError,
    VersionNotFoundError,
)
from esbuildkit.core.filesystem import TarExtractor, install_executable
from esbuildkit.core.interfaces import ArchitectureDetector, BinaryDownloader, Extractor
from esbuildkit.core.locking import LockManager
from esbuildkit.core.platform import UnameArchitectureDetector, detect_os
from esbuildkit.esbuild.registry import (
    DistInfo,
    NpmRegistryClient,
    package_name_for,
)
from esbuildkit.esbuild.versions import ESBuildVersion

ARCHIVE_NAME = "esbuild.tgz"
EXECUTABLE_IN_ARCHIVE = Path("package", "bin", EXECUTABLE_NAME)


class Downloader(BinaryDownloader):
    """
    Downloads the esbuild executable for the host platform.

    The workflow of download():
    1. Return early if a fixed version is already cached
    2. Build the package name from OS and architecture
    3. Fetch package metadata from the registry
    4. Resolve the version and return early on a cache hit
    5. Under a per-version lock: download, extract and install

    Example:
        >>> downloader = Downloader()
        >>> path = downloader.download(ESBuildVersion.fixed("0.19.11"), Path("/tmp/cache"))
        >>> print(path)
        /tmp/cache/0.19.11/esbuild
    """

    def __init__(
        self,
        architecture_detector: Optional[ArchitectureDetector] = None,
        extractor: Optional[Extractor] = None,
        registry: Optional[NpmRegistryClient] = None,
        os_name: Optional[str] = None,
        verify_checksum: bool = False,
        lock_timeout: float = 300,
        download_timeout: float = 30,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize downloader.

        Args:
            architecture_detector: Host architecture source (default: uname -m)
            extractor: Archive extractor (default: system tar)
            registry: npm registry client (default: registry.npmjs.org)
            os_name: OS name override ('windows', 'linux', 'darwin')
            verify_checksum: Verify archives against the published digest
            lock_timeout: Seconds to wait for another caller's download
            download_timeout: Connect/read timeout for the archive download
            progress_callback: Receives byte progress of archive downloads
            logger: Logger to report to (default: module logger)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.architecture_detector = architecture_detector or UnameArchitectureDetector(
            logger=self.logger
        )
        self.extractor = extractor or TarExtractor(logger=self.logger)
        self.registry = registry or NpmRegistryClient(logger=self.logger)
        self.os_name = os_name
        self.verify_checksum = verify_checksum
        self.lock_timeout = lock_timeout
        self.download_timeout = download_timeout
        self.progress_callback = progress_callback

    @staticmethod
    def default_download_directory() -> Path:
        """Directory esbuild binaries go to when none is given."""
        return get_default_cache_dir()

    def package_name(self) -> str:
        """
        Name of the npm package for this OS and architecture.

        Returns:
            e.g. '@esbuild/linux-x64'

        Raises:
            ArchitectureUnresolvedError: If the architecture can't be detected
            PackageNameUnresolvedError: If esbuild has no package for it
        """
        os_name = self.os_name or detect_os()
        architecture = self.architecture_detector.detect()
        if architecture is None:
            raise ArchitectureUnresolvedError(os_name)
        if not architecture.registry_token:
            raise PackageNameUnresolvedError(os_name, architecture.value)
        return package_name_for(os_name, architecture.registry_token)

    def download(
        self,
        version: Optional[ESBuildVersion] = None,
        directory: Optional[Path] = None,
    ) -> Path:
        """
        Ensure the requested esbuild version is present and return its path.

        Args:
            version: Version to download (default: latest)
            directory: Cache root (default: <temp dir>/esbuildkit)

        Returns:
            Path to the executable, <directory>/<resolved version>/esbuild

        Raises:
            PackageNameUnresolvedError: If no package matches this platform
            RegistryRequestError: If the metadata request fails
            MetadataParseError: If the metadata is malformed
            VersionNotFoundError: If the version isn't published
            ArchiveDownloadError: If the tarball download fails
            ChecksumError: If verification is enabled and fails
            ArchiveExtractionError: If tar fails
            InstallationError: If the executable can't be placed
            CacheLockTimeout: If another caller holds the lock too long
        """
        version = version or ESBuildVersion.latest()
        directory = Path(directory) if directory else self.default_download_directory()

        # Fixed versions can be found on disk without asking the registry.
        for candidate in version.candidates():
            cached = get_cache_path(directory, candidate)
            if cached.exists():
                self.logger.debug(f"esbuild {candidate} already cached: {cached}")
                return cached

        package_name = self.package_name()
        metadata = self.registry.fetch_metadata(package_name)
        resolved = version.resolve(metadata)
        binary_path = get_cache_path(directory, resolved)

        if binary_path.exists():
            self.logger.debug(f"esbuild {resolved} already cached: {binary_path}")
            return binary_path

        dist = metadata.dist(resolved)
        if dist is None:
            raise VersionNotFoundError(resolved, metadata.name)

        lock_manager = LockManager(get_lock_dir(directory), logger=self.logger)
        with lock_manager.version_lock(resolved, timeout=self.lock_timeout):
            if binary_path.exists():
                self.logger.info(f"esbuild {resolved} downloaded by another process")
                return binary_path

            self.logger.info(f"Downloading {metadata.name} {resolved}")
            self._download_binary(dist, binary_path)

        return binary_path

    def _download_binary(self, dist: DistInfo, binary_path: Path) -> None:
        """Download, extract and install one version into binary_path."""
        # Same filesystem as the cache, so the final move is a rename.
        binary_path.parent.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(
            prefix=".esbuildkit-", dir=str(binary_path.parent.parent)
        ) as tmp:
            archive_path = Path(tmp) / ARCHIVE_NAME
            self.logger.debug(f"Downloading {dist.tarball} to {archive_path}")

            download_file(
                dist.tarball,
                archive_path,
                expected_digest=self._expected_digest(dist),
                progress_callback=self.progress_callback or self._log_progress,
                timeout=self.download_timeout,
            )
            self.extractor.extract(archive_path)
            install_executable(archive_path.parent / EXECUTABLE_IN_ARCHIVE, binary_path)

        self.logger.info(f"esbuild installed at {binary_path}")

    def _expected_digest(self, dist: DistInfo) -> Optional[ExpectedDigest]:
        """Digest to verify the archive against, None when verification is off."""
        if not self.verify_checksum:
            return None

        if dist.integrity:
            try:
                digest = ExpectedDigest.from_integrity(dist.integrity)
            except ValueError as e:
                raise ChecksumError(str(e)) from e
            if digest.algorithm in StreamingHasher.SUPPORTED:
                return digest

        if dist.shasum:
            return ExpectedDigest.from_shasum(dist.shasum)

        raise ChecksumError(f"No usable checksum published for {dist.tarball}")

    def _log_progress(self, progress: DownloadProgress) -> None:
        self.logger.debug(f"Downloaded {progress.bytes_downloaded} bytes so far")


def download(
    version: Optional[ESBuildVersion] = None, directory: Optional[Path] = None
) -> Path:
    """
    Convenience function to provision esbuild with default settings.

    Example:
        >>> from esbuildkit.esbuild.downloader import download
        >>> path = download(ESBuildVersion.fixed("0.19.11"))
    """
    return Downloader().download(version, directory)


__all__ = [
    "Downloader",
    "download",
    "ARCHIVE_NAME",
    "EXECUTABLE_IN_ARCHIVE",
]
