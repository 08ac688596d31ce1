"""
Streaming archive download with progress tracking and optional digest checks.

This module provides:
- HTTP/HTTPS downloads streamed to disk in chunks
- Progress reporting (bytes, percentage, speed, ETA)
- Digest verification against npm's 'shasum' (sha1 hex) or
  'integrity' (Subresource Integrity, e.g. 'sha512-<base64>') fields
- Timeout handling

Failures are not retried; they surface as ArchiveDownloadError.
"""

import base64
import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from esbuildkit.core.exceptions import ArchiveDownloadError, ChecksumError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class StreamingHasher:
    """Compute a digest incrementally while a download streams to disk."""

    SUPPORTED = ("sha1", "sha256", "sha512")

    def __init__(self, algorithm: str = "sha512"):
        """
        Initialize streaming hasher.

        Args:
            algorithm: Hash algorithm ('sha1', 'sha256', 'sha512')

        Raises:
            ValueError: If algorithm is not supported
        """
        self.algorithm = algorithm.lower()
        if self.algorithm not in self.SUPPORTED:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.hasher = hashlib.new(self.algorithm)

    def update(self, data: bytes):
        """Add data to hash computation."""
        self.hasher.update(data)

    def hexdigest(self) -> str:
        """Get the digest as a hex string."""
        return self.hasher.hexdigest()

    def sri(self) -> str:
        """Get the digest in Subresource Integrity form ('<alg>-<base64>')."""
        encoded = base64.b64encode(self.hasher.digest()).decode("ascii")
        return f"{self.algorithm}-{encoded}"


@dataclass(frozen=True)
class ExpectedDigest:
    """
    A digest the downloaded bytes must match.

    Build one with from_integrity() for SRI strings or from_shasum() for npm's
    legacy sha1 hex digests.
    """

    algorithm: str
    value: str
    sri: bool

    @classmethod
    def from_integrity(cls, integrity: str) -> "ExpectedDigest":
        """
        Parse an SRI string such as 'sha512-xoOZ...=='.

        Raises:
            ValueError: If the string is not '<alg>-<base64>'
        """
        algorithm, sep, value = integrity.strip().partition("-")
        if not sep or not value:
            raise ValueError(f"Invalid integrity string: {integrity}")
        return cls(algorithm=algorithm.lower(), value=value, sri=True)

    @classmethod
    def from_shasum(cls, shasum: str) -> "ExpectedDigest":
        return cls(algorithm="sha1", value=shasum.strip().lower(), sri=False)

    def matches(self, hasher: StreamingHasher) -> bool:
        if self.sri:
            return hasher.sri() == f"{self.algorithm}-{self.value}"
        return hasher.hexdigest().lower() == self.value

    def __str__(self) -> str:
        return f"{self.algorithm}-{self.value}" if self.sri else self.value


def download_file(
    url: str,
    destination: Path,
    expected_digest: Optional[ExpectedDigest] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: float = 30,
) -> Path:
    """
    Download file from URL to destination, streaming it in chunks.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_digest: Digest to verify the bytes against (optional)
        progress_callback: Optional callback for progress updates
        timeout: Connect/read timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        ArchiveDownloadError: On timeout, connection failure or non-2xx status
        ChecksumError: If the digest doesn't match expected_digest
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://registry.npmjs.org/@esbuild/linux-x64/-/linux-x64-0.19.11.tgz",
        ...     Path("/tmp/esbuild.tgz"),
        ...     progress_callback=lambda p: print(p),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    hasher = StreamingHasher(expected_digest.algorithm) if expected_digest else None

    logger.debug(f"Downloading from {url}")

    try:
        with requests.Session() as session:
            with session.get(
                url, stream=True, timeout=timeout, allow_redirects=True
            ) as response:
                response.raise_for_status()
                downloaded = _stream_to_file(
                    response, destination, hasher, progress_callback
                )
    except RequestException as e:
        raise ArchiveDownloadError(f"Failed to download {url}: {e}") from e

    if expected_digest and hasher:
        if not expected_digest.matches(hasher):
            actual = hasher.sri() if expected_digest.sri else hasher.hexdigest()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_digest}, got {actual}"
            )
        logger.debug("Checksum verified successfully")

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    hasher: Optional[StreamingHasher],
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> int:
    """
    Write a streamed response body to destination, reporting progress.

    Returns:
        Number of bytes written
    """
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue

            f.write(chunk)
            downloaded += len(chunk)
            if hasher:
                hasher.update(chunk)

            # At most twice a second, plus the final chunk
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time

    return downloaded


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(4194304, 8388608, 50.0, 1048576, 4)
        >>> print(format_progress(progress))
        4.0/8.0 MB (50.0%) at 1.0 MB/s ETA: 4s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "StreamingHasher",
    "ExpectedDigest",
    "download_file",
    "format_progress",
]
