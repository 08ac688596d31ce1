"""
Centralized exception hierarchy for esbuildkit.

Every stage of the provisioning and execution pipeline raises its own
exception type so callers can tell which stage failed.
"""

from typing import List, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class ESBuildKitError(Exception):
    """Base exception for all esbuildkit errors."""

    pass


class ConfigError(ESBuildKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class PlatformError(ESBuildKitError):
    """Base exception for platform-related errors."""

    pass


class PackageNameUnresolvedError(PlatformError):
    """Raised when the npm package name for this OS/architecture can't be built."""

    def __init__(self, os_name: str, architecture: Optional[str] = None):
        self.os_name = os_name
        self.architecture = architecture
        if architecture is None:
            msg = f"Unable to determine the esbuild package name: unknown CPU architecture on {os_name}"
        else:
            msg = (
                f"Unable to determine the esbuild package name: "
                f"architecture '{architecture}' is not published for {os_name}"
            )
        super().__init__(msg)


class ArchitectureUnresolvedError(PackageNameUnresolvedError):
    """Raised when the host CPU architecture could not be detected."""

    def __init__(self, os_name: str):
        super().__init__(os_name, None)


# ============================================================================
# Registry and Network Exceptions
# ============================================================================


class NetworkError(ESBuildKitError):
    """Base exception for network failures (timeout, connection, non-2xx)."""

    pass


class RegistryRequestError(NetworkError):
    """Raised when the registry metadata request fails."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch package metadata from {url}: {reason}")


class ArchiveDownloadError(NetworkError):
    """Raised when the package archive can't be downloaded."""

    pass


class MetadataParseError(ESBuildKitError):
    """Raised when the registry payload is not valid package metadata."""

    def __init__(self, package_name: str, reason: str):
        self.package_name = package_name
        self.reason = reason
        super().__init__(f"Malformed metadata for {package_name}: {reason}")


class VersionNotFoundError(ESBuildKitError):
    """Raised when the registry metadata has no entry for the requested version."""

    def __init__(self, version: str, package_name: str = ""):
        self.version = version
        self.package_name = package_name
        msg = f"Version {version} not found in registry metadata"
        if package_name:
            msg += f" for {package_name}"
        super().__init__(msg)


class ChecksumError(ESBuildKitError):
    """Raised when a downloaded archive does not match its published digest."""

    pass


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class ArchiveExtractionError(ESBuildKitError):
    """Raised when the external extraction command fails or can't start."""

    pass


class InstallationError(ESBuildKitError):
    """Raised when the extracted executable can't be placed in the cache."""

    pass


class CacheLockTimeout(ESBuildKitError):
    """Raised when the per-version cache lock can't be acquired in time."""

    pass


# ============================================================================
# Execution Exceptions
# ============================================================================


class ExecutionError(ESBuildKitError):
    """Base exception for running the esbuild executable."""

    pass


class ProcessLaunchError(ExecutionError):
    """Raised when the esbuild process can't be started."""

    def __init__(self, command: List[str], reason: str):
        self.command = command
        super().__init__(f"Failed to launch {command[0]}: {reason}")


class ProcessExitError(ExecutionError):
    """Raised when esbuild exits with a non-zero status."""

    def __init__(self, command: List[str], returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"esbuild exited with status {returncode}: {' '.join(command)}")


__all__ = [
    "ESBuildKitError",
    "ConfigError",
    "PlatformError",
    "PackageNameUnresolvedError",
    "ArchitectureUnresolvedError",
    "NetworkError",
    "RegistryRequestError",
    "ArchiveDownloadError",
    "MetadataParseError",
    "VersionNotFoundError",
    "ChecksumError",
    "ArchiveExtractionError",
    "InstallationError",
    "CacheLockTimeout",
    "ExecutionError",
    "ProcessLaunchError",
    "ProcessExitError",
]
