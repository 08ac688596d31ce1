"""
Core functionality for esbuildkit.

This package contains the foundational modules the esbuild provisioning
pipeline depends on: platform detection, downloads, extraction, locking and
the exception hierarchy.
"""

from .directory import (
    get_default_cache_dir,
    get_cache_path,
    get_lock_dir,
    EXECUTABLE_NAME,
)

from .platform import (
    Architecture,
    UnameArchitectureDetector,
    detect_os,
)

from .locking import LockManager

from .exceptions import (
    ESBuildKitError,
    ConfigError,
    PlatformError,
    PackageNameUnresolvedError,
    ArchitectureUnresolvedError,
    NetworkError,
    RegistryRequestError,
    ArchiveDownloadError,
    MetadataParseError,
    VersionNotFoundError,
    ChecksumError,
    ArchiveExtractionError,
    InstallationError,
    CacheLockTimeout,
    ExecutionError,
    ProcessLaunchError,
    ProcessExitError,
)

__all__ = [
    "get_default_cache_dir",
    "get_cache_path",
    "get_lock_dir",
    "EXECUTABLE_NAME",
    "Architecture",
    "UnameArchitectureDetector",
    "detect_os",
    "LockManager",
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
