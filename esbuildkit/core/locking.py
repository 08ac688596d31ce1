"""
Concurrent access control for the esbuildkit cache.

Two callers provisioning the same version into the same cache root would
otherwise both download, extract and move the executable. The lock here
serializes that phase across threads and processes; the holder re-checks the
cache path after acquiring it so latecomers skip the download.

Usage:
    from esbuildkit.core.locking import LockManager

    lock_manager = LockManager(cache_root / ".locks")
    with lock_manager.version_lock("0.19.11", timeout=300):
        if not cache_path.exists():
            provision(cache_path)
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from esbuildkit.core.exceptions import CacheLockTimeout

logger = logging.getLogger(__name__)


class LockManager:
    """
    File-based locks for cache entries.

    Uses the `filelock` library, which locks across processes and releases
    automatically if the holder dies.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Path, logger: Optional[logging.Logger] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (created on first lock)
            logger: Logger to report lock activity to
        """
        self.lock_dir = Path(lock_dir)
        self.logger = logger or logging.getLogger(__name__)

    @contextmanager
    def version_lock(self, version: str, timeout: float = 300):
        """
        Acquire the lock for one version in this cache root.

        Args:
            version: Resolved version string (e.g. '0.19.11')
            timeout: Maximum wait time in seconds (default: 300 for slow downloads)

        Yields:
            None

        Raises:
            CacheLockTimeout: If the lock can't be acquired within timeout
        """
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        safe_version = version.replace("/", "-").replace("\\", "-").replace(":", "-")
        lock_path = self.lock_dir / f"{safe_version}.lock"
        lock = FileLock(str(lock_path), timeout=timeout)

        try:
            lock.acquire()
        except LockTimeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock for {version} after {timeout}s. "
                "Another process may be downloading this version."
            ) from e

        self.logger.debug(f"Acquired cache lock: {lock_path}")
        try:
            yield
        finally:
            lock.release()
            self.logger.debug(f"Released cache lock: {lock_path}")


__all__ = [
    "LockManager",
]
