"""
Info command implementation.

Shows what esbuildkit detects about the host and which package it would fetch.
"""

import logging

from esbuildkit.core.exceptions import PackageNameUnresolvedError
from esbuildkit.core.platform import UnameArchitectureDetector, detect_os
from esbuildkit.esbuild.downloader import Downloader

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if no package matches this platform)
    """
    detector = UnameArchitectureDetector()
    architecture = detector.detect()

    print(f"OS:           {detect_os()}")
    print(f"Architecture: {architecture.value if architecture else 'unknown'}")

    try:
        package_name = Downloader(architecture_detector=detector).package_name()
    except PackageNameUnresolvedError as e:
        print("Package:      unavailable")
        logger.error(str(e))
        return 1

    print(f"Package:      {package_name}")
    print(f"Cache:        {Downloader.default_download_directory()}")
    return 0
