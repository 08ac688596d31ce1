"""
Download command implementation.

Ensures the esbuild executable is cached and prints its path.
"""

import logging

from esbuildkit.cli.utils import create_esbuild

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the download command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    esbuild = create_esbuild(args)
    path = esbuild.download()
    print(path)
    return 0
