"""
Shared utilities for CLI commands.
"""

import logging

from esbuildkit.config.parser import load_config
from esbuildkit.esbuild.wrapper import ESBuild

logger = logging.getLogger(__name__)


def create_esbuild(args) -> ESBuild:
    """
    Build an ESBuild wrapper from the config file and global CLI options.

    Command-line --esbuild-version and --cache-dir override the file.

    Args:
        args: Parsed arguments with config, esbuild_version and cache_dir

    Raises:
        ConfigError: If an explicitly given config file is missing or invalid
    """
    config_path = getattr(args, "config", None)
    config = load_config(config_path, required=config_path is not None)

    if getattr(args, "esbuild_version", None):
        config.esbuild.version = args.esbuild_version
    if getattr(args, "cache_dir", None):
        config.esbuild.cache_dir = args.cache_dir

    logger.debug(
        f"Using esbuild {config.esbuild.version} "
        f"(cache: {config.esbuild.cache_dir or 'default'})"
    )
    return ESBuild.from_config(config)
