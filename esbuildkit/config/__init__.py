"""
Configuration for esbuildkit.

This package parses the optional esbuildkit.yaml file.
"""

from .parser import (
    DEFAULT_CONFIG_FILE,
    ESBuildKitConfig,
    EsbuildSection,
    RegistrySection,
    DownloadSection,
    parse_config,
    parse_config_data,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "ESBuildKitConfig",
    "EsbuildSection",
    "RegistrySection",
    "DownloadSection",
    "parse_config",
    "parse_config_data",
    "load_config",
]
