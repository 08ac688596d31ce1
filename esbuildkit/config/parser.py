"""YAML configuration parser for esbuildkit.

This module provides parsing and validation for esbuildkit.yaml files:

    version: 1
    esbuild:
      version: latest          # or "0.19.11"
      cache_dir: /path/to/cache
    registry:
      url: https://registry.npmjs.org
      timeout: 30
      max_metadata_bytes: 1048576
    download:
      verify_checksum: false
      lock_timeout: 300

Every section and field is optional except the top-level version.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from esbuildkit.core.exceptions import ConfigError
from esbuildkit.esbuild.registry import DEFAULT_REGISTRY_URL, MAX_METADATA_BYTES

DEFAULT_CONFIG_FILE = "esbuildkit.yaml"


@dataclass
class EsbuildSection:
    """Which esbuild to use and where to keep it."""

    version: str = "latest"
    cache_dir: Optional[Path] = None


@dataclass
class RegistrySection:
    """npm registry access."""

    url: str = DEFAULT_REGISTRY_URL
    timeout: float = 30
    max_metadata_bytes: int = MAX_METADATA_BYTES


@dataclass
class DownloadSection:
    """Archive download behavior."""

    verify_checksum: bool = False
    lock_timeout: float = 300


@dataclass
class ESBuildKitConfig:
    """Complete esbuildkit configuration."""

    version: int = 1
    esbuild: EsbuildSection = field(default_factory=EsbuildSection)
    registry: RegistrySection = field(default_factory=RegistrySection)
    download: DownloadSection = field(default_factory=DownloadSection)


def parse_config(config_path: Path) -> ESBuildKitConfig:
    """
    Parse esbuildkit.yaml configuration file.

    Args:
        config_path: Path to esbuildkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    return parse_config_data(data, base_dir=config_path.parent)


def load_config(config_path: Optional[Path] = None, required: bool = False) -> ESBuildKitConfig:
    """
    Load configuration, falling back to defaults when no file exists.

    Args:
        config_path: Explicit file (default: ./esbuildkit.yaml)
        required: Raise if the file doesn't exist

    Raises:
        ConfigError: If required and missing, or if the file is invalid
    """
    path = Path(config_path) if config_path else Path.cwd() / DEFAULT_CONFIG_FILE
    if not path.exists() and not required:
        return ESBuildKitConfig()
    return parse_config(path)


def parse_config_data(data: Any, base_dir: Optional[Path] = None) -> ESBuildKitConfig:
    """
    Validate decoded configuration data.

    Args:
        data: Decoded YAML document
        base_dir: Directory relative cache_dir values are resolved against
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    return ESBuildKitConfig(
        version=data["version"],
        esbuild=_parse_esbuild(_section(data, "esbuild"), base_dir),
        registry=_parse_registry(_section(data, "registry")),
        download=_parse_download(_section(data, "download")),
    )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be a mapping")
    return section


def _parse_esbuild(data: Dict[str, Any], base_dir: Optional[Path]) -> EsbuildSection:
    """Parse esbuild section."""
    version = data.get("version", "latest")
    # YAML reads 0.19 as a float; insist on strings
    if not isinstance(version, str) or not version.strip():
        raise ConfigError("esbuild.version must be a non-empty string (quote numeric versions)")

    cache_dir = data.get("cache_dir")
    if cache_dir is not None:
        if not isinstance(cache_dir, str):
            raise ConfigError("esbuild.cache_dir must be a string")
        cache_dir = Path(cache_dir).expanduser()
        if base_dir is not None and not cache_dir.is_absolute():
            cache_dir = base_dir / cache_dir

    return EsbuildSection(version=version.strip(), cache_dir=cache_dir)


def _parse_registry(data: Dict[str, Any]) -> RegistrySection:
    """Parse registry section."""
    url = data.get("url", DEFAULT_REGISTRY_URL)
    if not isinstance(url, str) or not url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid registry.url: {url}")

    return RegistrySection(
        url=url,
        timeout=_positive_number(data, "timeout", 30, "registry"),
        max_metadata_bytes=int(
            _positive_number(data, "max_metadata_bytes", MAX_METADATA_BYTES, "registry")
        ),
    )


def _parse_download(data: Dict[str, Any]) -> DownloadSection:
    """Parse download section."""
    verify = data.get("verify_checksum", False)
    if not isinstance(verify, bool):
        raise ConfigError("download.verify_checksum must be true or false")

    return DownloadSection(
        verify_checksum=verify,
        lock_timeout=_positive_number(data, "lock_timeout", 300, "download"),
    )


def _positive_number(data: Dict[str, Any], key: str, default: float, section: str) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{section}.{key} must be a positive number")
    return value
