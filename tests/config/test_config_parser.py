"""
Tests for esbuildkit.yaml parsing and validation.
"""

import pytest

from esbuildkit.core.exceptions import ConfigError
from esbuildkit.config.parser import (
    DEFAULT_CONFIG_FILE,
    ESBuildKitConfig,
    load_config,
    parse_config,
    parse_config_data,
)
from esbuildkit.esbuild.registry import DEFAULT_REGISTRY_URL, MAX_METADATA_BYTES


@pytest.fixture
def write_config(tmp_path):
    def _write(content: str):
        path = tmp_path / DEFAULT_CONFIG_FILE
        path.write_text(content)
        return path

    return _write


class TestParseConfig:
    """Test configuration file parsing."""

    def test_full_config(self, write_config, tmp_path):
        """Test every section is read."""
        path = write_config(
            """version: 1
esbuild:
  version: "0.19.11"
  cache_dir: /opt/esbuild-cache
registry:
  url: https://npm.mirror.example
  timeout: 10
  max_metadata_bytes: 2048
download:
  verify_checksum: true
  lock_timeout: 60
"""
        )

        config = parse_config(path)

        assert config.esbuild.version == "0.19.11"
        assert config.esbuild.cache_dir.as_posix() == "/opt/esbuild-cache"
        assert config.registry.url == "https://npm.mirror.example"
        assert config.registry.timeout == 10
        assert config.registry.max_metadata_bytes == 2048
        assert config.download.verify_checksum is True
        assert config.download.lock_timeout == 60

    def test_minimal_config_uses_defaults(self, write_config):
        config = parse_config(write_config("version: 1\n"))

        assert config.esbuild.version == "latest"
        assert config.esbuild.cache_dir is None
        assert config.registry.url == DEFAULT_REGISTRY_URL
        assert config.registry.timeout == 30
        assert config.registry.max_metadata_bytes == MAX_METADATA_BYTES
        assert config.download.verify_checksum is False
        assert config.download.lock_timeout == 300

    def test_relative_cache_dir(self, write_config, tmp_path):
        """Test relative cache_dir resolves against the config file's directory."""
        config = parse_config(
            write_config("version: 1\nesbuild:\n  cache_dir: .cache/esbuild\n")
        )

        assert config.esbuild.cache_dir == tmp_path / ".cache" / "esbuild"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            parse_config(write_config("version: 1\nesbuild: [unclosed\n"))

    def test_empty_file(self, write_config):
        with pytest.raises(ConfigError, match="empty"):
            parse_config(write_config(""))


class TestValidation:
    """Test validation of decoded configuration."""

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config_data(["version", 1])

    def test_missing_version(self):
        with pytest.raises(ConfigError, match="Missing required field: version"):
            parse_config_data({"esbuild": {}})

    def test_unsupported_version(self):
        with pytest.raises(ConfigError, match="Unsupported version"):
            parse_config_data({"version": 2})

    def test_numeric_esbuild_version(self):
        """Test unquoted numeric versions are rejected."""
        with pytest.raises(ConfigError, match="quote numeric versions"):
            parse_config_data({"version": 1, "esbuild": {"version": 0.19}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError, match="registry must be a mapping"):
            parse_config_data({"version": 1, "registry": "https://example.com"})

    def test_invalid_registry_url(self):
        with pytest.raises(ConfigError, match="Invalid registry.url"):
            parse_config_data({"version": 1, "registry": {"url": "ftp://example.com"}})

    @pytest.mark.parametrize("value", [0, -5, "fast", True])
    def test_invalid_timeout(self, value):
        with pytest.raises(ConfigError, match="registry.timeout must be a positive number"):
            parse_config_data({"version": 1, "registry": {"timeout": value}})

    def test_verify_checksum_must_be_bool(self):
        with pytest.raises(ConfigError, match="verify_checksum"):
            parse_config_data({"version": 1, "download": {"verify_checksum": "yes please"}})

    def test_null_section_is_default(self):
        config = parse_config_data({"version": 1, "download": None})

        assert config.download.verify_checksum is False


class TestLoadConfig:
    """Test load_config() fallbacks."""

    def test_defaults_when_missing(self, tmp_path):
        config = load_config(tmp_path / DEFAULT_CONFIG_FILE)

        assert config == ESBuildKitConfig()

    def test_required_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / DEFAULT_CONFIG_FILE, required=True)

    def test_reads_cwd_file(self, tmp_path, monkeypatch):
        """Test ./esbuildkit.yaml is picked up when no path is given."""
        (tmp_path / DEFAULT_CONFIG_FILE).write_text(
            'version: 1\nesbuild:\n  version: "0.20.0"\n'
        )
        monkeypatch.chdir(tmp_path)

        assert load_config().esbuild.version == "0.20.0"
