"""Tests for the configuration loader module."""

import json
import os
import tempfile
from pathlib import Path

import pytest
import yaml

from dns_redirect.config.loader import ConfigLoader, load_config_from_file
from dns_redirect.config.schema import RedirectConfig


def _write_temp(content: str, suffix: str = "") -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False) as f:
        f.write(content)
        return f.name


class _EnvOverride:
    """Set environment variables for the duration of a with block."""

    def __init__(self, env_vars):
        self.env_vars = env_vars
        self.original_values = {}

    def __enter__(self):
        for key, value in self.env_vars.items():
            self.original_values[key] = os.environ.get(key)
            os.environ[key] = value
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, original_value in self.original_values.items():
            if original_value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original_value


class TestConfigLoader:
    """Test ConfigLoader functionality."""

    def test_load_default_config(self):
        """Test loading default configuration without file."""
        loader = ConfigLoader()
        config = loader.load_config()

        assert isinstance(config, RedirectConfig)
        assert config.storage.root == "atmosphere"
        assert config.hosts.max_file_size == 0x8000

    def test_load_yaml_config(self):
        """Test loading configuration from YAML file."""
        yaml_content = """
storage:
  root: "/mnt/sd/atmosphere"

hosts:
  add_defaults: false
  watch: true

emummc:
  active: true
  id: 0x0012

logging:
  level: "DEBUG"
"""
        config_file = _write_temp(yaml_content, ".yaml")

        try:
            config = ConfigLoader(config_file).load_config()

            assert config.storage.root == "/mnt/sd/atmosphere"
            assert config.hosts.add_defaults is False
            assert config.hosts.watch is True
            assert config.emummc.active is True
            assert config.emummc.id == 0x12
            assert config.logging.level == "DEBUG"
        finally:
            os.unlink(config_file)

    def test_load_json_config(self):
        """Test loading configuration from JSON file."""
        json_content = {
            "hosts": {"hostname_limit": 256},
            "emummc": {"active": True, "id": "0xabcd"},
        }
        config_file = _write_temp(json.dumps(json_content), ".json")

        try:
            config = ConfigLoader(config_file).load_config()

            assert config.hosts.hostname_limit == 256
            assert config.emummc.id == 0xABCD
        finally:
            os.unlink(config_file)

    def test_file_not_found(self):
        """Test handling of non-existent configuration file."""
        loader = ConfigLoader("/non/existent/file.yaml")

        with pytest.raises(FileNotFoundError):
            loader.load_config()

    def test_invalid_yaml_file(self):
        """Test handling of invalid YAML file."""
        config_file = _write_temp("invalid: yaml: content: [", ".yaml")

        try:
            with pytest.raises(yaml.YAMLError):
                ConfigLoader(config_file).load_config()
        finally:
            os.unlink(config_file)

    def test_invalid_json_file(self):
        """Test handling of invalid JSON file."""
        config_file = _write_temp('{"invalid": json, "content":', ".json")

        try:
            with pytest.raises(json.JSONDecodeError):
                ConfigLoader(config_file).load_config()
        finally:
            os.unlink(config_file)

    def test_auto_format_detection(self):
        """Test automatic format detection for files without extension."""
        config_file = _write_temp("hosts:\n  max_file_size: 4096")

        try:
            config = ConfigLoader(config_file).load_config()

            assert config.hosts.max_file_size == 4096
        finally:
            os.unlink(config_file)

    def test_unknown_section(self):
        """Unknown sections are rejected."""
        config_file = _write_temp("cache:\n  max_size_mb: 10\n", ".yaml")

        try:
            with pytest.raises(ValueError, match="Unknown configuration sections"):
                ConfigLoader(config_file).load_config()
        finally:
            os.unlink(config_file)

    def test_unknown_key(self):
        """Unknown keys within a section are rejected."""
        config_file = _write_temp("hosts:\n  colour: blue\n", ".yaml")

        try:
            with pytest.raises(ValueError, match="Invalid configuration"):
                ConfigLoader(config_file).load_config()
        finally:
            os.unlink(config_file)

    def test_config_validation_error(self):
        """Test handling of configuration validation errors."""
        config_file = _write_temp("emummc:\n  id: -1\n", ".yaml")

        try:
            with pytest.raises(ValueError, match="fit in 32 bits"):
                ConfigLoader(config_file).load_config()
        finally:
            os.unlink(config_file)

    def test_config_merge(self):
        """Test merging file config with defaults."""
        config_file = _write_temp("hosts:\n  fail_on_error: false\n", ".yaml")

        try:
            config = ConfigLoader(config_file).load_config()

            assert config.hosts.fail_on_error is False
            assert config.hosts.add_defaults is True
            assert config.hosts.max_file_size == 0x8000
        finally:
            os.unlink(config_file)

    def test_environment_variable_overrides(self):
        """Test environment variable overrides."""
        env_vars = {
            "DNS_REDIRECT_STORAGE_ROOT": "/srv/sd",
            "DNS_REDIRECT_HOSTS_ADD_DEFAULTS": "false",
            "DNS_REDIRECT_HOSTS_MAX_FILE_SIZE": "1024",
            "DNS_REDIRECT_HOSTS_RELOAD_DEBOUNCE": "2.5",
            "DNS_REDIRECT_EMUMMC_ACTIVE": "1",
            "DNS_REDIRECT_EMUMMC_ID": "1",
            "DNS_REDIRECT_LOGGING_LEVEL": "ERROR",
        }

        with _EnvOverride(env_vars):
            config = ConfigLoader().load_config()

        assert config.storage.root == "/srv/sd"
        assert config.hosts.add_defaults is False
        assert config.hosts.max_file_size == 1024
        assert config.hosts.reload_debounce == 2.5
        assert config.emummc.active is True
        assert config.emummc.id == 1
        assert config.logging.level == "ERROR"

    def test_environment_hex_id(self):
        """Hex emummc ids are accepted from the environment."""
        with _EnvOverride({"DNS_REDIRECT_EMUMMC_ID": "0x0012"}):
            config = ConfigLoader().load_config()

        assert config.emummc.id == 0x12

    def test_environment_log_file(self):
        """Optional string settings are taken verbatim."""
        with _EnvOverride({"DNS_REDIRECT_LOGGING_FILE": "logs/redirect.log"}):
            config = ConfigLoader().load_config()

        assert config.logging.file == "logs/redirect.log"

    def test_environment_numeric_log_file(self):
        """A numeric-looking log file name stays a string."""
        with _EnvOverride({"DNS_REDIRECT_LOGGING_FILE": "2024"}):
            config = ConfigLoader().load_config()

        assert config.logging.file == "2024"

    def test_convenience_function(self):
        """Test the convenience function for loading configuration."""
        config = load_config_from_file()

        assert isinstance(config, RedirectConfig)

    def test_get_config(self):
        """Test getting current configuration."""
        loader = ConfigLoader()

        assert loader.get_config() is None

        config = loader.load_config()
        assert loader.get_config() == config

    def test_shipped_default_config(self):
        """The example configuration loads and matches the defaults."""
        config_file = Path(__file__).parents[2] / "config" / "default.yaml"

        config = ConfigLoader(str(config_file)).load_config()

        assert config == RedirectConfig()
