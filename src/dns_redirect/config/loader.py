"""Configuration loader for the DNS redirect resolver.

This module handles loading configuration from files and environment variables,
with validation.
"""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .schema import (
    EmummcConfig,
    HostsConfig,
    LoggingConfig,
    RedirectConfig,
    StorageConfig,
    create_default_config,
)

ENV_PREFIX = "DNS_REDIRECT_"

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")

# Marks an environment key the section does not define
_MISSING = object()


class ConfigLoader:
    """Configuration loader merging defaults, a file and the environment."""

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_file: Path to configuration file (YAML or JSON)
        """
        self.config_file = config_file
        self._config: Optional[RedirectConfig] = None

    def load_config(self) -> RedirectConfig:
        """Load configuration from file and environment variables.

        Returns:
            Loaded and validated configuration

        Raises:
            FileNotFoundError: If config file is specified but not found
            ValueError: If configuration is invalid
            yaml.YAMLError: If YAML parsing fails
            json.JSONDecodeError: If JSON parsing fails
        """
        # Start with default configuration
        config_dict = asdict(create_default_config())

        # Load from file if specified
        if self.config_file:
            file_config = self._load_from_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        # Apply environment variable overrides
        config_dict = self._apply_env_overrides(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def get_config(self) -> Optional[RedirectConfig]:
        """Get current configuration."""
        return self._config

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file.

        Args:
            file_path: Path to configuration file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If file is not found
            ValueError: If file format is not supported
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        # Determine file format from extension
        if path.suffix.lower() in [".yaml", ".yml"]:
            result = yaml.safe_load(content)
        elif path.suffix.lower() == ".json":
            result = json.loads(content)
        else:
            # Try YAML first, then JSON
            try:
                result = yaml.safe_load(content)
            except yaml.YAMLError:
                try:
                    result = json.loads(content)
                except json.JSONDecodeError:
                    raise ValueError(f"Unsupported file format: {file_path}")

        return result if isinstance(result, dict) else {}

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> RedirectConfig:
        """Convert dictionary to configuration object.

        Raises:
            ValueError: If configuration is invalid
        """
        known = {"storage", "hosts", "emummc", "logging"}
        unknown = set(config_dict) - known
        if unknown:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

        try:
            return RedirectConfig(
                storage=StorageConfig(**config_dict.get("storage", {})),
                hosts=HostsConfig(**config_dict.get("hosts", {})),
                emummc=EmummcConfig(**config_dict.get("emummc", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as e:
            # Unexpected keyword arguments from unknown keys
            raise ValueError(f"Invalid configuration: {e}") from e

    def _merge_configs(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Merge two configuration dictionaries.

        Args:
            base: Base configuration dictionary
            override: Override configuration dictionary

        Returns:
            Merged configuration dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Environment variables use the format DNS_REDIRECT_<SECTION>_<KEY>
        For example: DNS_REDIRECT_EMUMMC_ID=0x0012

        Args:
            config_dict: Base configuration dictionary

        Returns:
            Configuration dictionary with environment overrides applied
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            key_parts = env_key[len(ENV_PREFIX) :].lower().split("_")
            if len(key_parts) < 2:
                continue

            section = key_parts[0]
            config_key = "_".join(key_parts[1:])

            if not isinstance(config_dict.get(section), dict):
                continue

            current = config_dict[section].get(config_key, _MISSING)
            config_dict[section][config_key] = self._convert_env_value(
                env_value, current
            )

        return config_dict

    def _convert_env_value(self, value: str, current: Any = _MISSING) -> Any:
        """Convert environment variable value to appropriate Python type.

        The type of the value being overridden wins when it is known, so
        DNS_REDIRECT_EMUMMC_ID=1 stays an integer. Optional settings that
        default to None (such as logging.file) are strings and are kept as given.

        Args:
            value: Environment variable value as string
            current: Value being overridden

        Returns:
            Converted value
        """
        if isinstance(current, bool):
            if value.lower() in _TRUE_VALUES:
                return True
            if value.lower() in _FALSE_VALUES:
                return False
            return value

        if isinstance(current, int):
            try:
                return int(value, 0)
            except ValueError:
                return value

        if isinstance(current, float):
            try:
                return float(value)
            except ValueError:
                return value

        if current is None or isinstance(current, str):
            return value

        # Try boolean
        if value.lower() in _TRUE_VALUES:
            return True
        elif value.lower() in _FALSE_VALUES:
            return False

        # Try integer
        try:
            return int(value)
        except ValueError:
            pass

        # Try float
        try:
            return float(value)
        except ValueError:
            pass

        return value


def load_config_from_file(config_file: Optional[str] = None) -> RedirectConfig:
    """Convenience function to load configuration.

    Args:
        config_file: Path to configuration file

    Returns:
        Loaded configuration
    """
    return ConfigLoader(config_file).load_config()
