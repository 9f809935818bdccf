"""
DNS Redirect Configuration Module
"""

from .loader import ConfigLoader, load_config_from_file
from .schema import (
    EmummcConfig,
    HostsConfig,
    LoggingConfig,
    RedirectConfig,
    StorageConfig,
    create_default_config,
)

__all__ = [
    "ConfigLoader",
    "load_config_from_file",
    "RedirectConfig",
    "StorageConfig",
    "HostsConfig",
    "EmummcConfig",
    "LoggingConfig",
    "create_default_config",
]
