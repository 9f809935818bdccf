"""
DNS Redirect Configuration Schema

Configuration for where hosts files live, which emulated-storage instance is
active, the parser limits and logging.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from ..core.parser import HOSTNAME_LIMIT, HOSTS_FILE_SIZE_LIMIT
from ..core.startup_log import STARTUP_LOG_PATH
from .validators import (
    validate_boolean,
    validate_file_path,
    validate_log_level,
    validate_positive_float,
    validate_positive_int,
    validate_storage_path,
    validate_uint32,
)


@dataclass
class StorageConfig:
    """Storage configuration section."""

    root: str = "atmosphere"

    def __post_init__(self) -> None:
        """Validate storage configuration."""
        if not validate_file_path(self.root):
            raise ValueError(f"Invalid storage root: {self.root}")


@dataclass
class HostsConfig:
    """Hosts file loading configuration section."""

    add_defaults: bool = True
    fail_on_error: bool = True
    max_file_size: int = HOSTS_FILE_SIZE_LIMIT
    hostname_limit: int = HOSTNAME_LIMIT
    startup_log: str = STARTUP_LOG_PATH
    watch: bool = False
    reload_debounce: float = 1.0

    def __post_init__(self) -> None:
        """Validate hosts configuration."""
        if not validate_boolean(self.add_defaults):
            raise ValueError(f"Add defaults must be boolean: {self.add_defaults}")

        if not validate_boolean(self.fail_on_error):
            raise ValueError(f"Fail on error must be boolean: {self.fail_on_error}")

        if not validate_positive_int(self.max_file_size):
            raise ValueError(
                f"Max file size must be positive: {self.max_file_size}"
            )

        # Room for at least a one-byte hostname
        if not validate_positive_int(self.hostname_limit) or self.hostname_limit < 2:
            raise ValueError(
                f"Hostname limit must be at least 2: {self.hostname_limit}"
            )

        if not validate_storage_path(self.startup_log):
            raise ValueError(f"Invalid startup log path: {self.startup_log}")

        if not validate_boolean(self.watch):
            raise ValueError(f"Watch must be boolean: {self.watch}")

        if not validate_positive_float(self.reload_debounce):
            raise ValueError(
                f"Reload debounce must be positive: {self.reload_debounce}"
            )


@dataclass
class EmummcConfig:
    """Emulated storage configuration section."""

    active: bool = False
    id: Union[int, str] = 0

    def __post_init__(self) -> None:
        """Validate emummc configuration."""
        if not validate_boolean(self.active):
            raise ValueError(f"Emummc active must be boolean: {self.active}")

        # Accept "0x0012" style ids from files and environment variables
        if isinstance(self.id, str):
            try:
                self.id = int(self.id, 0)
            except ValueError:
                raise ValueError(f"Invalid emummc id: {self.id}")

        if not validate_uint32(self.id):
            raise ValueError(f"Emummc id must fit in 32 bits: {self.id}")


@dataclass
class LoggingConfig:
    """Logging configuration section."""

    level: str = "INFO"
    format: str = "structured"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if not validate_log_level(self.level):
            raise ValueError(f"Invalid log level: {self.level}")

        if self.format not in ["simple", "detailed", "structured"]:
            raise ValueError(f"Invalid log format: {self.format}")

        if self.file is not None and not validate_file_path(self.file):
            raise ValueError(f"Invalid log file path: {self.file}")

        if not validate_positive_int(self.max_size_mb):
            raise ValueError(f"Max size MB must be positive: {self.max_size_mb}")

        if not validate_positive_int(self.backup_count):
            raise ValueError(f"Backup count must be positive: {self.backup_count}")


@dataclass
class RedirectConfig:
    """Main DNS redirect configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    hosts: HostsConfig = field(default_factory=HostsConfig)
    emummc: EmummcConfig = field(default_factory=EmummcConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def create_default_config() -> RedirectConfig:
    """Create a default configuration instance."""
    return RedirectConfig()
