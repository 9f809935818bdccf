"""
Host Redirection Resolver

Owns the redirection table and rebuilds it from storage:

1. clear the table under its lock
2. recreate the startup log
3. provision /hosts/default if it is missing
4. optionally apply the built-in defaults
5. select and parse the hosts file for the current storage mode
6. install the result and log every redirection

The lock is held for the whole rebuild, so concurrent lookups block until the
new table is complete. Any failure leaves the table empty: a bad hosts file
is rejected as a whole, never half-applied.
"""

import logging
from typing import List, Optional, Tuple

from .address import AddressRecord
from .environment import EmulatedStorageInfo, StaticEmulatedStorage
from .errors import (
    HostnameTooLongError,
    HostsFileTooLargeError,
    InitializationError,
    InvalidHostsFileError,
    StorageError,
)
from .parser import (
    DEFAULT_HOSTS_FILE,
    HOSTNAME_LIMIT,
    HOSTS_FILE_SIZE_LIMIT,
    parse_hosts,
)
from .selector import DEFAULT_HOSTS_PATH, HOSTS_DIRECTORY, select_hosts_file
from .startup_log import STARTUP_LOG_PATH, StartupLog
from .storage import LocalStorage, StorageService
from .table import RedirectionTable

logger = logging.getLogger(__name__)


class HostRedirectionResolver:
    """Hosts-file backed redirection lookups for the DNS MITM layer"""

    def __init__(
        self,
        storage: StorageService,
        environment: Optional[EmulatedStorageInfo] = None,
        add_defaults: bool = True,
        max_file_size: int = HOSTS_FILE_SIZE_LIMIT,
        hostname_limit: int = HOSTNAME_LIMIT,
        startup_log_path: str = STARTUP_LOG_PATH,
    ):
        """
        Initialize resolver with an empty table

        Args:
            storage: Storage holding the hosts files and startup log
            environment: Emulated storage detection (defaults to sysmmc)
            add_defaults: Apply built-in defaults when initialize() is not told
            max_file_size: Hosts files must be smaller than this many bytes
            hostname_limit: Hostname tokens must be shorter than this many bytes
            startup_log_path: Storage path of the startup log
        """
        self.storage = storage
        self.environment = environment or StaticEmulatedStorage()
        self.add_defaults = add_defaults
        self.max_file_size = max_file_size
        self.hostname_limit = hostname_limit
        self.startup_log_path = startup_log_path
        self.table = RedirectionTable()

    @classmethod
    def from_config(cls, config) -> "HostRedirectionResolver":
        """Build a resolver over local storage from a RedirectConfig"""
        return cls(
            storage=LocalStorage(config.storage.root),
            environment=StaticEmulatedStorage(config.emummc.active, config.emummc.id),
            add_defaults=config.hosts.add_defaults,
            max_file_size=config.hosts.max_file_size,
            hostname_limit=config.hosts.hostname_limit,
            startup_log_path=config.hosts.startup_log,
        )

    def initialize(self, add_defaults: Optional[bool] = None) -> int:
        """Rebuild the redirection table from storage.

        Args:
            add_defaults: Apply the built-in defaults before the hosts file;
                None uses the value given at construction

        Returns:
            Number of redirections installed

        Raises:
            StorageError: If any storage operation fails
            HostsFileTooLargeError: If the selected file is too large
            InvalidHostsFileError: If the selected file has an oversized hostname
        """
        if add_defaults is None:
            add_defaults = self.add_defaults

        with self.table.lock:
            self.table.clear()

            try:
                hosts_path = self._load(add_defaults)
            except InitializationError:
                self.table.clear()
                logger.exception("Failed to load redirections; table left empty")
                raise

            count = len(self.table)

        logger.info(f"Loaded {count} redirections from {hosts_path}")
        return count

    def _load(self, add_defaults: bool) -> str:
        """Fill the (already cleared) table from storage; returns the hosts path"""
        with StartupLog(self.storage, self.startup_log_path) as startup_log:
            startup_log.write("DNS Mitm:\n")

            self._ensure_default_hosts_file(startup_log)

            entries = {}
            if add_defaults:
                startup_log.write("Adding defaults to redirection list.\n")
                parse_hosts(DEFAULT_HOSTS_FILE, entries, self.hostname_limit)

            hosts_path = select_hosts_file(self.storage, self.environment, startup_log)
            startup_log.write("Selected %s\n", hosts_path)

            data = self._read_hosts_file(hosts_path)
            try:
                parse_hosts(data, entries, self.hostname_limit)
            except HostnameTooLongError as e:
                raise InvalidHostsFileError(
                    f"Rejected hosts file {hosts_path}: {e}"
                ) from e

            self.table.replace(entries.items())

            startup_log.write("Redirections:\n")
            for host, address in self.table.items():
                startup_log.write("    `%s` -> %s\n", host, address)

        return hosts_path

    def _ensure_default_hosts_file(self, startup_log: StartupLog) -> None:
        """Write the built-in defaults to /hosts/default if it is missing"""
        if self.storage.exists(DEFAULT_HOSTS_PATH):
            return

        startup_log.write("Creating %s because it does not exist.\n", DEFAULT_HOSTS_PATH)

        self.storage.create_directory(HOSTS_DIRECTORY)
        self.storage.create_file(DEFAULT_HOSTS_PATH, len(DEFAULT_HOSTS_FILE))
        with self.storage.open_file(DEFAULT_HOSTS_PATH, "r+b") as default_file:
            self.storage.write(default_file, 0, DEFAULT_HOSTS_FILE, flush=True)

    def _read_hosts_file(self, path: str) -> bytes:
        """Read the whole hosts file after validating its size"""
        with self.storage.open_file(path, "rb") as hosts_file:
            size = self.storage.get_size(hosts_file)
            if not 0 <= size < self.max_file_size:
                raise HostsFileTooLargeError(path, size, self.max_file_size)

            data = self.storage.read(hosts_file, 0, size)
            if len(data) != size:
                raise StorageError(
                    f"Short read from {path}: got {len(data)} of {size} bytes"
                )

        return data

    def resolve(self, hostname: str) -> Optional[AddressRecord]:
        """Return the redirected address for hostname, or None"""
        return self.table.lookup(hostname)

    def redirections(self) -> List[Tuple[str, AddressRecord]]:
        """Snapshot of the current redirections"""
        return self.table.items()


def initialize_redirections(
    resolver: HostRedirectionResolver, add_defaults: bool
) -> None:
    """Load redirections into resolver; raises InitializationError on failure"""
    resolver.initialize(add_defaults)


def resolve_redirect(
    resolver: HostRedirectionResolver, hostname: str
) -> Optional[AddressRecord]:
    """Look up a redirection for hostname"""
    return resolver.resolve(hostname)
