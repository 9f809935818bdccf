"""
DNS Redirect Core Module

Hosts-file parsing, the redirection table and the resolver that loads it.
"""

from .address import AddressRecord
from .environment import EmulatedStorageInfo, StaticEmulatedStorage
from .errors import (
    HostnameTooLongError,
    HostsFileTooLargeError,
    InitializationError,
    InvalidHostsFileError,
    RedirectionError,
    StorageError,
)
from .parser import (
    DEFAULT_HOSTS_FILE,
    HOSTNAME_LIMIT,
    HOSTS_FILE_SIZE_LIMIT,
    ParserAction,
    ParserState,
    parse_hosts,
    transition,
)
from .resolver import (
    HostRedirectionResolver,
    initialize_redirections,
    resolve_redirect,
)
from .selector import hosts_file_candidates, select_hosts_file
from .startup_log import StartupLog
from .storage import LocalStorage, StorageService
from .table import RedirectionTable

__all__ = [
    # Resolver
    "HostRedirectionResolver",
    "initialize_redirections",
    "resolve_redirect",
    # Data
    "AddressRecord",
    "RedirectionTable",
    # Parser
    "ParserState",
    "ParserAction",
    "parse_hosts",
    "transition",
    "DEFAULT_HOSTS_FILE",
    "HOSTNAME_LIMIT",
    "HOSTS_FILE_SIZE_LIMIT",
    # Selection and collaborators
    "hosts_file_candidates",
    "select_hosts_file",
    "StartupLog",
    "StorageService",
    "LocalStorage",
    "EmulatedStorageInfo",
    "StaticEmulatedStorage",
    # Errors
    "RedirectionError",
    "HostnameTooLongError",
    "InitializationError",
    "HostsFileTooLargeError",
    "InvalidHostsFileError",
    "StorageError",
]
