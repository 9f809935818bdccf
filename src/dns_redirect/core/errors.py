"""
Host Redirection Errors

Typed failures raised while loading redirections. Malformed hosts-file lines
never raise; only conditions that would leave the table built from corrupt or
oversized input do.
"""


class RedirectionError(Exception):
    """Base class for host redirection failures."""


class HostnameTooLongError(RedirectionError):
    """A hostname token reached the hostname limit without a terminator."""

    def __init__(self, limit: int):
        super().__init__(f"Hostname token reached {limit} bytes without a terminator")
        self.limit = limit


class InitializationError(RedirectionError):
    """Loading the redirection table failed; the table is left empty."""


class HostsFileTooLargeError(InitializationError):
    """Selected hosts file size is negative or not below the size limit."""

    def __init__(self, path: str, size: int, limit: int):
        super().__init__(
            f"Hosts file {path} has invalid size {size} (must be below {limit})"
        )
        self.path = path
        self.size = size
        self.limit = limit


class InvalidHostsFileError(InitializationError):
    """Hosts file content was rejected by the parser."""


class StorageError(InitializationError):
    """A storage operation (create/open/read/write/delete) failed."""
