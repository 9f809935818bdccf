"""
Startup Diagnostic Log

Plain-text progress log written to storage on every initialization. The file
is recreated each run and every line is flushed as soon as it is written, so
the log survives a failure part way through loading.
"""

import logging
from typing import BinaryIO, Optional

from .storage import StorageService

logger = logging.getLogger(__name__)

STARTUP_LOG_PATH = "/dns_mitm_startup.log"


class StartupLog:
    """Context manager owning the startup log file handle"""

    def __init__(self, storage: StorageService, path: str = STARTUP_LOG_PATH):
        self.storage = storage
        self.path = path
        self._handle: Optional[BinaryIO] = None

    def open(self) -> None:
        """Delete, recreate and open the log file for appending"""
        self.storage.delete_file(self.path)
        self.storage.create_file(self.path, 0)
        self._handle = self.storage.open_file(self.path, "r+b")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def write(self, fmt: str, *args) -> None:
        """Append one printf-style formatted message and flush it"""
        if self._handle is None:
            raise RuntimeError(f"Startup log {self.path} is not open")

        message = fmt % args if args else fmt
        logger.debug(message.rstrip("\n"))

        offset = self.storage.get_size(self._handle)
        self.storage.write(
            self._handle,
            offset,
            message.encode("utf-8", errors="surrogateescape"),
            flush=True,
        )

    def __enter__(self) -> "StartupLog":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
