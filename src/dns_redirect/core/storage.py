"""
Storage Service

Narrow filesystem interface used by the initializer. Paths are absolute
within the storage root ("/hosts/default"), mirroring how the host service
exposes its SD card directory. LocalStorage maps them onto a local directory.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Protocol

from .errors import StorageError

logger = logging.getLogger(__name__)


class StorageService(Protocol):
    """Filesystem operations required by the initializer"""

    def exists(self, path: str) -> bool:
        ...

    def create_directory(self, path: str) -> None:
        ...

    def create_file(self, path: str, size: int = 0) -> None:
        ...

    def delete_file(self, path: str) -> None:
        ...

    def open_file(self, path: str, mode: str) -> BinaryIO:
        ...

    def get_size(self, handle: BinaryIO) -> int:
        ...

    def read(self, handle: BinaryIO, offset: int, size: int) -> bytes:
        ...

    def write(
        self, handle: BinaryIO, offset: int, data: bytes, flush: bool = False
    ) -> None:
        ...


class LocalStorage:
    """StorageService backed by a directory on the local filesystem"""

    def __init__(self, root: str):
        """
        Args:
            root: Local directory that storage paths are resolved against
        """
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Map a storage path onto the local filesystem"""
        return self.root / path.lstrip("/")

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def create_directory(self, path: str) -> None:
        """Create a directory; failure is logged, later file operations report it"""
        try:
            self.resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create directory {path}: {e}")

    def create_file(self, path: str, size: int = 0) -> None:
        """Create a new file of ``size`` zero bytes; fails if it exists"""
        local_path = self.resolve(path)
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            with open(local_path, "xb") as f:
                f.truncate(size)
        except OSError as e:
            raise StorageError(f"Failed to create file {path}: {e}") from e

    def delete_file(self, path: str) -> None:
        """Delete a file; a missing file is not an error"""
        try:
            self.resolve(path).unlink()
        except FileNotFoundError:
            logger.debug(f"Not deleting {path}: file does not exist")
        except OSError as e:
            raise StorageError(f"Failed to delete file {path}: {e}") from e

    def open_file(self, path: str, mode: str) -> BinaryIO:
        """Open an existing file in binary mode ("rb", "r+b" or "ab")"""
        if "b" not in mode:
            raise ValueError(f"Storage files must be opened in binary mode: {mode}")
        try:
            return open(self.resolve(path), mode)
        except OSError as e:
            raise StorageError(f"Failed to open file {path}: {e}") from e

    def get_size(self, handle: BinaryIO) -> int:
        try:
            return os.fstat(handle.fileno()).st_size
        except OSError as e:
            raise StorageError(f"Failed to get size of {handle.name}: {e}") from e

    def read(self, handle: BinaryIO, offset: int, size: int) -> bytes:
        try:
            handle.seek(offset)
            return handle.read(size)
        except OSError as e:
            raise StorageError(f"Failed to read {handle.name}: {e}") from e

    def write(
        self, handle: BinaryIO, offset: int, data: bytes, flush: bool = False
    ) -> None:
        try:
            # Append-mode handles ignore the offset and always write at the end
            if "a" not in handle.mode:
                handle.seek(offset)
            handle.write(data)
            if flush:
                handle.flush()
        except OSError as e:
            raise StorageError(f"Failed to write {handle.name}: {e}") from e
