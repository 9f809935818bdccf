"""
Hosts File Reloader

Watches the hosts directory of a LocalStorage and re-runs initialization
when a hosts file is created, modified, moved or deleted.
"""

import logging
import threading
from typing import Any, Callable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .errors import InitializationError
from .resolver import HostRedirectionResolver
from .selector import HOSTS_DIRECTORY
from .storage import LocalStorage

logger = logging.getLogger(__name__)


class HostsDirectoryHandler(FileSystemEventHandler):
    """File system event handler for hosts file changes."""

    def __init__(self, callback: Callable[[str], None]):
        """
        Args:
            callback: Function to call with the path of a changed file
        """
        self.callback = callback

    def on_any_event(self, event: Any) -> None:
        if event.is_directory or event.event_type not in (
            "created",
            "modified",
            "moved",
            "deleted",
            "closed",
        ):
            return
        self.callback(event.src_path)


class HostsFileWatcher:
    """Reload a resolver whenever its hosts files change"""

    def __init__(
        self,
        resolver: HostRedirectionResolver,
        storage: LocalStorage,
        debounce: float = 1.0,
    ):
        self.resolver = resolver
        self.storage = storage
        self.debounce = debounce
        self._observer: Optional[Observer] = None
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()

    def start(self) -> None:
        """Start watching the hosts directory"""
        if self._observer is not None:
            return

        self.storage.create_directory(HOSTS_DIRECTORY)
        hosts_dir = self.storage.resolve(HOSTS_DIRECTORY)

        self._observer = Observer()
        self._observer.schedule(
            HostsDirectoryHandler(self._on_hosts_change), str(hosts_dir), recursive=False
        )
        self._observer.start()
        logger.info(f"Watching {hosts_dir} for hosts file changes")

    def stop(self) -> None:
        """Stop watching and cancel any pending reload"""
        if self._observer is not None and self._observer.is_alive():
            self._observer.stop()
            self._observer.join()
        self._observer = None

        with self._timer_lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            timer.join()

    def _on_hosts_change(self, file_path: str) -> None:
        """Handle a hosts file change event.

        Every event restarts the quiet-period timer, so a file written in
        several steps is only loaded once the directory has settled.
        """
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._reload, args=(file_path,))
            self._timer.daemon = True
            self._timer.start()

    def _reload(self, file_path: str) -> None:
        """Rebuild the redirection table after hosts files changed"""
        try:
            count = self.resolver.initialize()
            logger.info(f"Reloaded {count} redirections after change to {file_path}")
        except InitializationError as e:
            logger.error(f"Error reloading redirections after change to {file_path}: {e}")
