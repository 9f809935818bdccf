"""
Redirection Table

Thread-safe hostname -> address mapping. Every read and every mutation
serializes on one re-entrant lock, which the initializer also holds for the
duration of a rebuild, so readers see either the old or the new table.
"""

import threading
from typing import Dict, Iterable, List, Optional, Tuple

from .address import AddressRecord


class RedirectionTable:
    """Hostname to address mapping guarded by a single lock"""

    def __init__(self) -> None:
        self._entries: Dict[str, AddressRecord] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Exclusive-access guard shared with the initializer."""
        return self._lock

    def replace(self, entries: Iterable[Tuple[str, AddressRecord]]) -> None:
        """Clear the table then insert all entries (later duplicates win)"""
        with self._lock:
            self._entries.clear()
            for hostname, address in entries:
                self._entries[hostname] = address

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def lookup(self, hostname: str) -> Optional[AddressRecord]:
        """Exact, case-sensitive lookup; None when not redirected"""
        with self._lock:
            return self._entries.get(hostname)

    def items(self) -> List[Tuple[str, AddressRecord]]:
        """Snapshot of all entries in insertion order"""
        with self._lock:
            return list(self._entries.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, hostname: object) -> bool:
        with self._lock:
            return hostname in self._entries
