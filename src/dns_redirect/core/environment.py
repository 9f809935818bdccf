"""
Emulated Storage Detection

The resolver only needs to know whether emulated storage (emummc) is active
and, if so, its numeric id. Detection itself belongs to the host service.
"""

from typing import Protocol


class EmulatedStorageInfo(Protocol):
    """Interface for emulated-storage detection"""

    def is_active(self) -> bool:
        ...

    def active_id(self) -> int:
        ...


class StaticEmulatedStorage:
    """Emulated-storage state fixed at construction (e.g. from configuration)"""

    def __init__(self, active: bool = False, emummc_id: int = 0):
        if not 0 <= emummc_id <= 0xFFFFFFFF:
            raise ValueError(f"emummc id must fit in 32 bits: {emummc_id}")
        self._active = active
        self._emummc_id = emummc_id

    def is_active(self) -> bool:
        return self._active

    def active_id(self) -> int:
        return self._emummc_id
