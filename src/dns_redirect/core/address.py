"""
IPv4 Address Record

Addresses are kept as a 32-bit integer in the same byte layout as the dotted
octets read left to right: the first octet lives in the lowest-order byte, so
the little-endian encoding of the integer is the address in network order.
"""

import ipaddress
import struct
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class AddressRecord:
    """A redirection target address."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"Address value out of 32-bit range: {self.value}")

    @classmethod
    def from_octets(cls, a: int, b: int, c: int, d: int) -> "AddressRecord":
        """Build a record from dotted octets, truncating each to 8 bits."""
        return cls(
            ((a & 0xFF) << 0) | ((b & 0xFF) << 8) | ((c & 0xFF) << 16) | ((d & 0xFF) << 24)
        )

    @classmethod
    def from_packed(cls, data: bytes) -> "AddressRecord":
        """Build a record from four bytes in network order."""
        return cls(struct.unpack("<I", data)[0])

    @property
    def octets(self) -> Tuple[int, int, int, int]:
        return (
            (self.value >> 0) & 0xFF,
            (self.value >> 8) & 0xFF,
            (self.value >> 16) & 0xFF,
            (self.value >> 24) & 0xFF,
        )

    @property
    def packed(self) -> bytes:
        return struct.pack("<I", self.value)

    def to_ipv4(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.packed)

    def __str__(self) -> str:
        return "%u.%u.%u.%u" % self.octets
