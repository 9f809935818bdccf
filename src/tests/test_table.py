"""Tests for address records and the redirection table."""

import ipaddress
import threading

import pytest

from dns_redirect.core.address import AddressRecord
from dns_redirect.core.table import RedirectionTable


class TestAddressRecord:
    """Test the IPv4 address record layout."""

    def test_first_octet_is_low_byte(self):
        """127.0.0.1 is stored as 0x0100007F."""
        address = AddressRecord.from_octets(127, 0, 0, 1)

        assert address.value == 0x0100007F
        assert address.octets == (127, 0, 0, 1)
        assert str(address) == "127.0.0.1"

    def test_packed_is_network_order(self):
        """Packed bytes read left to right like the dotted form."""
        address = AddressRecord.from_octets(10, 20, 30, 40)

        assert address.packed == b"\x0a\x14\x1e\x28"
        assert AddressRecord.from_packed(address.packed) == address

    def test_to_ipv4(self):
        """Conversion to ipaddress keeps the dotted form."""
        address = AddressRecord.from_octets(192, 168, 1, 2)

        assert address.to_ipv4() == ipaddress.IPv4Address("192.168.1.2")

    def test_octets_are_truncated(self):
        """Octets wider than 8 bits are masked."""
        assert AddressRecord.from_octets(256, 257, 511, 999).octets == (0, 1, 255, 231)

    def test_value_range(self):
        """Values must fit in 32 bits."""
        with pytest.raises(ValueError):
            AddressRecord(1 << 32)
        with pytest.raises(ValueError):
            AddressRecord(-1)


class TestRedirectionTable:
    """Test the redirection table."""

    def test_empty_table(self):
        """A new table resolves nothing."""
        table = RedirectionTable()

        assert len(table) == 0
        assert table.lookup("a.com") is None
        assert table.items() == []

    def test_replace_and_lookup(self):
        """replace() installs entries for exact lookups."""
        table = RedirectionTable()
        address = AddressRecord.from_octets(127, 0, 0, 1)

        table.replace([("a.com", address)])

        assert table.lookup("a.com") == address
        assert "a.com" in table
        assert table.lookup("A.com") is None
        assert table.lookup("a.com.") is None

    def test_replace_clears_previous_entries(self):
        """replace() drops everything that was there before."""
        table = RedirectionTable()
        table.replace([("old.com", AddressRecord(1))])

        table.replace([("new.com", AddressRecord(2))])

        assert table.lookup("old.com") is None
        assert table.lookup("new.com") == AddressRecord(2)

    def test_replace_last_duplicate_wins(self):
        """Duplicate hostnames keep the last value."""
        table = RedirectionTable()

        table.replace([("a.com", AddressRecord(1)), ("a.com", AddressRecord(2))])

        assert len(table) == 1
        assert table.lookup("a.com") == AddressRecord(2)

    def test_clear(self):
        """clear() empties the table."""
        table = RedirectionTable()
        table.replace([("a.com", AddressRecord(1))])

        table.clear()

        assert len(table) == 0

    def test_items_is_a_snapshot(self):
        """items() is not affected by later changes."""
        table = RedirectionTable()
        table.replace([("a.com", AddressRecord(1))])

        snapshot = table.items()
        table.clear()

        assert snapshot == [("a.com", AddressRecord(1))]

    def test_lookup_blocks_while_lock_is_held(self):
        """Readers wait for a writer holding the table lock."""
        table = RedirectionTable()
        table.replace([("a.com", AddressRecord(1))])
        results = []

        with table.lock:
            table.clear()
            reader = threading.Thread(target=lambda: results.append(table.lookup("a.com")))
            reader.start()
            reader.join(timeout=0.2)
            assert reader.is_alive()
            table.replace([("a.com", AddressRecord(2))])

        reader.join(timeout=5)
        assert results == [AddressRecord(2)]
