"""
Hosts File Parser

Single left-to-right scan over hosts-file bytes driven by an explicit state
machine. Grammar:

    entry    := ipv4 WS+ hostname (WS+ hostname)* (newline | EOF)
    ipv4     := octet '.' octet '.' octet '.' octet   (octets truncated mod 256)
    hostname := 1..HOSTNAME_LIMIT-1 non-whitespace bytes

Any line not starting with a digit is skipped, which is how comments work.
An unexpected byte inside an address discards the rest of its line. Several
hostnames may follow one address and all map to it.
"""

from enum import Enum
from typing import MutableMapping, Optional, Tuple, Union

from .address import AddressRecord
from .errors import HostnameTooLongError

# A hostname token must stay shorter than this many bytes
HOSTNAME_LIMIT = 0x1FF

# A hosts file must be smaller than this many bytes
HOSTS_FILE_SIZE_LIMIT = 0x8000

DEFAULT_HOSTS_FILE = (
    b"# Nintendo telemetry servers\n"
    b"127.0.0.1 receive-lp1.dg.srv.nintendo.net\n"
    b"127.0.0.1 receive-lp1.er.srv.nintendo.net\n"
)

_TAB = 0x09
_LF = 0x0A
_CR = 0x0D
_SPACE = 0x20
_DOT = 0x2E
_ZERO = 0x30
_NINE = 0x39


class ParserState(Enum):
    """Cursor of the hosts-file state machine."""

    IGNORED_LINE = "ignored_line"
    BEGIN_LINE = "begin_line"
    IP1 = "ip1"
    IP_DOT1 = "ip_dot1"
    IP2 = "ip2"
    IP_DOT2 = "ip_dot2"
    IP3 = "ip3"
    IP_DOT3 = "ip_dot3"
    IP4 = "ip4"
    WHITE_SPACE = "white_space"
    HOST_NAME = "host_name"


class ParserAction(Enum):
    """Side effect the scanner applies when taking a transition."""

    NONE = "none"
    START_ADDRESS = "start_address"  # reset address, first digit of octet 1
    ACCUMULATE = "accumulate"  # octet = octet * 10 + digit
    STORE_OCTET = "store_octet"  # mask octet, shift it into the address
    START_OCTET = "start_octet"  # first digit of octets 2-4
    START_HOSTNAME = "start_hostname"
    APPEND = "append"
    COMMIT = "commit"


# Octet being accumulated in each address state -> shift into the address
_OCTET_SHIFTS = {
    ParserState.IP1: 0,
    ParserState.IP2: 8,
    ParserState.IP3: 16,
    ParserState.IP4: 24,
}

_AFTER_DOT = {
    ParserState.IP1: ParserState.IP_DOT1,
    ParserState.IP2: ParserState.IP_DOT2,
    ParserState.IP3: ParserState.IP_DOT3,
}

_NEXT_OCTET = {
    ParserState.IP_DOT1: ParserState.IP2,
    ParserState.IP_DOT2: ParserState.IP3,
    ParserState.IP_DOT3: ParserState.IP4,
}


def _is_digit(byte: int) -> bool:
    return _ZERO <= byte <= _NINE


def transition(state: ParserState, byte: int) -> Tuple[ParserState, ParserAction]:
    """Compute the next state and action for one input byte.

    Pure function of its arguments, so the grammar can be exercised without
    any of the accumulation bookkeeping done by :func:`parse_hosts`.

    Args:
        state: Current parser state
        byte: Input byte value (0-255)

    Returns:
        Tuple of (next state, action to apply)
    """
    if state is ParserState.IGNORED_LINE:
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        return ParserState.IGNORED_LINE, ParserAction.NONE

    if state is ParserState.BEGIN_LINE:
        if _is_digit(byte):
            return ParserState.IP1, ParserAction.START_ADDRESS
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        return ParserState.IGNORED_LINE, ParserAction.NONE

    if state in _AFTER_DOT:
        if _is_digit(byte):
            return state, ParserAction.ACCUMULATE
        if byte == _DOT:
            return _AFTER_DOT[state], ParserAction.STORE_OCTET
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        return ParserState.IGNORED_LINE, ParserAction.NONE

    if state in _NEXT_OCTET:
        if _is_digit(byte):
            return _NEXT_OCTET[state], ParserAction.START_OCTET
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        return ParserState.IGNORED_LINE, ParserAction.NONE

    if state is ParserState.IP4:
        if _is_digit(byte):
            return ParserState.IP4, ParserAction.ACCUMULATE
        if byte in (_SPACE, _TAB):
            return ParserState.WHITE_SPACE, ParserAction.STORE_OCTET
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        return ParserState.IGNORED_LINE, ParserAction.NONE

    if state is ParserState.WHITE_SPACE:
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.NONE
        if byte in (_SPACE, _TAB, _CR):
            return ParserState.WHITE_SPACE, ParserAction.NONE
        return ParserState.HOST_NAME, ParserAction.START_HOSTNAME

    if state is ParserState.HOST_NAME:
        if byte == _LF:
            return ParserState.BEGIN_LINE, ParserAction.COMMIT
        if byte in (_SPACE, _TAB, _CR):
            return ParserState.WHITE_SPACE, ParserAction.COMMIT
        return ParserState.HOST_NAME, ParserAction.APPEND

    raise ValueError(f"Unknown parser state: {state}")


def _decode_hostname(raw: bytearray) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def parse_hosts(
    data: Union[bytes, bytearray, memoryview, str],
    into: Optional[MutableMapping[str, AddressRecord]] = None,
    hostname_limit: int = HOSTNAME_LIMIT,
) -> MutableMapping[str, AddressRecord]:
    """Parse hosts-file content into a hostname -> address mapping.

    Scanning stops at the end of the data or at the first NUL byte. Entries
    are inserted into ``into`` (or a new dict), overwriting earlier values
    for the same hostname. A hostname still open at end of input is kept.

    Args:
        data: Hosts-file content
        into: Mapping to insert entries into
        hostname_limit: Hostname tokens must stay shorter than this

    Returns:
        The mapping the entries were inserted into

    Raises:
        HostnameTooLongError: If a hostname token reaches ``hostname_limit``
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    data = bytes(data)

    terminator = data.find(b"\x00")
    if terminator != -1:
        data = data[:terminator]

    table = {} if into is None else into

    state = ParserState.BEGIN_LINE
    address = 0
    work = 0
    hostname = bytearray()

    for byte in data:
        next_state, action = transition(state, byte)

        if action is ParserAction.START_ADDRESS:
            address = 0
            work = byte - _ZERO
        elif action is ParserAction.ACCUMULATE:
            work = work * 10 + (byte - _ZERO)
        elif action is ParserAction.STORE_OCTET:
            address |= (work & 0xFF) << _OCTET_SHIFTS[state]
            work = 0
        elif action is ParserAction.START_OCTET:
            work = byte - _ZERO
        elif action is ParserAction.START_HOSTNAME:
            hostname = bytearray((byte,))
        elif action is ParserAction.APPEND:
            if len(hostname) + 1 >= hostname_limit:
                raise HostnameTooLongError(hostname_limit)
            hostname.append(byte)
        elif action is ParserAction.COMMIT:
            table[_decode_hostname(hostname)] = AddressRecord(address)

        state = next_state

    if state is ParserState.HOST_NAME:
        table[_decode_hostname(hostname)] = AddressRecord(address)

    return table
