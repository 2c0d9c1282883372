"""Network-byte-order parsing and serialisation of integers."""

from __future__ import annotations

from enum import Enum
from typing import Union

from .buffer import Buffer


class ParseResult(Enum):
    """The outcome of parsing a datagram, segment, frame or ARP message."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


def as_string(result: ParseResult) -> str:
    """The name of a ParseResult."""
    return _NAMES[ParseResult(result)]


class ParseError(ValueError):
    """Raised when parsing fails; ``result`` tells why."""

    def __init__(self, result: ParseResult) -> None:
        self.result = ParseResult(result)
        super().__init__(as_string(self.result))


class NetParser:
    """Reads big-endian integers from the front of a Buffer, recording the first error."""

    def __init__(self, buffer: Union[Buffer, bytes, bytearray, memoryview]) -> None:
        self._buffer = Buffer(buffer)
        self.error = ParseResult.NO_ERROR

    def buffer(self) -> Buffer:
        """A copy of the unparsed remainder."""
        return Buffer(self._buffer)

    def failed(self) -> bool:
        """Whether an error has been recorded."""
        return self.error is not ParseResult.NO_ERROR

    def _check_size(self, size: int) -> None:
        if size < 0 or size > len(self._buffer):
            self.error = ParseResult.PACKET_TOO_SHORT

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        if self.failed():
            return 0
        value = int.from_bytes(bytes(self._buffer.at(i) for i in range(size)), "big")
        self._buffer.remove_prefix(size)
        return value

    def u8(self) -> int:
        """Parse an 8-bit integer; 0 on error."""
        return self._parse_int(1)

    def u16(self) -> int:
        """Parse a 16-bit big-endian integer; 0 on error."""
        return self._parse_int(2)

    def u32(self) -> int:
        """Parse a 32-bit big-endian integer; 0 on error."""
        return self._parse_int(4)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes, recording an error if there are not enough."""
        self._check_size(n)
        if self.failed():
            return
        self._buffer.remove_prefix(n)

    def raise_for_error(self) -> None:
        """Raise ParseError if an error has been recorded."""
        if self.failed():
            raise ParseError(self.error)


def pack_u8(value: int) -> bytes:
    """Serialise the low 8 bits of ``value``."""
    return (value & 0xFF).to_bytes(1, "big")


def pack_u16(value: int) -> bytes:
    """Serialise the low 16 bits of ``value`` in network byte order."""
    return (value & 0xFFFF).to_bytes(2, "big")


def pack_u32(value: int) -> bytes:
    """Serialise the low 32 bits of ``value`` in network byte order."""
    return (value & 0xFFFFFFFF).to_bytes(4, "big")