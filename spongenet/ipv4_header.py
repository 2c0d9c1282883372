"""IPv4 datagram headers (options are skipped, not interpreted)."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import ClassVar

from .parser import NetParser, ParseError, ParseResult, pack_u8, pack_u16, pack_u32
from .util import InternetChecksum

_BOOL_TEXT = {True: "true", False: "false"}


def format_ipv4(address: int) -> str:
    """Dotted-quad form of a 32-bit IPv4 address."""
    return str(ipaddress.IPv4Address(address & 0xFFFFFFFF))


@dataclass
class IPv4Header:
    """An IPv4 header; ``hlen`` counts 32-bit words."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = LENGTH // 4
    tos: int = 0
    len: int = 0
    id: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = DEFAULT_TTL
    proto: int = PROTO_TCP
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> "IPv4Header":
        """Read a header from ``parser`` and verify it; raise ParseError on failure."""
        original = parser.buffer()
        data_size = len(original)
        if data_size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        first_byte = parser.u8()
        header = cls(ver=first_byte >> 4, hlen=first_byte & 0x0F)
        header.tos = parser.u8()
        header.len = parser.u16()
        header.id = parser.u16()
        fo_val = parser.u16()
        header.df = bool(fo_val & 0x4000)
        header.mf = bool(fo_val & 0x2000)
        header.offset = fo_val & 0x1FFF
        header.ttl = parser.u8()
        header.proto = parser.u8()
        header.cksum = parser.u16()
        header.src = parser.u32()
        header.dst = parser.u32()

        if data_size < 4 * header.hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if data_size != header.len:
            raise ParseError(ParseResult.TRUNCATED_PACKET)

        parser.remove_prefix(header.hlen * 4 - cls.LENGTH)
        parser.raise_for_error()

        check = InternetChecksum()
        check.add(original.copy()[: 4 * header.hlen])
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return header

    def serialize(self) -> bytes:
        """The header in wire format, padded to ``hlen`` words (checksum as stored)."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        raw = b"".join(
            (
                pack_u8((self.ver << 4) | (self.hlen & 0x0F)),
                pack_u8(self.tos),
                pack_u16(self.len),
                pack_u16(self.id),
                pack_u16(fo_val),
                pack_u8(self.ttl),
                pack_u8(self.proto),
                pack_u16(self.cksum),
                pack_u32(self.src),
                pack_u32(self.dst),
            )
        )
        size = 4 * self.hlen
        return raw.ljust(size, b"\0")[:size]

    def payload_length(self) -> int:
        """Bytes of payload after the header."""
        return (self.len - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to a TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def __str__(self) -> str:
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.len:x}\n"
            f"IP id: {self.id:x}\n"
            f"Flags: df: {_BOOL_TEXT[bool(self.df)]} mf: {_BOOL_TEXT[bool(self.mf)]}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """A one-line human-readable summary."""
        ttl_part = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.len:x}, protocol={self.proto:x}, {ttl_part}"
            f"src={format_ipv4(self.src)}, dst={format_ipv4(self.dst)}"
        )