"""Ethernet frame headers and Ethernet addresses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .parser import NetParser, ParseError, ParseResult, pack_u16

ETHERNET_ADDRESS_LENGTH = 6

ETHERNET_BROADCAST = b"\xff" * ETHERNET_ADDRESS_LENGTH
"""The Ethernet broadcast address, ff:ff:ff:ff:ff:ff."""


def _check_address(address: bytes) -> bytes:
    raw = bytes(address)
    if len(raw) != ETHERNET_ADDRESS_LENGTH:
        raise ValueError(f"Ethernet address must be {ETHERNET_ADDRESS_LENGTH} bytes, got {len(raw)}")
    return raw


def format_ethernet_address(address: bytes) -> str:
    """Colon-separated lower-case hex form of a six-byte Ethernet address."""
    return ":".join(f"{byte:02x}" for byte in bytes(address))


def read_ethernet_address(parser: NetParser) -> bytes:
    """Read six bytes from ``parser`` as an Ethernet address."""
    return bytes(parser.u8() for _ in range(ETHERNET_ADDRESS_LENGTH))


@dataclass
class EthernetHeader:
    """An Ethernet frame header: destination, source and EtherType."""

    LENGTH: ClassVar[int] = 14
    TYPE_IPV4: ClassVar[int] = 0x800
    TYPE_ARP: ClassVar[int] = 0x806

    dst: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    src: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    type: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> "EthernetHeader":
        """Read a header from ``parser``; raise ParseError if it is too short."""
        if len(parser.buffer()) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        dst = read_ethernet_address(parser)
        src = read_ethernet_address(parser)
        frame_type = parser.u16()
        parser.raise_for_error()
        return cls(dst=dst, src=src, type=frame_type)

    def serialize(self) -> bytes:
        """The header in wire format."""
        return _check_address(self.dst) + _check_address(self.src) + pack_u16(self.type)

    def __str__(self) -> str:
        if self.type == self.TYPE_IPV4:
            type_name = "IPv4"
        elif self.type == self.TYPE_ARP:
            type_name = "ARP"
        else:
            type_name = f"[unknown type {self.type:x}!]"
        return (
            f"dst={format_ethernet_address(self.dst)}, "
            f"src={format_ethernet_address(self.src)}, type={type_name}"
        )