"""ARP messages for Ethernet/IPv4 address resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .ethernet_header import (
    ETHERNET_ADDRESS_LENGTH,
    EthernetHeader,
    format_ethernet_address,
    read_ethernet_address,
)
from .ipv4_header import format_ipv4
from .parser import NetParser, ParseError, ParseResult, pack_u8, pack_u16, pack_u32

_IPV4_ADDRESS_LENGTH = 4


@dataclass
class ARPMessage:
    """An ARP request or reply; only Ethernet/IPv4 is supported."""

    LENGTH: ClassVar[int] = 28
    TYPE_ETHERNET: ClassVar[int] = 1
    OPCODE_REQUEST: ClassVar[int] = 1
    OPCODE_REPLY: ClassVar[int] = 2

    hardware_type: int = 1
    protocol_type: int = EthernetHeader.TYPE_IPV4
    hardware_address_size: int = ETHERNET_ADDRESS_LENGTH
    protocol_address_size: int = _IPV4_ADDRESS_LENGTH
    opcode: int = 0
    sender_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    sender_ip_address: int = 0
    target_ethernet_address: bytes = bytes(ETHERNET_ADDRESS_LENGTH)
    target_ip_address: int = 0

    @classmethod
    def parse(cls, data: object) -> "ARPMessage":
        """Parse a message; raise ParseError if too short or unsupported."""
        parser = NetParser(data)  # type: ignore[arg-type]
        if len(parser.buffer()) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        message = cls(
            hardware_type=parser.u16(),
            protocol_type=parser.u16(),
            hardware_address_size=parser.u8(),
            protocol_address_size=parser.u8(),
            opcode=parser.u16(),
        )
        if not message.supported():
            raise ParseError(ParseResult.UNSUPPORTED)
        message.sender_ethernet_address = read_ethernet_address(parser)
        message.sender_ip_address = parser.u32()
        message.target_ethernet_address = read_ethernet_address(parser)
        message.target_ip_address = parser.u32()
        parser.raise_for_error()
        return message

    def supported(self) -> bool:
        """Whether this is an Ethernet/IPv4 request or reply."""
        return (
            self.hardware_type == self.TYPE_ETHERNET
            and self.protocol_type == EthernetHeader.TYPE_IPV4
            and self.hardware_address_size == ETHERNET_ADDRESS_LENGTH
            and self.protocol_address_size == _IPV4_ADDRESS_LENGTH
            and self.opcode in (self.OPCODE_REQUEST, self.OPCODE_REPLY)
        )

    def serialize(self) -> bytes:
        """The message in wire format."""
        if not self.supported():
            raise ValueError(
                "ARPMessage.serialize(): unsupported field combination "
                "(must be Ethernet/IP, and request or reply)"
            )
        for address in (self.sender_ethernet_address, self.target_ethernet_address):
            if len(address) != ETHERNET_ADDRESS_LENGTH:
                raise ValueError("Ethernet address must be 6 bytes")
        return b"".join(
            (
                pack_u16(self.hardware_type),
                pack_u16(self.protocol_type),
                pack_u8(self.hardware_address_size),
                pack_u8(self.protocol_address_size),
                pack_u16(self.opcode),
                bytes(self.sender_ethernet_address),
                pack_u32(self.sender_ip_address),
                bytes(self.target_ethernet_address),
                pack_u32(self.target_ip_address),
            )
        )

    def __str__(self) -> str:
        if self.opcode == self.OPCODE_REQUEST:
            opcode_str = "REQUEST"
        elif self.opcode == self.OPCODE_REPLY:
            opcode_str = "REPLY"
        else:
            opcode_str = "(unknown type)"
        return (
            f"opcode={opcode_str}, "
            f"sender={format_ethernet_address(self.sender_ethernet_address)}"
            f"/{format_ipv4(self.sender_ip_address)}, "
            f"target={format_ethernet_address(self.target_ethernet_address)}"
            f"/{format_ipv4(self.target_ip_address)}"
        )