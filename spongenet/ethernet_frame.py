"""Ethernet frames: a header followed by a payload."""

from __future__ import annotations

from dataclasses import dataclass, field

from .buffer import BufferList
from .ethernet_header import EthernetHeader
from .parser import NetParser


@dataclass
class EthernetFrame:
    """An Ethernet frame."""

    header: EthernetHeader = field(default_factory=EthernetHeader)
    payload: BufferList = field(default_factory=BufferList)

    @classmethod
    def parse(cls, data: object) -> "EthernetFrame":
        """Parse a frame from bytes or a Buffer; raise ParseError on failure."""
        parser = NetParser(data)  # type: ignore[arg-type]
        header = EthernetHeader.parse(parser)
        payload = BufferList(parser.buffer())
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """The frame in wire format, as header and payload buffers."""
        ret = BufferList(self.header.serialize())
        ret.append(self.payload)
        return ret