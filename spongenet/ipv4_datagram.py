"""IPv4 datagrams: a header followed by a payload."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from .buffer import BufferList
from .ipv4_header import IPv4Header
from .parser import NetParser, ParseError, ParseResult
from .util import InternetChecksum


@dataclass
class IPv4Datagram:
    """An IPv4 Internet datagram."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: BufferList = field(default_factory=BufferList)

    @classmethod
    def parse(cls, data: object) -> "IPv4Datagram":
        """Parse a datagram from bytes or a Buffer; raise ParseError on failure."""
        parser = NetParser(data)  # type: ignore[arg-type]
        header = IPv4Header.parse(parser)
        payload = BufferList(parser.buffer())
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """The datagram in wire format, with the header checksum computed."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram.serialize: payload is wrong size")
        header_out = dataclasses.replace(self.header, cksum=0)
        check = InternetChecksum()
        check.add(header_out.serialize())
        header_out.cksum = check.value()
        ret = BufferList(header_out.serialize())
        ret.append(self.payload)
        return ret


InternetDatagram = IPv4Datagram