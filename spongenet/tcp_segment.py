"""TCP segments: a header followed by a payload."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from .buffer import Buffer, BufferList
from .parser import NetParser, ParseError, ParseResult
from .tcp_header import TCPHeader
from .util import InternetChecksum


@dataclass
class TCPSegment:
    """A TCP segment."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    def __post_init__(self) -> None:
        if not isinstance(self.payload, Buffer):
            self.payload = Buffer(self.payload)

    @classmethod
    def parse(cls, data: object, datagram_layer_checksum: int = 0) -> "TCPSegment":
        """Verify the checksum and parse a segment; raise ParseError on failure.

        ``datagram_layer_checksum`` is the pseudo-header sum of the carrying datagram.
        """
        raw = data if isinstance(data, Buffer) else bytes(data)  # type: ignore[call-overload]
        check = InternetChecksum(datagram_layer_checksum)
        check.add(raw)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        parser = NetParser(raw)
        header = TCPHeader.parse(parser)
        payload = parser.buffer()
        parser.raise_for_error()
        return cls(header=header, payload=payload)

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """The segment in wire format, with the checksum computed over header and payload."""
        header_out = dataclasses.replace(self.header, cksum=0)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(self.payload)
        header_out.cksum = check.value()

        ret = BufferList(header_out.serialize())
        ret.append(self.payload)
        return ret

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + (1 if self.header.syn else 0) + (1 if self.header.fin else 0)