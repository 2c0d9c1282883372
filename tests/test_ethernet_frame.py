import pytest

from spongenet.buffer import BufferList
from spongenet.ethernet_frame import EthernetFrame
from spongenet.ethernet_header import EthernetHeader
from spongenet.parser import ParseError, ParseResult

DST = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x0A])
SRC = bytes([0x02, 0x00, 0x00, 0x00, 0x00, 0x0B])


def make_frame(payload=b"hello"):
    header = EthernetHeader(dst=DST, src=SRC, type=EthernetHeader.TYPE_IPV4)
    return EthernetFrame(header=header, payload=BufferList(payload))


def test_serialize_is_header_then_payload():
    frame = make_frame()
    out = frame.serialize()
    assert out.concatenate() == frame.header.serialize() + b"hello"
    assert len(out.buffers()) == 2


def test_round_trip():
    frame = make_frame()
    parsed = EthernetFrame.parse(frame.serialize().concatenate())
    assert parsed.header == frame.header
    assert parsed.payload.concatenate() == b"hello"


def test_empty_payload_round_trip():
    frame = make_frame(b"")
    parsed = EthernetFrame.parse(frame.serialize().concatenate())
    assert len(parsed.payload) == 0
    assert parsed.header.type == EthernetHeader.TYPE_IPV4


def test_too_short_raises():
    with pytest.raises(ParseError) as info:
        EthernetFrame.parse(b"\x00" * 5)
    assert info.value.result is ParseResult.PACKET_TOO_SHORT