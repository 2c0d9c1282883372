"""Conversion between TCP segments and the IPv4 datagrams that carry them."""

from __future__ import annotations

from typing import Optional

from .address import Address
from .fd_adapter import FdAdapterBase
from .ipv4_datagram import IPv4Datagram
from .ipv4_header import IPv4Header, format_ipv4
from .parser import ParseError
from .tcp_segment import TCPSegment


class TCPOverIPv4Adapter(FdAdapterBase):
    """Wraps TCP segments in IPv4 datagrams and filters incoming ones for this connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """The TCP segment in ``ip_dgram``, or None if it is invalid or unrelated.

        While listening, an acceptable SYN fixes the source and destination
        addresses and the peer's port from the datagram.
        """
        header = ip_dgram.header
        cfg = self.config

        # binding to "0" (any address) is valid; replies come from the address contacted
        if not self.listening and header.dst != cfg.source.ipv4_numeric():
            return None
        if not self.listening and header.src != cfg.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload.concatenate(), header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != cfg.source.port():
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                cfg.source = Address(format_ipv4(header.dst), cfg.source.port())
                cfg.destination = Address(format_ipv4(header.src), seg.header.sport)
                self.listening = False
            else:
                return None

        if seg.header.sport != cfg.destination.port():
            return None

        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Set the segment's ports and wrap it in an IPv4 datagram."""
        cfg = self.config
        seg.header.sport = cfg.source.port()
        seg.header.dport = cfg.destination.port()

        ip_dgram = IPv4Datagram()
        ip_dgram.header.src = cfg.source.ipv4_numeric()
        ip_dgram.header.dst = cfg.destination.ipv4_numeric()
        ip_dgram.header.len = (
            ip_dgram.header.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
        )
        ip_dgram.payload = seg.serialize(ip_dgram.header.pseudo_cksum())
        return ip_dgram