"""Carrying TCP segments in IPv4 datagrams over a TUN device."""

from __future__ import annotations

from typing import Optional

from .file_descriptor import FileDescriptor
from .ipv4_datagram import IPv4Datagram
from .parser import ParseError
from .tcp_over_ip import TCPOverIPv4Adapter
from .tcp_segment import TCPSegment


class TCPOverIPv4OverTunFdAdapter(TCPOverIPv4Adapter):
    """Reads and writes IPv4 datagrams holding TCP segments on a TUN device."""

    def __init__(self, tun: FileDescriptor) -> None:
        super().__init__()
        self._tun = tun

    @property
    def tun(self) -> FileDescriptor:
        """The underlying TUN device."""
        return self._tun

    def read(self) -> Optional[TCPSegment]:
        """Read one datagram and return its TCP segment, or None if invalid or unrelated."""
        try:
            ip_dgram = IPv4Datagram.parse(self._tun.read())
        except ParseError:
            return None
        return self.unwrap_tcp_in_ip(ip_dgram)

    def write(self, seg: TCPSegment) -> None:
        """Wrap a segment in an IPv4 datagram and write it to the device."""
        self._tun.write(self.wrap_tcp_in_ip(seg).serialize())

    def fileno(self) -> int:
        """The descriptor number of the device."""
        return self._tun.fileno()