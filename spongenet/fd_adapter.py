"""Adapters that carry TCP segments over an underlying datagram transport."""

from __future__ import annotations

from typing import Optional

from .parser import ParseError
from .sockets import UDPSocket
from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment


class FdAdapterBase:
    """Configuration and listening state shared by all datagram adapters.

    ``listening`` is true while the connected TCP endpoint waits for a peer;
    the first acceptable SYN then fixes the peer's address in ``config``.
    """

    def __init__(self) -> None:
        self.config = FdAdapterConfig()
        self.listening = False
        self.elapsed_ms = 0

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the passage of time; ``elapsed_ms`` totals all ticks."""
        self.elapsed_ms += ms_since_last_tick


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments carried as UDP payloads."""

    def __init__(self, sock: UDPSocket) -> None:
        super().__init__()
        self._sock = sock

    @property
    def sock(self) -> UDPSocket:
        """The underlying UDP socket."""
        return self._sock

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram and return its TCP segment, or None if invalid or unrelated."""
        datagram = self._sock.recv()

        if not self.listening and datagram.source_address != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(datagram.payload, 0)
        except ParseError:
            return None

        if self.listening:
            if seg.header.syn and not seg.header.rst:
                self.config.destination = datagram.source_address
                self.listening = False
            else:
                return None

        return seg

    def write(self, seg: TCPSegment) -> None:
        """Set the segment's ports and send it as the payload of a UDP datagram."""
        seg.header.sport = self.config.source.port()
        seg.header.dport = self.config.destination.port()
        self._sock.sendto(self.config.destination, seg.serialize(0))

    def fileno(self) -> int:
        """The descriptor number of the underlying socket."""
        return self._sock.fileno()