"""Network sockets built on FileDescriptor: UDP, TCP and local stream sockets."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Union

from .address import Address
from .buffer import Buffer, BufferList, BufferViewList
from .file_descriptor import FileDescriptor

_MSG_TRUNC = getattr(socket, "MSG_TRUNC", 0)
_SHUTDOWN_MODES = (socket.SHUT_RD, socket.SHUT_WR, socket.SHUT_RDWR)

Payload = Union[BufferViewList, BufferList, Buffer, bytes, bytearray, memoryview]


def _views(payload: Payload) -> list[memoryview]:
    if isinstance(payload, BufferViewList):
        return payload.views()
    return BufferViewList(payload).views()


class Socket(FileDescriptor):
    """Base class for network sockets; construct through a subclass."""

    def _init_new(self, domain: int, sock_type: int) -> None:
        raw = socket.socket(domain, sock_type)
        FileDescriptor.__init__(self, raw.detach())

    def _init_adopt(self, fd: Union[FileDescriptor, int], domain: int, sock_type: int) -> None:
        if isinstance(fd, FileDescriptor):
            self._internal = fd._internal
        else:
            FileDescriptor.__init__(self, fd)
        with self._socket_view() as sock:
            if sock.family != domain:
                raise RuntimeError("socket domain mismatch")
            if sock.type != sock_type:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _socket_view(self) -> Iterator[socket.socket]:
        """A temporary socket object over this descriptor that does not own it."""
        sock = socket.socket(fileno=self.fd_num())
        try:
            yield sock
        finally:
            sock.detach()

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listen/accept."""
        with self._socket_view() as sock:
            sock.bind(address.to_sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._socket_view() as sock:
            sock.connect(address.to_sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading, writing or both (SHUT_RD, SHUT_WR, SHUT_RDWR)."""
        if how not in _SHUTDOWN_MODES:
            raise ValueError("Socket.shutdown() called with invalid `how`")
        with self._socket_view() as sock:
            sock.shutdown(how)
        if how in (socket.SHUT_RD, socket.SHUT_RDWR):
            self._register_read()
        if how in (socket.SHUT_WR, socket.SHUT_RDWR):
            self._register_write()

    def local_address(self) -> Address:
        """The address this socket is bound to."""
        with self._socket_view() as sock:
            return Address.from_sockaddr(sock.getsockname())

    def peer_address(self) -> Address:
        """The address of the connected peer."""
        with self._socket_view() as sock:
            return Address.from_sockaddr(sock.getpeername())

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner (SO_REUSEADDR)."""
        with self._socket_view() as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass
class ReceivedDatagram:
    """A received UDP datagram and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self) -> None:
        self._init_new(socket.AF_INET, socket.SOCK_DGRAM)

    @classmethod
    def _from_fd(cls, fd: Union[FileDescriptor, int]) -> "UDPSocket":
        sock = cls.__new__(cls)
        sock._init_adopt(fd, socket.AF_INET, socket.SOCK_DGRAM)
        return sock

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raise RuntimeError if it exceeds ``mtu`` bytes."""
        storage = bytearray(mtu)
        with self._socket_view() as sock:
            length, source = sock.recvfrom_into(storage, mtu, _MSG_TRUNC)
        if length > mtu:
            raise RuntimeError("recvfrom (oversized datagram)")
        self._register_read()
        return ReceivedDatagram(Address.from_sockaddr(source), bytes(storage[:length]))

    def _sendmsg(self, payload: Payload, destination: Address | None) -> None:
        views = _views(payload)
        expected = sum(len(view) for view in views)
        with self._socket_view() as sock:
            if destination is None:
                sent = sock.sendmsg(views)
            else:
                sent = sock.sendmsg(views, [], 0, destination.to_sockaddr())
        if sent != expected:
            raise RuntimeError("datagram payload too big for sendmsg()")
        self._register_write()

    def sendto(self, destination: Address, payload: Payload) -> None:
        """Send a datagram to ``destination``."""
        self._sendmsg(payload, destination)

    def send(self, payload: Payload) -> None:
        """Send a datagram to the connected peer."""
        self._sendmsg(payload, None)


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self) -> None:
        self._init_new(socket.AF_INET, socket.SOCK_STREAM)

    @classmethod
    def _from_fd(cls, fd: Union[FileDescriptor, int]) -> "TCPSocket":
        sock = cls.__new__(cls)
        sock._init_adopt(fd, socket.AF_INET, socket.SOCK_STREAM)
        return sock

    def listen(self, backlog: int = 16) -> None:
        """Mark the socket as accepting connections."""
        with self._socket_view() as sock:
            sock.listen(backlog)

    def accept(self) -> "TCPSocket":
        """Wait for and return a new connection."""
        self._register_read()
        with self._socket_view() as sock:
            conn, _ = sock.accept()
        return TCPSocket._from_fd(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket."""

    def __init__(self, fd: Union[FileDescriptor, int]) -> None:
        self._init_adopt(fd, socket.AF_UNIX, socket.SOCK_STREAM)


def local_stream_socket_pair() -> tuple[LocalStreamSocket, LocalStreamSocket]:
    """Two connected Unix-domain stream sockets."""
    first, second = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    return (
        LocalStreamSocket(FileDescriptor(first.detach())),
        LocalStreamSocket(FileDescriptor(second.detach())),
    )