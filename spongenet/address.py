"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import socket
from typing import Union

_NUMERIC_FLAGS = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
_RESOLVE_FLAGS = getattr(socket, "AI_ALL", 0)


def _check_port(port: int) -> int:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")
    return port


class Address:
    """A socket address: an IPv4 address and port, resolved on construction.

    A numeric ``port`` means ``host`` must be a dotted-quad address and no
    lookup takes place; a string ``port`` is a service name or number and
    ``host`` may be a hostname to resolve.
    """

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, host: str, port: Union[int, str] = 0) -> None:
        if isinstance(port, int):
            service = str(_check_port(port))
            flags = _NUMERIC_FLAGS
        else:
            service = port
            flags = _RESOLVE_FLAGS
        try:
            results = socket.getaddrinfo(host, service, socket.AF_INET, 0, 0, flags)
        except socket.gaierror as exc:
            raise socket.gaierror(
                exc.errno, f"getaddrinfo({host}, {service}): {exc.strerror}"
            ) from exc
        if not results:
            raise OSError("getaddrinfo returned successfully but with no results")
        family, _, _, _, sockaddr = results[0]
        self._family = family
        self._sockaddr = tuple(sockaddr)

    @classmethod
    def from_sockaddr(cls, sockaddr: tuple) -> "Address":
        """Build from a socket-module address tuple (IPv4 pair or IPv6 4-tuple)."""
        address = object.__new__(cls)
        if len(sockaddr) == 2:
            host, port = sockaddr
            packed = socket.inet_pton(socket.AF_INET, host)
            address._family = socket.AF_INET
            address._sockaddr = (socket.inet_ntop(socket.AF_INET, packed), _check_port(int(port)))
        elif len(sockaddr) == 4:
            host, port, flowinfo, scope_id = sockaddr
            socket.inet_pton(socket.AF_INET6, host.split("%", 1)[0])
            address._family = socket.AF_INET6
            address._sockaddr = (host, _check_port(int(port)), flowinfo, scope_id)
        else:
            raise ValueError(f"invalid sockaddr: {sockaddr!r}")
        return address

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> "Address":
        """Build an IPv4 address (port 0) from its 32-bit numeric value."""
        if not 0 <= ip_address <= 0xFFFFFFFF:
            raise ValueError(f"IPv4 address out of range: {ip_address}")
        return cls.from_sockaddr((socket.inet_ntoa(ip_address.to_bytes(4, "big")), 0))

    def ip_port(self) -> tuple[str, int]:
        """The numeric address string and the port."""
        return self._sockaddr[0], self._sockaddr[1]

    def ip(self) -> str:
        """The numeric address string, e.g. ``"18.243.0.1"``."""
        return self.ip_port()[0]

    def port(self) -> int:
        """The port number."""
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """The IPv4 address as a 32-bit integer in host order."""
        if self._family != socket.AF_INET:
            raise ValueError("ipv4_numeric called on non-IPV4 address")
        return int.from_bytes(socket.inet_aton(self._sockaddr[0]), "big")

    def to_sockaddr(self) -> tuple:
        """The address tuple accepted by the socket module."""
        return self._sockaddr

    def __str__(self) -> str:
        ip, port = self.ip_port()
        return f"{ip}:{port}"

    def __repr__(self) -> str:
        return f"Address({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))