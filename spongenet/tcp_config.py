"""Configuration for TCP endpoints and the adapters that carry their segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from .address import Address


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = TIMEOUT_DFLT
    recv_capacity: int = DEFAULT_CAPACITY
    send_capacity: int = DEFAULT_CAPACITY
    fixed_isn: Optional[int] = None


def _any_address() -> Address:
    return Address("0", 0)


@dataclass
class FdAdapterConfig:
    """Addresses and loss rates for a datagram adapter."""

    source: Address = field(default_factory=_any_address)
    destination: Address = field(default_factory=_any_address)
    loss_rate_dn: int = 0
    loss_rate_up: int = 0