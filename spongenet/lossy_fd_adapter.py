"""An adapter wrapper that randomly drops segments in either direction."""

from __future__ import annotations

import random
from typing import Optional, Protocol

from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment
from .util import get_random_generator


class _Adapter(Protocol):
    config: FdAdapterConfig
    listening: bool

    def read(self) -> Optional[TCPSegment]: ...

    def write(self, seg: TCPSegment) -> None: ...

    def tick(self, ms_since_last_tick: int) -> None: ...

    def fileno(self) -> int: ...


class LossyFdAdapter:
    """Wraps an adapter and drops reads and writes at the configured loss rates.

    Loss rates are out of 65536: a rate of ``n`` drops a segment when the low
    16 bits of a fresh 32-bit random value are below ``n``.
    """

    def __init__(self, adapter: _Adapter, rng: Optional[random.Random] = None) -> None:
        self._adapter = adapter
        self._rand = get_random_generator() if rng is None else rng

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and (self._rand.getrandbits(32) & 0xFFFF) < loss

    @property
    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    @config.setter
    def config(self, value: FdAdapterConfig) -> None:
        self._adapter.config = value

    @property
    def listening(self) -> bool:
        """The wrapped adapter's listening flag."""
        return self._adapter.listening

    @listening.setter
    def listening(self, value: bool) -> None:
        self._adapter.listening = value

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, possibly dropping what was read."""
        ret = self._adapter.read()
        if self._should_drop(False):
            return None
        return ret

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(seg)

    def tick(self, ms_since_last_tick: int) -> None:
        """Pass the passage of time on to the wrapped adapter."""
        self._adapter.tick(ms_since_last_tick)

    def fileno(self) -> int:
        """The wrapped adapter's descriptor number."""
        return self._adapter.fileno()