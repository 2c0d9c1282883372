"""Internet checksum, hexdump, timing and random-generator helpers."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import TextIO

_PROGRAM_START_NS = time.monotonic_ns()

# Number of 32-bit words in the Mersenne Twister state.
_MT_STATE_WORDS = 624


def _as_bytes(data: object) -> bytes:
    """Return the bytes of a bytes-like object (or anything with __bytes__)."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, (int, str)):
        raise TypeError(f"expected bytes-like data, got {type(data).__name__}")
    return bytes(data)  # type: ignore[call-overload]


def timestamp_ms() -> int:
    """Milliseconds elapsed since this module was first loaded."""
    return (time.monotonic_ns() - _PROGRAM_START_NS) // 1_000_000


def get_random_generator() -> random.Random:
    """Return a Mersenne Twister generator seeded with a full state of OS entropy."""
    seed = int.from_bytes(os.urandom(_MT_STATE_WORDS * 4), "big")
    return random.Random(seed)


class InternetChecksum:
    """The Internet (ones'-complement) checksum used by IPv4 and TCP.

    Adding data that already holds a correct checksum yields a value of zero.
    To compute a checksum, zero the checksum field, add the data and store
    the value.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data: object) -> None:
        """Add bytes to the running sum; may be called repeatedly."""
        raw = _as_bytes(data)
        if not raw:
            return
        if self._parity:
            low, high = raw[0::2], raw[1::2]
        else:
            high, low = raw[0::2], raw[1::2]
        self._sum = (self._sum + (sum(high) << 8) + sum(low)) & 0xFFFFFFFF
        if len(raw) % 2:
            self._parity = not self._parity

    def value(self) -> int:
        """The checksum of everything added so far, in host order."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def format_hexdump(data: object, indent: int = 0) -> str:
    """Render bytes as a hexdump: offset, grouped hex pairs and printable characters."""
    raw = _as_bytes(data)
    prefix = " " * indent
    out: list[str] = []
    chars: list[str] = []
    for printed, byte in enumerate(raw):
        if printed % 16 == 0:
            if printed:
                out.append(f"    {''.join(chars)}\n")
                chars = []
            out.append(f"{prefix}{printed:08x}:    ")
        elif printed % 2 == 0:
            out.append(" ")
        out.append(f"{byte:02x}")
        chars.append(_printable(byte))
    remainder = (16 - len(raw) % 16) % 16
    out.append(" " * (2 * remainder + remainder // 2 + 4))
    out.append("".join(chars) or " ")
    out.append("\n\n")
    return "".join(out)


def hexdump(data: object, indent: int = 0, file: TextIO | None = None) -> None:
    """Write a hexdump of ``data`` to ``file`` (standard output by default)."""
    stream = sys.stdout if file is None else file
    stream.write(format_hexdump(data, indent))
    stream.flush()