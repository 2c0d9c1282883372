"""A reference-counted handle to a kernel file descriptor."""

from __future__ import annotations

import operator
import os
import sys
from typing import Optional

from .buffer import Buffer, BufferList, BufferViewList

_MAX_READ = 1024 * 1024


class _FDWrapper:
    """The shared kernel descriptor; closes it when the last handle goes away."""

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise ValueError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        os.close(self.fd)
        self.eof = self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except OSError as exc:
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


def _as_view_list(data: object) -> BufferViewList:
    if isinstance(data, BufferViewList):
        return BufferViewList(b"".join(data.views()))
    return BufferViewList(data)  # type: ignore[arg-type]


class FileDescriptor:
    """A file descriptor that tracks EOF, closure, and how often it was read or written.

    Handles made with ``duplicate()`` share the same descriptor and counters;
    the descriptor is closed when the last handle is garbage collected.
    """

    def __init__(self, fd: int) -> None:
        self._internal = _FDWrapper(operator.index(fd))

    def _register_read(self) -> None:
        self._internal.read_count += 1

    def _register_write(self) -> None:
        self._internal.write_count += 1

    def read(self, limit: Optional[int] = None) -> bytes:
        """Read up to ``limit`` bytes (at most 1 MiB per call)."""
        size = _MAX_READ if limit is None else min(_MAX_READ, limit)
        if size < 0:
            raise ValueError("read limit must not be negative")
        data = os.read(self.fd_num(), size)
        if size > 0 and not data:
            self._internal.eof = True
        if len(data) > size:
            raise RuntimeError("read() read more than requested")
        self._register_read()
        return data

    def write(
        self,
        data: "BufferViewList | BufferList | Buffer | bytes | bytearray | memoryview",
        write_all: bool = True,
    ) -> int:
        """Write data, repeating until all is written if ``write_all``; return bytes written."""
        buffer = _as_view_list(data)
        total = 0
        while True:
            written = os.writev(self.fd_num(), buffer.views())
            if written == 0 and len(buffer) != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > len(buffer):
                raise RuntimeError("write wrote more than length of input buffer")
            self._register_write()
            buffer.remove_prefix(written)
            total += written
            if not (write_all and len(buffer)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor."""
        self._internal.close()

    def duplicate(self) -> "FileDescriptor":
        """Another handle sharing this descriptor and its state."""
        copy = FileDescriptor.__new__(FileDescriptor)
        copy._internal = self._internal
        return copy

    def set_blocking(self, blocking: bool) -> None:
        """Switch between blocking and non-blocking mode."""
        os.set_blocking(self.fd_num(), blocking)

    def fileno(self) -> int:
        return self._internal.fd

    def fd_num(self) -> int:
        """The descriptor number."""
        return self._internal.fd

    def eof(self) -> bool:
        """Whether a read has reached end of file."""
        return self._internal.eof

    def closed(self) -> bool:
        """Whether the descriptor has been closed."""
        return self._internal.closed

    def read_count(self) -> int:
        """How many times the descriptor has been read."""
        return self._internal.read_count

    def write_count(self) -> int:
        """How many times the descriptor has been written."""
        return self._internal.write_count

    def __enter__(self) -> "FileDescriptor":
        return self

    def __exit__(self, *args: object) -> None:
        if not self.closed():
            self.close()