"""Read-only byte buffers that can cheaply discard bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Union


def _to_bytes(data: object) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like data, got {type(data).__name__}")


class Buffer:
    """A read-only byte string that can discard bytes from its front.

    Copies made with ``Buffer(other)`` share storage but keep their own
    starting offset.
    """

    __slots__ = ("_storage", "_offset")

    def __init__(self, data: Union["Buffer", bytes, bytearray, memoryview] = b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        else:
            self._storage = _to_bytes(data)
            self._offset = 0

    def _view(self) -> memoryview:
        return memoryview(self._storage)[self._offset:]

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if n < 0 or n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0

    def copy(self) -> bytes:
        """The remaining contents as new bytes."""
        return self._storage[self._offset:]

    def at(self, n: int) -> int:
        """The byte at position ``n``."""
        if not 0 <= n < len(self):
            raise IndexError("Buffer.at")
        return self._storage[self._offset + n]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __bytes__(self) -> bytes:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return self._view() == other._view()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._view() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({self.copy()!r})"


BufferLike = Union[Buffer, bytes, bytearray, memoryview]


class BufferList:
    """A discontiguous byte string made of several Buffers."""

    def __init__(self, data: Union["BufferList", BufferLike, None] = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    def buffers(self) -> tuple[Buffer, ...]:
        """The Buffers that make up this list, in order."""
        return tuple(Buffer(buf) for buf in self._buffers)

    def append(self, other: Union["BufferList", BufferLike]) -> None:
        """Append another BufferList, a Buffer, or bytes."""
        if isinstance(other, BufferList):
            self._buffers.extend(Buffer(buf) for buf in other._buffers)
        else:
            self._buffers.append(Buffer(other))

    def to_buffer(self) -> Buffer:
        """Convert to a single Buffer; only possible when at most one Buffer is held."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the held Buffers."""
        if n < 0:
            raise IndexError("BufferList.remove_prefix")
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                front.remove_prefix(n)
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """All contents joined into new bytes."""
        return b"".join(buf.copy() for buf in self._buffers)

    def __bytes__(self) -> bytes:
        return self.concatenate()

    def __repr__(self) -> str:
        return f"BufferList({list(self._buffers)!r})"


class BufferViewList:
    """A non-owning sequence of memory views over a discontiguous byte string."""

    def __init__(self, data: Union[BufferList, BufferLike]) -> None:
        views: Iterable[memoryview]
        if isinstance(data, BufferList):
            views = [buf._view() for buf in data._buffers]
        elif isinstance(data, Buffer):
            views = [data._view()]
        elif isinstance(data, memoryview):
            views = [data.cast("B")]
        else:
            views = [memoryview(_to_bytes(data))]
        self._views: deque[memoryview] = deque(views)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the views."""
        if n < 0:
            raise IndexError("BufferViewList.remove_prefix")
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def __len__(self) -> int:
        return sum(len(view) for view in self._views)

    def views(self) -> list[memoryview]:
        """The views, suitable for scatter-gather writes."""
        return list(self._views)