"""Waits for readiness on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import select
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]


class Direction(Enum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class EventLoopResult(Enum):
    """The outcome of one EventLoop.wait_next_event call."""

    SUCCESS = 0
    TIMEOUT = 1
    EXIT = 2


def _always() -> bool:
    return True


@dataclass
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callback
    interest: Interest
    cancel: Optional[Callback]

    def service_count(self) -> int:
        if self.direction is Direction.IN:
            return self.fd.read_count()
        return self.fd.write_count()


class EventLoop:
    """Polls descriptors according to registered rules.

    A rule is polled whenever its interest callback returns true; it is
    cancelled on EOF (for reading), closure, or hangup. Every callback must
    read or write its descriptor, or stop being interested, otherwise a busy
    wait is reported.
    """

    def __init__(self) -> None:
        self._rules: list[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Optional[Interest] = None,
        cancel: Optional[Callback] = None,
    ) -> None:
        """Run ``callback`` whenever ``fd`` is ready in ``direction``."""
        self._rules.append(
            _Rule(
                fd.duplicate(),
                Direction(direction),
                callback,
                _always if interest is None else interest,
                cancel,
            )
        )

    def _drop(self, rule: _Rule) -> None:
        if rule.cancel is not None:
            rule.cancel()
        if rule in self._rules:
            self._rules.remove(rule)

    def wait_next_event(self, timeout_ms: Optional[int]) -> EventLoopResult:
        """Poll once, run callbacks for ready descriptors, and report what happened."""
        polled: list[tuple[_Rule, int]] = []
        something_to_poll = False
        for rule in list(self._rules):
            if rule.direction is Direction.IN and rule.fd.eof():
                self._drop(rule)
                continue
            if rule.fd.closed():
                self._drop(rule)
                continue
            if rule.interest():
                polled.append((rule, rule.direction.value))
                something_to_poll = True
            else:
                polled.append((rule, 0))

        if not something_to_poll:
            return EventLoopResult.EXIT

        masks: dict[int, int] = {}
        for rule, events in polled:
            fd_num = rule.fd.fd_num()
            masks[fd_num] = masks.get(fd_num, 0) | events
        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready = poller.poll(timeout_ms)
        except InterruptedError:
            return EventLoopResult.EXIT
        if not ready:
            return EventLoopResult.TIMEOUT
        revents_by_fd = dict(ready)

        for rule, events in polled:
            revents = revents_by_fd.get(rule.fd.fd_num(), 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and events and not poll_ready:
                self._drop(rule)
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interest():
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd "
                        "and is still interested"
                    )

        return EventLoopResult.SUCCESS