import os

import pytest

from spongenet.eventloop import Direction, EventLoop, EventLoopResult
from spongenet.file_descriptor import FileDescriptor


def make_pipe():
    r, w = os.pipe()
    return FileDescriptor(r), FileDescriptor(w)


def test_empty_loop_exits():
    assert EventLoop().wait_next_event(0) is EventLoopResult.EXIT


def test_uninterested_rule_exits():
    r, w = make_pipe()
    with r, w:
        loop = EventLoop()
        loop.add_rule(r, Direction.IN, lambda: None, lambda: False)
        assert loop.wait_next_event(0) is EventLoopResult.EXIT


def test_timeout_when_nothing_ready():
    r, w = make_pipe()
    with r, w:
        loop = EventLoop()
        loop.add_rule(r, Direction.IN, lambda: r.read(10))
        assert loop.wait_next_event(0) is EventLoopResult.TIMEOUT


def test_readable_callback_runs():
    r, w = make_pipe()
    with r, w:
        received = []
        loop = EventLoop()
        loop.add_rule(r, Direction.IN, lambda: received.append(r.read(100)))
        w.write(b"abc")
        assert loop.wait_next_event(100) is EventLoopResult.SUCCESS
        assert received == [b"abc"]


def test_writable_callback_runs():
    r, w = make_pipe()
    with r, w:
        loop = EventLoop()
        done = []

        def write_once():
            w.write(b"xyz")
            done.append(True)

        loop.add_rule(w, Direction.OUT, write_once, lambda: not done)
        assert loop.wait_next_event(100) is EventLoopResult.SUCCESS
        assert r.read(10) == b"xyz"


def test_busy_wait_detected():
    r, w = make_pipe()
    with r, w:
        loop = EventLoop()
        loop.add_rule(r, Direction.IN, lambda: None)
        w.write(b"x")
        with pytest.raises(RuntimeError, match="busy wait"):
            loop.wait_next_event(100)


def test_closed_fd_rule_cancelled():
    r, w = make_pipe()
    with w:
        cancelled = []
        loop = EventLoop()
        loop.add_rule(r, Direction.IN, lambda: r.read(10), cancel=lambda: cancelled.append(1))
        r.close()
        assert loop.wait_next_event(0) is EventLoopResult.EXIT
        assert cancelled == [1]


def test_write_end_without_reader_is_error():
    r, w = make_pipe()
    with w:
        loop = EventLoop()
        loop.add_rule(w, Direction.OUT, lambda: w.write(b"x"))
        r.close()
        with pytest.raises(RuntimeError, match="error on polled file descriptor"):
            loop.wait_next_event(100)