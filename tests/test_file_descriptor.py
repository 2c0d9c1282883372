import gc
import os

import pytest

from spongenet.buffer import Buffer, BufferList, BufferViewList
from spongenet.file_descriptor import FileDescriptor


@pytest.fixture
def pipe_pair():
    read_end, write_end = os.pipe()
    reader = FileDescriptor(read_end)
    writer = FileDescriptor(write_end)
    yield reader, writer
    for handle in (reader, writer):
        if not handle.closed():
            handle.close()


def test_write_then_read(pipe_pair):
    reader, writer = pipe_pair
    assert writer.write(b"hello") == 5
    assert reader.read() == b"hello"
    assert writer.write_count() == 1
    assert reader.read_count() == 1


def test_read_respects_limit(pipe_pair):
    reader, writer = pipe_pair
    writer.write(b"abcdef")
    assert reader.read(4) == b"abcd"
    assert reader.read(4) == b"ef"
    assert reader.read_count() == 2


def test_eof_after_writer_closes(pipe_pair):
    reader, writer = pipe_pair
    writer.write(b"x")
    writer.close()
    assert reader.read() == b"x"
    assert not reader.eof()
    assert reader.read() == b""
    assert reader.eof()


def test_zero_limit_read_does_not_set_eof(pipe_pair):
    reader, writer = pipe_pair
    writer.close()
    assert reader.read(0) == b""
    assert not reader.eof()


def test_write_buffer_list(pipe_pair):
    reader, writer = pipe_pair
    data = BufferList(b"head")
    data.append(b"-payload")
    assert writer.write(data) == len(b"head-payload")
    assert reader.read() == b"head-payload"


def test_write_buffer_after_prefix_removed(pipe_pair):
    reader, writer = pipe_pair
    buffer = Buffer(b"skipkeep")
    buffer.remove_prefix(4)
    writer.write(buffer)
    assert reader.read() == b"keep"


def test_write_buffer_view_list_leaves_original(pipe_pair):
    reader, writer = pipe_pair
    views = BufferViewList(b"view data")
    writer.write(views)
    assert reader.read() == b"view data"
    assert len(views) == len(b"view data")


def test_duplicate_shares_state(pipe_pair):
    reader, writer = pipe_pair
    twin = writer.duplicate()
    assert twin.fd_num() == writer.fd_num()
    twin.write(b"a")
    writer.write(b"b")
    assert writer.write_count() == 2
    assert reader.read() == b"ab"
    twin.close()
    assert writer.closed()
    assert writer.eof()


def test_close_twice_raises(pipe_pair):
    reader, _ = pipe_pair
    reader.close()
    with pytest.raises(OSError):
        reader.close()


def test_negative_fd_rejected():
    with pytest.raises(ValueError):
        FileDescriptor(-1)


def test_fileno_matches_fd_num():
    read_end, write_end = os.pipe()
    with FileDescriptor(read_end) as reader, FileDescriptor(write_end) as writer:
        assert reader.fileno() == reader.fd_num() == read_end
        assert writer.fileno() == write_end


def test_context_manager_closes():
    read_end, write_end = os.pipe()
    os.close(write_end)
    with FileDescriptor(read_end) as reader:
        pass
    assert reader.closed()
    with pytest.raises(OSError):
        os.fstat(read_end)


def test_nonblocking_read_on_empty_pipe(pipe_pair):
    reader, _ = pipe_pair
    reader.set_blocking(False)
    assert os.get_blocking(reader.fd_num()) is False
    with pytest.raises(BlockingIOError):
        reader.read()
    reader.set_blocking(True)
    assert os.get_blocking(reader.fd_num()) is True


def test_partial_write_without_write_all(pipe_pair):
    _, writer = pipe_pair
    writer.set_blocking(False)
    payload = b"z" * (4 * 1024 * 1024)
    written = writer.write(payload, write_all=False)
    assert 0 < written < len(payload)
    assert writer.write_count() == 1


def test_last_handle_closes_descriptor():
    read_end, write_end = os.pipe()
    os.close(write_end)
    handle = FileDescriptor(read_end)
    twin = handle.duplicate()
    del handle
    gc.collect()
    assert os.fstat(read_end) is not None and not twin.closed()
    del twin
    gc.collect()
    with pytest.raises(OSError):
        os.fstat(read_end)