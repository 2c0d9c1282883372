import pytest

from spongenet.tcp_state import (
    ReceiverSummary,
    SenderSummary,
    State,
    TCPState,
    receiver_state_summary,
    sender_state_summary,
)


class FakeStream:
    def __init__(self, error=False, eof=False, input_ended=False, bytes_written=0):
        self._error = error
        self._eof = eof
        self._input_ended = input_ended
        self._bytes_written = bytes_written

    def error(self):
        return self._error

    def eof(self):
        return self._eof

    def input_ended(self):
        return self._input_ended

    def bytes_written(self):
        return self._bytes_written


class FakeReceiver:
    def __init__(self, stream, ackno):
        self._stream = stream
        self._ackno = ackno

    def stream_out(self):
        return self._stream

    def ackno(self):
        return self._ackno


class FakeSender:
    def __init__(self, stream, next_seqno, in_flight):
        self._stream = stream
        self._next_seqno = next_seqno
        self._in_flight = in_flight

    def stream_in(self):
        return self._stream

    def next_seqno_absolute(self):
        return self._next_seqno

    def bytes_in_flight(self):
        return self._in_flight


def test_summary_texts():
    assert TCPState.from_state(State.LISTEN).receiver.value == "waiting for SYN: ackno is empty"
    assert TCPState.from_state(State.ESTABLISHED).sender.value == "stream ongoing"


def test_listen_state():
    state = TCPState.from_state(State.LISTEN)
    assert state.receiver is ReceiverSummary.LISTEN
    assert state.sender is SenderSummary.CLOSED
    assert state.active
    assert state.linger_after_streams_finish


def test_reset_state_is_inactive():
    state = TCPState.from_state(State.RESET)
    assert state.receiver is ReceiverSummary.ERROR
    assert state.sender is SenderSummary.ERROR
    assert not state.active
    assert not state.linger_after_streams_finish


def test_close_wait_does_not_linger():
    state = TCPState.from_state(State.CLOSE_WAIT)
    assert state.active
    assert not state.linger_after_streams_finish


def test_every_official_state_has_a_summary():
    states = {TCPState.from_state(s) for s in State}
    # CLOSING and LAST_ACK differ only in lingering, so all twelve are distinct.
    assert len(states) == len(State)


def test_name_of_closed():
    assert TCPState.from_state(State.CLOSED).name() == (
        "sender=`stream finished and fully acknowledged`, "
        "receiver=`input to stream has ended`, active=0, linger_after_streams_finish=0"
    )


@pytest.mark.parametrize(
    "stream, ackno, expected",
    [
        (FakeStream(error=True), 1, ReceiverSummary.ERROR),
        (FakeStream(), None, ReceiverSummary.LISTEN),
        (FakeStream(input_ended=True), 1, ReceiverSummary.FIN_RECV),
        (FakeStream(), 1, ReceiverSummary.SYN_RECV),
    ],
)
def test_receiver_summary(stream, ackno, expected):
    assert receiver_state_summary(FakeReceiver(stream, ackno)) is expected


@pytest.mark.parametrize(
    "stream, next_seqno, in_flight, expected",
    [
        (FakeStream(error=True), 5, 0, SenderSummary.ERROR),
        (FakeStream(), 0, 0, SenderSummary.CLOSED),
        (FakeStream(), 1, 1, SenderSummary.SYN_SENT),
        (FakeStream(), 5, 2, SenderSummary.SYN_ACKED),
        (FakeStream(eof=True, bytes_written=4), 5, 0, SenderSummary.SYN_ACKED),
        (FakeStream(eof=True, bytes_written=4), 6, 1, SenderSummary.FIN_SENT),
        (FakeStream(eof=True, bytes_written=4), 6, 0, SenderSummary.FIN_ACKED),
    ],
)
def test_sender_summary(stream, next_seqno, in_flight, expected):
    assert sender_state_summary(FakeSender(stream, next_seqno, in_flight)) is expected


def test_endpoints_match_established():
    sender = FakeSender(FakeStream(), 5, 2)
    receiver = FakeReceiver(FakeStream(), 1)
    state = TCPState.from_endpoints(sender, receiver, True, True)
    assert state == TCPState.from_state(State.ESTABLISHED)
    assert state != TCPState.from_state(State.SYN_RCVD)


def test_inactive_endpoints_never_linger():
    sender = FakeSender(FakeStream(eof=True, bytes_written=4), 6, 0)
    receiver = FakeReceiver(FakeStream(input_ended=True), 1)
    state = TCPState.from_endpoints(sender, receiver, False, True)
    assert not state.linger_after_streams_finish
    assert state == TCPState.from_state(State.CLOSED)