"""Summaries of TCP sender/receiver state and the official TCP state names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class ReceiverSummary(Enum):
    """States a TCP receiver can be in."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderSummary(Enum):
    """States a TCP sender can be in."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


class State(Enum):
    """Official state names from the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class _InboundStream(Protocol):
    def error(self) -> bool: ...

    def input_ended(self) -> bool: ...


class _OutboundStream(Protocol):
    def error(self) -> bool: ...

    def eof(self) -> bool: ...

    def bytes_written(self) -> int: ...


class _Receiver(Protocol):
    def stream_out(self) -> _InboundStream: ...

    def ackno(self) -> Optional[int]: ...


class _Sender(Protocol):
    def stream_in(self) -> _OutboundStream: ...

    def next_seqno_absolute(self) -> int: ...

    def bytes_in_flight(self) -> int: ...


def receiver_state_summary(receiver: _Receiver) -> ReceiverSummary:
    """Summarise a receiver's state."""
    stream = receiver.stream_out()
    if stream.error():
        return ReceiverSummary.ERROR
    if receiver.ackno() is None:
        return ReceiverSummary.LISTEN
    if stream.input_ended():
        return ReceiverSummary.FIN_RECV
    return ReceiverSummary.SYN_RECV


def sender_state_summary(sender: _Sender) -> SenderSummary:
    """Summarise a sender's state."""
    stream = sender.stream_in()
    next_seqno = sender.next_seqno_absolute()
    in_flight = sender.bytes_in_flight()
    if stream.error():
        return SenderSummary.ERROR
    if next_seqno == 0:
        return SenderSummary.CLOSED
    if next_seqno == in_flight:
        return SenderSummary.SYN_SENT
    if not stream.eof():
        return SenderSummary.SYN_ACKED
    if next_seqno < stream.bytes_written() + 2:
        return SenderSummary.SYN_ACKED
    if in_flight:
        return SenderSummary.FIN_SENT
    return SenderSummary.FIN_ACKED


@dataclass(frozen=True)
class TCPState:
    """A connection's state: sender and receiver summaries plus the connection's own flags."""

    sender: SenderSummary
    receiver: ReceiverSummary
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> "TCPState":
        """The summary that corresponds to an official TCP state."""
        receiver, sender, active, linger = _OFFICIAL[State(state)]
        return cls(sender, receiver, active, linger)

    @classmethod
    def from_endpoints(
        cls, sender: _Sender, receiver: _Receiver, active: bool, linger: bool
    ) -> "TCPState":
        """Summarise a live sender and receiver with the connection's active and linger bits."""
        return cls(
            sender_state_summary(sender),
            receiver_state_summary(receiver),
            bool(active),
            bool(linger) if active else False,
        )

    def name(self) -> str:
        """A human-readable description of the state."""
        return (
            f"sender=`{self.sender.value}`, receiver=`{self.receiver.value}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )


_R = ReceiverSummary
_S = SenderSummary

# receiver, sender, active, linger_after_streams_finish
_OFFICIAL = {
    State.LISTEN: (_R.LISTEN, _S.CLOSED, True, True),
    State.SYN_RCVD: (_R.SYN_RECV, _S.SYN_SENT, True, True),
    State.SYN_SENT: (_R.LISTEN, _S.SYN_SENT, True, True),
    State.ESTABLISHED: (_R.SYN_RECV, _S.SYN_ACKED, True, True),
    State.CLOSE_WAIT: (_R.FIN_RECV, _S.SYN_ACKED, True, False),
    State.LAST_ACK: (_R.FIN_RECV, _S.FIN_SENT, True, False),
    State.CLOSING: (_R.FIN_RECV, _S.FIN_SENT, True, True),
    State.FIN_WAIT_1: (_R.SYN_RECV, _S.FIN_SENT, True, True),
    State.FIN_WAIT_2: (_R.SYN_RECV, _S.FIN_ACKED, True, True),
    State.TIME_WAIT: (_R.FIN_RECV, _S.FIN_ACKED, True, True),
    State.RESET: (_R.ERROR, _S.ERROR, False, False),
    State.CLOSED: (_R.FIN_RECV, _S.FIN_ACKED, False, False),
}