"""Summaries of a TCP connection's state, compared against the official TCP states."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol


class ReceiverStateSummary:
    """Descriptions of the states a TCP receiver can be in."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderStateSummary:
    """Descriptions of the states a TCP sender can be in."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


class _Stream(Protocol):
    error: bool
    input_ended: bool
    eof: bool
    bytes_written: int


class _Receiver(Protocol):
    stream_out: _Stream
    ackno: Optional[int]


class _Sender(Protocol):
    stream_in: _Stream
    next_seqno_absolute: int
    bytes_in_flight: int


class State(enum.Enum):
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


_R = ReceiverStateSummary
_S = SenderStateSummary

# state -> (sender, receiver, active, linger_after_streams_finish)
_OFFICIAL: dict[State, tuple[str, str, bool, bool]] = {
    State.LISTEN: (_S.CLOSED, _R.LISTEN, True, True),
    State.SYN_RCVD: (_S.SYN_SENT, _R.SYN_RECV, True, True),
    State.SYN_SENT: (_S.SYN_SENT, _R.LISTEN, True, True),
    State.ESTABLISHED: (_S.SYN_ACKED, _R.SYN_RECV, True, True),
    State.CLOSE_WAIT: (_S.SYN_ACKED, _R.FIN_RECV, True, False),
    State.LAST_ACK: (_S.FIN_SENT, _R.FIN_RECV, True, False),
    State.CLOSING: (_S.FIN_SENT, _R.FIN_RECV, True, True),
    State.FIN_WAIT_1: (_S.FIN_SENT, _R.SYN_RECV, True, True),
    State.FIN_WAIT_2: (_S.FIN_ACKED, _R.SYN_RECV, True, True),
    State.TIME_WAIT: (_S.FIN_ACKED, _R.FIN_RECV, True, True),
    State.RESET: (_S.ERROR, _R.ERROR, False, False),
    State.CLOSED: (_S.FIN_ACKED, _R.FIN_RECV, False, False),
}


def receiver_summary(receiver: _Receiver) -> str:
    """Describe the state of a TCP receiver."""
    stream = receiver.stream_out
    if stream.error:
        return ReceiverStateSummary.ERROR
    if receiver.ackno is None:
        return ReceiverStateSummary.LISTEN
    if stream.input_ended:
        return ReceiverStateSummary.FIN_RECV
    return ReceiverStateSummary.SYN_RECV


def sender_summary(sender: _Sender) -> str:
    """Describe the state of a TCP sender."""
    stream = sender.stream_in
    next_seqno = sender.next_seqno_absolute
    if stream.error:
        return SenderStateSummary.ERROR
    if next_seqno == 0:
        return SenderStateSummary.CLOSED
    if next_seqno == sender.bytes_in_flight:
        return SenderStateSummary.SYN_SENT
    if not stream.eof:
        return SenderStateSummary.SYN_ACKED
    if next_seqno < stream.bytes_written + 2:
        return SenderStateSummary.SYN_ACKED
    if sender.bytes_in_flight:
        return SenderStateSummary.FIN_SENT
    return SenderStateSummary.FIN_ACKED


@dataclass(frozen=True, eq=False)
class TCPState:
    """A connection's sender and receiver summaries plus its active and linger bits.

    Compares equal to a :class:`State` that maps onto the same summary.
    """

    sender: str = ""
    receiver: str = ""
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> TCPState:
        """The summary that corresponds to one of the official TCP states."""
        sender, receiver, active, linger = _OFFICIAL[state]
        return cls(sender, receiver, active, linger)

    @classmethod
    def from_endpoints(cls, sender: _Sender, receiver: _Receiver, active: bool, linger: bool) -> TCPState:
        """Summarize a live sender and receiver with the connection's flags."""
        return cls(
            sender=sender_summary(sender),
            receiver=receiver_summary(receiver),
            active=active,
            linger_after_streams_finish=linger if active else False,
        )

    def _key(self) -> tuple[str, str, bool, bool]:
        return (self.sender, self.receiver, bool(self.active), bool(self.linger_after_streams_finish))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            other = TCPState.from_state(other)
        if not isinstance(other, TCPState):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def name(self) -> str:
        """Describe the state in one line."""
        return (
            f"sender=`{self.sender}`, receiver=`{self.receiver}`, active={int(self.active)}"
            f", linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )