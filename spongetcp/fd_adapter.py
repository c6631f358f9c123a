"""Adapters that carry TCP segments over datagram sockets, optionally losing some."""

from __future__ import annotations

import random
from typing import Any, Optional

from spongetcp.tcp_config import Endpoint, FdAdapterConfig
from spongetcp.tcp_header import ParseError
from spongetcp.tcp_segment import TCPSegment

_MAX_DATAGRAM = 65536


class FdAdapterBase:
    """Configuration and listening state shared by segment adapters."""

    def __init__(self) -> None:
        self.config = FdAdapterConfig()
        self.listening = False
        self.elapsed_ms = 0

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the time that has passed since the last tick."""
        self.elapsed_ms += ms_since_last_tick


class TCPOverUDPSocketAdapter(FdAdapterBase):
    """Reads and writes TCP segments carried in UDP payloads."""

    def __init__(self, sock: Any) -> None:
        super().__init__()
        self._sock = sock

    def fileno(self) -> int:
        """The underlying socket's file descriptor."""
        return self._sock.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Receive one datagram; return its segment if it is valid and belongs to this connection."""
        payload, address = self._sock.recvfrom(_MAX_DATAGRAM)
        source = Endpoint(address[0], address[1])

        if not self.listening and source != self.config.destination:
            return None

        try:
            seg = TCPSegment.parse(payload, 0)
        except ParseError:
            return None

        if self.listening:
            if not (seg.header.syn and not seg.header.rst):
                return None
            self.config.destination = source
            self.listening = False

        return seg

    def write(self, seg: TCPSegment) -> None:
        """Fill in the ports and send the segment as one UDP datagram."""
        destination = self.config.destination
        seg.header.sport = self.config.source.port
        seg.header.dport = destination.port
        self._sock.sendto(seg.serialize(0), (destination.host, destination.port))


class LossyFdAdapter:
    """Wraps an adapter and drops reads and writes at the configured loss rates.

    Loss rates are out of 65535.
    """

    def __init__(self, adapter: Any, rng: Optional[random.Random] = None) -> None:
        self._adapter = adapter
        self._rng = rng if rng is not None else random.Random()

    def _should_drop(self, uplink: bool) -> bool:
        cfg = self._adapter.config
        loss = cfg.loss_rate_up if uplink else cfg.loss_rate_dn
        return loss != 0 and self._rng.getrandbits(16) < loss

    @property
    def config(self) -> FdAdapterConfig:
        """The wrapped adapter's configuration."""
        return self._adapter.config

    @config.setter
    def config(self, value: FdAdapterConfig) -> None:
        self._adapter.config = value

    @property
    def listening(self) -> bool:
        """Whether the wrapped adapter is waiting for a new connection."""
        return self._adapter.listening

    @listening.setter
    def listening(self, value: bool) -> None:
        self._adapter.listening = value

    def fileno(self) -> int:
        """The wrapped adapter's file descriptor."""
        return self._adapter.fileno()

    def read(self) -> Optional[TCPSegment]:
        """Read from the wrapped adapter, possibly dropping what was read."""
        seg = self._adapter.read()
        if self._should_drop(False):
            return None
        return seg

    def write(self, seg: TCPSegment) -> None:
        """Write through the wrapped adapter unless the segment is dropped."""
        if self._should_drop(True):
            return
        self._adapter.write(seg)

    def tick(self, ms_since_last_tick: int) -> None:
        """Pass the elapsed time on to the wrapped adapter."""
        self._adapter.tick(ms_since_last_tick)