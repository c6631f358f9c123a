"""Configuration for TCP connections and the adapters that carry their segments."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import ClassVar, Optional


@dataclass
class TCPConfig:
    """Settings for a TCP sender and receiver."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1000
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = TIMEOUT_DFLT
    recv_capacity: int = DEFAULT_CAPACITY
    send_capacity: int = DEFAULT_CAPACITY
    fixed_isn: Optional[int] = None


@dataclass(frozen=True)
class Endpoint:
    """An IPv4 host and a port number."""

    host: str
    port: int

    def __post_init__(self) -> None:
        port = int(self.port)
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        object.__setattr__(self, "port", port)

    def ipv4_numeric(self) -> int:
        """The host's IPv4 address as a 32-bit number."""
        try:
            packed = socket.inet_aton(self.host)
        except OSError as exc:
            raise ValueError(f"not an IPv4 address: {self.host!r}") from exc
        return int.from_bytes(packed, "big")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class FdAdapterConfig:
    """Addresses and loss rates for an adapter that carries TCP segments."""

    source: Endpoint = field(default_factory=lambda: Endpoint("0", 0))
    destination: Endpoint = field(default_factory=lambda: Endpoint("0", 0))
    loss_rate_dn: int = 0
    loss_rate_up: int = 0