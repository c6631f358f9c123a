"""Conversion between TCP segments and the IPv4 datagrams that carry them."""

from __future__ import annotations

import ipaddress
from typing import Optional

from spongetcp.fd_adapter import FdAdapterBase
from spongetcp.ipv4_datagram import IPv4Datagram
from spongetcp.ipv4_header import IPv4Header
from spongetcp.tcp_config import Endpoint
from spongetcp.tcp_header import ParseError
from spongetcp.tcp_segment import TCPSegment


def _dotted(address: int) -> str:
    return str(ipaddress.IPv4Address(address))


class TCPOverIPv4Adapter(FdAdapterBase):
    """Wraps TCP segments in IPv4 datagrams and unwraps the ones for this connection."""

    def unwrap_tcp_in_ip(self, ip_dgram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the datagram's TCP segment if it is valid and belongs to this connection."""
        header = ip_dgram.header
        config = self.config

        if not self.listening and header.dst != config.source.ipv4_numeric():
            return None
        if not self.listening and header.src != config.destination.ipv4_numeric():
            return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None

        try:
            seg = TCPSegment.parse(ip_dgram.payload, header.pseudo_cksum())
        except ParseError:
            return None

        if seg.header.dport != config.source.port:
            return None

        if self.listening:
            if not (seg.header.syn and not seg.header.rst):
                return None
            config.source = Endpoint(_dotted(header.dst), config.source.port)
            config.destination = Endpoint(_dotted(header.src), seg.header.sport)
            self.listening = False

        if seg.header.sport != config.destination.port:
            return None

        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Fill in the segment's ports and wrap it in an IPv4 datagram."""
        config = self.config
        seg.header.sport = config.source.port
        seg.header.dport = config.destination.port

        dgram = IPv4Datagram()
        dgram.header.src = config.source.ipv4_numeric()
        dgram.header.dst = config.destination.ipv4_numeric()
        dgram.header.length = dgram.header.hlen * 4 + seg.header.doff * 4 + len(seg.payload)
        dgram.payload = seg.serialize(dgram.header.pseudo_cksum())
        return dgram