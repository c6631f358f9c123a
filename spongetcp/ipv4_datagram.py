"""IPv4 datagrams: a header and its payload."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from spongetcp.ipv4_header import IPv4Header
from spongetcp.tcp_header import ParseError, ParseResult
from spongetcp.tcp_segment import internet_checksum


@dataclass
class IPv4Datagram:
    """An IPv4 header together with its payload."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> IPv4Datagram:
        """Parse a whole datagram; raise ParseError if it is malformed."""
        header = IPv4Header.parse(data)
        payload = bytes(data[4 * header.hlen :])
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return cls(header=header, payload=payload)

    def serialize(self) -> bytes:
        """Encode the datagram, filling in the header checksum."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("datagram payload is wrong size")
        blank = dataclasses.replace(self.header, cksum=0).serialize()
        header_out = dataclasses.replace(self.header, cksum=internet_checksum(blank))
        return header_out.serialize() + self.payload