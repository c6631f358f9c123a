"""TCP segments and the Internet checksum."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from spongetcp.tcp_header import ParseError, ParseResult, TCPHeader


def internet_checksum(data: bytes, initial: int = 0) -> int:
    """Return the one's-complement Internet checksum of ``data``.

    ``initial`` is a partial sum to start from, such as a pseudo-header's.
    A buffer that carries a correct checksum yields 0.
    """
    if len(data) % 2:
        data = data + b"\x00"
    total = initial + sum(memoryview(data).cast("B")[0::2]) * 256 + sum(memoryview(data).cast("B")[1::2])
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


@dataclass
class TCPSegment:
    """A TCP header together with its payload."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes, datagram_layer_checksum: int = 0) -> TCPSegment:
        """Parse a segment, verifying its checksum against the lower layer's pseudo-checksum."""
        if internet_checksum(data, datagram_layer_checksum):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        header = TCPHeader.parse(data)
        return cls(header=header, payload=bytes(data[4 * header.doff :]))

    def serialize(self, datagram_layer_checksum: int = 0) -> bytes:
        """Encode the segment, filling in a checksum over header and payload."""
        blank = dataclasses.replace(self.header, cksum=0).serialize()
        cksum = internet_checksum(blank + self.payload, datagram_layer_checksum)
        return dataclasses.replace(self.header, cksum=cksum).serialize() + self.payload

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)