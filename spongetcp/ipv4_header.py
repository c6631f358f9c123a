"""IPv4 datagram header: parsing, serialization and display."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import ClassVar

from spongetcp.tcp_header import ParseError, ParseResult
from spongetcp.tcp_segment import internet_checksum

_LAYOUT = struct.Struct("!BBHHHBBHII")


@dataclass
class IPv4Header:
    """An IPv4 header; options are not supported."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = LENGTH // 4
    tos: int = 0
    length: int = 0
    ident: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = DEFAULT_TTL
    proto: int = PROTO_TCP
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, data: bytes) -> IPv4Header:
        """Parse a header from a whole datagram; raise ParseError if it is malformed."""
        size = len(data)
        if size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        first, tos, length, ident, fo_val, ttl, proto, cksum, src, dst = _LAYOUT.unpack_from(data)
        ver, hlen = first >> 4, first & 0x0F
        if size < 4 * hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if size != length:
            raise ParseError(ParseResult.TRUNCATED_PACKET)
        if internet_checksum(data[: 4 * hlen]):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return cls(
            ver=ver,
            hlen=hlen,
            tos=tos,
            length=length,
            ident=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=ttl,
            proto=proto,
            cksum=cksum,
            src=src,
            dst=dst,
        )

    def serialize(self) -> bytes:
        """Encode the header as it appears on the wire; the checksum is not recomputed."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        packed = _LAYOUT.pack(
            ((self.ver << 4) | (self.hlen & 0x0F)) & 0xFF,
            self.tos & 0xFF,
            self.length & 0xFFFF,
            self.ident & 0xFFFF,
            fo_val,
            self.ttl & 0xFF,
            self.proto & 0xFF,
            self.cksum & 0xFFFF,
            self.src & 0xFFFFFFFF,
            self.dst & 0xFFFFFFFF,
        )
        return packed.ljust(4 * self.hlen, b"\x00")

    def payload_length(self) -> int:
        """Length of the datagram's payload."""
        return (self.length - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def to_string(self) -> str:
        """Return the header's contents in human-readable form."""
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.length:x}\n"
            f"IP id: {self.ident:x}\n"
            f"Flags: df: {str(self.df).lower()} mf: {str(self.mf).lower()}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """Return a one-line summary of the header."""
        ttl_part = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.length:x}, protocol={self.proto:x}, {ttl_part}"
            f"src={ipaddress.IPv4Address(self.src)}, dst={ipaddress.IPv4Address(self.dst)}"
        )