"""TCP segment header: parsing, serialization and display."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import ClassVar

_LAYOUT = struct.Struct("!HHIIBBHHH")

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001


class ParseResult(enum.IntEnum):
    """Outcome of parsing a header, datagram or segment."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5


class ParseError(Exception):
    """Raised when bytes cannot be parsed; ``result`` says why."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(result.name.lower().replace("_", " "))
        self.result = result


@dataclass
class TCPHeader:
    """A TCP segment header without options.

    Equality ignores the ports and the checksum.
    """

    LENGTH: ClassVar[int] = 20

    sport: int = field(default=0, compare=False)
    dport: int = field(default=0, compare=False)
    seqno: int = 0
    ackno: int = 0
    doff: int = LENGTH // 4
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = field(default=0, compare=False)
    uptr: int = 0

    @classmethod
    def parse(cls, data: bytes) -> TCPHeader:
        """Parse a header from the front of ``data``; raise ParseError if it is malformed."""
        if len(data) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        sport, dport, seqno, ackno, off_byte, flags, win, cksum, uptr = _LAYOUT.unpack_from(data)
        doff = off_byte >> 4
        if doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if len(data) < 4 * doff:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=win,
            cksum=cksum,
            uptr=uptr,
        )

    @property
    def flag_byte(self) -> int:
        """The flags packed as they appear on the wire."""
        return (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )

    def serialize(self) -> bytes:
        """Encode the header as it appears on the wire; the checksum is not recomputed."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        packed = _LAYOUT.pack(
            self.sport & 0xFFFF,
            self.dport & 0xFFFF,
            self.seqno & 0xFFFFFFFF,
            self.ackno & 0xFFFFFFFF,
            (self.doff << 4) & 0xFF,
            self.flag_byte,
            self.win & 0xFFFF,
            self.cksum & 0xFFFF,
            self.uptr & 0xFFFF,
        )
        return packed.ljust(4 * self.doff, b"\x00")

    def to_string(self) -> str:
        """Return the header's contents in human-readable form."""
        flags = " ".join(
            f"{name}: {str(value).lower()}"
            for name, value in (
                ("urg", self.urg),
                ("ack", self.ack),
                ("psh", self.psh),
                ("rst", self.rst),
                ("syn", self.syn),
                ("fin", self.fin),
            )
        )
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno:x}\n"
            f"TCP ackno: {self.ackno:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: {flags}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """Return a one-line summary of the header."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"