import pytest

from spongetcp.tcp_header import ParseError, ParseResult, TCPHeader
from spongetcp.tcp_segment import TCPSegment, internet_checksum


def test_checksum_worked_example():
    assert internet_checksum(bytes([0x00, 0x01, 0xF2, 0x03, 0xF4, 0xF5, 0xF6, 0xF7])) == 0x220D


def test_checksum_of_data_with_its_checksum_is_zero():
    data = b"hello world!"
    cksum = internet_checksum(data)
    assert internet_checksum(data + cksum.to_bytes(2, "big")) == 0


def test_round_trip_with_pseudo_checksum():
    seg = TCPSegment(TCPHeader(sport=5, dport=6, seqno=100, ack=True, ackno=3, win=10), b"payload")
    wire = seg.serialize(1234)
    parsed = TCPSegment.parse(wire, 1234)
    assert parsed.header == seg.header
    assert parsed.payload == b"payload"
    assert internet_checksum(wire, 1234) == 0


def test_odd_length_payload_round_trip():
    seg = TCPSegment(TCPHeader(fin=True), b"abc")
    assert TCPSegment.parse(seg.serialize()).payload == b"abc"


def test_serialize_leaves_header_untouched():
    seg = TCPSegment(TCPHeader(seqno=1), b"xy")
    wire = seg.serialize()
    assert seg.header.cksum == 0
    assert TCPSegment.parse(wire).header.cksum != 0


def test_corrupted_byte_fails_checksum():
    wire = bytearray(TCPSegment(TCPHeader(), b"data").serialize())
    wire[-1] ^= 0x01
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(bytes(wire))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_wrong_pseudo_checksum_is_rejected():
    wire = TCPSegment(TCPHeader(), b"data").serialize(100)
    with pytest.raises(ParseError) as info:
        TCPSegment.parse(wire, 101)
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_length_in_sequence_space_counts_syn_and_fin():
    assert TCPSegment(TCPHeader(syn=True, fin=True), b"abc").length_in_sequence_space() == 5
    assert TCPSegment(TCPHeader(), b"abc").length_in_sequence_space() == 3
    assert TCPSegment().length_in_sequence_space() == 0