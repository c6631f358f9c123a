# spongetcp

Building blocks for a TCP implementation, plus two small socket commands.
Everything runs on the Python 3.10+ standard library alone.

## What is in the package

- `spongetcp.byte_stream.ByteStream`: a flow-controlled, in-memory byte
  stream with a fixed capacity. `write()` accepts as much as fits and returns
  the count; `peek_output()`, `pop_output()` and `read()` work on the output
  side; `end_input()` and `set_error()` mark the end or a failure. Properties
  such as `remaining_capacity`, `buffer_size`, `eof`, `bytes_written` and
  `bytes_read` report its state.
- `spongetcp.stream_reassembler.StreamReassembler`: accepts substrings of a
  stream by index with `push_substring(data, index, eof)`, possibly out of
  order or overlapping, and writes the contiguous bytes into its
  `stream_out` `ByteStream`. `unassembled_bytes` and `empty` report what is
  still held back.
- `spongetcp.tcp_header.TCPHeader` and `spongetcp.ipv4_header.IPv4Header`:
  dataclasses with `parse()`, `serialize()`, `to_string()` and `summary()`.
  `IPv4Header` also has `payload_length()` and `pseudo_cksum()`.
- `spongetcp.tcp_segment.TCPSegment` and
  `spongetcp.ipv4_datagram.IPv4Datagram`: a header with its payload.
  Serializing fills in the checksum; parsing verifies it.
  `spongetcp.tcp_segment.internet_checksum(data, initial)` computes the
  one's-complement Internet checksum (0 for a buffer with a correct checksum).
- Malformed input raises `spongetcp.tcp_header.ParseError`, whose `result`
  is a `ParseResult` (`BAD_CHECKSUM`, `PACKET_TOO_SHORT`, `WRONG_IP_VERSION`,
  `HEADER_TOO_SHORT`, `TRUNCATED_PACKET`).
- `spongetcp.tcp_state`: the official TCP states as the `State` enum, and
  `TCPState`, which summarises a sender and receiver
  (`TCPState.from_endpoints`) or an official state (`TCPState.from_state`).
  A `TCPState` compares equal to a `State` with the same summary.
  `sender_summary()` and `receiver_summary()` work on any objects with the
  expected attributes.
- `spongetcp.tcp_config`: `TCPConfig` (timeouts and capacities),
  `Endpoint` (an IPv4 host and port, with `ipv4_numeric()`) and
  `FdAdapterConfig` (source, destination and loss rates).
- `spongetcp.fd_adapter`: `TCPOverUDPSocketAdapter` sends and receives TCP
  segments as UDP payloads over a socket you supply; in listening mode it
  locks on to the first peer that sends a SYN. `LossyFdAdapter` wraps an
  adapter and drops reads and writes at the configured rates (out of 65535).
- `spongetcp.tcp_over_ip.TCPOverIPv4Adapter`: `wrap_tcp_in_ip()` puts a
  segment in an `IPv4Datagram`; `unwrap_tcp_in_ip()` returns the segment only
  if it belongs to the configured connection.
- `spongetcp.stream_copy.bidirectional_stream_copy(sock, stdin, stdout)`:
  copies one file descriptor to a connected socket and the socket to another
  descriptor until both directions finish.

## Using the library

```python
from spongetcp.byte_stream import ByteStream
from spongetcp.stream_reassembler import StreamReassembler

stream = ByteStream(16)
stream.write(b"hello, world")
stream.end_input()
print(stream.read(5))          # b"hello"

reassembler = StreamReassembler(65000)
reassembler.push_substring(b"b", 1, False)   # held until the gap is filled
reassembler.push_substring(b"a", 0, False)   # both bytes now reach the stream
print(reassembler.stream_out.read(2))        # b"ab"
```

Segments round-trip through bytes:

```python
from spongetcp.tcp_header import TCPHeader
from spongetcp.tcp_segment import TCPSegment

wire = TCPSegment(payload=b"data").serialize(0)
segment = TCPSegment.parse(wire, 0)
print(TCPHeader.parse(wire).summary())
```

## Commands

`spongetcp-native` copies standard input to a TCP connection made by the
operating system and the connection's data to standard output, as a client,
or with `-l` as a server that accepts exactly one connection:

```
spongetcp-native example.com 80
spongetcp-native -l 127.0.0.1 9090
```

`spongetcp-webget` sends an HTTP/1.1 GET request and prints the whole raw
response:

```
spongetcp-webget example.com /index.html
```

## What it does not do

The package has no TCP sender, receiver or connection state machine, so it
cannot run TCP itself: the adapters move segments, but nothing here decides
what to send or retransmits. There is no user-space TCP socket and no
support for TUN devices or packet capture; the commands use the operating
system's TCP.

## Tests

The tests use pytest and live in `tests/`; install the `test` extra to run
them.