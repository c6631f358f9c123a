from collections import deque

from spongetcp.fd_adapter import FdAdapterBase, LossyFdAdapter, TCPOverUDPSocketAdapter
from spongetcp.tcp_config import Endpoint
from spongetcp.tcp_header import TCPHeader
from spongetcp.tcp_segment import TCPSegment

LOCAL = Endpoint("127.0.0.1", 4000)
PEER = Endpoint("127.0.0.1", 5000)


class FakeUDPSocket:
    def __init__(self):
        self.inbox = deque()
        self.sent = []

    def recvfrom(self, bufsize):
        return self.inbox.popleft()

    def sendto(self, data, address):
        self.sent.append((data, address))
        return len(data)

    def fileno(self):
        return 7


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, k):
        return self.value


class RecordingAdapter(FdAdapterBase):
    def __init__(self):
        super().__init__()
        self.written = []
        self.ticks = []
        self.to_read = TCPSegment(TCPHeader(seqno=9), b"data")

    def read(self):
        return self.to_read

    def write(self, seg):
        self.written.append(seg)

    def tick(self, ms_since_last_tick):
        self.ticks.append(ms_since_last_tick)


def make_adapter():
    sock = FakeUDPSocket()
    adapter = TCPOverUDPSocketAdapter(sock)
    adapter.config.source = LOCAL
    adapter.config.destination = PEER
    return adapter, sock


def wire(header, payload=b""):
    return TCPSegment(header, payload).serialize(0)


def test_write_sets_ports_and_destination():
    adapter, sock = make_adapter()
    adapter.write(TCPSegment(TCPHeader(seqno=17, ack=True), b"hello"))
    data, address = sock.sent[0]
    assert address == ("127.0.0.1", 5000)
    seg = TCPSegment.parse(data)
    assert (seg.header.sport, seg.header.dport) == (LOCAL.port, PEER.port)
    assert seg.header.seqno == 17
    assert seg.payload == b"hello"


def test_read_from_peer():
    adapter, sock = make_adapter()
    sock.inbox.append((wire(TCPHeader(seqno=3), b"abc"), ("127.0.0.1", 5000)))
    seg = adapter.read()
    assert seg.header.seqno == 3
    assert seg.payload == b"abc"


def test_read_from_stranger_is_ignored():
    adapter, sock = make_adapter()
    sock.inbox.append((wire(TCPHeader(seqno=3)), ("127.0.0.1", 5001)))
    assert adapter.read() is None


def test_read_garbage_is_ignored():
    adapter, sock = make_adapter()
    sock.inbox.append((b"\x01\x02\x03", ("127.0.0.1", 5000)))
    assert adapter.read() is None


def test_listening_accepts_syn_and_records_peer():
    adapter, sock = make_adapter()
    adapter.listening = True
    sock.inbox.append((wire(TCPHeader(ack=True)), ("127.0.0.1", 6000)))
    assert adapter.read() is None
    assert adapter.listening is True
    sock.inbox.append((wire(TCPHeader(syn=True, rst=True)), ("127.0.0.1", 6000)))
    assert adapter.read() is None
    sock.inbox.append((wire(TCPHeader(syn=True, seqno=11)), ("127.0.0.1", 6000)))
    seg = adapter.read()
    assert seg.header.syn and seg.header.seqno == 11
    assert adapter.listening is False
    assert adapter.config.destination == Endpoint("127.0.0.1", 6000)


def test_fileno_passes_through():
    adapter, _ = make_adapter()
    assert LossyFdAdapter(adapter).fileno() == 7


def test_lossless_passes_everything():
    inner = RecordingAdapter()
    lossy = LossyFdAdapter(inner, FixedRandom(0))
    seg = TCPSegment()
    lossy.write(seg)
    assert inner.written == [seg]
    assert lossy.read() is inner.to_read


def test_uplink_loss_drops_writes():
    inner = RecordingAdapter()
    inner.config.loss_rate_up = 200
    lossy = LossyFdAdapter(inner, FixedRandom(100))
    lossy.write(TCPSegment())
    assert inner.written == []
    assert lossy.read() is inner.to_read


def test_downlink_loss_drops_reads():
    inner = RecordingAdapter()
    inner.config.loss_rate_dn = 200
    lossy = LossyFdAdapter(inner, FixedRandom(100))
    assert lossy.read() is None
    inner.config.loss_rate_dn = 50
    assert lossy.read() is inner.to_read


def test_passthroughs():
    inner = RecordingAdapter()
    lossy = LossyFdAdapter(inner)
    lossy.tick(25)
    assert inner.ticks == [25]
    lossy.listening = True
    assert inner.listening is True
    assert lossy.config is inner.config