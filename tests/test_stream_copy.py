import os
import socket
import threading

from spongetcp.stream_copy import bidirectional_stream_copy


class _Rig:
    """A socket pair, stdin and stdout pipes, and threads feeding and draining them."""

    def __init__(self, stdin_data, reply):
        self.sock, self.peer = socket.socketpair()
        self.in_r, in_w = os.pipe()
        out_r, self.out_w = os.pipe()
        self.results = {}

        def feed():
            with open(in_w, "wb") as f:
                f.write(stdin_data)

        def drain_stdout():
            with open(out_r, "rb") as f:
                self.results["stdout"] = f.read()

        def send_reply():
            self.peer.sendall(reply)
            self.peer.shutdown(socket.SHUT_WR)

        def read_peer():
            chunks = []
            while True:
                chunk = self.peer.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
            self.results["peer"] = b"".join(chunks)

        self.threads = [
            threading.Thread(target=t, daemon=True) for t in (feed, drain_stdout, send_reply, read_peer)
        ]
        for t in self.threads:
            t.start()

    def finish(self):
        self.sock.close()
        os.close(self.in_r)
        for t in self.threads:
            t.join(20)
        alive = [t for t in self.threads if t.is_alive()]
        self.peer.close()
        return alive


def test_small_copy_in_both_directions():
    rig = _Rig(b"hello", b"reply")
    try:
        bidirectional_stream_copy(rig.sock, rig.in_r, rig.out_w)
    finally:
        alive = rig.finish()
    assert alive == []
    assert rig.results["peer"] == b"hello"
    assert rig.results["stdout"] == b"reply"


def test_empty_stdin_shuts_down_socket_writes():
    rig = _Rig(b"", b"only one way")
    try:
        bidirectional_stream_copy(rig.sock, rig.in_r, rig.out_w)
    finally:
        alive = rig.finish()
    assert alive == []
    assert rig.results["peer"] == b""
    assert rig.results["stdout"] == b"only one way"


def test_empty_socket_input_closes_stdout():
    rig = _Rig(b"outgoing", b"")
    try:
        bidirectional_stream_copy(rig.sock, rig.in_r, rig.out_w)
    finally:
        alive = rig.finish()
    assert alive == []
    assert rig.results["peer"] == b"outgoing"
    assert rig.results["stdout"] == b""


def test_large_transfer_is_copied_intact():
    upstream = bytes(range(256)) * 1200
    downstream = bytes(reversed(range(256))) * 1500
    rig = _Rig(upstream, downstream)
    try:
        bidirectional_stream_copy(rig.sock, rig.in_r, rig.out_w)
    finally:
        alive = rig.finish()
    assert alive == []
    assert rig.results["peer"] == upstream
    assert rig.results["stdout"] == downstream


def test_stdout_may_be_a_file_object():
    rig = _Rig(b"abc", b"xyz")
    stdout = open(rig.out_w, "wb", buffering=0)
    try:
        bidirectional_stream_copy(rig.sock, rig.in_r, stdout)
    finally:
        alive = rig.finish()
    assert alive == []
    assert rig.results["peer"] == b"abc"
    assert rig.results["stdout"] == b"xyz"