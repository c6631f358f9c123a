"""Copy bytes between a connected socket and a pair of local file descriptors."""

from __future__ import annotations

import os
import select
import socket
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from spongetcp.byte_stream import ByteStream

MAX_COPY_LENGTH = 65536
BUFFER_SIZE = 1048576

FileLike = Union[int, Any]


def _fileno(obj: FileLike) -> int:
    return obj if isinstance(obj, int) else obj.fileno()


def _close(obj: FileLike) -> None:
    if isinstance(obj, int):
        os.close(obj)
    else:
        obj.close()


@dataclass
class _Rule:
    """One thing the copy loop waits for: a descriptor, a direction and what to do."""

    fd: int
    writing: bool
    callback: Callable[[], None]
    interest: Callable[[], bool]
    cancel: Callable[[], None]
    cancelled: bool = False


class _Copier:
    def __init__(self, sock: socket.socket, stdin: FileLike, stdout: FileLike) -> None:
        self.sock = sock
        self.stdout = stdout
        self.in_fd = _fileno(stdin)
        self.out_fd = _fileno(stdout)
        self.outbound = ByteStream(BUFFER_SIZE)
        self.inbound = ByteStream(BUFFER_SIZE)
        self.outbound_shutdown = False
        self.inbound_shutdown = False

        sock.setblocking(False)
        os.set_blocking(self.in_fd, False)
        os.set_blocking(self.out_fd, False)

        sock_fd = sock.fileno()
        self.rules = [
            _Rule(self.in_fd, False, self._read_stdin, self._want_stdin, self.outbound.end_input),
            _Rule(sock_fd, True, self._write_socket, self._want_socket_out, self.outbound.end_input),
            _Rule(sock_fd, False, self._read_socket, self._want_socket_in, self.inbound.end_input),
            _Rule(self.out_fd, True, self._write_stdout, self._want_stdout, self.inbound.end_input),
        ]

    # stdin -> outbound
    def _want_stdin(self) -> bool:
        return (
            not self.outbound.error
            and not self.outbound.input_ended
            and self.outbound.remaining_capacity > 0
            and not self.inbound.error
        )

    def _read_stdin(self) -> None:
        data = os.read(self.in_fd, self.outbound.remaining_capacity)
        if data:
            self.outbound.write(data)
        else:
            self.outbound.end_input()

    # outbound -> socket
    def _want_socket_out(self) -> bool:
        return not self.outbound.buffer_empty or (self.outbound.eof and not self.outbound_shutdown)

    def _write_socket(self) -> None:
        chunk = self.outbound.peek_output(min(MAX_COPY_LENGTH, self.outbound.buffer_size))
        sent = self.sock.send(chunk) if chunk else 0
        self.outbound.pop_output(sent)
        if self.outbound.eof:
            self.sock.shutdown(socket.SHUT_WR)
            self.outbound_shutdown = True

    # socket -> inbound
    def _want_socket_in(self) -> bool:
        return (
            not self.inbound.error
            and not self.inbound.input_ended
            and self.inbound.remaining_capacity > 0
            and not self.outbound.error
        )

    def _read_socket(self) -> None:
        data = self.sock.recv(self.inbound.remaining_capacity)
        if data:
            self.inbound.write(data)
        else:
            self.inbound.end_input()

    # inbound -> stdout
    def _want_stdout(self) -> bool:
        return not self.inbound.buffer_empty or (self.inbound.eof and not self.inbound_shutdown)

    def _write_stdout(self) -> None:
        chunk = self.inbound.peek_output(min(MAX_COPY_LENGTH, self.inbound.buffer_size))
        written = os.write(self.out_fd, chunk) if chunk else 0
        self.inbound.pop_output(written)
        if self.inbound.eof:
            _close(self.stdout)
            self.inbound_shutdown = True

    def run(self) -> None:
        while True:
            active = [rule for rule in self.rules if not rule.cancelled and rule.interest()]
            if not active:
                return
            readers = list({rule.fd for rule in active if not rule.writing})
            writers = list({rule.fd for rule in active if rule.writing})
            try:
                ready_read, ready_write, _ = select.select(readers, writers, [])
            except InterruptedError:
                continue
            for rule in active:
                ready = ready_write if rule.writing else ready_read
                if rule.fd not in ready or rule.cancelled or not rule.interest():
                    continue
                try:
                    rule.callback()
                except (BlockingIOError, InterruptedError):
                    pass
                except OSError:
                    rule.cancelled = True
                    rule.cancel()


def bidirectional_stream_copy(
    sock: socket.socket,
    stdin: Optional[FileLike] = None,
    stdout: Optional[FileLike] = None,
) -> None:
    """Copy ``stdin`` to ``sock`` and ``sock`` to ``stdout`` until both directions finish.

    ``stdin`` and ``stdout`` are file descriptors or objects with ``fileno()``;
    they default to the process's standard input and output. When the socket's
    input ends, ``stdout`` is closed; when ``stdin`` ends, the socket is shut down
    for writing.
    """
    if stdin is None:
        stdin = sys.stdin.fileno()
    if stdout is None:
        sys.stdout.flush()
        stdout = sys.stdout.fileno()
    _Copier(sock, stdin, stdout).run()