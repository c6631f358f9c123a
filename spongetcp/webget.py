"""Fetch a web page over HTTP/1.1 and write the raw response."""

from __future__ import annotations

import socket
import sys
from typing import BinaryIO, Optional, Sequence


def build_request(host: str, path: str) -> bytes:
    """The HTTP request for ``path`` on ``host``, asking the server to close afterwards."""
    return f"GET {path} HTTP/1.1\r\nHost: {host}\r\nConnection: close\r\n\r\n".encode()


def get_url(host: str, path: str, out: BinaryIO) -> None:
    """Request ``path`` from the http service on ``host`` and write everything it sends to ``out``."""
    with socket.create_connection((host, "http")) as sock:
        sock.sendall(build_request(host, path))
        sock.shutdown(socket.SHUT_WR)
        while chunk := sock.recv(65536):
            out.write(chunk)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the process exit status."""
    prog = sys.argv[0] if sys.argv and sys.argv[0] else "webget"
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print(f"Usage: {prog} HOST PATH", file=sys.stderr)
        print(f"\tExample: {prog} example.com /index.html", file=sys.stderr)
        return 1
    host, path = args
    try:
        get_url(host, path, sys.stdout.buffer)
        sys.stdout.buffer.flush()
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())