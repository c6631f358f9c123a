"""Connect to or accept one TCP connection and copy it to standard input and output."""

from __future__ import annotations

import os
import socket
import sys
from typing import Optional, Sequence

from spongetcp.stream_copy import bidirectional_stream_copy


def _usage(prog: str) -> str:
    return (
        f"Usage: {prog} [-l] <host> <port>\n\n"
        "  -l specifies listen mode; <host>:<port> is the listening address."
    )


def _resolve(host: str, port: str) -> tuple[int, tuple]:
    family, _type, _proto, _name, address = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)[0]
    return family, address


def open_socket(argv: Sequence[str]) -> socket.socket:
    """Return a connected TCP socket.

    ``argv`` is ``[host, port]`` to connect, or ``["-l", host, port]`` to listen
    on that address and accept exactly one connection. Raises ValueError when
    arguments are missing.
    """
    args = list(argv)
    server_mode = bool(args) and args[0] == "-l"
    if len(args) < 2 or (server_mode and len(args) < 3):
        raise ValueError("required arguments are missing")

    if server_mode:
        family, address = _resolve(args[1], args[2])
        with socket.socket(family, socket.SOCK_STREAM) as listener:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(address)
            listener.listen()
            conn, _peer = listener.accept()
            return conn

    family, address = _resolve(args[0], args[1])
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the process exit status."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "tcp_native"
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        sock = open_socket(args)
    except ValueError:
        print(_usage(prog), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Exception: {exc}", file=sys.stderr)
        return 1

    with sock:
        try:
            bidirectional_stream_copy(sock)
        except OSError as exc:
            print(f"Exception: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())