"""TCP building blocks: byte streams, reassembly, TCP/IPv4 wire formats, adapters and commands."""

__version__ = "0.1.0"