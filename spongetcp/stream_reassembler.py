"""Reassembly of possibly out-of-order, overlapping substrings into a byte stream."""

from __future__ import annotations

from spongetcp.byte_stream import ByteStream


class StreamReassembler:
    """Assemble excerpts of a byte stream into an in-order :class:`ByteStream`."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._output = ByteStream(capacity)
        self._pending: dict[int, bytes] = {}
        self._next_index = 0
        self._unassembled = 0
        self._last_byte = 0
        self._eof_received = False

    @property
    def stream_out(self) -> ByteStream:
        """The reassembled in-order byte stream."""
        return self._output

    @property
    def unassembled_bytes(self) -> int:
        """Number of bytes stored but not yet reassembled."""
        return self._unassembled

    @property
    def empty(self) -> bool:
        """True if no substrings are waiting to be assembled."""
        return self._unassembled == 0

    @staticmethod
    def _detect_overlap(a_idx: int, a_len: int, b_idx: int, b_len: int) -> int:
        """Return -1 if b contains a, 1 if a contains b, otherwise 0."""
        if a_idx >= b_idx and a_idx + a_len <= b_idx + b_len:
            return -1
        if b_idx >= a_idx and b_idx + b_len <= a_idx + a_len:
            return 1
        return 0

    def push_substring(self, data: bytes, index: int, eof: bool) -> None:
        """Accept ``data`` starting at stream ``index`` and write any newly contiguous bytes."""
        output = self._output
        if eof:
            self._eof_received = True
            self._last_byte = index + len(data)

        if index + len(data) < output.bytes_written:
            return

        if self._next_index >= index:
            output.write(data[self._next_index - index :])
            self._next_index = output.bytes_written
        else:
            self._store(data, index)

        for start in sorted(self._pending):
            chunk = self._pending[start]
            written = output.bytes_written
            end = start + len(chunk)
            if start <= written < end:
                offset = self._next_index - start
                output.write(chunk[offset:])
                self._unassembled -= len(chunk) - offset
                del self._pending[start]
                self._next_index = output.bytes_written
            elif end <= written:
                self._unassembled -= len(chunk)
                del self._pending[start]

        if self._eof_received and self._last_byte == output.bytes_written:
            output.end_input()

    def _store(self, data: bytes, index: int) -> None:
        """Keep an out-of-order substring unless a stored one already covers it."""
        for start in sorted(self._pending):
            chunk = self._pending[start]
            overlap = self._detect_overlap(index, len(data), start, len(chunk))
            if overlap == -1:
                return
            if overlap == 1:
                self._unassembled -= len(chunk)
                del self._pending[start]
        self._pending[index] = data
        self._unassembled += len(data)