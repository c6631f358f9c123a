"""A flow-controlled, in-memory, in-order byte stream."""

from __future__ import annotations


class ByteStream:
    """Bytes are written on the input side and read from the output side.

    The stream holds at most ``capacity`` bytes at a time. The writer may
    end the input, after which the reader reaches end of file once the
    buffer has drained.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._buffer = bytearray()
        self._bytes_written = 0
        self._bytes_read = 0
        self._input_ended = False
        self._error = False

    # -- writer side -------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Accept as much of ``data`` as fits and return how many bytes were taken."""
        accepted = min(len(data), self.remaining_capacity)
        self._buffer += data[:accepted]
        self._bytes_written += accepted
        return accepted

    @property
    def remaining_capacity(self) -> int:
        """Number of additional bytes the stream has room for."""
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        """Signal that the writer has reached the end of the stream."""
        self._input_ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    # -- reader side -------------------------------------------------------

    def peek_output(self, length: int) -> bytes:
        """Return up to ``length`` bytes from the front without removing them."""
        return bytes(self._buffer[: min(length, len(self._buffer))])

    def pop_output(self, length: int) -> None:
        """Discard up to ``length`` bytes from the front of the buffer."""
        count = min(length, len(self._buffer))
        del self._buffer[:count]
        self._bytes_read += count

    def read(self, length: int) -> bytes:
        """Remove and return up to ``length`` bytes from the front of the buffer."""
        data = self.peek_output(length)
        self.pop_output(len(data))
        return data

    @property
    def input_ended(self) -> bool:
        """True once the writer has ended the input."""
        return self._input_ended

    @property
    def error(self) -> bool:
        """True if the stream has suffered an error."""
        return self._error

    @property
    def buffer_size(self) -> int:
        """Number of bytes that can currently be read."""
        return len(self._buffer)

    @property
    def buffer_empty(self) -> bool:
        """True if nothing is waiting to be read."""
        return not self._buffer

    @property
    def eof(self) -> bool:
        """True once the input has ended and every byte has been read."""
        return self.buffer_empty and self._input_ended

    # -- accounting --------------------------------------------------------

    @property
    def bytes_written(self) -> int:
        """Total number of bytes accepted by the stream."""
        return self._bytes_written

    @property
    def bytes_read(self) -> int:
        """Total number of bytes removed from the stream."""
        return self._bytes_read