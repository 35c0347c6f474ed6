"""A growable read buffer over a byte stream."""

from __future__ import annotations

from typing import Any

_BUF_STEP = 1024


class Reader:
    """Buffers bytes from a stream and hands them out in exact-sized pieces."""

    def __init__(self, stream: Any) -> None:
        self._stream = stream
        self.buffer = bytearray(_BUF_STEP)
        self.read_position = 0
        self.write_position = 0

    def _request_space(self, size: int) -> None:
        capacity = len(self.buffer)
        if self.write_position + size > capacity:
            new_size = max(capacity * 2, capacity + size + _BUF_STEP)
            self.buffer.extend(bytes(new_size - capacity))

    def _read_chunk(self, size: int) -> bytes:
        read = getattr(self._stream, "read1", None) or self._stream.read
        return read(size)

    def read_some(self, minimum: int) -> None:
        """Read at least ``minimum`` bytes into the buffer.

        Raises EOFError when the stream ends before that many arrive.
        """
        self._request_space(minimum)
        space = len(self.buffer) - self.write_position
        received = bytearray()
        while len(received) < minimum:
            chunk = self._read_chunk(space - len(received))
            if not chunk:
                if received:
                    raise EOFError("unexpected EOF")
                raise EOFError("EOF")
            received += chunk
        end = self.write_position + len(received)
        self.buffer[self.write_position:end] = received
        self.write_position = end

    def require_n_bytes(self, num: int) -> None:
        """Make sure ``num`` unread bytes are buffered."""
        available = self.write_position - self.read_position
        if available >= num:
            return
        self.read_some(num - available)

    def get_n_bytes(self, num: int) -> bytes:
        """Consume and return exactly ``num`` bytes."""
        self.require_n_bytes(num)
        data = bytes(self.buffer[self.read_position:self.read_position + num])
        self.read_position += num
        return data

    def is_end(self) -> bool:
        """Tell whether every buffered byte was consumed; resets if so."""
        if self.read_position >= self.write_position:
            self.reset()
            return True
        return False

    def reset(self) -> None:
        """Forget all buffered data."""
        self.write_position = 0
        self.read_position = 0