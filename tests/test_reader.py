import io

import pytest

from icefire_proxy.reader import Reader


class _Trickle:
    """A stream that returns one byte per read call."""

    def __init__(self, data):
        self._data = io.BytesIO(data)

    def read(self, size):
        return self._data.read(min(size, 1))


def test_get_n_bytes_in_order():
    reader = Reader(io.BytesIO(b"*1\r\n$4\r\nPING\r\n"))
    assert reader.get_n_bytes(4) == b"*1\r\n"
    assert reader.get_n_bytes(4) == b"$4\r\n"
    assert reader.get_n_bytes(6) == b"PING\r\n"


def test_is_end_resets_positions():
    reader = Reader(io.BytesIO(b"abc"))
    reader.read_some(3)
    assert not reader.is_end()
    assert reader.get_n_bytes(3) == b"abc"
    assert reader.is_end()
    assert reader.read_position == 0
    assert reader.write_position == 0


def test_require_n_bytes_uses_buffered_data():
    reader = Reader(io.BytesIO(b"abcdef"))
    reader.read_some(6)
    reader.require_n_bytes(2)
    assert reader.write_position == 6
    assert reader.get_n_bytes(2) == b"ab"


def test_read_some_accumulates_small_reads():
    reader = Reader(_Trickle(b"hello"))
    reader.read_some(5)
    assert reader.write_position == 5
    assert reader.get_n_bytes(5) == b"hello"


def test_buffer_grows_for_large_payload():
    payload = bytes(range(256)) * 12
    reader = Reader(io.BytesIO(payload))
    assert reader.get_n_bytes(len(payload)) == payload
    assert len(reader.buffer) >= len(payload)


def test_eof_on_empty_stream():
    reader = Reader(io.BytesIO(b""))
    with pytest.raises(EOFError):
        reader.get_n_bytes(1)


def test_eof_on_short_stream_keeps_positions():
    reader = Reader(io.BytesIO(b"ab"))
    with pytest.raises(EOFError):
        reader.get_n_bytes(5)
    assert reader.write_position == 0


def test_reset_discards_data():
    reader = Reader(io.BytesIO(b"xyz"))
    reader.read_some(3)
    reader.reset()
    assert reader.is_end()