"""RESP reply encoding and helpers that deliver replies to a client."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterable
from typing import Any

from icefire_proxy.errors import LocalFlushError, LocalWriterError

logger = logging.getLogger(__name__)

_CRLF = b"\r\n"
_NIL_BULK = b"$-1\r\n"


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    if isinstance(value, float):
        return repr(value).encode("ascii")
    raise TypeError(f"cannot encode {type(value).__name__} as a bulk string")


def _line_text(text: str) -> bytes:
    cleaned = text.replace("\r", " ").replace("\n", " ")
    return cleaned.encode("utf-8", errors="surrogateescape")


def _bulk(value: Any) -> bytes:
    if value is None:
        return _NIL_BULK
    data = _as_bytes(value)
    return b"$%d\r\n" % len(data) + data + _CRLF


def _error(message: str) -> bytes:
    return b"-" + _line_text(message) + _CRLF


def _encode(value: Any, nested: bool) -> bytes:
    if value is None:
        return _NIL_BULK
    if isinstance(value, BaseException):
        return _error(str(value))
    if isinstance(value, bool):
        return b":%d\r\n" % int(value)
    if isinstance(value, int):
        return b":%d\r\n" % value
    if isinstance(value, (bytes, bytearray, memoryview, str, float)):
        return _bulk(value)
    if isinstance(value, (list, tuple)):
        if not nested:
            raise TypeError("nested reply needs recursive writing")
        return _array(value, nested)
    raise TypeError(f"unsupported reply type {type(value).__name__}")


def _array(items: Iterable[Any], nested: bool) -> bytes:
    encoded = [_encode(item, nested) for item in items]
    return b"*%d\r\n" % len(encoded) + b"".join(encoded)


class RespWriter:
    """Buffers RESP replies and sends them to a stream on flush.

    The stream may be a socket (``sendall``) or any object with ``write``.
    """

    def __init__(self, stream: Any) -> None:
        self._stream = stream
        self._buffer = bytearray()

    def write(self, data: bytes) -> int:
        """Append raw bytes to the pending output."""
        self._buffer += data
        return len(data)

    def write_simple_string(self, value: str) -> None:
        self._buffer += b"+" + _line_text(value) + _CRLF

    def write_bulk(self, value: Any) -> None:
        """Write a bulk string; None is written as a nil bulk."""
        self._buffer += _bulk(value)

    def write_bulk_strings(self, values: Iterable[Any]) -> None:
        """Write an array of bulk strings."""
        encoded = [_bulk(value) for value in values]
        self._buffer += b"*%d\r\n" % len(encoded) + b"".join(encoded)

    def write_int(self, value: int) -> None:
        self._buffer += b":%d\r\n" % value

    def write_error(self, message: str) -> None:
        self._buffer += _error(message)

    def write_objects(self, *args: Any) -> None:
        """Write the values as one array of scalar replies."""
        self._buffer += _array(args, nested=False)

    def recursively_write_objects(self, *args: Any) -> None:
        """Write the values as one array, nesting lists as arrays."""
        self._buffer += _array(args, nested=True)

    def flush(self) -> None:
        """Send the pending output to the stream."""
        if not self._buffer:
            return
        data = bytes(self._buffer)
        self._buffer.clear()
        sendall = getattr(self._stream, "sendall", None)
        if sendall is not None:
            sendall(data)
            return
        self._stream.write(data)
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()


def _deliver(local: RespWriter, action: Callable[[], Any]) -> None:
    try:
        action()
    except (OSError, TypeError, ValueError) as exc:
        logger.error("client write error: %s", exc)
        raise LocalWriterError() from exc
    try:
        local.flush()
    except OSError as exc:
        logger.error("client flush error: %s", exc)
        raise LocalFlushError() from exc


def _render_off_line(writer_method: str, reply: tuple[Any, ...]) -> bytes:
    memory = io.BytesIO()
    memory_writer = RespWriter(memory)
    getattr(memory_writer, writer_method)(*reply)
    memory_writer.flush()
    return memory.getvalue()


def write_simple_string(local: RespWriter, reply: str) -> None:
    """Send a simple string reply."""
    _deliver(local, lambda: local.write_simple_string(reply))


def write_bulk(local: RespWriter, reply: Any) -> None:
    """Send a bulk string reply; None sends a nil bulk."""
    _deliver(local, lambda: local.write_bulk(reply))


def write_objects(local: RespWriter, *args: Any) -> None:
    """Send the values as one array reply."""
    if len(args) > 1:
        payload = _render_off_line("write_objects", args)
        _deliver(local, lambda: local.write(payload))
    else:
        _deliver(local, lambda: local.write_objects(*args))


def recursively_write_objects(local: RespWriter, *args: Any) -> None:
    """Send the values as one array reply, nesting lists."""
    if len(args) > 1:
        payload = _render_off_line("recursively_write_objects", args)
        _deliver(local, lambda: local.write(payload))
    else:
        _deliver(local, lambda: local.recursively_write_objects(*args))


def write_bulk_strings(local: RespWriter, reply: Iterable[Any]) -> None:
    """Send an array of bulk strings."""
    _deliver(local, lambda: local.write_bulk_strings(reply))


def write_int(local: RespWriter, reply: int) -> None:
    """Send an integer reply."""
    _deliver(local, lambda: local.write_int(reply))


def write_error(local: RespWriter, err: BaseException | str) -> None:
    """Send an error reply; stream failures propagate unchanged."""
    local.write_error(str(err))
    local.flush()