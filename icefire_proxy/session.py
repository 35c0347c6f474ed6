"""Serving one client connection: RESP decoding, admission and dispatch."""

from __future__ import annotations

import enum
import logging
import threading
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from icefire_proxy.context import Routes
from icefire_proxy.errors import (
    CommandTypeError,
    LocalFlushError,
    LocalWriterError,
    unknown_command,
    wrong_arguments,
)
from icefire_proxy.writer import RespWriter, write_error

logger = logging.getLogger(__name__)


class RespProtocolError(ValueError):
    """The client sent bytes that are not valid RESP."""


class RespType(enum.Enum):
    STRING = "+"
    ERROR = "-"
    INT = ":"
    BULK_BYTES = "$"
    ARRAY = "*"


@dataclass
class Resp:
    """One decoded RESP value; scalars keep their raw bytes."""

    type: RespType
    value: bytes | None = None
    array: list["Resp"] | None = None


class RespDecoder:
    """Reads RESP values from a binary stream with ``readline`` and ``read``."""

    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def _line(self) -> bytes:
        line = self._stream.readline()
        if not line:
            raise EOFError("EOF")
        if not line.endswith(b"\r\n"):
            raise RespProtocolError("bad CRLF end")
        return line[:-2]

    def _read_exact(self, size: int) -> bytes:
        chunks = bytearray()
        while len(chunks) < size:
            chunk = self._stream.read(size - len(chunks))
            if not chunk:
                raise EOFError("unexpected EOF")
            chunks += chunk
        return bytes(chunks)

    @staticmethod
    def _length(raw: bytes) -> int:
        try:
            size = int(raw)
        except ValueError:
            raise RespProtocolError(f"bad length {raw!r}") from None
        if size < -1:
            raise RespProtocolError(f"bad length {size}")
        return size

    def decode(self) -> Resp:
        """Read the next value; raises EOFError at the end of the stream."""
        line = self._line()
        if not line:
            raise RespProtocolError("empty line")
        try:
            kind = RespType(chr(line[0]))
        except ValueError:
            raise RespProtocolError(f"bad resp type {line[:1]!r}") from None
        body = line[1:]
        if kind is RespType.INT:
            self._length(body) if body.lstrip(b"-").isdigit() else self._bad_int(body)
            return Resp(kind, body)
        if kind in (RespType.STRING, RespType.ERROR):
            return Resp(kind, body)
        size = self._length(body)
        if kind is RespType.BULK_BYTES:
            if size == -1:
                return Resp(kind, None)
            data = self._read_exact(size + 2)
            if data[-2:] != b"\r\n":
                raise RespProtocolError("bad CRLF end")
            return Resp(kind, data[:-2])
        if size == -1:
            return Resp(kind, array=None)
        return Resp(kind, array=[self.decode() for _ in range(size)])

    @staticmethod
    def _bad_int(body: bytes) -> None:
        raise RespProtocolError(f"bad integer {body!r}")


def _host_of(remote_addr: Any) -> str:
    if isinstance(remote_addr, tuple):
        return str(remote_addr[0])
    host, sep, _ = str(remote_addr).rpartition(":")
    if not sep:
        return ""
    if host.startswith("[") and host.endswith("]"):
        return host[1:-1]
    if ":" in host or "[" in host or "]" in host:
        return ""
    return host


class ConnectionGate:
    """Admits clients by IP white list and counts open connections."""

    def __init__(self, enable_whitelist: bool = False, whitelist: Any = ()) -> None:
        self.enable_whitelist = enable_whitelist
        self.whitelist = frozenset(whitelist or ())
        self.connections = 0
        self._lock = threading.Lock()

    def accept(self, remote_addr: Any) -> bool:
        """Tell whether a client may connect; counts it if so."""
        if self.enable_whitelist and _host_of(remote_addr) not in self.whitelist:
            return False
        with self._lock:
            self.connections += 1
        return True

    def closed(self) -> None:
        """Note that an admitted connection has ended."""
        with self._lock:
            self.connections -= 1


def _reject(writer: RespWriter, err: BaseException) -> None:
    with suppress(OSError):
        write_error(writer, err)


def serve_connection(router: Routes, stream: Any, writer: RespWriter) -> None:
    """Read commands from ``stream`` and dispatch them until an error or EOF."""
    decoder = RespDecoder(stream)
    while True:
        try:
            resp = decoder.decode()
        except (EOFError, OSError, RespProtocolError):
            return
        if resp.type is not RespType.ARRAY:
            _reject(writer, unknown_command("cmd"))
            return
        items = resp.array or []
        if not items:
            _reject(writer, wrong_arguments("cmd"))
            return
        if items[0].type is not RespType.BULK_BYTES:
            _reject(writer, CommandTypeError())
            return
        args = [item.value for item in items]
        try:
            router.handle(writer, args)
        except (LocalWriterError, LocalFlushError):
            return
        except Exception as exc:  # noqa: BLE001
            _reject(writer, exc)
            logger.error("command failed: %s, %s", args, exc)
            return