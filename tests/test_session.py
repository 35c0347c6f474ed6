import io

import pytest

from icefire_proxy.errors import LocalWriterError, RouterError
from icefire_proxy.node_router import NodeRouter
from icefire_proxy.session import (
    ConnectionGate,
    Resp,
    RespDecoder,
    RespProtocolError,
    RespType,
    serve_connection,
)
from icefire_proxy.writer import RespWriter


class RecordingRouter:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def handle(self, writer, args):
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error


def serve(router, data):
    out = io.BytesIO()
    serve_connection(router, io.BytesIO(data), RespWriter(out))
    return out.getvalue()


def test_decode_command_array():
    resp = RespDecoder(io.BytesIO(b"*2\r\n$3\r\nGET\r\n$1\r\nk\r\n")).decode()
    assert resp.type is RespType.ARRAY
    assert [item.value for item in resp.array] == [b"GET", b"k"]


def test_decode_nested():
    resp = RespDecoder(io.BytesIO(b"*2\r\n*1\r\n:1\r\n$-1\r\n")).decode()
    assert resp.array[0].array == [Resp(RespType.INT, b"1")]
    assert resp.array[1] == Resp(RespType.BULK_BYTES, None)


def test_decode_eof():
    with pytest.raises(EOFError):
        RespDecoder(io.BytesIO(b"")).decode()


def test_decode_truncated_bulk():
    with pytest.raises(EOFError):
        RespDecoder(io.BytesIO(b"$10\r\nabc")).decode()


@pytest.mark.parametrize(
    "data", [b"?x\r\n", b"+OK\n", b"$abc\r\n", b"$-7\r\n", b":12a\r\n", b"$2\r\nabcd"]
)
def test_decode_protocol_errors(data):
    with pytest.raises(RespProtocolError):
        RespDecoder(io.BytesIO(data)).decode()


def test_serve_dispatches_each_command_until_eof():
    router = RecordingRouter()
    data = b"*1\r\n$4\r\nPING\r\n*2\r\n$3\r\nGET\r\n$1\r\nk\r\n"
    assert serve(router, data) == b""
    assert router.calls == [[b"PING"], [b"GET", b"k"]]


def test_non_array_is_rejected():
    router = RecordingRouter()
    out = serve(router, b"+PING\r\n*1\r\n$4\r\nPING\r\n")
    assert out == b"-ERR command resp type not support`cmd`\r\n"
    assert router.calls == []


def test_empty_array_is_rejected():
    out = serve(RecordingRouter(), b"*0\r\n")
    assert out == b"-ERR wrong number of arguments for 'cmd' command\r\n"


def test_command_name_must_be_bulk():
    out = serve(RecordingRouter(), b"*1\r\n:1\r\n")
    assert out == b"-Err command type wrong\r\n"


def test_router_error_written_and_connection_ends():
    router = RecordingRouter(error=RouterError("ERR boom"))
    out = serve(router, b"*1\r\n$3\r\nGET\r\n*1\r\n$3\r\nGET\r\n")
    assert out == b"-ERR boom\r\n"
    assert len(router.calls) == 1


def test_local_writer_error_ends_silently():
    router = RecordingRouter(error=LocalWriterError())
    out = serve(router, b"*1\r\n$3\r\nGET\r\n*1\r\n$3\r\nGET\r\n")
    assert out == b""
    assert len(router.calls) == 1


def test_serve_with_real_router():
    router = NodeRouter(None)
    router.init_cmd()
    out = serve(router, b"*1\r\n$4\r\nping\r\n*1\r\n$4\r\nKEYS\r\n")
    assert out == b"+PONG\r\n-ERR command resp type not support`KEYS`\r\n"


def test_gate_counts_connections():
    gate = ConnectionGate()
    assert gate.accept("10.0.0.1:6000") is True
    assert gate.accept("10.0.0.2:6000") is True
    gate.closed()
    assert gate.connections == 1


def test_gate_whitelist():
    gate = ConnectionGate(enable_whitelist=True, whitelist=["127.0.0.1", "::1"])
    assert gate.accept("127.0.0.1:5000") is True
    assert gate.accept("[::1]:5000") is True
    assert gate.accept(("127.0.0.1", 5000)) is True
    assert gate.accept("10.0.0.9:5000") is False
    assert gate.accept("garbage") is False
    assert gate.connections == 3