from types import SimpleNamespace

import pytest

from icefire_proxy.context import Context
from icefire_proxy.keymonitor import (
    CommandStats,
    bh_get,
    bh_hget,
    bh_hset,
    bh_mget,
    bh_mset,
    bh_push,
    bh_set,
    key_monitor_middleware,
)


class FakeMonitor:
    def __init__(self, slow=True, hot=True, big=True, should_put=True):
        self.slow_query_conf = SimpleNamespace(enable=slow)
        self.hot_key_conf = SimpleNamespace(enable=hot)
        self.big_key_conf = SimpleNamespace(enable=big)
        self.should_put = should_put
        self.big_keys = []
        self.hot_keys = []
        self.slow_queries = []

    def put_big_key(self, key, size):
        self.big_keys.append((key, size))
        return True

    def put_hot_key(self, key, value):
        self.hot_keys.append(key)

    def is_should_put_hot_key(self):
        return self.should_put

    def is_slow_query(self, args, start, end):
        self.slow_queries.append((list(args), start <= end))


def _run(middleware, cmd, args, final=None):
    def handler(ctx):
        if final is not None:
            final(ctx)

    ctx = Context(cmd=cmd, args=list(args), handlers=[middleware, handler])
    ctx.next()
    return ctx


def test_bh_set_records_value_size():
    mon = FakeMonitor()
    assert bh_set(mon, [b"SET", b"k", b"value"], None) is True
    assert mon.big_keys == [("k", len(b"value"))]


def test_bh_set_counts_utf8_bytes():
    mon = FakeMonitor()
    bh_set(mon, [b"SET", b"snow", "☃☃☃"], None)
    assert mon.big_keys == [("snow", 9)]


def test_bh_get_without_reply():
    mon = FakeMonitor()
    assert bh_get(mon, [b"GET", b"k"], None) is False
    assert mon.big_keys == []


def test_bh_get_with_reply():
    mon = FakeMonitor()
    bh_get(mon, [b"GET", b"k"], b"mies")
    assert mon.big_keys == [("k", len(b"mies"))]


def test_bh_hget_non_bytes_reply_counts_zero():
    mon = FakeMonitor()
    bh_hget(mon, [b"HGET", b"h", b"f"], 5)
    assert mon.big_keys == [("h", 0)]


def test_bh_hset_uses_value_argument():
    mon = FakeMonitor()
    bh_hset(mon, [b"HSET", b"h", b"field", b"jet"], None)
    assert mon.big_keys == [("h", len(b"jet"))]


def test_bh_mget_pairs_keys_with_values():
    mon = FakeMonitor()
    result = bh_mget(mon, [b"MGET", b"a", b"b", b"c"], [b"aa", None, b"c"])
    assert result is False
    assert mon.big_keys == [("a", len(b"aa")), ("c", len(b"c"))]


def test_bh_mget_non_list_reply():
    mon = FakeMonitor()
    assert bh_mget(mon, [b"MGET", b"a"], None) is False
    assert mon.big_keys == []


def test_bh_mset_records_each_pair():
    mon = FakeMonitor()
    bh_mset(mon, [b"MSET", b"a", b"xx", b"b", b"y"], None)
    assert mon.big_keys == [("a", len(b"xx")), ("b", len(b"y"))]


def test_bh_push_records_each_element():
    mon = FakeMonitor()
    bh_push(mon, [b"LPUSH", b"l", b"aap", b"noot"], None)
    assert mon.big_keys == [("l", len(b"aap")), ("l", len(b"noot"))]


def test_command_stats_counts():
    stats = CommandStats()
    for cmd in ("GET", "GET", "SET"):
        stats.record(cmd)
    assert stats.total == 3
    assert stats.per_command["GET"] == 2


def test_middleware_counts_and_tracks_hot_keys():
    mon = FakeMonitor()
    middleware = key_monitor_middleware(mon, [])
    _run(middleware, "MGET", [b"MGET", b"a", b"b"])
    assert mon.hot_keys == ["a", "b"]
    assert middleware.stats.per_command["MGET"] == 1


def test_middleware_no_hot_key_when_monitor_declines():
    mon = FakeMonitor(should_put=False)
    _run(key_monitor_middleware(mon, []), "GET", [b"GET", b"a"])
    assert mon.hot_keys == []


def test_middleware_big_key_uses_reply_from_handler():
    mon = FakeMonitor()

    def final(ctx):
        ctx.reply = b"value"

    _run(key_monitor_middleware(mon, []), "GET", [b"GET", b"k"], final)
    assert mon.big_keys == [("k", len(b"value"))]


def test_middleware_records_slow_query():
    mon = FakeMonitor()
    _run(key_monitor_middleware(mon, []), "SET", [b"SET", b"k", b"v"])
    assert mon.slow_queries == [([b"SET", b"k", b"v"], True)]


def test_middleware_default_ignores_wconfig():
    mon = FakeMonitor()
    _run(key_monitor_middleware(mon, None), "WCONFIG", [b"WCONFIG", b"a"])
    assert mon.slow_queries == []


def test_single_argument_only_counted():
    mon = FakeMonitor()
    middleware = key_monitor_middleware(mon, [])
    _run(middleware, "PING", [b"PING"])
    assert middleware.stats.total == 1
    assert mon.slow_queries == []


def test_monitoring_runs_when_handler_fails():
    mon = FakeMonitor()

    def final(ctx):
        raise RuntimeError("backend down")

    with pytest.raises(RuntimeError):
        _run(key_monitor_middleware(mon, []), "SET", [b"SET", b"k", b"v"], final)
    assert mon.big_keys == [("k", len(b"v"))]
    assert len(mon.slow_queries) == 1