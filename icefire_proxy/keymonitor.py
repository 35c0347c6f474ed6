"""Middleware that counts commands and feeds hot-key, big-key and slow-query data.

The monitor passed in is expected to offer ``slow_query_conf.enable``,
``hot_key_conf.enable``, ``big_key_conf.enable``, ``is_slow_query(args,
start, end)``, ``is_should_put_hot_key()``, ``put_hot_key(key, value)`` and
``put_big_key(key, size)``.
"""

from __future__ import annotations

import threading
import time
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from icefire_proxy.context import Context
from icefire_proxy.namespace import key_indexes
from icefire_proxy.utils import get_interface_string

IGNORE_WCONFIG = "WCONFIG"
HOT_KEY_CMD_LIST = ("GET", "HGET", "MGET")


def _size(value: Any) -> int:
    return len(get_interface_string(value).encode("utf-8", errors="surrogateescape"))


def _key(value: Any) -> str:
    return get_interface_string(value)


def bh_get(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of a GET reply."""
    if reply is None:
        return False
    size = len(reply) if isinstance(reply, (bytes, bytearray)) else 0
    return mon.put_big_key(_key(args[1]), size)


def bh_set(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of a SET value."""
    return mon.put_big_key(_key(args[1]), _size(args[2]))


def bh_hget(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of an HGET reply under the hash key."""
    if reply is None:
        return False
    size = len(reply) if isinstance(reply, (bytes, bytearray)) else 0
    return mon.put_big_key(_key(args[1]), size)


def bh_hset(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of an HSET value under the hash key."""
    return mon.put_big_key(_key(args[1]), _size(args[3]))


def bh_mget(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of every value returned by MGET."""
    if not isinstance(reply, (list, tuple)):
        return False
    for key, value in zip(args[1:], reply):
        if isinstance(value, (bytes, bytearray)):
            mon.put_big_key(_key(key), len(value))
    return False


def bh_mset(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of every value written by MSET."""
    for key, value in zip(args[1::2], args[2::2]):
        mon.put_big_key(_key(key), _size(value))
    return False


def bh_push(mon: Any, args: Sequence[Any], reply: Any) -> bool:
    """Record the size of every element pushed onto a list."""
    key = _key(args[1])
    for value in args[2:]:
        mon.put_big_key(key, _size(value))
    return False


BigKeyHandler = Callable[[Any, Sequence[Any], Any], bool]

BIG_KEY_HANDLERS: dict[str, BigKeyHandler] = {
    "GET": bh_get,
    "SET": bh_set,
    "HGET": bh_hget,
    "HSET": bh_hset,
    "MGET": bh_mget,
    "MSET": bh_mset,
    "SETNX": bh_set,
    "SETEX": bh_hset,
    "LPUSH": bh_push,
    "RPUSH": bh_push,
}


class CommandStats:
    """Counts of processed commands, in total and per command."""

    def __init__(self) -> None:
        self.total = 0
        self.per_command: Counter[str] = Counter()
        self._lock = threading.Lock()

    def record(self, cmd: str) -> None:
        with self._lock:
            self.total += 1
            self.per_command[cmd] += 1


class _KeyMonitorMiddleware:
    def __init__(self, monitor: Any, ignore: Iterable[str]) -> None:
        self.monitor = monitor
        self.slow_query_ignore = frozenset(ignore)
        self.stats = CommandStats()

    def __call__(self, ctx: Context) -> None:
        self.stats.record(ctx.cmd)
        if len(ctx.args) == 1:
            ctx.next()
            return

        mon = self.monitor
        track_slow = mon.slow_query_conf.enable and ctx.cmd not in self.slow_query_ignore
        start = time.time()

        if (
            mon.hot_key_conf.enable
            and ctx.cmd in HOT_KEY_CMD_LIST
            and mon.is_should_put_hot_key()
        ):
            for index in key_indexes(ctx.cmd, ctx.args):
                mon.put_hot_key(get_interface_string(ctx.args[index]), None)

        big_key = BIG_KEY_HANDLERS.get(ctx.cmd) if mon.big_key_conf.enable else None
        try:
            ctx.next()
        finally:
            if big_key is not None:
                big_key(mon, ctx.args, ctx.reply)
            if track_slow:
                mon.is_slow_query(ctx.args, start, time.time())


def key_monitor_middleware(
    monitor: Any, slow_query_ignore_cmd: Iterable[str] | None
) -> _KeyMonitorMiddleware:
    """Build the monitoring middleware; its counters are on ``.stats``."""
    ignore = (IGNORE_WCONFIG,) if slow_query_ignore_cmd is None else slow_query_ignore_cmd
    return _KeyMonitorMiddleware(monitor, ignore)