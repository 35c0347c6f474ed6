"""Key position lookup and the key-prefixing middleware."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from icefire_proxy.context import Context, HandlerFunc

FIRST_KEY_INDEX = (1,)

KeyIndexFunc = Callable[[Sequence[Any]], list[int]]


def first_key(args: Sequence[Any]) -> list[int]:
    """The key is the first argument after the command."""
    return list(FIRST_KEY_INDEX)


def all_key(args: Sequence[Any]) -> list[int]:
    """Every argument after the command is a key."""
    return list(range(1, len(args)))


def odd_key(args: Sequence[Any]) -> list[int]:
    """Keys sit at odd positions, followed by their values."""
    pairs = (len(args) - 1) // 2
    return list(range(1, 2 * pairs, 2))


_CMD_KEYS: dict[str, KeyIndexFunc] = {
    "MGET": all_key,
    "MSET": odd_key,
    "DEL": all_key,
    "EXISTS": all_key,
}


def key_indexes(cmd: str, args: Sequence[Any]) -> list[int]:
    """Positions of the keys in the arguments of ``cmd``."""
    return _CMD_KEYS.get(cmd, first_key)(args)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    return bytes(value)


def namespace(prefix: bytes | str) -> HandlerFunc:
    """Build middleware that prefixes every key with ``prefix:``."""
    prefix_bytes = _to_bytes(prefix)
    if not prefix_bytes:
        raise ValueError("namespace prefix must not be empty")
    if not prefix_bytes.endswith(b":"):
        prefix_bytes += b":"

    def middleware(ctx: Context) -> None:
        if len(ctx.args) != 1:
            for index in key_indexes(ctx.cmd, ctx.args):
                ctx.args[index] = prefix_bytes + _to_bytes(ctx.args[index])
        ctx.next()

    return middleware