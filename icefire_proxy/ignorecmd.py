"""Middleware that rejects configured commands."""

from __future__ import annotations

from collections.abc import Iterable

from icefire_proxy.context import Context, HandlerFunc
from icefire_proxy.errors import unknown_command


def ignore_cmd_middleware(enable: bool, cmd_list: Iterable[str]) -> HandlerFunc:
    """Build middleware that refuses the commands in ``cmd_list`` when enabled."""
    blocked = frozenset(cmd_list or ())

    def middleware(context: Context) -> None:
        if enable and blocked and context.cmd in blocked:
            raise unknown_command(context.cmd)
        context.next()

    return middleware