"""Command routing to a single backend server through a connection pool."""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any

from icefire_proxy.context import Context
from icefire_proxy.routes import BaseRouter
from icefire_proxy.writer import write_error

logger = logging.getLogger(__name__)


class NodeRouter(BaseRouter):
    """Routes commands to one backend server.

    The pool must offer ``get()``, which returns a connection with
    ``do(cmd, *args)`` and ``close()``, and ``close()`` for shutdown.
    A nil reply is returned by ``do`` as None; an error reply or a
    connection failure is raised.
    """

    def __init__(self, pool: Any) -> None:
        super().__init__(pool)

    def init_cmd(self) -> None:
        """Register COMMAND, PING, QUIT and the forwarding handler."""
        super().init_cmd()

    def do(self, cmd: str, *args: Any) -> Any:
        """Run one command on a pooled connection and return its reply."""
        conn = self.backend.get()
        try:
            return conn.do(cmd, *args)
        finally:
            conn.close()

    def close(self) -> None:
        """Close the connection pool."""
        self.backend.close()

    def _cmd_exec(self, ctx: Context) -> None:
        try:
            ctx.reply = self.do(ctx.cmd, *ctx.args[1:])
        except Exception as exc:  # noqa: BLE001
            logger.debug("backend error for %s: %s", ctx.cmd, exc)
            with suppress(OSError):
                write_error(ctx.writer, exc)
            return
        self._send_reply(ctx)