"""Command routing to a sharded backend cluster."""

from __future__ import annotations

import logging
from typing import Any

from icefire_proxy.context import Context
from icefire_proxy.errors import RouterError
from icefire_proxy.routes import BaseRouter
from icefire_proxy.writer import recursively_write_objects, write_error, write_int

logger = logging.getLogger(__name__)

BATCH_SIZE = 10


def _as_int(value: Any) -> int:
    if value is None:
        raise RouterError("nil returned")
    if isinstance(value, bool) or not isinstance(value, int):
        raise RouterError(f"unexpected type for Int64, got type {type(value).__name__}")
    return value


class ClusterRouter(BaseRouter):
    """Routes commands to a cluster, splitting multi-key commands into batches.

    The cluster must offer ``is_slave_operate()``, ``do(cmd, *args)``,
    ``slave_do(cmd, *args)``, ``new_batch(size)`` returning a batch with
    ``put(slave, cmd, *args)``, ``run_batch(batch)`` returning the list of
    replies, and ``close()``. A nil reply is returned as None.
    """

    def __init__(self, cluster: Any) -> None:
        super().__init__(cluster)

    def init_cmd(self) -> None:
        """Register the built-in commands and the multi-key handlers."""
        super().init_cmd()
        self.add_command("DEL", self._cmd_del)
        self.add_command("EXISTS", self._cmd_exists)
        self.add_command("MGET", self._cmd_mget)

    def close(self) -> None:
        """Close the cluster client."""
        self.backend.close()

    def _cmd_exec(self, ctx: Context) -> None:
        cluster = self.backend
        if cluster.is_slave_operate() and ctx.op.is_read_only():
            ctx.reply = cluster.slave_do(ctx.cmd, *ctx.args[1:])
        else:
            ctx.reply = cluster.do(ctx.cmd, *ctx.args[1:])
        self._send_reply(ctx)

    def _run_batch(self, ctx: Context, command: str, slave: bool) -> list[Any] | None:
        """Run ``command`` once per key; on failure write the error and give None."""
        cluster = self.backend
        batch = cluster.new_batch(BATCH_SIZE)
        for key in ctx.args[1:]:
            batch.put(slave, command, key)
        try:
            values = cluster.run_batch(batch)
        except Exception as exc:  # noqa: BLE001
            logger.debug("batch %s failed: %s", command, exc)
            write_error(ctx.writer, exc)
            return None
        return list(values or [])

    def _cmd_mget(self, ctx: Context) -> None:
        reply = self._run_batch(ctx, "GET", self.backend.is_slave_operate())
        if reply is None:
            return
        if len(reply) == 1 and isinstance(reply[0], BaseException):
            write_error(ctx.writer, reply[0])
            return
        ctx.reply = reply
        recursively_write_objects(ctx.writer, *reply)

    def _count_keys(self, ctx: Context, command: str) -> None:
        if len(ctx.args) == 2:
            try:
                count = _as_int(self.backend.do(ctx.cmd, ctx.args[1]))
            except Exception as exc:  # noqa: BLE001
                write_error(ctx.writer, exc)
                return
            write_int(ctx.writer, count)
            return
        reply = self._run_batch(ctx, command, False)
        if reply is None:
            return
        total = sum(
            value for value in reply if isinstance(value, int) and not isinstance(value, bool)
        )
        ctx.reply = total
        write_int(ctx.writer, total)

    def _cmd_del(self, ctx: Context) -> None:
        self._count_keys(ctx, "DEL")

    def _cmd_exists(self, ctx: Context) -> None:
        self._count_keys(ctx, ctx.cmd)