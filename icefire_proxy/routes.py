"""Shared command routing: validation, handler chains and reply writing."""

from __future__ import annotations

import abc
import logging
from typing import Any

from icefire_proxy.context import ABORT_INDEX, Context, HandlerFunc, Routes
from icefire_proxy.errors import unknown_command, wrong_arguments
from icefire_proxy.mapper import lookup
from icefire_proxy.utils import get_interface_string
from icefire_proxy.writer import (
    recursively_write_objects,
    write_bulk,
    write_error,
    write_int,
    write_objects,
    write_simple_string,
)

logger = logging.getLogger(__name__)

CMDEXEC = "CMDEXEC"
PONG_REPLY = "PONG"
OK_REPLY = "OK"


class BaseRouter(Routes):
    """Routes validated commands through middleware to their handlers.

    Commands without a handler of their own go to the CMDEXEC handler,
    which subclasses provide by implementing ``_cmd_exec``.
    """

    def __init__(self, backend: Any = None) -> None:
        self.backend = backend
        self.middlewares: list[HandlerFunc] = []
        self._commands: dict[str, list[HandlerFunc]] = {}

    def use(self, *args: HandlerFunc) -> "BaseRouter":
        self.middlewares.extend(args)
        return self

    def add_command(self, operation: str, *args: HandlerFunc) -> "BaseRouter":
        self._commands[operation] = self._combine(args)
        return self

    def _combine(self, handlers: tuple[HandlerFunc, ...]) -> list[HandlerFunc]:
        if len(self.middlewares) + len(handlers) >= ABORT_INDEX:
            raise ValueError("too many handlers")
        return [*self.middlewares, *handlers]

    def init_cmd(self) -> None:
        self.add_command("COMMAND", self._cmd_command)
        self.add_command("PING", self._cmd_ping)
        self.add_command("QUIT", self._cmd_quit)
        self.add_command(CMDEXEC, self._cmd_exec)

    def handle(self, writer: Any, args: list[Any]) -> None:
        """Validate and dispatch one command.

        Programming faults inside handlers are logged and swallowed; command
        errors and connection failures propagate.
        """
        try:
            self._dispatch(writer, args)
        except (LookupError, TypeError, AttributeError) as exc:
            logger.error("handle panic: %r", exc)

    def _dispatch(self, writer: Any, args: list[Any]) -> None:
        cmd = get_interface_string(args[0]).upper()
        op = lookup(cmd)
        if op is None or op.flag.is_not_allowed():
            write_error(writer, unknown_command(cmd))
            return
        if not op.args_verify(len(args)):
            write_error(writer, wrong_arguments(cmd))
            return
        handlers = self._commands.get(cmd)
        if handlers is None:
            handlers = self._commands.get(CMDEXEC, [])
        ctx = Context(writer=writer, args=args, cmd=cmd, handlers=handlers, op=op.flag)
        try:
            ctx.next()
        finally:
            ctx.reset()

    def close(self) -> None:
        closer = getattr(self.backend, "close", None)
        if closer is not None:
            closer()

    def _cmd_command(self, ctx: Context) -> None:
        write_objects(ctx.writer, None)

    def _cmd_ping(self, ctx: Context) -> None:
        ctx.reply = PONG_REPLY
        write_simple_string(ctx.writer, PONG_REPLY)

    def _cmd_quit(self, ctx: Context) -> None:
        ctx.reply = OK_REPLY
        write_simple_string(ctx.writer, OK_REPLY)

    @abc.abstractmethod
    def _cmd_exec(self, ctx: Context) -> None:
        """Forward a command to the backend and answer the client."""

    def _send_reply(self, ctx: Context) -> None:
        """Write ``ctx.reply`` to the client in the form its type calls for."""
        reply = ctx.reply
        writer = ctx.writer
        if reply is None:
            write_bulk(writer, None)
        elif isinstance(reply, BaseException):
            write_error(writer, reply)
        elif isinstance(reply, int) and not isinstance(reply, bool):
            write_int(writer, reply)
        elif isinstance(reply, (bytes, bytearray)):
            write_bulk(writer, bytes(reply))
        elif isinstance(reply, str):
            write_simple_string(writer, reply)
        elif isinstance(reply, (list, tuple)):
            if len(reply) == 1 and isinstance(reply[0], BaseException):
                write_error(writer, reply[0])
            else:
                recursively_write_objects(writer, *reply)
        else:
            write_objects(writer, reply)