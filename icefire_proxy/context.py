"""Per-command state and the handler chain that processes it."""

from __future__ import annotations

import abc
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from icefire_proxy.mapper import OpFlag

ABORT_INDEX = 127 // 2

HandlerFunc = Callable[["Context"], None]


@dataclass
class Context:
    """A command on its way through middleware and the final handler."""

    writer: Any = None
    args: list[Any] = field(default_factory=list)
    cmd: str = ""
    handlers: list[HandlerFunc] = field(default_factory=list)
    index: int = -1
    op: OpFlag = OpFlag.NONE
    reply: Any = None

    def next(self) -> None:
        """Run the remaining handlers; meant to be called from middleware."""
        self.index += 1
        while self.index < len(self.handlers):
            self.handlers[self.index](self)
            self.index += 1

    def is_aborted(self) -> bool:
        return self.index >= ABORT_INDEX

    def abort(self) -> None:
        """Stop the pending handlers; the current one runs to its end."""
        self.index = ABORT_INDEX

    def reset(self) -> None:
        """Clear the context for reuse."""
        self.writer = None
        self.args = []
        self.handlers = []
        self.index = -1
        self.reply = None


class Routes(abc.ABC):
    """What a command router offers to the connection handler."""

    @abc.abstractmethod
    def use(self, *handlers: HandlerFunc) -> "Routes":
        """Append middleware run before every command."""

    @abc.abstractmethod
    def add_command(self, operation: str, *handlers: HandlerFunc) -> "Routes":
        """Register handlers for a command."""

    @abc.abstractmethod
    def init_cmd(self) -> None:
        """Register the built-in commands."""

    @abc.abstractmethod
    def handle(self, writer: Any, args: list[Any]) -> None:
        """Dispatch one decoded command."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the backend connection."""


def last_handler(chain: Sequence[HandlerFunc]) -> HandlerFunc | None:
    """Return the final handler of a chain, or None if it is empty."""
    return chain[-1] if chain else None