"""Errors raised while routing client commands."""

from __future__ import annotations

ERR_UNKNOWN_COMMAND = "ERR command resp type not support`%s`"
ERR_ARGUMENTS = "ERR wrong number of arguments for '%s' command"


class RouterError(Exception):
    """A command failure that is reported back to the client."""


class LocalWriterError(RouterError):
    """Writing the reply to the client connection failed."""

    def __init__(self, message: str = "client conn writer error") -> None:
        super().__init__(message)


class LocalFlushError(RouterError):
    """Flushing the reply to the client connection failed."""

    def __init__(self, message: str = "client conn flush error") -> None:
        super().__init__(message)


class CommandTypeError(RouterError):
    """The command name was not sent as a bulk string."""

    def __init__(self, message: str = "Err command type wrong") -> None:
        super().__init__(message)


def unknown_command(cmd: str) -> RouterError:
    """Error for a command that is unknown or not allowed."""
    return RouterError(ERR_UNKNOWN_COMMAND % cmd)


def wrong_arguments(cmd: str) -> RouterError:
    """Error for a command called with the wrong number of arguments."""
    return RouterError(ERR_ARGUMENTS % cmd)