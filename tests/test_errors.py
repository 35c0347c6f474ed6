import pytest

from icefire_proxy.errors import (
    CommandTypeError,
    LocalFlushError,
    LocalWriterError,
    RouterError,
    unknown_command,
    wrong_arguments,
)


def test_unknown_command_message():
    assert str(unknown_command("KEYS")) == "ERR command resp type not support`KEYS`"


def test_wrong_arguments_message():
    assert (
        str(wrong_arguments("HGET"))
        == "ERR wrong number of arguments for 'HGET' command"
    )


@pytest.mark.parametrize(
    "cls, message",
    [
        (LocalWriterError, "client conn writer error"),
        (LocalFlushError, "client conn flush error"),
        (CommandTypeError, "Err command type wrong"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message


@pytest.mark.parametrize(
    "cls, message",
    [
        (LocalWriterError, "client conn writer error"),
        (LocalFlushError, "client conn flush error"),
        (CommandTypeError, "Err command type wrong"),
    ],
)
def test_subclasses_caught_as_router_error(cls, message):
    err = cls()
    assert isinstance(err, RouterError)
    assert str(err) == message


def test_factories_return_router_errors():
    err = wrong_arguments("LSET")
    assert isinstance(err, RouterError)
    assert str(err) == "ERR wrong number of arguments for 'LSET' command"

    unknown = unknown_command("SCAN")
    assert isinstance(unknown, RouterError)
    assert str(unknown) == "ERR command resp type not support`SCAN`"