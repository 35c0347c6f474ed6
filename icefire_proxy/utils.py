"""Small helpers shared across the proxy."""

from __future__ import annotations

import logging
import socket
import threading
import traceback
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)

_hostname = ""


def go_with_recover(
    handler: Callable[[], Any],
    recover_handler: Callable[[BaseException], Any] | None = None,
) -> threading.Thread:
    """Run ``handler`` in a daemon thread.

    If it raises, the failure is logged and ``recover_handler`` is called
    with the exception in a thread of its own; a failure there is logged too.
    The started thread is returned.
    """

    def _run_recover(exc: BaseException) -> None:
        try:
            recover_handler(exc)
        except Exception as inner:  # noqa: BLE001
            logger.error(
                "recover thread panic: %r\n%s", inner, traceback.format_exc()
            )

    def _run() -> None:
        try:
            handler()
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "%s thread panic: %r\n%s",
                datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                exc,
                traceback.format_exc(),
            )
            if recover_handler is not None:
                threading.Thread(target=_run_recover, args=(exc,), daemon=True).start()

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()
    return thread


def get_interface_string(param: Any) -> str:
    """Render a command argument as text; unsupported types give ``""``."""
    if isinstance(param, (bytes, bytearray, memoryview)):
        return bytes(param).decode("utf-8", errors="surrogateescape")
    if isinstance(param, str):
        return param
    if isinstance(param, bool):
        return ""
    if isinstance(param, int):
        return str(param)
    if isinstance(param, float):
        return str(int(param))
    return ""


def in_array(item: str, array: Iterable[str]) -> bool:
    """Tell whether ``item`` occurs in ``array``."""
    return item in array


def get_hostname() -> str:
    """Return the host name, cached after the first successful lookup."""
    global _hostname
    if _hostname:
        return _hostname
    try:
        name = socket.gethostname()
    except OSError:
        return ""
    _hostname = name
    return _hostname