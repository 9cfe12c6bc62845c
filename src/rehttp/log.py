r"""Logger capability injected into retry clients.

A client reports attempt outcomes through an object exposing ``error``
and ``info`` with ``logging``-style ``%`` formatting, so a
``logging.Logger`` can be injected directly. Logging is best effort: a
failing logger never changes the outcome of a request.
"""

from __future__ import annotations

__all__ = ["Logger", "NullLogger", "emit", "resolve_logger"]

import logging
from typing import Any, Protocol, runtime_checkable

logger: logging.Logger = logging.getLogger(__name__)


@runtime_checkable
class Logger(Protocol):
    """Capability used by the retry executor to report attempts."""

    def error(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...


class NullLogger:
    """Logger discarding every message.

    Example:
        ```pycon
        >>> from rehttp.log import NullLogger
        >>> NullLogger().error("dropped %s", "message")

        ```
    """

    def error(self, msg: str, *args: Any) -> None:
        pass

    def info(self, msg: str, *args: Any) -> None:
        pass


def resolve_logger(log: Logger | None, name: str) -> Logger:
    """Return ``log``, or the ``logging`` logger called ``name`` if
    ``log`` is ``None``.

    Example:
        ```pycon
        >>> from rehttp.log import resolve_logger
        >>> resolve_logger(None, "rehttp").name
        'rehttp'

        ```
    """
    if log is None:
        return logging.getLogger(name)
    return log


def emit(log: Logger, level: str, msg: str, *args: Any) -> None:
    """Send a message to ``log`` without letting it fail the caller.

    Args:
        log: The logger to write to.
        level: ``"error"`` or ``"info"``.
        msg: The ``%``-style message format.
        *args: The message arguments.
    """
    try:
        getattr(log, level)(msg, *args)
    except Exception:
        logger.debug(f"Injected logger {log!r} failed to log a message", exc_info=True)
