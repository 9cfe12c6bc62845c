r"""Synchronous retry executor for HTTP requests.

This module provides the RetryExecutor class that sends an HTTP request
until the retry predicate accepts a response or the backoff policy stops.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from rehttp.backoff.base import STOP
from rehttp.exceptions import PermanentBodyError
from rehttp.log import emit, resolve_logger
from rehttp.retry.body import RequestBodyBuffer
from rehttp.retry.executor_core import (
    create_cancelled_error,
    create_exhausted_error,
    describe_response,
)
from rehttp.retry.predicate import default_retry_func

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable

    from rehttp.backoff.base import BackOff
    from rehttp.log import Logger
    from rehttp.retry.predicate import RetryFunc

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes HTTP requests with automatic retry logic.

    Each call to ``execute`` owns its body buffer and its current
    response; nothing is shared between calls except the transport, so a
    single executor can serve concurrent requests as long as each call
    gets its own backoff policy.

    Attributes:
        send: The transport. It sends one request and returns the
            response, or raises ``httpx.RequestError`` when no response
            was obtained. ``httpx.Client.send`` is a typical transport.
        logger: The logger receiving attempt outcomes.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.backoff import ConstantBackOff, WithMaxRetries
        >>> from rehttp.retry import RetryExecutor
        >>> with httpx.Client() as client:  # doctest: +SKIP
        ...     executor = RetryExecutor(client.send)
        ...     response = executor.execute(
        ...         httpx.Request("GET", "https://api.example.com/data"),
        ...         backoff=WithMaxRetries(ConstantBackOff(1.0), max_retries=3),
        ...     )
        ...

        ```
    """

    def __init__(
        self,
        send: Callable[[httpx.Request], httpx.Response],
        logger: Logger | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """Initialize the retry executor.

        Args:
            send: The transport sending one request.
            logger: Optional logger. Defaults to the module logger.
            sleep: Optional function waiting between attempts.
                Defaults to ``time.sleep``.
        """
        self.send = send
        self.logger: Logger = resolve_logger(logger, __name__)
        self._sleep = sleep

    def execute(
        self,
        request: httpx.Request,
        backoff: BackOff,
        retry_func: RetryFunc = default_retry_func,
        cancel_event: threading.Event | None = None,
    ) -> httpx.Response:
        """Send the request until it succeeds or the backoff policy
        stops.

        The request body, if any, is read once before the first attempt
        and replayed on every attempt. After each attempt:

        - a transport error (``httpx.RequestError``) requests a retry,
        - a response becomes the current response, replacing the previous
          one, and ``retry_func`` decides whether to retry it,
        - a retry consumes one delay from ``backoff``; when it returns
          ``STOP`` the request fails.

        Args:
            request: The request to send. Its stream is replaced on
                every attempt.
            backoff: The backoff policy. It is reset before the first
                attempt.
            retry_func: Predicate returning ``True`` if a response must
                be retried.
            cancel_event: Optional event aborting the request. It is
                checked before each attempt and interrupts the wait
                between attempts.

        Returns:
            The first response accepted by ``retry_func``.

        Raises:
            PermanentBodyError: If the request body cannot be read. No
                attempt is made.
            ResponseRetryExhaustedError: If the backoff policy stopped and
                the last attempt got a rejected response.
            TransportRetryExhaustedError: If the backoff policy stopped and
                the last attempt got no response.
            RequestCancelledError: If ``cancel_event`` was set.
        """
        try:
            body = RequestBodyBuffer.capture(request)
        except PermanentBodyError as exc:
            emit(
                self.logger,
                "error",
                "error while reading the request body, given up retrying. Err: %s",
                exc,
            )
            raise

        backoff.reset()
        response: httpx.Response | None = None
        error: httpx.RequestError | None = None
        attempt = 0
        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise create_cancelled_error(request, attempts=attempt)
                attempt += 1
                body.rewind(request)
                error = None
                try:
                    result = self.send(request)
                except httpx.RequestError as exc:
                    error = exc
                    response = _replace_response(response, None)
                    emit(self.logger, "error", "request error, err: %s, need a retry", exc)
                else:
                    response = _replace_response(response, result)
                    if not retry_func(response):
                        emit(
                            self.logger,
                            "info",
                            "executed successfully, response: %s",
                            describe_response(response),
                        )
                        return response
                    emit(
                        self.logger,
                        "error",
                        "got response from server: %s, a retry is needed",
                        describe_response(response),
                    )

                delay = backoff.next_backoff()
                if delay is STOP:
                    break
                logger.debug(f"Waiting {delay:.2f}s before attempt {attempt + 1}")
                self._wait(delay, cancel_event, request, attempt)
        except BaseException:
            # The exhausted error below is the only exit that keeps the response.
            _replace_response(response, None)
            raise

        logger.debug(
            f"{request.method} request to {request.url} gave up after {attempt} attempts"
        )
        raise create_exhausted_error(request, attempt, response, error) from error

    def _wait(
        self,
        delay: float,
        cancel_event: threading.Event | None,
        request: httpx.Request,
        attempt: int,
    ) -> None:
        if cancel_event is not None:
            if cancel_event.wait(delay):
                raise create_cancelled_error(request, attempts=attempt)
        elif self._sleep is not None:
            self._sleep(delay)
        else:
            time.sleep(delay)


def _replace_response(
    previous: httpx.Response | None, current: httpx.Response | None
) -> httpx.Response | None:
    if previous is not None and previous is not current:
        previous.close()
    return current
