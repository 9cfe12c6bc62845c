r"""Asynchronous retry executor for HTTP requests.

This module provides the AsyncRetryExecutor class, the asyncio
counterpart of RetryExecutor. The wait between attempts yields to the
event loop, and cancelling the calling task aborts the request.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from rehttp.backoff.base import STOP
from rehttp.exceptions import PermanentBodyError
from rehttp.log import emit, resolve_logger
from rehttp.retry.body import RequestBodyBuffer
from rehttp.retry.executor_core import create_exhausted_error, describe_response
from rehttp.retry.predicate import default_retry_func

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from rehttp.backoff.base import BackOff
    from rehttp.log import Logger
    from rehttp.retry.predicate import RetryFunc

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes async HTTP requests with automatic retry logic.

    Attributes:
        send: The async transport, typically ``httpx.AsyncClient.send``.
        logger: The logger receiving attempt outcomes.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from rehttp.backoff import ConstantBackOff, WithMaxRetries
        >>> from rehttp.retry import AsyncRetryExecutor
        >>> async def main():
        ...     async with httpx.AsyncClient() as client:
        ...         executor = AsyncRetryExecutor(client.send)
        ...         return await executor.execute(
        ...             httpx.Request("GET", "https://api.example.com/data"),
        ...             backoff=WithMaxRetries(ConstantBackOff(1.0), max_retries=3),
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        send: Callable[[httpx.Request], Awaitable[httpx.Response]],
        logger: Logger | None = None,
    ) -> None:
        self.send = send
        self.logger: Logger = resolve_logger(logger, __name__)

    async def execute(
        self,
        request: httpx.Request,
        backoff: BackOff,
        retry_func: RetryFunc = default_retry_func,
    ) -> httpx.Response:
        """Send the request until it succeeds or the backoff policy
        stops.

        The semantics are the same as ``RetryExecutor.execute``. There is
        no cancellation argument: cancel the task running this coroutine
        to abort the in-flight attempt or the wait between attempts.

        Args:
            request: The request to send.
            backoff: The backoff policy. It is reset before the first
                attempt.
            retry_func: Predicate returning ``True`` if a response must
                be retried.

        Returns:
            The first response accepted by ``retry_func``.

        Raises:
            PermanentBodyError: If the request body cannot be read.
            ResponseRetryExhaustedError: If the backoff policy stopped and
                the last attempt got a rejected response.
            TransportRetryExhaustedError: If the backoff policy stopped and
                the last attempt got no response.
        """
        try:
            body = await RequestBodyBuffer.acapture(request)
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
                attempt += 1
                body.rewind(request)
                error = None
                try:
                    result = await self.send(request)
                except httpx.RequestError as exc:
                    error = exc
                    response = await _replace_response(response, None)
                    emit(self.logger, "error", "request error, err: %s, need a retry", exc)
                else:
                    response = await _replace_response(response, result)
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
                await asyncio.sleep(delay)
        except BaseException:
            # The exhausted error below is the only exit that keeps the response.
            await _replace_response(response, None)
            raise

        logger.debug(
            f"{request.method} request to {request.url} gave up after {attempt} attempts"
        )
        raise create_exhausted_error(request, attempt, response, error) from error


async def _replace_response(
    previous: httpx.Response | None, current: httpx.Response | None
) -> httpx.Response | None:
    if previous is not None and previous is not current:
        await previous.aclose()
    return current
