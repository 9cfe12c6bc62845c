r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
asynchronous retry executors to describe requests and build the errors
raised when a request cannot be completed.
"""

from __future__ import annotations

__all__ = [
    "create_cancelled_error",
    "create_exhausted_error",
    "describe_response",
]

from typing import TYPE_CHECKING

from rehttp.exceptions import (
    RequestCancelledError,
    ResponseRetryExhaustedError,
    RetryExhaustedError,
    TransportRetryExhaustedError,
)

if TYPE_CHECKING:
    import httpx


def describe_response(response: httpx.Response) -> str:
    """Return a short description of a response for log messages.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.retry.executor_core import describe_response
        >>> describe_response(httpx.Response(503))
        '503 Service Unavailable'

        ```
    """
    return f"{response.status_code} {response.reason_phrase}".strip()


def create_exhausted_error(
    request: httpx.Request,
    attempts: int,
    response: httpx.Response | None,
    exc: Exception | None,
) -> RetryExhaustedError:
    """Create the error raised when the backoff policy stops retrying.

    The error type tells whether the last attempt got a response that
    was still rejected, or failed before any response was received.

    Args:
        request: The request that was retried.
        attempts: The number of attempts made.
        response: The response of the last attempt, if any.
        exc: The transport error of the last attempt, if any.

    Returns:
        A ``ResponseRetryExhaustedError`` if the last attempt produced a
        response, otherwise a ``TransportRetryExhaustedError``.
    """
    method, url = request.method, str(request.url)
    if response is not None:
        return ResponseRetryExhaustedError(
            method=method,
            url=url,
            message=(
                f"{method} request to {url} failed with status {response.status_code} "
                f"after {attempts} attempts"
            ),
            status_code=response.status_code,
            response=response,
            attempts=attempts,
        )
    return TransportRetryExhaustedError(
        method=method,
        url=url,
        message=f"{method} request to {url} failed after {attempts} attempts: {exc}",
        cause=exc,
        attempts=attempts,
    )


def create_cancelled_error(request: httpx.Request, attempts: int) -> RequestCancelledError:
    """Create the error raised when the caller cancels a request."""
    method, url = request.method, str(request.url)
    return RequestCancelledError(
        method=method,
        url=url,
        message=f"{method} request to {url} was cancelled after {attempts} attempts",
    )
