r"""Exceptions raised by the retry client.

Every error surfaced to the caller derives from ``HttpRequestError``. A
request either returns a usable ``httpx.Response`` or raises one of these
errors; it never does both.
"""

from __future__ import annotations

__all__ = [
    "HttpRequestError",
    "PermanentBodyError",
    "RequestCancelledError",
    "ResponseRetryExhaustedError",
    "RetryExhaustedError",
    "TransportRetryExhaustedError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HttpRequestError(Exception):
    """Base exception for failed HTTP requests.

    Args:
        method: The HTTP method of the failed request (e.g. ``"GET"``).
        url: The URL of the failed request.
        message: A human readable description of the failure.
        status_code: The HTTP status code of the last response, if any.
        response: The last response, if any. It is attached as context
            only: the caller never receives it as a successful result.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from rehttp.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="GET request to https://api.example.com/data failed",
        ...     status_code=503,
        ... )
        >>> error.status_code
        503

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code!r})"
        )


class PermanentBodyError(HttpRequestError):
    """Raised when the request body cannot be buffered.

    Retrying cannot fix a body that cannot be read, so this error is
    raised before any attempt is made and is never retried.
    """


class RequestCancelledError(HttpRequestError):
    """Raised when the caller cancels a request between attempts."""


class RetryExhaustedError(HttpRequestError):
    """Raised when the backoff policy stops before the request
    succeeded.

    The other arguments are the ones of ``HttpRequestError``.

    Args:
        attempts: The number of attempts that were made.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
        *,
        attempts: int,
    ) -> None:
        super().__init__(
            method=method,
            url=url,
            message=message,
            status_code=status_code,
            response=response,
            cause=cause,
        )
        self.attempts = attempts


class ResponseRetryExhaustedError(RetryExhaustedError):
    """Raised when the last attempt obtained a response that the retry
    predicate still rejected."""


class TransportRetryExhaustedError(RetryExhaustedError):
    """Raised when the last attempt failed before any response was
    received."""
