r"""rehttp - HTTP requests retried transparently on transient failures.

This package wraps httpx clients with a retry policy: the request body is
buffered once and replayed on every attempt, a pluggable backoff policy
drives the delays between attempts, and a retry predicate decides whether
a response is final.

Key Features:
    - Transparent retries of server errors (>= 500, except 501)
    - Request bodies replayed byte for byte on every attempt
    - Pluggable backoff policies: exponential, constant, zero, stop, and
      bounded retries
    - Pluggable retry predicates
    - Injectable transport and logger
    - Synchronous and asyncio clients

Example:
    ```pycon
    >>> import httpx
    >>> from rehttp import ResilientClient, default_backoff, retry_on_status
    >>> with ResilientClient() as client:  # doctest: +SKIP
    ...     request = httpx.Request("POST", "https://api.example.com/data", json={"key": "value"})
    ...     response = client.do(request)
    ...     response = client.do_with_retry_func(
    ...         request, default_backoff(), retry_on_status(503)
    ...     )
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRY",
    "AsyncResilientClient",
    "BackOff",
    "ClientConfig",
    "HttpRequestError",
    "Logger",
    "PermanentBodyError",
    "RequestCancelledError",
    "ResilientClient",
    "ResponseRetryExhaustedError",
    "RetryExhaustedError",
    "RetryFunc",
    "TransportRetryExhaustedError",
    "__version__",
    "default_backoff",
    "default_retry_func",
    "retry_on_status",
]

from importlib.metadata import PackageNotFoundError, version

from rehttp.backoff import BackOff
from rehttp.client import ResilientClient
from rehttp.client_async import AsyncResilientClient
from rehttp.config import DEFAULT_MAX_RETRY, ClientConfig, default_backoff
from rehttp.exceptions import (
    HttpRequestError,
    PermanentBodyError,
    RequestCancelledError,
    ResponseRetryExhaustedError,
    RetryExhaustedError,
    TransportRetryExhaustedError,
)
from rehttp.log import Logger
from rehttp.retry import RetryFunc, default_retry_func, retry_on_status

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
