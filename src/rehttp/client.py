r"""Synchronous retry client for HTTP requests.

This module provides ResilientClient, the public entry point wrapping an
``httpx.Client`` with a retry policy. It offers three layered ways of
sending a prepared ``httpx.Request`` (``do``, ``do_with_backoff`` and
``do_with_retry_func``), each defaulting more of the policy, plus
convenience methods building the request for you.
"""

from __future__ import annotations

__all__ = ["ResilientClient"]

from typing import TYPE_CHECKING, Any

import httpx

from rehttp.config import ClientConfig, create_default_http_client
from rehttp.retry.executor import RetryExecutor

if TYPE_CHECKING:
    import threading
    from types import TracebackType
    from typing import Self

    from rehttp.backoff import BackOff
    from rehttp.log import Logger
    from rehttp.retry.predicate import RetryFunc


class ResilientClient:
    r"""Synchronous HTTP client retrying transient server failures.

    The underlying ``httpx.Client`` is the transport and is shared by all
    requests; each request gets its own body buffer and backoff state, so
    a single ResilientClient can be used from several threads.

    If ``client`` is omitted, a client with the default timeouts and
    connection limits is created and closed when the ResilientClient is
    closed. A client supplied by the caller is never closed by the
    ResilientClient.

    Args:
        client: Optional ``httpx.Client`` used to send requests.
        logger: Optional logger receiving attempt outcomes. Defaults to
            the ``rehttp`` module logger.
        config: Optional ClientConfig defining the default policy used by
            ``do``. Defaults to ``ClientConfig()``.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp import ResilientClient
        >>> with ResilientClient() as client:  # doctest: +SKIP
        ...     response = client.do(httpx.Request("GET", "https://api.example.com/data"))
        ...     response = client.post("https://api.example.com/data", json={"key": "value"})
        ...

        ```
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        logger: Logger | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client: httpx.Client = (
            client if client is not None else create_default_http_client()
        )
        self._config: ClientConfig = config or ClientConfig()
        self._executor = RetryExecutor(self._client.send, logger=logger)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def logger(self) -> Logger:
        return self._executor.logger

    def close(self) -> None:
        """Close the underlying httpx client if this client created
        it."""
        if self._owns_client:
            self._client.close()
            self._owns_client = False

    def with_logger(self, logger: Logger) -> Self:
        """Use ``logger`` instead of the current logger.

        Args:
            logger: The logger receiving attempt outcomes.

        Returns:
            This client, to allow chaining.
        """
        self._executor.logger = logger
        return self

    def do(
        self, request: httpx.Request, cancel_event: threading.Event | None = None
    ) -> httpx.Response:
        """Send the request with the default backoff policy and retry
        predicate.

        The default policy is built from the client config; with the
        default config it is ``default_backoff()`` and
        ``default_retry_func``.

        Args:
            request: The request to send.
            cancel_event: Optional event aborting the request.

        Returns:
            The first response accepted by the retry predicate.

        Raises:
            HttpRequestError: If the request failed after all retries,
                its body could not be read, or it was cancelled.
        """
        return self.do_with_retry_func(
            request,
            self._config.build_backoff(),
            self._config.retry_func,
            cancel_event=cancel_event,
        )

    def do_with_backoff(
        self,
        request: httpx.Request,
        backoff: BackOff,
        cancel_event: threading.Event | None = None,
    ) -> httpx.Response:
        """Send the request with the given backoff policy.

        Responses are classified by the configured retry predicate,
        ``default_retry_func`` unless the config says otherwise: server
        errors are retried, except ``501 Not Implemented``.

        Args:
            request: The request to send.
            backoff: The backoff policy. It must not be shared with a
                concurrent request.
            cancel_event: Optional event aborting the request.

        Returns:
            The first response accepted by the retry predicate.
        """
        return self.do_with_retry_func(
            request, backoff, self._config.retry_func, cancel_event=cancel_event
        )

    def do_with_retry_func(
        self,
        request: httpx.Request,
        backoff: BackOff,
        retry_func: RetryFunc,
        cancel_event: threading.Event | None = None,
    ) -> httpx.Response:
        """Send the request with the given backoff policy and retry
        predicate.

        Args:
            request: The request to send.
            backoff: The backoff policy.
            retry_func: Predicate returning ``True`` if a response must be
                retried.
            cancel_event: Optional event aborting the request.

        Returns:
            The first response accepted by ``retry_func``.
        """
        return self._executor.execute(
            request, backoff, retry_func=retry_func, cancel_event=cancel_event
        )

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        r"""Build a request and send it with the default policy.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS, etc.).
            url: The URL to send the request to.
            **kwargs: Additional keyword arguments passed to
                ``httpx.Client.build_request()`` (``content``, ``json``,
                ``headers``, ``params``, ...).

        Returns:
            The first response accepted by the retry predicate.
        """
        return self.do(self._client.build_request(method, url, **kwargs))

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request with the default policy."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request with the default policy."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a PUT request with the default policy."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a PATCH request with the default policy."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a DELETE request with the default policy."""
        return self.request("DELETE", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a HEAD request with the default policy."""
        return self.request("HEAD", url, **kwargs)

    def options(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send an OPTIONS request with the default policy."""
        return self.request("OPTIONS", url, **kwargs)
