r"""Asynchronous retry client for HTTP requests.

This module provides AsyncResilientClient, the asyncio counterpart of
ResilientClient built on ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["AsyncResilientClient"]

from typing import TYPE_CHECKING, Any

import httpx

from rehttp.config import ClientConfig, create_default_async_http_client
from rehttp.retry.executor_async import AsyncRetryExecutor

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from rehttp.backoff import BackOff
    from rehttp.log import Logger
    from rehttp.retry.predicate import RetryFunc


class AsyncResilientClient:
    r"""Asynchronous HTTP client retrying transient server failures.

    Cancelling the task awaiting a request aborts the in-flight attempt or
    the wait between attempts.

    Args:
        client: Optional ``httpx.AsyncClient`` used to send requests.
            A client supplied by the caller is never closed by this client.
        logger: Optional logger receiving attempt outcomes.
        config: Optional ClientConfig defining the default policy used by
            ``do``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from rehttp import AsyncResilientClient
        >>> async def main():
        ...     async with AsyncResilientClient() as client:
        ...         return await client.get("https://api.example.com/data")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        logger: Logger | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client: httpx.AsyncClient = (
            client if client is not None else create_default_async_http_client()
        )
        self._config: ClientConfig = config or ClientConfig()
        self._executor = AsyncRetryExecutor(self._client.send, logger=logger)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def logger(self) -> Logger:
        return self._executor.logger

    async def aclose(self) -> None:
        """Close the underlying httpx client if this client created
        it."""
        if self._owns_client:
            await self._client.aclose()
            self._owns_client = False

    def with_logger(self, logger: Logger) -> Self:
        self._executor.logger = logger
        return self

    async def do(self, request: httpx.Request) -> httpx.Response:
        """Send the request with the default backoff policy and retry
        predicate."""
        return await self.do_with_retry_func(
            request, self._config.build_backoff(), self._config.retry_func
        )

    async def do_with_backoff(self, request: httpx.Request, backoff: BackOff) -> httpx.Response:
        """Send the request with the given backoff policy and the
        configured retry predicate."""
        return await self.do_with_retry_func(request, backoff, self._config.retry_func)

    async def do_with_retry_func(
        self, request: httpx.Request, backoff: BackOff, retry_func: RetryFunc
    ) -> httpx.Response:
        """Send the request with the given backoff policy and retry
        predicate.

        Args:
            request: The request to send.
            backoff: The backoff policy.
            retry_func: Predicate returning ``True`` if a response must be
                retried.

        Returns:
            The first response accepted by ``retry_func``.

        Raises:
            HttpRequestError: If the request failed after all retries or
                its body could not be read.
        """
        return await self._executor.execute(request, backoff, retry_func=retry_func)

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Build a request and send it with the default policy.

        Args:
            method: HTTP method.
            url: The URL to send the request to.
            **kwargs: Additional keyword arguments passed to
                ``httpx.AsyncClient.build_request()``.
        """
        return await self.do(self._client.build_request(method, url, **kwargs))

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def head(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("HEAD", url, **kwargs)

    async def options(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("OPTIONS", url, **kwargs)
