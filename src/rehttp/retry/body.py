r"""Request body buffering so a body can be replayed on every attempt.

The transport consumes the request stream on each send. The body is
therefore read once into memory before the first attempt, and a fresh
stream over those bytes is installed before every attempt.
"""

from __future__ import annotations

__all__ = ["RequestBodyBuffer", "has_request_body"]

import logging

import httpx

from rehttp.exceptions import PermanentBodyError

logger: logging.Logger = logging.getLogger(__name__)


def has_request_body(request: httpx.Request) -> bool:
    """Indicate if the request carries a body.

    httpx sets ``Content-Length`` or ``Transfer-Encoding`` whenever a
    request is built with content. A ``Content-Length`` of zero is
    treated as no body.

    Args:
        request: The request to inspect.

    Returns:
        ``True`` if the request has a body to buffer, otherwise ``False``.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.retry.body import has_request_body
        >>> has_request_body(httpx.Request("GET", "https://api.example.com"))
        False
        >>> has_request_body(httpx.Request("POST", "https://api.example.com", content=b"data"))
        True

        ```
    """
    if "Transfer-Encoding" in request.headers:
        return True
    content_length = request.headers.get("Content-Length")
    return content_length is not None and content_length.strip() != "0"


class RequestBodyBuffer:
    """In-memory copy of a request body, replayable on every attempt.

    A buffer is private to a single request execution and is never
    shared between concurrent executions.

    Args:
        body: The buffered bytes, or ``None`` for a bodyless request.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.retry import RequestBodyBuffer
        >>> request = httpx.Request("POST", "https://api.example.com", content=iter([b"a", b"b"]))
        >>> buffer = RequestBodyBuffer.capture(request)
        >>> buffer.body
        b'ab'
        >>> buffer.rewind(request)
        >>> b"".join(request.stream)
        b'ab'

        ```
    """

    def __init__(self, body: bytes | None = None) -> None:
        self.body = body

    def __repr__(self) -> str:
        size = None if self.body is None else len(self.body)
        return f"{self.__class__.__qualname__}(size={size})"

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @classmethod
    def capture(cls, request: httpx.Request) -> RequestBodyBuffer:
        """Read the request body once and close the original stream.

        Args:
            request: The request whose body is buffered.

        Returns:
            The buffer. It is empty if the request has no body.

        Raises:
            PermanentBodyError: If the body cannot be read.
        """
        if not has_request_body(request):
            return cls()
        stream = request.stream
        try:
            body = request.read()
        except Exception as exc:
            raise _body_error(request, exc) from exc
        finally:
            if isinstance(stream, httpx.SyncByteStream):
                stream.close()
        return cls(body)

    @classmethod
    async def acapture(cls, request: httpx.Request) -> RequestBodyBuffer:
        """Read the request body once and close the original stream,
        asynchronously.

        Args:
            request: The request whose body is buffered.

        Returns:
            The buffer. It is empty if the request has no body.

        Raises:
            PermanentBodyError: If the body cannot be read.
        """
        if not has_request_body(request):
            return cls()
        stream = request.stream
        try:
            body = await request.aread()
        except Exception as exc:
            raise _body_error(request, exc) from exc
        finally:
            if isinstance(stream, httpx.AsyncByteStream):
                await stream.aclose()
        return cls(body)

    def rewind(self, request: httpx.Request) -> None:
        """Install a fresh stream over the buffered bytes.

        This is a no-op for a bodyless request.

        Args:
            request: The request about to be sent.
        """
        if self.body is not None:
            request.stream = httpx.ByteStream(self.body)


def _body_error(request: httpx.Request, exc: Exception) -> PermanentBodyError:
    method, url = request.method, str(request.url)
    logger.debug(f"Failed to read the body of {method} request to {url}: {exc}")
    return PermanentBodyError(
        method=method,
        url=url,
        message=f"failed to read the body of {method} request to {url}: {exc}",
        cause=exc,
    )
