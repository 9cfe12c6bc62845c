r"""Retry predicates deciding whether a response warrants another
attempt."""

from __future__ import annotations

__all__ = ["RetryFunc", "default_retry_func", "retry_on_status"]

from collections.abc import Callable

import httpx

RetryFunc = Callable[[httpx.Response], bool]


def default_retry_func(response: httpx.Response) -> bool:
    """Return ``True`` if the response should be retried.

    A response is retried when it carries no status code, or when its
    status code is a server error (>= 500) other than
    ``501 Not Implemented``, which denotes a permanent capability gap.

    Args:
        response: The response to classify. It is not modified.

    Returns:
        ``True`` if another attempt should be made, otherwise ``False``.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.retry import default_retry_func
        >>> default_retry_func(httpx.Response(503))
        True
        >>> default_retry_func(httpx.Response(501))
        False
        >>> default_retry_func(httpx.Response(404))
        False

        ```
    """
    status_code = response.status_code
    if not status_code:
        return True
    return status_code >= 500 and status_code != httpx.codes.NOT_IMPLEMENTED


def retry_on_status(*status_codes: int) -> RetryFunc:
    """Build a predicate retrying only on the given status codes.

    Args:
        *status_codes: The status codes that trigger a retry.

    Returns:
        A retry predicate.

    Raises:
        ValueError: If no status code is given.

    Example:
        ```pycon
        >>> import httpx
        >>> from rehttp.retry import retry_on_status
        >>> retry_func = retry_on_status(503)
        >>> retry_func(httpx.Response(503))
        True
        >>> retry_func(httpx.Response(500))
        False

        ```
    """
    if not status_codes:
        msg = "at least one status code is required"
        raise ValueError(msg)
    codes = frozenset(status_codes)

    def retry_func(response: httpx.Response) -> bool:
        return response.status_code in codes

    return retry_func
