r"""Backoff policy wrapper bounding the number of retries."""

from __future__ import annotations

__all__ = ["WithMaxRetries"]

from rehttp.backoff.base import STOP, BackOff
from rehttp.validation import validate_max_retry


class WithMaxRetries(BackOff):
    """Wrap a backoff policy to stop after ``max_retries`` retries.

    The wrapped policy may still stop earlier on its own (for example when
    its elapsed-time budget is exceeded). With ``max_retries=0`` no retry
    is ever made.

    Args:
        delegate: The backoff policy providing the delays.
        max_retries: Maximum number of retries. Must be >= 0.

    Example:
        ```pycon
        >>> from rehttp.backoff import ConstantBackOff, WithMaxRetries
        >>> backoff = WithMaxRetries(ConstantBackOff(interval=1.0), max_retries=2)
        >>> backoff.next_backoff(), backoff.next_backoff(), backoff.next_backoff()
        (1.0, 1.0, None)
        >>> backoff.reset()
        >>> backoff.next_backoff()
        1.0

        ```
    """

    def __init__(self, delegate: BackOff, max_retries: int) -> None:
        validate_max_retry(max_retries)
        self.delegate = delegate
        self.max_retries = max_retries
        self._num_retries = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(delegate={self.delegate!r}, "
            f"max_retries={self.max_retries})"
        )

    @property
    def num_retries(self) -> int:
        """The number of delays handed out since the last reset."""
        return self._num_retries

    def next_backoff(self) -> float | None:
        if self._num_retries >= self.max_retries:
            return STOP
        self._num_retries += 1
        return self.delegate.next_backoff()

    def reset(self) -> None:
        self._num_retries = 0
        self.delegate.reset()
