r"""Constant, zero and stop backoff policies."""

from __future__ import annotations

__all__ = ["ConstantBackOff", "StopBackOff", "ZeroBackOff"]

from rehttp.backoff.base import STOP, BackOff


class ConstantBackOff(BackOff):
    """Backoff policy that always waits the same amount of time.

    It never stops by itself; wrap it in ``WithMaxRetries`` to bound the
    number of retries.

    Args:
        interval: The fixed delay in seconds (default: 1.0).

    Example:
        ```pycon
        >>> from rehttp.backoff import ConstantBackOff
        >>> backoff = ConstantBackOff(interval=2.5)
        >>> backoff.next_backoff()
        2.5
        >>> backoff.next_backoff()
        2.5

        ```
    """

    def __init__(self, interval: float = 1.0) -> None:
        if interval < 0:
            msg = f"interval must be non-negative, got {interval}"
            raise ValueError(msg)
        self.interval = interval

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(interval={self.interval})"

    def next_backoff(self) -> float:
        return self.interval

    def reset(self) -> None:
        pass


class ZeroBackOff(ConstantBackOff):
    """Backoff policy that retries immediately, forever.

    Example:
        ```pycon
        >>> from rehttp.backoff import ZeroBackOff
        >>> ZeroBackOff().next_backoff()
        0.0

        ```
    """

    def __init__(self) -> None:
        super().__init__(interval=0.0)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"


class StopBackOff(BackOff):
    """Backoff policy that never retries.

    Example:
        ```pycon
        >>> from rehttp.backoff import StopBackOff
        >>> StopBackOff().next_backoff() is None
        True

        ```
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"

    def next_backoff(self) -> float | None:
        return STOP

    def reset(self) -> None:
        pass
