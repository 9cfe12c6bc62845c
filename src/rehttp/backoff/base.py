r"""Abstract base class for backoff policies."""

from __future__ import annotations

__all__ = ["STOP", "BackOff"]

from abc import ABC, abstractmethod

# Value returned by ``BackOff.next_backoff`` when no more retries must be made
STOP = None


class BackOff(ABC):
    """Abstract base class for backoff policies.

    A backoff policy is a stateful sequence generator: each call to
    ``next_backoff`` returns how long to wait before the next retry, or
    ``STOP`` when the retry budget is exhausted. ``reset`` brings the
    policy back to its initial state.

    A policy instance holds per-request state, so it must not be shared
    between concurrent requests.
    """

    @abstractmethod
    def next_backoff(self) -> float | None:
        """Return the delay before the next retry.

        Returns:
            The delay in seconds, or ``STOP`` (``None``) if no more
            retries must be made.
        """

    @abstractmethod
    def reset(self) -> None:
        """Reset the policy to its initial state."""
