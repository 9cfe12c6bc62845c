r"""Exponential backoff policy."""

from __future__ import annotations

__all__ = ["ExponentialBackOff"]

import random
import time
from typing import TYPE_CHECKING

from rehttp.backoff.base import STOP, BackOff
from rehttp.validation import validate_backoff_params

if TYPE_CHECKING:
    from collections.abc import Callable


class ExponentialBackOff(BackOff):
    """Exponential backoff policy.

    Each call to ``next_backoff`` returns the current interval, randomized
    into ``[interval * (1 - randomization_factor), interval * (1 +
    randomization_factor)]``, then grows the current interval to
    ``min(interval * multiplier, max_interval)``.

    When ``max_elapsed_time`` is set, the policy returns ``STOP`` once the
    time elapsed since the last ``reset`` plus the next delay exceeds it.
    The elapsed time is measured with ``clock``.

    Args:
        initial_interval: The first delay in seconds (default: 0.5).
        randomization_factor: Jitter ratio in ``[0, 1]`` (default: 0.5).
            Set to 0 to disable jitter.
        multiplier: Growth factor between two delays (default: 1.5).
        max_interval: Cap for a single delay in seconds (default: 60.0).
        max_elapsed_time: Optional total time budget in seconds
            (default: 900.0). ``None`` never stops.
        clock: Function returning the current time in seconds
            (default: ``time.monotonic``).

    Example:
        ```pycon
        >>> from rehttp.backoff import ExponentialBackOff
        >>> backoff = ExponentialBackOff(
        ...     initial_interval=1.0,
        ...     randomization_factor=0.0,
        ...     multiplier=2.0,
        ...     max_interval=5.0,
        ...     max_elapsed_time=None,
        ... )
        >>> [backoff.next_backoff() for _ in range(5)]
        [1.0, 2.0, 4.0, 5.0, 5.0]

        ```
    """

    def __init__(
        self,
        initial_interval: float = 0.5,
        randomization_factor: float = 0.5,
        multiplier: float = 1.5,
        max_interval: float = 60.0,
        max_elapsed_time: float | None = 900.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        validate_backoff_params(
            initial_interval=initial_interval,
            multiplier=multiplier,
            max_interval=max_interval,
            randomization_factor=randomization_factor,
            max_elapsed_time=max_elapsed_time,
        )
        self.initial_interval = initial_interval
        self.randomization_factor = randomization_factor
        self.multiplier = multiplier
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.clock = clock

        self._current_interval = initial_interval
        self._start_time = clock()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial_interval={self.initial_interval}, "
            f"randomization_factor={self.randomization_factor}, "
            f"multiplier={self.multiplier}, max_interval={self.max_interval}, "
            f"max_elapsed_time={self.max_elapsed_time})"
        )

    @property
    def current_interval(self) -> float:
        """The interval the next delay is computed from, before
        randomization."""
        return self._current_interval

    def elapsed_time(self) -> float:
        """Return the time elapsed since the last reset, in seconds."""
        return self.clock() - self._start_time

    def next_backoff(self) -> float | None:
        elapsed = self.elapsed_time()
        delay = self._randomize(self._current_interval)
        self._increment_current_interval()
        if self.max_elapsed_time is not None and elapsed + delay > self.max_elapsed_time:
            return STOP
        return delay

    def reset(self) -> None:
        self._current_interval = self.initial_interval
        self._start_time = self.clock()

    def _increment_current_interval(self) -> None:
        # Compare before multiplying so the interval never overflows past the cap
        if self._current_interval >= self.max_interval / self.multiplier:
            self._current_interval = self.max_interval
        else:
            self._current_interval *= self.multiplier

    def _randomize(self, interval: float) -> float:
        if self.randomization_factor == 0:
            return interval
        delta = self.randomization_factor * interval
        return random.uniform(interval - delta, interval + delta)  # noqa: S311
