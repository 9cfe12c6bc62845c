r"""Parameter validation utilities for backoff policies and retry
configuration.

This module provides validation functions to ensure parameters meet the
required constraints before they are used by the retry logic.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_max_retry"]


def validate_max_retry(max_retry: int) -> None:
    """Validate the maximum number of retries.

    Args:
        max_retry: Maximum number of retries. Must be >= 0. A value of 0
            means only the initial attempt is made.

    Raises:
        ValueError: If ``max_retry`` is negative.
    """
    if max_retry < 0:
        msg = f"max_retry must be >= 0, got {max_retry}"
        raise ValueError(msg)


def validate_backoff_params(
    initial_interval: float,
    multiplier: float,
    max_interval: float,
    randomization_factor: float = 0.0,
    max_elapsed_time: float | None = None,
) -> None:
    """Validate exponential backoff parameters.

    Args:
        initial_interval: First delay in seconds. Must be >= 0.
        multiplier: Growth factor between delays. Must be >= 1.
        max_interval: Cap for a single delay. Must be >= ``initial_interval``.
        randomization_factor: Jitter ratio. Must be in ``[0, 1]``.
        max_elapsed_time: Optional total time budget in seconds.
            Must be > 0 if provided.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from rehttp.validation import validate_backoff_params
        >>> validate_backoff_params(initial_interval=1.0, multiplier=2.0, max_interval=60.0)
        >>> validate_backoff_params(
        ...     initial_interval=1.0, multiplier=0.5, max_interval=60.0
        ... )  # doctest: +SKIP

        ```
    """
    if initial_interval < 0:
        msg = f"initial_interval must be >= 0, got {initial_interval}"
        raise ValueError(msg)
    if multiplier < 1:
        msg = f"multiplier must be >= 1, got {multiplier}"
        raise ValueError(msg)
    if max_interval < initial_interval:
        msg = (
            f"max_interval must be >= initial_interval, got max_interval={max_interval} "
            f"and initial_interval={initial_interval}"
        )
        raise ValueError(msg)
    if not 0 <= randomization_factor <= 1:
        msg = f"randomization_factor must be in [0, 1], got {randomization_factor}"
        raise ValueError(msg)
    if max_elapsed_time is not None and max_elapsed_time <= 0:
        msg = f"max_elapsed_time must be > 0, got {max_elapsed_time}"
        raise ValueError(msg)
