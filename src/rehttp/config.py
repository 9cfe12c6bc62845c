r"""Configuration dataclass and defaults for the retry clients.

This module provides the default retry policy constants, the default
httpx client settings, and a dataclass-based configuration object for
ResilientClient and AsyncResilientClient.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_INITIAL_INTERVAL",
    "DEFAULT_KEEPALIVE_EXPIRY",
    "DEFAULT_MAX_INTERVAL",
    "DEFAULT_MAX_KEEPALIVE_CONNECTIONS",
    "DEFAULT_MAX_RETRY",
    "DEFAULT_MULTIPLIER",
    "DEFAULT_RANDOMIZATION_FACTOR",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "create_default_async_http_client",
    "create_default_http_client",
    "default_backoff",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

import httpx

from rehttp.backoff import BackOff, ExponentialBackOff, WithMaxRetries
from rehttp.retry.predicate import default_retry_func
from rehttp.validation import validate_backoff_params, validate_max_retry

if TYPE_CHECKING:
    from rehttp.retry.predicate import RetryFunc

# Default maximum number of retries
# Total attempts = max_retry + 1 (initial attempt)
DEFAULT_MAX_RETRY = 10

# Default exponential backoff: 1s, 2s, 4s, ... capped at 60s, without jitter
DEFAULT_INITIAL_INTERVAL = 1.0
DEFAULT_MULTIPLIER = 2.0
DEFAULT_MAX_INTERVAL = 60.0
DEFAULT_RANDOMIZATION_FACTOR = 0.0

# Default httpx client settings
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 500
DEFAULT_KEEPALIVE_EXPIRY = 10.0

# Fields where None is a valid value rather than "no override"
_NULLABLE_FIELDS = frozenset({"max_elapsed_time"})


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        DEFAULT_TIMEOUT,
        connect=DEFAULT_CONNECT_TIMEOUT,
        read=DEFAULT_CONNECT_TIMEOUT,
    )


def _default_limits() -> httpx.Limits:
    return httpx.Limits(
        max_keepalive_connections=DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
        keepalive_expiry=DEFAULT_KEEPALIVE_EXPIRY,
    )


def create_default_http_client() -> httpx.Client:
    """Create the httpx client used when none is provided.

    Returns:
        An ``httpx.Client`` with a 30s overall timeout, 10s connect and
        read timeouts, and up to 500 keep-alive connections expiring
        after 10s.
    """
    return httpx.Client(timeout=_default_timeout(), limits=_default_limits())


def create_default_async_http_client() -> httpx.AsyncClient:
    """Create the httpx async client used when none is provided."""
    return httpx.AsyncClient(timeout=_default_timeout(), limits=_default_limits())


@dataclass
class ClientConfig:
    """Configuration of the default retry policy of a client.

    The default values reproduce ``default_backoff()`` and
    ``default_retry_func``.

    Args:
        max_retry: Maximum number of retries. Must be >= 0.
        initial_interval: First backoff delay in seconds. Must be >= 0.
        multiplier: Growth factor between delays. Must be >= 1.
        max_interval: Cap for a single delay in seconds.
        randomization_factor: Jitter ratio in ``[0, 1]``.
        max_elapsed_time: Optional total time budget in seconds for all
            the retries of one request. Must be > 0 if provided.
        retry_func: Predicate returning ``True`` if a response must be
            retried.

    Example:
        ```pycon
        >>> from rehttp.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.max_retry
        10
        >>> config = config.merge(max_retry=3)
        >>> config.max_retry
        3

        ```
    """

    max_retry: int = DEFAULT_MAX_RETRY
    initial_interval: float = DEFAULT_INITIAL_INTERVAL
    multiplier: float = DEFAULT_MULTIPLIER
    max_interval: float = DEFAULT_MAX_INTERVAL
    randomization_factor: float = DEFAULT_RANDOMIZATION_FACTOR
    max_elapsed_time: float | None = None
    retry_func: RetryFunc = default_retry_func

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_max_retry(self.max_retry)
        validate_backoff_params(
            initial_interval=self.initial_interval,
            multiplier=self.multiplier,
            max_interval=self.max_interval,
            randomization_factor=self.randomization_factor,
            max_elapsed_time=self.max_elapsed_time,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        A None override is ignored, except for ``max_elapsed_time``
        where None removes the elapsed-time budget.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from rehttp.config import ClientConfig
            >>> config = ClientConfig(max_elapsed_time=300.0)
            >>> config.merge(max_retry=None).max_retry
            10
            >>> config.merge(max_elapsed_time=None).max_elapsed_time is None
            True

            ```
        """
        filtered_overrides = {
            k: v for k, v in overrides.items() if v is not None or k in _NULLABLE_FIELDS
        }
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format.

        Example:
            ```pycon
            >>> from rehttp.config import ClientConfig
            >>> ClientConfig(max_retry=5).to_dict()["max_retry"]
            5

            ```
        """
        return {
            "max_retry": self.max_retry,
            "initial_interval": self.initial_interval,
            "multiplier": self.multiplier,
            "max_interval": self.max_interval,
            "randomization_factor": self.randomization_factor,
            "max_elapsed_time": self.max_elapsed_time,
            "retry_func": self.retry_func,
        }

    def build_backoff(self) -> BackOff:
        """Create a fresh backoff policy from this configuration.

        A new policy is built for every request because a policy holds
        per-request state.

        Returns:
            An exponential backoff policy bounded to ``max_retry``
            retries, already reset.
        """
        backoff = WithMaxRetries(
            ExponentialBackOff(
                initial_interval=self.initial_interval,
                randomization_factor=self.randomization_factor,
                multiplier=self.multiplier,
                max_interval=self.max_interval,
                max_elapsed_time=self.max_elapsed_time,
            ),
            max_retries=self.max_retry,
        )
        backoff.reset()
        return backoff


def default_backoff() -> BackOff:
    """Return the default backoff policy.

    The policy is exponential, starting at 1s, doubling, capped at 60s,
    without jitter or elapsed-time budget, and bounded to
    ``DEFAULT_MAX_RETRY`` retries. An always-failing request is therefore
    attempted 11 times.

    Example:
        ```pycon
        >>> from rehttp.config import default_backoff
        >>> backoff = default_backoff()
        >>> [backoff.next_backoff() for _ in range(11)]
        [1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 60.0, 60.0, 60.0, 60.0, None]

        ```
    """
    return ClientConfig().build_backoff()
