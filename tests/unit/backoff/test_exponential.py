r"""Unit tests for ExponentialBackOff policy."""

from __future__ import annotations

import random
from unittest.mock import Mock

import pytest

from rehttp.backoff import STOP, ExponentialBackOff


def create_backoff(**kwargs) -> ExponentialBackOff:
    params = {
        "initial_interval": 1.0,
        "randomization_factor": 0.0,
        "multiplier": 2.0,
        "max_interval": 60.0,
        "max_elapsed_time": None,
    }
    params.update(kwargs)
    return ExponentialBackOff(**params)


def test_exponential_backoff_sequence() -> None:
    """Test the delays double until they reach max_interval."""
    backoff = create_backoff()
    assert [backoff.next_backoff() for _ in range(10)] == [
        1.0,
        2.0,
        4.0,
        8.0,
        16.0,
        32.0,
        60.0,
        60.0,
        60.0,
        60.0,
    ]


def test_exponential_backoff_never_stops_without_max_elapsed_time() -> None:
    backoff = create_backoff()
    for _ in range(100):
        assert backoff.next_backoff() is not STOP


def test_exponential_backoff_reset() -> None:
    """Test reset restores the initial interval."""
    backoff = create_backoff()
    backoff.next_backoff()
    backoff.next_backoff()
    assert backoff.current_interval == 4.0
    backoff.reset()
    assert backoff.current_interval == 1.0
    assert backoff.next_backoff() == 1.0


def test_exponential_backoff_default_values() -> None:
    backoff = ExponentialBackOff()
    assert backoff.initial_interval == 0.5
    assert backoff.randomization_factor == 0.5
    assert backoff.multiplier == 1.5
    assert backoff.max_interval == 60.0
    assert backoff.max_elapsed_time == 900.0


@pytest.mark.parametrize("seed", range(5))
def test_exponential_backoff_randomization_bounds(seed: int) -> None:
    """Test randomized delays stay within the randomization window."""
    random.seed(seed)
    backoff = create_backoff(randomization_factor=0.5)
    intervals = [1.0, 2.0, 4.0, 8.0]
    for interval in intervals:
        delay = backoff.next_backoff()
        assert 0.5 * interval <= delay <= 1.5 * interval


def test_exponential_backoff_max_elapsed_time_stops() -> None:
    """Test the policy stops once the elapsed time budget is
    exceeded."""
    clock = Mock(return_value=0.0)
    backoff = create_backoff(max_elapsed_time=10.0, clock=clock)
    assert backoff.next_backoff() == 1.0
    clock.return_value = 5.0
    assert backoff.next_backoff() == 2.0
    clock.return_value = 9.0
    # 9 elapsed + 4 delay > 10
    assert backoff.next_backoff() is STOP


def test_exponential_backoff_reset_restarts_elapsed_time() -> None:
    clock = Mock(return_value=0.0)
    backoff = create_backoff(max_elapsed_time=10.0, clock=clock)
    clock.return_value = 20.0
    assert backoff.elapsed_time() == 20.0
    assert backoff.next_backoff() is STOP
    backoff.reset()
    assert backoff.elapsed_time() == 0.0
    assert backoff.next_backoff() == 1.0


def test_exponential_backoff_zero_initial_interval() -> None:
    backoff = create_backoff(initial_interval=0.0)
    assert backoff.next_backoff() == 0.0
    assert backoff.next_backoff() == 0.0


def test_exponential_backoff_invalid_initial_interval() -> None:
    with pytest.raises(ValueError, match=r"initial_interval must be >= 0"):
        create_backoff(initial_interval=-1.0)


def test_exponential_backoff_invalid_multiplier() -> None:
    with pytest.raises(ValueError, match=r"multiplier must be >= 1"):
        create_backoff(multiplier=0.5)


def test_exponential_backoff_invalid_max_interval() -> None:
    with pytest.raises(ValueError, match=r"max_interval must be >= initial_interval"):
        create_backoff(initial_interval=10.0, max_interval=5.0)


def test_exponential_backoff_invalid_randomization_factor() -> None:
    with pytest.raises(ValueError, match=r"randomization_factor must be in \[0, 1\]"):
        create_backoff(randomization_factor=1.5)


def test_exponential_backoff_invalid_max_elapsed_time() -> None:
    with pytest.raises(ValueError, match=r"max_elapsed_time must be > 0"):
        create_backoff(max_elapsed_time=0)


def test_exponential_backoff_repr() -> None:
    assert repr(create_backoff()).startswith("ExponentialBackOff(initial_interval=1.0")
