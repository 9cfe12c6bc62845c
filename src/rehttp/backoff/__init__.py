r"""Backoff policies driving the delay between retries.

This package provides the ``BackOff`` capability consumed by the retry
executor and its implementations: exponential, constant, zero and stop
policies, plus a wrapper bounding the number of retries.
"""

from __future__ import annotations

__all__ = [
    "STOP",
    "BackOff",
    "ConstantBackOff",
    "ExponentialBackOff",
    "StopBackOff",
    "WithMaxRetries",
    "ZeroBackOff",
]

from rehttp.backoff.base import STOP, BackOff
from rehttp.backoff.constant import ConstantBackOff, StopBackOff, ZeroBackOff
from rehttp.backoff.exponential import ExponentialBackOff
from rehttp.backoff.max_retries import WithMaxRetries
