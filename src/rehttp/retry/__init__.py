r"""Retry execution engine.

Public API:
    - RequestBodyBuffer: Buffers a request body so it can be replayed
    - RetryFunc: Type of the predicates classifying responses
    - default_retry_func: Retries server errors except 501
    - retry_on_status: Builds a predicate retrying given status codes
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "RequestBodyBuffer",
    "RetryExecutor",
    "RetryFunc",
    "default_retry_func",
    "retry_on_status",
]

from rehttp.retry.body import RequestBodyBuffer
from rehttp.retry.executor import RetryExecutor
from rehttp.retry.executor_async import AsyncRetryExecutor
from rehttp.retry.predicate import RetryFunc, default_retry_func, retry_on_status
