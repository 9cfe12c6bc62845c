r"""Shared test helpers.

This module contains transports and request factories used across
multiple test files.
"""

from __future__ import annotations

__all__ = [
    "TEST_URL",
    "RecordingHandler",
    "create_mock_response",
    "failing_body",
]

from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

TEST_URL = "https://api.example.com/data"


def create_mock_response(status_code: int = 200, reason_phrase: str = "") -> Mock:
    """Create a mock httpx.Response with the given status code."""
    return Mock(spec=httpx.Response, status_code=status_code, reason_phrase=reason_phrase)


def failing_body(exc: Exception) -> Iterator[bytes]:
    """Yield one chunk, then raise ``exc``."""
    yield b"partial"
    raise exc


class RecordingHandler:
    """``httpx.MockTransport`` handler replaying scripted outcomes.

    Each call consumes the next outcome: an int is returned as a response
    with that status code and a body of ``str(status_code)``, an
    exception is raised. The last outcome is repeated once the script is
    exhausted. Every request body received is recorded.

    Args:
        outcomes: The scripted outcomes.
    """

    def __init__(self, outcomes: Sequence[int | Exception]) -> None:
        self.outcomes = list(outcomes)
        self.bodies: list[bytes] = []
        self.methods: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.bodies)

    def _next_outcome(self) -> int | Exception:
        index = min(self.call_count, len(self.outcomes)) - 1
        return self.outcomes[index]

    def _record(self, request: httpx.Request, body: bytes) -> httpx.Response:
        self.bodies.append(body)
        self.methods.append(request.method)
        outcome = self._next_outcome()
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, content=str(outcome).encode())

    def __call__(self, request: httpx.Request) -> httpx.Response:
        return self._record(request, b"".join(request.stream))

    async def handle_async(self, request: httpx.Request) -> httpx.Response:
        body = b"".join([chunk async for chunk in request.stream])
        return self._record(request, body)
