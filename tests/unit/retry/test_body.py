r"""Unit tests for request body buffering."""

from __future__ import annotations

import httpx
import pytest

from rehttp.exceptions import PermanentBodyError
from rehttp.retry import RequestBodyBuffer
from rehttp.retry.body import has_request_body
from tests.helpers import TEST_URL, failing_body


async def _async_body(*chunks: bytes):
    for chunk in chunks:
        yield chunk


async def _failing_async_body(exc: Exception):
    yield b"partial"
    raise exc


######################################
#     Tests for has_request_body     #
######################################


@pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE", "OPTIONS", "POST", "PUT"])
def test_has_request_body_without_content(method: str) -> None:
    assert not has_request_body(httpx.Request(method, TEST_URL))


def test_has_request_body_with_bytes() -> None:
    assert has_request_body(httpx.Request("POST", TEST_URL, content=b"data"))


def test_has_request_body_with_json() -> None:
    assert has_request_body(httpx.Request("POST", TEST_URL, json={"key": "value"}))


def test_has_request_body_with_stream() -> None:
    assert has_request_body(httpx.Request("POST", TEST_URL, content=iter([b"a", b"b"])))


########################################
#     Tests for RequestBodyBuffer     #
########################################


def test_capture_bodyless_request() -> None:
    request = httpx.Request("GET", TEST_URL)
    stream = request.stream
    buffer = RequestBodyBuffer.capture(request)
    assert not buffer.has_body
    assert buffer.body is None
    buffer.rewind(request)
    assert request.stream is stream


def test_capture_bytes_body() -> None:
    request = httpx.Request("POST", TEST_URL, content=b"hello")
    buffer = RequestBodyBuffer.capture(request)
    assert buffer.has_body
    assert buffer.body == b"hello"


def test_capture_stream_body_replays_every_rewind() -> None:
    """Test a one-shot stream body can be replayed many times."""
    request = httpx.Request("POST", TEST_URL, content=(chunk for chunk in [b"hel", b"lo"]))
    buffer = RequestBodyBuffer.capture(request)
    for _ in range(3):
        buffer.rewind(request)
        assert b"".join(request.stream) == b"hello"


def test_capture_read_error_is_permanent() -> None:
    exc = OSError("disk failure")
    request = httpx.Request("PUT", TEST_URL, content=failing_body(exc))
    with pytest.raises(PermanentBodyError, match=r"failed to read the body of PUT request") as exc_info:
        RequestBodyBuffer.capture(request)
    assert exc_info.value.__cause__ is exc
    assert exc_info.value.cause is exc
    assert exc_info.value.method == "PUT"
    assert exc_info.value.url == TEST_URL


def test_capture_consumed_stream_is_permanent() -> None:
    request = httpx.Request("POST", TEST_URL, content=(chunk for chunk in [b"data"]))
    b"".join(request.stream)
    with pytest.raises(PermanentBodyError):
        RequestBodyBuffer.capture(request)


def test_rewind_installs_fresh_stream() -> None:
    request = httpx.Request("POST", TEST_URL, content=b"data")
    buffer = RequestBodyBuffer.capture(request)
    buffer.rewind(request)
    first = request.stream
    buffer.rewind(request)
    assert request.stream is not first
    assert isinstance(request.stream, httpx.ByteStream)


def test_buffer_repr() -> None:
    assert repr(RequestBodyBuffer(b"abc")) == "RequestBodyBuffer(size=3)"
    assert repr(RequestBodyBuffer()) == "RequestBodyBuffer(size=None)"


@pytest.mark.asyncio
async def test_acapture_stream_body() -> None:
    request = httpx.Request("POST", TEST_URL, content=_async_body(b"hel", b"lo"))
    buffer = await RequestBodyBuffer.acapture(request)
    assert buffer.body == b"hello"
    for _ in range(2):
        buffer.rewind(request)
        assert b"".join([chunk async for chunk in request.stream]) == b"hello"


@pytest.mark.asyncio
async def test_acapture_bodyless_request() -> None:
    buffer = await RequestBodyBuffer.acapture(httpx.Request("GET", TEST_URL))
    assert not buffer.has_body


@pytest.mark.asyncio
async def test_acapture_read_error_is_permanent() -> None:
    exc = OSError("connection reset")
    request = httpx.Request("POST", TEST_URL, content=_failing_async_body(exc))
    with pytest.raises(PermanentBodyError) as exc_info:
        await RequestBodyBuffer.acapture(request)
    assert exc_info.value.__cause__ is exc
