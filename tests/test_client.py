from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable

import httpx

from smashit.config import RequestConfig
from smashit.loadgen.client import build_client, execute_request
from smashit.metrics import ErrorType, Failure, RequestOutcome, Success

URL = "http://target.test/ping"


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b"partial"
        raise httpx.ReadError("connection reset")


def _execute(handler: Callable[[httpx.Request], httpx.Response], config: RequestConfig) -> RequestOutcome:
    async def go() -> RequestOutcome:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await execute_request(client, config)

    return asyncio.run(go())


def test_success_measures_body() -> None:
    outcome = _execute(lambda request: httpx.Response(200, content=b"hello"), RequestConfig(url=URL))
    assert isinstance(outcome, Success)
    assert outcome.status_code == 200
    assert outcome.response_size == 5
    assert 0.0 <= outcome.latency_ms <= outcome.total_ms


def test_request_carries_method_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    config = RequestConfig(url=URL, method="post", headers={"X-Token": "abc"}, body="payload")
    outcome = _execute(handler, config)
    assert isinstance(outcome, Success)
    assert outcome.status_code == 201
    assert outcome.response_size == 0
    (request,) = seen
    assert request.method == "POST"
    assert request.headers["X-Token"] == "abc"
    assert request.content == b"payload"


def test_non_2xx_is_failure_with_status() -> None:
    outcome = _execute(lambda request: httpx.Response(503, content=b"busy"), RequestConfig(url=URL))
    assert outcome == Failure(status_code=503, error_type=ErrorType.STATUS)


def test_redirect_is_not_success() -> None:
    outcome = _execute(
        lambda request: httpx.Response(302, headers={"Location": "/elsewhere"}),
        RequestConfig(url=URL),
    )
    assert outcome == Failure(status_code=302, error_type=ErrorType.STATUS)


def test_body_read_failure_keeps_status() -> None:
    outcome = _execute(lambda request: httpx.Response(200, stream=_BrokenStream()), RequestConfig(url=URL))
    assert outcome == Failure(status_code=200, error_type=ErrorType.READ)


def test_transport_errors_have_no_status() -> None:
    cases = [
        (httpx.ConnectError("refused"), ErrorType.CONNECT),
        (httpx.ConnectTimeout("slow"), ErrorType.TIMEOUT),
        (httpx.ReadTimeout("slow"), ErrorType.TIMEOUT),
        (httpx.RemoteProtocolError("garbage"), ErrorType.OTHER),
    ]
    for exc, expected in cases:

        def handler(request: httpx.Request, exc: Exception = exc) -> httpx.Response:
            raise exc

        outcome = _execute(handler, RequestConfig(url=URL))
        assert outcome == Failure(status_code=None, error_type=expected)


def test_build_client_applies_timeout() -> None:
    async def go() -> None:
        async with build_client(RequestConfig(url=URL, timeout_sec=2.5)) as client:
            assert client.timeout.connect == 2.5
            assert client.timeout.read == 2.5
        async with build_client(RequestConfig(url=URL)) as client:
            assert client.timeout == httpx.Timeout(5.0)

    asyncio.run(go())


def test_non_2xx_body_is_never_read() -> None:
    outcome = _execute(lambda request: httpx.Response(500, stream=_BrokenStream()), RequestConfig(url=URL))
    assert outcome == Failure(status_code=500, error_type=ErrorType.STATUS)


def test_unbuildable_request_is_failure() -> None:
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200)

    config = RequestConfig(url=URL)
    # bypass validation to reach the transport layer with a header httpx cannot encode
    object.__setattr__(config, "headers", {"X-Name": "café"})
    outcome = _execute(handler, config)
    assert outcome == Failure(status_code=None, error_type=ErrorType.OTHER)
    assert sent == []


def test_total_time_includes_slow_body() -> None:
    class _SlowStream(httpx.AsyncByteStream):
        async def __aiter__(self) -> AsyncIterator[bytes]:
            await asyncio.sleep(0.05)
            yield b"0123456789"

    outcome = _execute(lambda request: httpx.Response(200, stream=_SlowStream()), RequestConfig(url=URL))
    assert isinstance(outcome, Success)
    assert outcome.response_size == 10
    assert outcome.total_ms >= 40.0
    assert outcome.total_ms > outcome.latency_ms
