from __future__ import annotations

import logging
import time

import httpx

from smashit.config import RequestConfig
from smashit.metrics import ErrorType, Failure, RequestOutcome, Success

logger = logging.getLogger(__name__)


def build_client(config: RequestConfig) -> httpx.AsyncClient:
    # no pool caps: every dispatched request may hold its own connection
    limits = httpx.Limits(max_connections=None, max_keepalive_connections=None)
    if config.timeout_sec is None:
        return httpx.AsyncClient(limits=limits)
    return httpx.AsyncClient(limits=limits, timeout=config.timeout_sec)


async def execute_request(client: httpx.AsyncClient, config: RequestConfig) -> RequestOutcome:
    start_mono = time.perf_counter()
    try:
        request = client.build_request(
            config.method,
            config.url,
            headers=config.headers,
            content=config.body,
        )
    except (httpx.InvalidURL, ValueError) as exc:
        logger.debug("%s %s could not be built: %s", config.method, config.url, exc)
        return Failure(status_code=None, error_type=ErrorType.OTHER)
    try:
        resp = await client.send(request, stream=True)
    except httpx.HTTPError as exc:
        err = _classify(exc)
        logger.debug("%s %s failed before a response: %s (%s)", config.method, config.url, err.value, exc)
        return Failure(status_code=None, error_type=err)

    try:
        latency_ms = (time.perf_counter() - start_mono) * 1000.0
        if not resp.is_success:
            logger.debug("%s %s returned %d", config.method, config.url, resp.status_code)
            return Failure(status_code=resp.status_code, error_type=ErrorType.STATUS)
        try:
            body = await resp.aread()
        except httpx.HTTPError as exc:
            logger.debug("%s %s body read failed after %d: %s", config.method, config.url, resp.status_code, exc)
            return Failure(status_code=resp.status_code, error_type=ErrorType.READ)
        total_ms = (time.perf_counter() - start_mono) * 1000.0
        return Success(
            status_code=resp.status_code,
            latency_ms=latency_ms,
            total_ms=total_ms,
            response_size=len(body),
        )
    finally:
        await resp.aclose()


def _classify(exc: httpx.HTTPError) -> ErrorType:
    if isinstance(exc, httpx.TimeoutException):
        return ErrorType.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorType.CONNECT
    if isinstance(exc, httpx.ReadError):
        return ErrorType.READ
    return ErrorType.OTHER
