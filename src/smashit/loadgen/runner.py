from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from smashit.config import RequestConfig
from smashit.loadgen.client import build_client, execute_request
from smashit.metrics import AggregatedStatistics, RequestOutcome, aggregate_outcomes

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    statistics: AggregatedStatistics
    elapsed_sec: float

    @property
    def requests_per_sec(self) -> float:
        if self.elapsed_sec <= 0:
            return 0.0
        return self.statistics.total_requests / self.elapsed_sec


ProgressCallback = Callable[[int, int], Awaitable[None]]


async def run_load_test(
    config: RequestConfig,
    client: httpx.AsyncClient | None = None,
    progress: ProgressCallback | None = None,
) -> RunResult:
    logger.info("Sending %d %s request(s) to %s", config.count, config.method, config.url)
    logger.debug("Run config: %s", config.to_metadata())
    started_mono = time.perf_counter()
    if client is None:
        async with build_client(config) as own_client:
            outcomes = await dispatch(config, own_client, progress)
    else:
        outcomes = await dispatch(config, client, progress)
    elapsed_sec = time.perf_counter() - started_mono
    statistics = aggregate_outcomes(outcomes)
    logger.info(
        "Finished in %.3fs: %d succeeded, %d failed",
        elapsed_sec,
        statistics.success_count,
        statistics.failure_count,
    )
    return RunResult(statistics=statistics, elapsed_sec=elapsed_sec)


async def dispatch(
    config: RequestConfig,
    client: httpx.AsyncClient,
    progress: ProgressCallback | None = None,
) -> list[RequestOutcome]:
    outcomes: list[RequestOutcome] = []
    total = config.count

    async def one() -> None:
        outcome = await execute_request(client, config)
        outcomes.append(outcome)
        if progress:
            await progress(len(outcomes), total)

    tasks = [asyncio.create_task(one()) for _ in range(total)]
    await asyncio.gather(*tasks)
    return outcomes
