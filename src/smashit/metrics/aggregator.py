from __future__ import annotations

from collections import Counter
from typing import Iterable

from smashit.metrics.histogram import LatencyHistogram
from smashit.metrics.models import (
    AggregatedStatistics,
    ErrorType,
    Failure,
    LatencySummary,
    RequestOutcome,
    Success,
)


def aggregate_outcomes(outcomes: Iterable[RequestOutcome]) -> AggregatedStatistics:
    histogram = LatencyHistogram()
    status_counts: Counter[int | None] = Counter()
    error_counts: Counter[ErrorType] = Counter()
    success_count = 0
    failure_count = 0
    bytes_received = 0
    latency_sum = 0.0
    latency_min: float | None = None
    latency_max: float | None = None

    for outcome in outcomes:
        status_counts[outcome.status_code] += 1
        if isinstance(outcome, Success):
            success_count += 1
            bytes_received += outcome.response_size
            # timed through the end of the body read
            elapsed_ms = outcome.total_ms
            histogram.record(elapsed_ms)
            latency_sum += elapsed_ms
            if latency_min is None or elapsed_ms < latency_min:
                latency_min = elapsed_ms
            if latency_max is None or elapsed_ms > latency_max:
                latency_max = elapsed_ms
        elif isinstance(outcome, Failure):
            failure_count += 1
            error_counts[outcome.error_type] += 1
        else:
            msg = f"Unsupported outcome: {outcome!r}"
            raise TypeError(msg)

    if success_count:
        latency = LatencySummary(
            min_ms=latency_min or 0.0,
            avg_ms=latency_sum / success_count,
            max_ms=latency_max or 0.0,
            p50_ms=histogram.percentile(50),
            p75_ms=histogram.percentile(75),
            p90_ms=histogram.percentile(90),
            p99_ms=histogram.percentile(99),
        )
    else:
        latency = LatencySummary()

    return AggregatedStatistics(
        success_count=success_count,
        failure_count=failure_count,
        status_counts=_sorted_status_counts(status_counts),
        latency=latency,
        error_counts=tuple((err, error_counts[err]) for err in ErrorType if error_counts[err]),
        bytes_received=bytes_received,
    )


def _sorted_status_counts(counts: Counter[int | None]) -> tuple[tuple[int | None, int], ...]:
    # ascending by count; equal counts ordered by code with transport errors first
    def key(item: tuple[int | None, int]) -> tuple[int, int, int]:
        code, count = item
        return (count, 0 if code is None else 1, code or 0)

    return tuple(sorted(counts.items(), key=key))
