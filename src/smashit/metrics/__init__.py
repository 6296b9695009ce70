from __future__ import annotations

from smashit.metrics.aggregator import aggregate_outcomes
from smashit.metrics.histogram import LatencyHistogram
from smashit.metrics.models import (
    AggregatedStatistics,
    ErrorType,
    Failure,
    LatencySummary,
    RequestOutcome,
    Success,
)

__all__ = [
    "AggregatedStatistics",
    "ErrorType",
    "Failure",
    "LatencyHistogram",
    "LatencySummary",
    "RequestOutcome",
    "Success",
    "aggregate_outcomes",
]
