from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ErrorType(str, Enum):
    TIMEOUT = "timeout"
    CONNECT = "connect"
    READ = "read"
    STATUS = "status"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Success:
    status_code: int
    latency_ms: float
    total_ms: float
    response_size: int


@dataclass(frozen=True, slots=True)
class Failure:
    # None when no response was received at all
    status_code: int | None
    error_type: ErrorType


RequestOutcome = Union[Success, Failure]


@dataclass(frozen=True, slots=True)
class LatencySummary:
    min_ms: float = 0.0
    avg_ms: float = 0.0
    max_ms: float = 0.0
    p50_ms: float = 0.0
    p75_ms: float = 0.0
    p90_ms: float = 0.0
    p99_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class AggregatedStatistics:
    success_count: int
    failure_count: int
    status_counts: tuple[tuple[int | None, int], ...]
    latency: LatencySummary
    error_counts: tuple[tuple[ErrorType, int], ...] = ()
    bytes_received: int = 0

    @property
    def total_requests(self) -> int:
        return self.success_count + self.failure_count
