from __future__ import annotations

import math
from collections import defaultdict

import numpy as np


class LatencyHistogram:
    __slots__ = ("_counts", "_total")

    def __init__(self) -> None:
        self._counts: dict[int, int] = defaultdict(int)
        self._total = 0

    def __len__(self) -> int:
        return len(self._counts)

    @property
    def total(self) -> int:
        return self._total

    def record(self, latency_ms: float) -> None:
        if latency_ms < 0:
            msg = f"Latency must be non-negative, got {latency_ms}"
            raise ValueError(msg)
        self._counts[int(latency_ms)] += 1
        self._total += 1

    def merge(self, other: LatencyHistogram) -> None:
        for bucket, count in other._counts.items():
            self._counts[bucket] += count
        self._total += other._total

    def percentile(self, p: float) -> float:
        if not 0 <= p <= 100:
            msg = f"Percentile must be within [0, 100], got {p}"
            raise ValueError(msg)
        if self._total == 0:
            return 0.0
        buckets = np.fromiter(sorted(self._counts), dtype=np.int64, count=len(self._counts))
        counts = np.fromiter(
            (self._counts[b] for b in buckets.tolist()),
            dtype=np.int64,
            count=len(buckets),
        )
        cumulative = np.cumsum(counts)
        rank = max(1, math.ceil(p * self._total / 100))
        idx = int(np.searchsorted(cumulative, rank, side="left"))
        return float(buckets[idx])
