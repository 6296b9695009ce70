from __future__ import annotations

import pandas as pd

from smashit.loadgen.runner import RunResult
from smashit.metrics import AggregatedStatistics


def _status_frame(stats: AggregatedStatistics) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"status": "error" if code is None else str(code), "count": count}
            for code, count in stats.status_counts
        ],
        columns=["status", "count"],
    )


def _latency_frame(stats: AggregatedStatistics) -> pd.DataFrame:
    latency = stats.latency
    rows = [
        ("min", latency.min_ms),
        ("avg", latency.avg_ms),
        ("max", latency.max_ms),
        ("p50", latency.p50_ms),
        ("p75", latency.p75_ms),
        ("p90", latency.p90_ms),
        ("p99", latency.p99_ms),
    ]
    return pd.DataFrame(rows, columns=["stat", "ms"])


def render_statistics(result: RunResult) -> str:
    stats = result.statistics
    lines = [
        f"Requests:   {stats.total_requests} in {result.elapsed_sec:.3f}s ({result.requests_per_sec:.1f} req/s)",
        f"Successful: {stats.success_count}",
        f"Failed:     {stats.failure_count}",
        f"Received:   {stats.bytes_received} bytes",
        "",
        "Status codes:",
    ]
    status = _status_frame(stats)
    if status.empty:
        lines.append("  (none)")
    else:
        lines.append(status.to_string(index=False))
    if stats.error_counts:
        lines.append("")
        lines.append("Failures by type:")
        errors = pd.DataFrame(
            [{"type": err.value, "count": count} for err, count in stats.error_counts],
        )
        lines.append(errors.to_string(index=False))
    lines.append("")
    lines.append("Latency:")
    lines.append(_latency_frame(stats).to_string(index=False, float_format=lambda v: f"{v:.2f}"))
    return "\n".join(lines)
