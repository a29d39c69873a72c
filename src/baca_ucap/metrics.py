"""Metrics aggregation and statistical utilities."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .client import RequestMetrics


@dataclass
class AggregatedMetrics:
    """Summary statistics across all transcription requests in a run."""

    latency_p50: float | None = None
    latency_p95: float | None = None
    latency_p99: float | None = None
    latency_mean: float | None = None

    total_audio_bytes: int = 0
    total_requests: int = 0
    failed_requests: int = 0
    wall_time_seconds: float = 0.0
    effective_throughput_rps: float | None = None

    def to_dict(self) -> dict:
        return {k: v for k, v in self.__dict__.items() if v is not None}


def aggregate_metrics(
    request_metrics: list[RequestMetrics],
    wall_time: float = 0.0,
) -> AggregatedMetrics:
    """Compute summary statistics from a list of per-request metrics."""
    agg = AggregatedMetrics()
    agg.total_requests = len(request_metrics)
    agg.wall_time_seconds = wall_time

    successful = [m for m in request_metrics if m.error is None]
    agg.failed_requests = agg.total_requests - len(successful)

    if not successful:
        return agg

    agg.total_audio_bytes = sum(m.audio_bytes for m in successful)

    latencies = [m.total_latency_seconds for m in successful]
    arr = np.array(latencies)
    agg.latency_p50 = float(np.percentile(arr, 50))
    agg.latency_p95 = float(np.percentile(arr, 95))
    agg.latency_p99 = float(np.percentile(arr, 99))
    agg.latency_mean = float(np.mean(arr))

    if wall_time > 0:
        agg.effective_throughput_rps = len(successful) / wall_time

    return agg


def confidence_interval_95(scores: list[float]) -> tuple[float, float]:
    """Compute 95% confidence interval using normal approximation."""
    arr = np.array(scores)
    n = len(arr)
    if n == 0:
        return (0.0, 0.0)
    mean = float(np.mean(arr))
    if n < 2:
        return (mean, mean)
    se = float(np.std(arr, ddof=1) / np.sqrt(n))
    return (mean - 1.96 * se, mean + 1.96 * se)
