"""Run result records, JSON persistence and comparison."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from .client import RequestMetrics
from .config import EvalConfig
from .evaluators.matching import MatchResult
from .metrics import AggregatedMetrics, confidence_interval_95

console = Console()

EVALUATED = "evaluated"
SKIPPED = "skipped"
INVALID = "invalid"


@dataclass
class SampleResult:
    """Result of evaluating one sample."""

    id: str
    target: str
    status: str
    match: MatchResult | None = None
    error: str | None = None
    metrics: RequestMetrics | None = None

    @property
    def correct(self) -> bool:
        return self.match is not None and self.match.is_correct

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "target": self.target,
            "status": self.status,
            "correct": self.correct,
        }
        if self.match:
            d.update(self.match.to_dict())
        if self.error:
            d["error"] = self.error
        if self.metrics:
            d["metrics"] = {
                "request_id": self.metrics.request_id,
                "total_latency_seconds": self.metrics.total_latency_seconds,
                "audio_bytes": self.metrics.audio_bytes,
            }
        return d


@dataclass
class RunResult:
    """Aggregated result of a batch evaluation run."""

    name: str
    sample_results: list[SampleResult] = field(default_factory=list)
    aggregated_metrics: AggregatedMetrics | None = None

    @property
    def num_samples(self) -> int:
        return len(self.sample_results)

    @property
    def num_evaluated(self) -> int:
        return sum(1 for r in self.sample_results if r.status == EVALUATED)

    @property
    def num_skipped(self) -> int:
        return sum(1 for r in self.sample_results if r.status == SKIPPED)

    @property
    def num_correct(self) -> int:
        return sum(1 for r in self.sample_results if r.correct)

    @property
    def accuracy(self) -> float:
        """Fraction of evaluated samples judged correct; skipped samples carry no verdict."""
        evaluated = self.num_evaluated
        return self.num_correct / evaluated if evaluated else 0.0

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "name": self.name,
            "num_samples": self.num_samples,
            "num_evaluated": self.num_evaluated,
            "num_skipped": self.num_skipped,
            "accuracy": self.accuracy,
        }
        if self.aggregated_metrics:
            d["aggregated_metrics"] = self.aggregated_metrics.to_dict()
        d["sample_results"] = [sr.to_dict() for sr in self.sample_results]
        return d


def save_result(result: RunResult, config: EvalConfig) -> Path:
    """Save a run result to a timestamped JSON file."""
    output_dir = Path(config.run.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    filename = f"{result.name}_{config.transcriber.model}_{timestamp}.json"
    # Sanitize model name for filesystem
    filename = filename.replace("/", "_").replace("\\", "_")
    filepath = output_dir / filename

    data = {
        "run": result.name,
        "model": config.transcriber.model,
        "timestamp": timestamp,
        "config": {
            "base_url": config.transcriber.base_url,
            "language": config.transcriber.language,
            "concurrency": config.run.concurrency,
            "max_file_size_mb": config.audio.max_file_size_mb,
        },
        **result.to_dict(),
    }

    filepath.write_text(json.dumps(data, indent=2, default=str))
    console.print(f"  Results saved to [cyan]{filepath}[/]")
    return filepath


def load_result(filepath: Path) -> dict:
    """Load a result JSON file."""
    return json.loads(filepath.read_text())


def compare_results(filepaths: list[Path]) -> None:
    """Display a side-by-side comparison table of multiple result files."""
    results = []
    for fp in filepaths:
        try:
            results.append(load_result(fp))
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[red]Error loading {fp}:[/] {e}")

    if not results:
        console.print("[red]No valid result files to compare.[/]")
        return

    table = Table(title="Run Comparison", show_lines=True)
    table.add_column("Metric", style="bold")

    for r in results:
        label = f"{r.get('run', '?')}\n{r.get('model', '?')}"
        table.add_column(label, justify="right")

    table.add_row("Accuracy", *[f"{r.get('accuracy', 0):.4f}" for r in results])
    table.add_row("Samples", *[str(r.get("num_samples", 0)) for r in results])
    table.add_row("Evaluated", *[str(r.get("num_evaluated", 0)) for r in results])
    table.add_row("Skipped", *[str(r.get("num_skipped", 0)) for r in results])

    # Confidence intervals over evaluated samples only
    for r in results:
        scores = [
            1.0 if sr.get("correct") else 0.0
            for sr in r.get("sample_results", [])
            if sr.get("status") == EVALUATED
        ]
        if scores:
            ci_lo, ci_hi = confidence_interval_95(scores)
            r["_ci"] = f"[{ci_lo:.4f}, {ci_hi:.4f}]"
        else:
            r["_ci"] = "N/A"
    table.add_row("95% CI", *[r["_ci"] for r in results])

    metric_keys = [
        ("latency_mean", "Latency Mean (s)"),
        ("latency_p50", "Latency P50 (s)"),
        ("latency_p95", "Latency P95 (s)"),
        ("effective_throughput_rps", "Throughput (req/s)"),
    ]

    for key, label in metric_keys:
        values = []
        for r in results:
            agg = r.get("aggregated_metrics", {})
            v = agg.get(key)
            values.append(f"{v:.4f}" if v is not None else "N/A")
        table.add_row(label, *values)

    console.print(table)
