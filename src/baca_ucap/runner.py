"""Async batch evaluation engine."""

from __future__ import annotations

import asyncio
import time

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn

from .audio import validate_audio_file
from .client import RequestMetrics, TranscriptionClient
from .config import EvalConfig
from .dataset import EvalSample
from .evaluators.matching import evaluate_transcription, normalize
from .metrics import aggregate_metrics
from .results import EVALUATED, INVALID, SKIPPED, RunResult, SampleResult

console = Console()


class EvaluationRunner:
    """Scores samples with controlled transcription concurrency using asyncio."""

    def __init__(self, client: TranscriptionClient, config: EvalConfig) -> None:
        self._client = client
        self._config = config
        self._semaphore = asyncio.Semaphore(config.run.concurrency)

    async def run(self, name: str, samples: list[EvalSample]) -> RunResult:
        """Evaluate all samples and aggregate the outcome."""
        console.print(f"\n[bold blue]Running evaluation:[/] {name}")
        console.print(f"  {len(samples)} samples (concurrency={self._config.run.concurrency})")

        wall_start = time.perf_counter()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(name, total=len(samples))

            async def _run_one(sample: EvalSample) -> SampleResult:
                result = await self.evaluate_sample(sample)
                progress.advance(task)
                return result

            gathered = await asyncio.gather(*[_run_one(s) for s in samples], return_exceptions=True)

        results: list[SampleResult] = []
        for sample, item in zip(samples, gathered):
            if isinstance(item, Exception):
                item = SampleResult(
                    id=sample.id,
                    target=sample.target,
                    status=SKIPPED,
                    error=str(item),
                    metrics=RequestMetrics(error=str(item)),
                )
            results.append(item)

        wall_time = time.perf_counter() - wall_start
        all_metrics = [r.metrics for r in results if r.metrics]

        result = RunResult(
            name=name,
            sample_results=results,
            aggregated_metrics=aggregate_metrics(all_metrics, wall_time),
        )

        console.print(f"  [green]Done:[/] accuracy={result.accuracy:.4f} "
                      f"({result.num_correct}/{result.num_evaluated}), "
                      f"skipped={result.num_skipped}, wall_time={wall_time:.1f}s")

        return result

    async def evaluate_sample(self, sample: EvalSample) -> SampleResult:
        """Evaluate one sample, transcribing its audio first when no transcript is given."""
        if not normalize(sample.target):
            return SampleResult(id=sample.id, target=sample.target, status=INVALID, error="Blank target word")

        if sample.transcript is not None:
            return SampleResult(
                id=sample.id,
                target=sample.target,
                status=EVALUATED,
                match=evaluate_transcription(sample.target, sample.transcript),
            )

        if sample.audio_path is None:
            return SampleResult(id=sample.id, target=sample.target, status=INVALID, error="No transcript or audio")

        validation = validate_audio_file(sample.audio_path, self._config.audio)
        if not validation.valid:
            return SampleResult(id=sample.id, target=sample.target, status=SKIPPED, error=validation.error)

        async with self._semaphore:
            transcription, metrics = await self._client.transcribe(sample.audio_path)

        if not transcription.success:
            return SampleResult(
                id=sample.id,
                target=sample.target,
                status=SKIPPED,
                error=transcription.error,
                metrics=metrics,
            )

        return SampleResult(
            id=sample.id,
            target=sample.target,
            status=EVALUATED,
            match=evaluate_transcription(sample.target, transcription.text),
            metrics=metrics,
        )
