"""Click CLI entry point."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console

from .config import AudioLimits, EvalConfig, RunConfig, TranscriberConfig
from .evaluators.matching import evaluate_transcription, normalize

console = Console()


@click.group()
@click.option("--base-url", default="http://localhost:8000/v1", help="Transcription API base URL.")
@click.option("--model", default="whisper-small", help="Speech-recognition model name.")
@click.option("--api-key", default="EMPTY", help="API key (default: EMPTY).")
@click.option("--language", default="id", help="Spoken language code passed to the recognizer.")
@click.option("--output-dir", default="results", help="Directory for result files.")
@click.pass_context
def cli(ctx: click.Context, base_url: str, model: str, api_key: str, language: str, output_dir: str) -> None:
    """Baca & Ucap: judge spoken words against their targets."""
    ctx.ensure_object(dict)
    ctx.obj["transcriber"] = TranscriberConfig(
        base_url=base_url,
        api_key=api_key,
        model=model,
        language=language,
    )
    ctx.obj["output_dir"] = output_dir


def _print_json(data: dict) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


@cli.command()
@click.argument("target")
@click.argument("transcript")
def evaluate(target: str, transcript: str) -> None:
    """Judge TRANSCRIPT as a reading of TARGET."""
    if not normalize(target):
        raise click.UsageError("TARGET must contain at least one letter or digit.")
    _print_json(evaluate_transcription(target, transcript).to_dict())


@cli.command()
@click.argument("audio", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", required=True, help="Word the player was asked to read.")
@click.option("--max-file-size-mb", default=5.0, type=float, help="Reject clips larger than this.")
@click.pass_context
def transcribe(ctx: click.Context, audio: str, target: str, max_file_size_mb: float) -> None:
    """Transcribe one AUDIO clip and judge it against --target."""
    if not normalize(target):
        raise click.UsageError("--target must contain at least one letter or digit.")

    from .audio import validate_audio_file

    validation = validate_audio_file(audio, AudioLimits(max_file_size_mb=max_file_size_mb))
    if not validation.valid:
        console.print(f"[red]{validation.error}[/]")
        raise SystemExit(1)

    async def _transcribe() -> None:
        from .client import TranscriptionClient

        client = TranscriptionClient(ctx.obj["transcriber"])
        result, metrics = await client.transcribe(audio)
        if not result.success:
            console.print(f"[red]Evaluation skipped:[/] {result.error}")
            raise SystemExit(1)

        console.print(f"[dim]Transcribed in {metrics.total_latency_seconds:.2f}s[/]")
        _print_json(evaluate_transcription(target, result.text).to_dict())

    asyncio.run(_transcribe())


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check that the transcription server serves the configured model."""
    transcriber: TranscriberConfig = ctx.obj["transcriber"]

    async def _check() -> None:
        from .client import TranscriptionClient

        client = TranscriptionClient(transcriber)
        if await client.check_available():
            console.print(f"[green]Model {transcriber.model!r} is available at {transcriber.base_url}.[/]")
        else:
            console.print(f"[red]Model {transcriber.model!r} is not available at {transcriber.base_url}.[/]")
            raise SystemExit(1)

    asyncio.run(_check())


@cli.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", default=None, help="Run name (default: dataset file stem).")
@click.option("--concurrency", default=4, help="Max concurrent transcription requests.")
@click.option("--max-samples", default=None, type=int, help="Limit number of samples.")
@click.option("--max-file-size-mb", default=5.0, type=float, help="Skip clips larger than this.")
@click.pass_context
def run(
    ctx: click.Context,
    dataset: str,
    name: str | None,
    concurrency: int,
    max_samples: int | None,
    max_file_size_mb: float,
) -> None:
    """Evaluate every sample in a JSON Lines DATASET."""
    from .dataset import load_samples

    run_config = RunConfig(
        concurrency=concurrency,
        max_samples=max_samples,
        output_dir=Path(ctx.obj["output_dir"]),
    )
    config = EvalConfig(
        transcriber=ctx.obj["transcriber"],
        audio=AudioLimits(max_file_size_mb=max_file_size_mb),
        run=run_config,
    )

    try:
        samples = load_samples(dataset, config.run.max_samples)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="DATASET") from e

    async def _run() -> None:
        from .client import TranscriptionClient
        from .results import save_result
        from .runner import EvaluationRunner

        runner = EvaluationRunner(TranscriptionClient(config.transcriber), config)
        result = await runner.run(name or Path(dataset).stem, samples)
        save_result(result, config)

    asyncio.run(_run())


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True))
def compare(files: tuple[str, ...]) -> None:
    """Compare results from multiple evaluation runs."""
    from .results import compare_results

    compare_results([Path(f) for f in files])


@cli.command()
@click.argument("word_list", type=click.Path(exists=True, dir_okay=False))
@click.option("--count", default=None, type=click.IntRange(min=1), help="Number of words to draw (default: all).")
@click.option("--seed", default=None, type=int, help="Random seed for the shuffle.")
def words(word_list: str, count: int | None, seed: int | None) -> None:
    """Draw a shuffled round of words from WORD_LIST, one per line."""
    from .dataset import load_words, shuffle_words

    loaded = load_words(word_list)
    if not loaded:
        console.print(f"[red]No words found in {word_list}.[/]")
        raise SystemExit(1)

    for word in shuffle_words(loaded, seed)[:count]:
        click.echo(word)
