"""Word lists and evaluation samples."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass
from pathlib import Path


@dataclass
class EvalSample:
    """A single target word with either a known transcript or a recorded clip."""

    id: str
    target: str
    transcript: str | None = None
    audio_path: Path | None = None


def load_words(path: str | Path) -> list[str]:
    """Load a word list with one word per line, skipping blank lines."""
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def shuffle_words(words: list[str], seed: int | None = None) -> list[str]:
    """Return a shuffled copy of ``words``."""
    shuffled = list(words)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def load_samples(path: str | Path, max_samples: int | None = None) -> list[EvalSample]:
    """Load evaluation samples from a JSON Lines file.

    Each record needs a ``target`` and either a ``transcript`` or an
    ``audio`` path, resolved relative to the dataset file. Records
    without an ``id`` are numbered after the file stem.
    """
    path = Path(path)
    samples: list[EvalSample] = []

    with path.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            if max_samples is not None and len(samples) >= max_samples:
                break

            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e

            if not isinstance(record, dict):
                raise ValueError(f"{path}:{lineno}: record must be a JSON object")

            transcript = record.get("transcript")
            audio = record.get("audio")
            if transcript is None and audio is None:
                raise ValueError(f"{path}:{lineno}: record needs a 'transcript' or an 'audio' path")
            target = record.get("target", "")
            if not isinstance(target, str):
                raise ValueError(f"{path}:{lineno}: 'target' must be a string")
            for key, value in (("transcript", transcript), ("audio", audio)):
                if value is not None and not isinstance(value, str):
                    raise ValueError(f"{path}:{lineno}: '{key}' must be a string")

            samples.append(EvalSample(
                id=str(record.get("id", f"{path.stem}_{len(samples)}")),
                target=target,
                transcript=transcript,
                audio_path=path.parent / audio if audio is not None else None,
            ))

    return samples
