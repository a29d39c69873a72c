"""Pydantic configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class TranscriberConfig(BaseModel):
    """Connection settings for a Whisper-compatible OpenAI API."""

    base_url: str = "http://localhost:8000/v1"
    api_key: str = "EMPTY"
    model: str = "whisper-small"
    language: str = "id"
    timeout: float = 60.0


class AudioLimits(BaseModel):
    """Limits applied to an audio clip before it is transcribed."""

    max_file_size_mb: float = Field(default=5.0, gt=0)

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


class RunConfig(BaseModel):
    """Execution settings for a batch evaluation run."""

    concurrency: int = Field(default=4, ge=1)
    max_samples: int | None = None
    output_dir: Path = Path("results")


class EvalConfig(BaseModel):
    """Combined config passed to the evaluation runner."""

    transcriber: TranscriberConfig = Field(default_factory=TranscriberConfig)
    audio: AudioLimits = Field(default_factory=AudioLimits)
    run: RunConfig = Field(default_factory=RunConfig)
