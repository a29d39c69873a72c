"""Instrumented client for a Whisper-compatible transcription API."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from openai import AsyncOpenAI

from .config import TranscriberConfig


@dataclass
class RequestMetrics:
    """Per-request performance metrics."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    total_latency_seconds: float = 0.0
    audio_bytes: int = 0
    error: str | None = None


@dataclass
class TranscriptionResult:
    """Text returned by the recognizer, or the reason there is none."""

    text: str
    success: bool
    error: str | None = None


class TranscriptionClient:
    """Async OpenAI client wrapper that transcribes audio clips and measures latency."""

    def __init__(self, config: TranscriberConfig) -> None:
        self._config = config
        self._client = AsyncOpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
        )

    @property
    def client(self) -> AsyncOpenAI:
        return self._client

    async def transcribe(self, audio_path: str | Path) -> tuple[TranscriptionResult, RequestMetrics]:
        """Transcribe one audio file and return (result, metrics).

        Failures are reported in the result rather than raised, so callers
        can skip evaluation without handling client exceptions.
        """
        metrics = RequestMetrics()
        path = Path(audio_path)

        start = time.perf_counter()
        try:
            metrics.audio_bytes = path.stat().st_size
            with path.open("rb") as audio:
                response = await self._client.audio.transcriptions.create(
                    model=self._config.model,
                    file=audio,
                    language=self._config.language,
                )
        except Exception as exc:
            metrics.error = str(exc)
            metrics.total_latency_seconds = time.perf_counter() - start
            return TranscriptionResult(
                text="",
                success=False,
                error=f"Transcription failed: {exc}",
            ), metrics

        metrics.total_latency_seconds = time.perf_counter() - start

        text = (response.text or "").strip()
        if not text:
            metrics.error = "empty transcription"
            return TranscriptionResult(
                text="",
                success=False,
                error="Empty transcription received",
            ), metrics

        return TranscriptionResult(text=text, success=True), metrics

    async def check_available(self) -> bool:
        """Return True if the server is reachable and serves the configured model."""
        try:
            models = await self._client.models.list()
        except Exception:
            return False
        return self._config.model in [m.id for m in models.data]
