"""Audio clip checks applied before transcription."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import AudioLimits


@dataclass
class AudioValidationResult:
    valid: bool
    error: str | None = None
    size: int | None = None


def validate_audio_file(path: str | Path, limits: AudioLimits | None = None) -> AudioValidationResult:
    """Check that an audio clip exists and is within the upload size limit."""
    limits = limits or AudioLimits()
    path = Path(path)

    if not path.is_file():
        return AudioValidationResult(valid=False, error=f"Audio file not found: {path}")

    size = path.stat().st_size
    if size > limits.max_file_size_bytes:
        return AudioValidationResult(
            valid=False,
            error=f"File too large: {size / 1024 / 1024:.2f}MB (max {limits.max_file_size_mb:g}MB)",
            size=size,
        )

    return AudioValidationResult(valid=True, size=size)
