"""Normalized transcript matching for spoken target words."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchResult:
    """Verdict for one transcript, keeping the raw text for display."""

    transcript: str
    normalized_transcript: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "transcript": self.transcript,
            "normalizedTranscript": self.normalized_transcript,
            "isCorrect": self.is_correct,
        }


def normalize(text: str) -> str:
    """Normalize text for comparison: lowercase, strip, remove punctuation, collapse whitespace."""
    text = text.lower().strip()
    # Combining marks are kept: Indic vowel signs and viramas are part of the word.
    text = "".join(c for c in text if c.isspace() or c == "_" or unicodedata.category(c)[0] in "LNM")
    text = re.sub(r"\s+", " ", text)
    # Punctuation removed next to the edges leaves a stray space behind.
    return text.strip()


def _contains(normalized_target: str, normalized_transcript: str) -> bool:
    if normalized_target in normalized_transcript:
        return True
    # Recognizer may split one word into several tokens ("ik an").
    return normalized_target.replace(" ", "") in normalized_transcript.replace(" ", "")


def is_match(target: str, transcript: str) -> bool:
    """Return True if the normalized target is found within the normalized transcript.

    Containment is not word-bounded, so "bukuku" counts as a reading of
    "buku" and surrounding filler words are ignored. An empty target
    matches every transcript.
    """
    return _contains(normalize(target), normalize(transcript))


def evaluate_transcription(target: str, transcript: str) -> MatchResult:
    """Evaluate a transcript against a target word."""
    normalized_transcript = normalize(transcript)
    return MatchResult(
        transcript=transcript,
        normalized_transcript=normalized_transcript,
        is_correct=_contains(normalize(target), normalized_transcript),
    )
