"""Tests for word list and dataset loading."""

import json

import pytest

from baca_ucap.audio import validate_audio_file
from baca_ucap.config import AudioLimits
from baca_ucap.dataset import load_samples, load_words, shuffle_words


def write_jsonl(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n")
    return path


class TestWords:
    def test_load_words(self, tmp_path):
        path = tmp_path / "words.csv"
        path.write_text("buku\n  meja \n\n\nkucing\n")
        assert load_words(path) == ["buku", "meja", "kucing"]

    def test_shuffle_is_a_copy(self):
        words = ["buku", "meja", "kucing", "ikan", "rumah"]
        shuffled = shuffle_words(words, seed=1)
        assert sorted(shuffled) == sorted(words)
        assert words == ["buku", "meja", "kucing", "ikan", "rumah"]
        assert shuffle_words(words, seed=1) == shuffled


class TestSamples:
    def test_load(self, tmp_path):
        path = write_jsonl(tmp_path / "day1.jsonl", [
            {"id": "x", "target": "buku", "transcript": "buku uh"},
            {"target": "meja", "audio": "clips/meja.webm"},
        ])
        samples = load_samples(path)

        assert [s.id for s in samples] == ["x", "day1_1"]
        assert samples[0].transcript == "buku uh"
        assert samples[0].audio_path is None
        assert samples[1].audio_path == tmp_path / "clips" / "meja.webm"

    def test_max_samples(self, tmp_path):
        path = write_jsonl(tmp_path / "d.jsonl", [{"target": f"w{i}", "transcript": "x"} for i in range(5)])
        assert len(load_samples(path, max_samples=2)) == 2

    def test_missing_source(self, tmp_path):
        path = write_jsonl(tmp_path / "d.jsonl", [{"target": "buku", "transcript": "buku"}, {"target": "meja"}])
        with pytest.raises(ValueError, match=":2:"):
            load_samples(path)

    def test_zero_max_samples(self, tmp_path):
        path = write_jsonl(tmp_path / "d.jsonl", [{"target": "buku", "transcript": "buku"}])
        assert load_samples(path, max_samples=0) == []

    @pytest.mark.parametrize("record", [["buku"], "buku", 5])
    def test_record_not_an_object(self, tmp_path, record):
        path = write_jsonl(tmp_path / "d.jsonl", [record])
        with pytest.raises(ValueError, match=":1: record must be a JSON object"):
            load_samples(path)

    @pytest.mark.parametrize("record, key", [
        ({"target": "buku", "transcript": 5}, "transcript"),
        ({"target": "buku", "audio": ["a.wav"]}, "audio"),
        ({"target": None, "transcript": "buku"}, "target"),
        ({"target": 7, "transcript": "buku"}, "target"),
    ])
    def test_non_string_fields(self, tmp_path, record, key):
        path = write_jsonl(tmp_path / "d.jsonl", [record])
        with pytest.raises(ValueError, match=f"'{key}' must be a string"):
            load_samples(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "d.jsonl"
        path.write_text("{oops\n")
        with pytest.raises(ValueError, match="invalid JSON"):
            load_samples(path)


class TestAudioValidation:
    def test_valid(self, tmp_path):
        path = tmp_path / "clip.webm"
        path.write_bytes(b"\x00" * 10)
        result = validate_audio_file(path)
        assert result.valid
        assert result.size == 10

    def test_missing(self, tmp_path):
        result = validate_audio_file(tmp_path / "none.webm")
        assert not result.valid
        assert "not found" in result.error

    def test_too_large(self, tmp_path):
        path = tmp_path / "clip.webm"
        path.write_bytes(b"\x00" * 3 * 1024 * 1024)
        result = validate_audio_file(path, AudioLimits(max_file_size_mb=2))
        assert not result.valid
        assert result.error == "File too large: 3.00MB (max 2MB)"
        assert result.size == 3 * 1024 * 1024
