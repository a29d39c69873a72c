"""Tests for metrics aggregation and result persistence."""

import pytest

from baca_ucap.client import RequestMetrics
from baca_ucap.config import EvalConfig, RunConfig, TranscriberConfig
from baca_ucap.evaluators.matching import evaluate_transcription
from baca_ucap.metrics import aggregate_metrics, confidence_interval_95
from baca_ucap.results import RunResult, SampleResult, compare_results, load_result, save_result


def make_result(name="words"):
    return RunResult(
        name=name,
        sample_results=[
            SampleResult(
                id="s0",
                target="buku",
                status="evaluated",
                match=evaluate_transcription("buku", "Buku!"),
                metrics=RequestMetrics(total_latency_seconds=0.4, audio_bytes=100),
            ),
            SampleResult(id="s1", target="meja", status="evaluated", match=evaluate_transcription("meja", "kursi")),
            SampleResult(id="s2", target="ikan", status="skipped", error="Empty transcription received"),
        ],
    )


class TestMetrics:
    def test_aggregate(self):
        metrics = [
            RequestMetrics(total_latency_seconds=0.1, audio_bytes=10),
            RequestMetrics(total_latency_seconds=0.3, audio_bytes=30),
            RequestMetrics(error="timeout"),
        ]
        agg = aggregate_metrics(metrics, wall_time=2.0)
        assert agg.total_requests == 3
        assert agg.failed_requests == 1
        assert agg.total_audio_bytes == 40
        assert agg.latency_mean == pytest.approx(0.2)
        assert agg.effective_throughput_rps == pytest.approx(1.0)

    def test_aggregate_empty(self):
        agg = aggregate_metrics([])
        assert agg.total_requests == 0
        assert "latency_mean" not in agg.to_dict()

    def test_confidence_interval(self):
        assert confidence_interval_95([]) == (0.0, 0.0)
        assert confidence_interval_95([1.0]) == (1.0, 1.0)
        lo, hi = confidence_interval_95([1.0, 0.0, 1.0, 0.0])
        assert lo < 0.5 < hi


class TestRunResult:
    def test_counts(self):
        result = make_result()
        assert result.num_samples == 3
        assert result.num_evaluated == 2
        assert result.num_skipped == 1
        assert result.accuracy == 0.5

    def test_sample_to_dict(self):
        d = make_result().sample_results[0].to_dict()
        assert d["id"] == "s0"
        assert d["correct"] is True
        assert d["transcript"] == "Buku!"
        assert d["normalizedTranscript"] == "buku"
        assert d["isCorrect"] is True
        assert d["metrics"]["audio_bytes"] == 100

    def test_skipped_to_dict(self):
        d = make_result().sample_results[2].to_dict()
        assert d["status"] == "skipped"
        assert d["correct"] is False
        assert "isCorrect" not in d
        assert d["error"] == "Empty transcription received"

    def test_empty_accuracy(self):
        assert RunResult(name="empty").accuracy == 0.0


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        config = EvalConfig(
            transcriber=TranscriberConfig(model="org/whisper"),
            run=RunConfig(output_dir=tmp_path),
        )
        path = save_result(make_result(), config)

        assert path.parent == tmp_path
        assert "org_whisper" in path.name
        data = load_result(path)
        assert data["run"] == "words"
        assert data["model"] == "org/whisper"
        assert data["num_evaluated"] == 2
        assert len(data["sample_results"]) == 3

    def test_compare(self, tmp_path, capsys):
        config = EvalConfig(run=RunConfig(output_dir=tmp_path))
        first = save_result(make_result("first"), config)
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        compare_results([first, broken])

        out = capsys.readouterr().out
        assert "Run Comparison" in out
        assert "Error loading" in out

    def test_compare_nothing(self, tmp_path, capsys):
        broken = tmp_path / "broken.json"
        broken.write_text("")
        compare_results([broken])
        assert "No valid result files" in capsys.readouterr().out
