"""Tests for gibbslda.synthesis — trace exports and plot."""

import json
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from gibbslda.metrics import SweepRecord, TrainingMetrics
from gibbslda.synthesis import export_report_json, export_trace_csv, plot_likelihood_trace


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def metrics():
    return TrainingMetrics(
        num_documents=3,
        num_occurrences=12,
        vocabulary_size=5,
        num_topics=2,
        records=[
            SweepRecord(iteration=i, burn_in=i < 3, log_likelihood=-30.0 + i, seconds=0.01)
            for i in range(5)
        ],
    )


# ── Tests ─────────────────────────────────────────────────────────────


class TestExports:
    def test_trace_csv(self, metrics, tmp_path):
        out = tmp_path / "nested" / "trace.csv"
        export_trace_csv(metrics, out)
        df = pd.read_csv(out)
        assert df["iteration"].tolist() == [0, 1, 2, 3, 4]
        assert df["log_likelihood"].tolist() == [-30.0, -29.0, -28.0, -27.0, -26.0]

    def test_report_json(self, metrics, tmp_path):
        out = tmp_path / "meta.json"
        export_report_json(metrics, out)
        with open(out) as f:
            data = json.load(f)
        assert data["sampling"]["burn_in_sweeps"] == 3
        assert len(data["sweeps"]) == 5


class TestPlotLikelihoodTrace:
    def test_creates_png_file(self, metrics):
        """Verify the function creates a non-empty PNG file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            out_path = Path(tmpdir) / "trace.png"
            assert plot_likelihood_trace(metrics, out_path) is True

            assert out_path.exists(), "Trace plot PNG was not created"
            assert out_path.stat().st_size > 0, "Trace plot PNG is empty"

    def test_creates_parent_dirs(self, metrics):
        with tempfile.TemporaryDirectory() as tmpdir:
            out_path = Path(tmpdir) / "nested" / "dir" / "trace.png"
            plot_likelihood_trace(metrics, out_path)

            assert out_path.exists()

    def test_skipped_without_log_likelihood(self, tmp_path):
        metrics = TrainingMetrics(
            num_documents=1, num_occurrences=2, vocabulary_size=2, num_topics=2,
            records=[SweepRecord(iteration=0, burn_in=True, log_likelihood=None, seconds=0.0)],
        )
        out_path = tmp_path / "trace.png"
        assert plot_likelihood_trace(metrics, out_path) is False
        assert not out_path.exists()
