"""Tests for gibbslda.runner — training and evaluation drivers."""

import math
from pathlib import Path
from unittest.mock import patch

import pytest

from gibbslda.config import TrainingConfig
from gibbslda.errors import CorpusError
from gibbslda.model import load_model
from gibbslda.runner import evaluate, train

FIXTURES = Path(__file__).parent / "fixtures"

CORPUS = """\
apple banana apple cherry apple
banana cherry date date
egg apple egg fig banana
fig fig date cherry
apple cherry cherry egg
"""


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text(CORPUS)
    return path


def make_config(tmp_path, corpus_file, **overrides):
    base = dict(
        num_topics=3,
        corpus_file=corpus_file,
        model_file=tmp_path / "model.txt",
        burn_in_iterations=2,
        accumulate_iterations=3,
        random_state=42,
    )
    base.update(overrides)
    return TrainingConfig(**base)


# ── train ─────────────────────────────────────────────────────────────


class TestTrain:
    def test_saves_accumulated_model(self, tmp_path, corpus_file):
        cfg = make_config(tmp_path, corpus_file)
        accum, metrics = train(cfg)

        assert cfg.model_file.exists()
        assert load_model(cfg.model_file) == accum
        # three accumulated sweeps of 22 occurrences each
        assert accum.global_histogram.sum() == 3 * 22
        assert accum.num_topics == 3

    def test_records_every_sweep(self, tmp_path, corpus_file):
        _, metrics = train(make_config(tmp_path, corpus_file))
        assert [r.iteration for r in metrics.records] == [0, 1, 2, 3, 4]
        assert [r.burn_in for r in metrics.records] == [True, True, False, False, False]
        assert all(r.log_likelihood < 0 for r in metrics.records)
        assert metrics.num_documents == 5
        assert metrics.num_occurrences == 22
        assert metrics.vocabulary_size == 6

    def test_first_log_likelihood_uses_initial_assignment(self, tmp_path, corpus_file):
        """Before the first sweep every occurrence sits on topic 0."""
        _, metrics_a = train(make_config(tmp_path, corpus_file, random_state=1))
        _, metrics_b = train(make_config(tmp_path, corpus_file, random_state=2))
        assert metrics_a.records[0].log_likelihood == metrics_b.records[0].log_likelihood

    def test_without_log_likelihood(self, tmp_path, corpus_file):
        _, metrics = train(make_config(tmp_path, corpus_file, compute_loglikelihood=False))
        assert all(r.log_likelihood is None for r in metrics.records)

    def test_seeded_runs_are_reproducible(self, tmp_path, corpus_file):
        accum_a, _ = train(make_config(tmp_path, corpus_file, model_file=tmp_path / "a.txt"))
        accum_b, _ = train(make_config(tmp_path, corpus_file, model_file=tmp_path / "b.txt"))
        assert accum_a == accum_b

    def test_invalid_config(self, tmp_path, corpus_file):
        with pytest.raises(ValueError):
            train(make_config(tmp_path, corpus_file, word_prior=0))
        assert not (tmp_path / "model.txt").exists()

    def test_missing_corpus(self, tmp_path):
        with pytest.raises(CorpusError):
            train(make_config(tmp_path, tmp_path / "missing.txt"))

    def test_corpus_without_documents(self, tmp_path):
        path = tmp_path / "lonely.txt"
        path.write_text("lonely\n\nword\n")
        cfg = make_config(tmp_path, path)
        with pytest.raises(CorpusError):
            train(cfg)
        assert not cfg.model_file.exists()

    @patch("gibbslda.runner.compute_coherence", return_value=0.5)
    def test_exports_reports(self, mock_coherence, tmp_path, corpus_file):
        out = tmp_path / "reports"
        train(make_config(tmp_path, corpus_file, output_dir=out, top_n_terms=3))

        mock_coherence.assert_called_once()
        assert mock_coherence.call_args.kwargs["topn"] == 3
        for name in (
            "topic_terms.csv",
            "topic_terms.json",
            "training_trace.csv",
            "training_metadata.json",
            "loglikelihood_trace.png",
        ):
            assert (out / name).exists(), f"missing report: {name}"

    @patch("gibbslda.runner.export_reports")
    def test_no_reports_without_output_dir(self, mock_export, tmp_path, corpus_file):
        train(make_config(tmp_path, corpus_file))
        mock_export.assert_not_called()


# ── evaluate ──────────────────────────────────────────────────────────


class TestEvaluate:
    def test_returns_one_value_per_sweep(self):
        lls = evaluate(FIXTURES / "model.txt", FIXTURES / "corpus.txt", iterations=4, random_state=0)
        assert len(lls) == 4
        assert all(math.isfinite(v) and v < 0 for v in lls)

    def test_model_file_untouched(self, tmp_path):
        path = tmp_path / "model.txt"
        path.write_text((FIXTURES / "model.txt").read_text())
        before = path.read_text()
        evaluate(path, FIXTURES / "corpus.txt", iterations=2, random_state=0)
        assert path.read_text() == before

    def test_unseen_words(self, tmp_path):
        heldout = tmp_path / "heldout.txt"
        heldout.write_text("kiwi mango apple\n")
        lls = evaluate(FIXTURES / "model.txt", heldout, iterations=1, random_state=0)
        assert math.isfinite(lls[0])

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            evaluate(FIXTURES / "model.txt", FIXTURES / "corpus.txt", iterations=0)
        with pytest.raises(ValueError):
            evaluate(FIXTURES / "model.txt", FIXTURES / "corpus.txt", topic_prior=0)
