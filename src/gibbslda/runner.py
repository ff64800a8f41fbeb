"""Orchestrator: train an LDA model by Gibbs sampling, or evaluate one.

Training connects all modules:
1. Load the corpus (every occurrence starts at topic 0)
2. Count the initial assignment into the live model
3. Burn-in sweeps (live model only)
4. Accumulation sweeps (live model folded into the accumulator)
5. Save the accumulated model, optionally export reports
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np

from gibbslda.config import TrainingConfig
from gibbslda.corpus import Corpus, corpus_texts, count_occurrences, load_corpus
from gibbslda.errors import CorpusError
from gibbslda.metrics import SweepRecord, TrainingMetrics
from gibbslda.model import Model, load_model
from gibbslda.sampler import Sampler
from gibbslda.synthesis import export_report_json, export_trace_csv, plot_likelihood_trace
from gibbslda.topics import compute_coherence, export_topic_terms, get_all_topic_labels

# Configure basic logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def train(config: TrainingConfig) -> tuple[Model, TrainingMetrics]:
    """Run burn-in and accumulation sweeps and save the accumulated model.

    Parameters
    ----------
    config : TrainingConfig
        Validated before anything is read.

    Returns
    -------
    (Model, TrainingMetrics)
        The accumulated model (as written to ``config.model_file``) and
        the per-sweep trace.

    Raises
    ------
    ValueError
        If the configuration is invalid.
    LoadError
        If the corpus cannot be loaded.
    CorpusError
        If the corpus holds no usable document.
    """
    config.check()

    logger.info(f"Loading corpus from {config.corpus_file}")
    corpus = load_corpus(
        config.corpus_file,
        config.num_topics,
        max_line_length=config.max_line_length,
        normalize=config.normalize,
    )
    if not corpus:
        raise CorpusError(f"No document with at least two words in {config.corpus_file}")

    model = Model.from_corpus(config.num_topics, corpus)
    accum_model = Model(config.num_topics)
    rng = np.random.default_rng(config.random_state)
    sampler = Sampler(config.topic_prior, config.word_prior, model, accum_model, rng=rng)

    metrics = TrainingMetrics(
        num_documents=len(corpus),
        num_occurrences=count_occurrences(corpus),
        vocabulary_size=model.num_words,
        num_topics=config.num_topics,
    )
    logger.info(
        f"Corpus: {metrics.num_documents} documents, {metrics.num_occurrences} "
        f"occurrences, {metrics.vocabulary_size} unique words"
    )

    for iteration in range(config.total_iterations):
        burn_in = config.is_burn_in(iteration)
        log_likelihood = None
        if config.compute_loglikelihood:
            log_likelihood = sampler.corpus_log_likelihood(corpus)
            logger.info(f"Iteration {iteration} ... log-likelihood: {log_likelihood:f}")
        else:
            logger.info(f"Iteration {iteration} ...")

        start = time.perf_counter()
        sampler.corpus_gibbs_sampling(corpus, update_model=True, burn_in=burn_in)
        metrics.records.append(
            SweepRecord(
                iteration=iteration,
                burn_in=burn_in,
                log_likelihood=log_likelihood,
                seconds=time.perf_counter() - start,
            )
        )

    logger.info(f"Saving accumulated model to {config.model_file}")
    accum_model.save(config.model_file)

    if config.output_dir is not None:
        export_reports(accum_model, corpus, metrics, config)

    logger.info("Training complete.")
    return accum_model, metrics


def export_reports(
    model: Model,
    corpus: Corpus,
    metrics: TrainingMetrics,
    config: TrainingConfig,
) -> None:
    """Write topic terms, coherence, the sweep trace and its plot."""
    out_dir = Path(config.output_dir)

    labels = get_all_topic_labels(model, topn=config.top_n_terms, word_prior=config.word_prior)
    for tid, label in labels.items():
        logger.info(f"Topic {tid}: {label}")

    logger.info(f"Exporting topic terms to {out_dir}...")
    export_topic_terms(model, out_dir, topn=config.top_n_terms, word_prior=config.word_prior)

    coherence = compute_coherence(model, corpus_texts(corpus), topn=config.top_n_terms)
    logger.info(f"Topic coherence (u_mass): {coherence:.4f}")

    export_trace_csv(metrics, out_dir / "training_trace.csv")
    export_report_json(metrics, out_dir / "training_metadata.json")
    if plot_likelihood_trace(metrics, out_dir / "loglikelihood_trace.png"):
        logger.info(f"Log-likelihood plot saved to {out_dir / 'loglikelihood_trace.png'}")


def evaluate(
    model_file: Path | str,
    corpus_file: Path | str,
    topic_prior: float = 0.1,
    word_prior: float = 0.01,
    iterations: int = 10,
    random_state: int | None = None,
    normalize: bool = False,
) -> list[float]:
    """Log-likelihood of a corpus under a saved model.

    Runs *iterations* inference sweeps: document labels are re-drawn
    against the fixed model, which is never modified.

    Returns
    -------
    list[float]
        Corpus log-likelihood after each sweep.
    """
    if iterations <= 0:
        raise ValueError("iterations must be positive")
    if topic_prior <= 0 or word_prior <= 0:
        raise ValueError("topic_prior and word_prior must be positive")

    model = load_model(model_file)
    corpus = load_corpus(corpus_file, model.num_topics, normalize=normalize)
    rng = np.random.default_rng(random_state)
    sampler = Sampler(topic_prior, word_prior, model, rng=rng)

    log_likelihoods: list[float] = []
    for iteration in range(iterations):
        sampler.corpus_gibbs_sampling(corpus, update_model=False, burn_in=True)
        log_likelihood = sampler.corpus_log_likelihood(corpus)
        logger.info(f"Inference iteration {iteration} ... log-likelihood: {log_likelihood:f}")
        log_likelihoods.append(log_likelihood)
    return log_likelihoods
