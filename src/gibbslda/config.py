"""Central configuration for a Gibbs sampling training run.

Every knob the driver exposes lives in one ``@dataclass``; the command
line only overrides fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class TrainingConfig:
    """Settings of one training run.

    Parameters
    ----------
    num_topics : int
        The number of topics *K* in the trained model (>= 2).
    topic_prior : float
        Symmetric Dirichlet parameter on topics per document (alpha).
    word_prior : float
        Symmetric Dirichlet parameter on words per topic (beta).
    corpus_file : Path | None
        Training corpus, one document per line.
    model_file : Path | None
        Where the accumulated model is written.
    burn_in_iterations : int
        Gibbs sweeps whose samples are discarded.
    accumulate_iterations : int
        Sweeps after burn-in whose model state is accumulated.
    compute_loglikelihood : bool
        Compute and report the corpus log-likelihood before every sweep.
    random_state : int | None
        Seed for the sampler's random source. ``None`` draws fresh entropy.
    output_dir : Path | None
        If set, topic terms, the training trace and its plot go here.
    normalize : bool
        Transliterate and lowercase corpus lines before splitting.
    max_line_length : int
        Longest accepted corpus line, in characters.
    top_n_terms : int
        Terms per topic in the exported reports.
    """

    # ── Model shape & priors ──────────────────────────────────────
    num_topics: int = 2
    topic_prior: float = 0.1
    word_prior: float = 0.01

    # ── Paths ─────────────────────────────────────────────────────
    corpus_file: Path | None = None
    model_file: Path | None = None
    output_dir: Path | None = None

    # ── Sweeps ────────────────────────────────────────────────────
    burn_in_iterations: int = 50
    accumulate_iterations: int = 10
    compute_loglikelihood: bool = True
    random_state: int | None = None

    # ── Corpus reading ────────────────────────────────────────────
    normalize: bool = False
    max_line_length: int = 1024 * 1024

    # ── Reporting ─────────────────────────────────────────────────
    top_n_terms: int = 10

    # ── Helpers ────────────────────────────────────────────────────

    @property
    def total_iterations(self) -> int:
        return self.burn_in_iterations + self.accumulate_iterations

    def is_burn_in(self, iteration: int) -> bool:
        """True for the first ``burn_in_iterations`` sweeps (0-based)."""
        return iteration < self.burn_in_iterations

    def validate(self) -> list[str]:
        """Return a message for every invalid setting (empty when valid)."""
        problems: list[str] = []
        if self.num_topics < 2:
            problems.append("num_topics must be larger than or equal to 2")
        if self.topic_prior <= 0:
            problems.append("topic_prior must be positive")
        if self.word_prior <= 0:
            problems.append("word_prior must be positive")
        if self.corpus_file is None:
            problems.append("corpus_file must be specified")
        if self.model_file is None:
            problems.append("model_file must be specified")
        if self.burn_in_iterations <= 0:
            problems.append("burn_in_iterations must be positive")
        if self.accumulate_iterations <= 0:
            problems.append("accumulate_iterations must be positive")
        if self.max_line_length <= 0:
            problems.append("max_line_length must be positive")
        if self.top_n_terms <= 0:
            problems.append("top_n_terms must be positive")
        return problems

    def check(self) -> None:
        """Raise ``ValueError`` listing every invalid setting."""
        problems = self.validate()
        if problems:
            raise ValueError("; ".join(problems))
