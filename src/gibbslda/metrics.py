"""Training trace: per-sweep statistics for reporting."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import pandas as pd


@dataclass
class SweepRecord:
    """Outcome of a single Gibbs sweep over the corpus."""

    iteration: int
    burn_in: bool
    log_likelihood: float | None
    seconds: float


@dataclass
class TrainingMetrics:
    """Corpus statistics plus the record of every sweep of a run."""

    num_documents: int
    num_occurrences: int
    vocabulary_size: int
    num_topics: int
    records: list[SweepRecord] = field(default_factory=list)

    @property
    def final_log_likelihood(self) -> float | None:
        """Last log-likelihood that was computed, if any."""
        for record in reversed(self.records):
            if record.log_likelihood is not None:
                return record.log_likelihood
        return None

    def to_frame(self) -> pd.DataFrame:
        """One row per sweep: iteration, burn_in, log_likelihood, seconds."""
        return pd.DataFrame(
            [asdict(r) for r in self.records],
            columns=["iteration", "burn_in", "log_likelihood", "seconds"],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured dictionary for JSON export.

        Returns
        -------
        dict
            Nested structure with sections: corpus, sampling, sweeps.
        """
        return {
            "corpus": {
                "num_documents": self.num_documents,
                "num_occurrences": self.num_occurrences,
                "vocabulary_size": self.vocabulary_size,
            },
            "sampling": {
                "num_topics": self.num_topics,
                "burn_in_sweeps": sum(1 for r in self.records if r.burn_in),
                "accumulated_sweeps": sum(1 for r in self.records if not r.burn_in),
                "final_log_likelihood": self.final_log_likelihood,
            },
            "sweeps": [asdict(r) for r in self.records],
        }
