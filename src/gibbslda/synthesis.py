"""Reporting: training trace exports and the log-likelihood plot."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gibbslda.metrics import TrainingMetrics


def export_trace_csv(metrics: TrainingMetrics, output_path: Path | str) -> None:
    """Write one CSV row per sweep (iteration, burn_in, log_likelihood, seconds)."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    metrics.to_frame().to_csv(output_path, index=False)


def export_report_json(metrics: TrainingMetrics, output_path: Path | str) -> None:
    """Export training metrics as structured JSON.

    Parameters
    ----------
    metrics : TrainingMetrics
        Corpus statistics and sweep records of the run.
    output_path : Path | str
        Path to save the .json file.
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(metrics.to_dict(), f, indent=2)


def plot_likelihood_trace(
    metrics: TrainingMetrics,
    output_path: Path | str,
) -> bool:
    """Plot corpus log-likelihood against sweep number.

    A dashed vertical line marks the end of burn-in.

    Parameters
    ----------
    metrics : TrainingMetrics
        Sweep records; sweeps without a log-likelihood are left out.
    output_path : Path | str
        Where to save the PNG chart.

    Returns
    -------
    bool
        False (and nothing written) when no sweep has a log-likelihood.
    """
    points = [
        (r.iteration, r.log_likelihood)
        for r in metrics.records
        if r.log_likelihood is not None
    ]
    if not points:
        return False

    import matplotlib
    matplotlib.use("Agg")          # non-interactive backend
    import matplotlib.pyplot as plt

    iterations = [p[0] for p in points]
    likelihoods = [p[1] for p in points]
    burn_in_sweeps = sum(1 for r in metrics.records if r.burn_in)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(iterations, likelihoods, marker="o", color="#4c72b0")
    if 0 < burn_in_sweeps < len(metrics.records):
        ax.axvline(burn_in_sweeps - 0.5, color="orange", linestyle="--", label="end of burn-in")
        ax.legend()
    ax.set_title("Corpus Log-Likelihood by Sweep")
    ax.set_xlabel("Sweep")
    ax.set_ylabel("Log-likelihood")

    plt.tight_layout()

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    fig.savefig(str(output_path), dpi=150)
    plt.close(fig)
    return True
