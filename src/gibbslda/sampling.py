"""Histogram / distribution helpers and the inverse-CDF categorical draw."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    def random(self) -> float: ...


def new_histogram(num_topics: int) -> np.ndarray:
    """Return an all-zero integer histogram with *num_topics* bins."""
    return np.zeros(num_topics, dtype=np.int64)


def new_distribution(num_topics: int) -> np.ndarray:
    """Return an all-zero float vector with *num_topics* entries."""
    return np.zeros(num_topics, dtype=np.float64)


def is_normalized(distribution: np.ndarray) -> bool:
    """True when *distribution* sums to one, up to a small tolerance."""
    total = float(np.sum(distribution))
    return (total - 1.0) * (total - 1.0) < 0.00001


def get_accumulative_sample(distribution: np.ndarray, rng: RandomSource) -> int:
    """Draw an index from an un-normalised weight vector.

    The draw is ``u * total`` for ``u`` uniform in [0, 1); the result is the
    first index whose running sum reaches or exceeds the draw.  Ties go to
    the lower index.

    Parameters
    ----------
    distribution : np.ndarray
        Non-negative weights, at least one positive.
    rng : RandomSource
        Anything with a ``random()`` method, normally a
        ``numpy.random.Generator``.

    Returns
    -------
    int
        The sampled index, or ``-1`` when the draw lands on no index
        (non-finite or non-positive mass).
    """
    # Running sum is sequential, so the total is its last entry.
    running = np.cumsum(distribution, dtype=np.float64)
    if len(running) == 0:
        return -1
    total = running[-1]
    if not np.isfinite(total) or total <= 0.0:
        return -1
    # searchsorted needs a non-decreasing running sum.
    if np.any(np.asarray(distribution) < 0):
        return -1

    choice = rng.random() * total
    index = int(np.searchsorted(running, choice, side="left"))
    if index >= len(running):
        return -1
    return index
