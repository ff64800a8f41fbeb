"""Collapsed Gibbs sampling for LDA.

The sampler re-draws the topic of every word occurrence from its
conditional distribution given all other assignments::

    P(z = k | rest) ~ (N(w, k) + beta) * (N(d, k) + alpha) / (N(k) + V * beta)

where the counts exclude the occurrence being re-drawn, alpha is the topic
prior and beta the word prior.  It is the only writer to the live model,
to the accumulator and to the document being swept.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from gibbslda.errors import InvariantViolation
from gibbslda.sampling import get_accumulative_sample

if TYPE_CHECKING:
    from gibbslda.document import Document
    from gibbslda.model import Model
    from gibbslda.sampling import RandomSource

logger = logging.getLogger(__name__)


class Sampler:
    """Drives Gibbs sweeps over documents and corpora.

    Parameters
    ----------
    topic_prior : float
        Symmetric Dirichlet concentration over topics per document (alpha).
    word_prior : float
        Symmetric Dirichlet concentration over words per topic (beta).
    model : Model
        The live model, mutated when sweeping with ``update_model=True``.
    accum_model : Model | None
        Receives the live model's counts after every non burn-in sweep.
    rng : RandomSource | None
        Source of uniform draws; a fresh ``numpy.random.default_rng()``
        when omitted.
    """

    def __init__(
        self,
        topic_prior: float,
        word_prior: float,
        model: Model,
        accum_model: Model | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.topic_prior = topic_prior
        self.word_prior = word_prior
        self.model = model
        self.accum_model = accum_model
        self.rng = rng if rng is not None else np.random.default_rng()

    def topic_distribution(
        self,
        doc: Document,
        word: str,
        target_topic: int,
        update_model: bool,
    ) -> np.ndarray:
        """Un-normalised conditional topic weights for one occurrence.

        When *update_model* is true the occurrence is still counted under
        *target_topic*, so that topic's three counts are reduced by one.
        """
        num_topics = self.model.num_topics
        adjustment = np.zeros(num_topics, dtype=np.int64)
        if update_model:
            adjustment[target_topic] = -1

        topic_word_factor = self.model.word_histogram(word) + adjustment
        document_topic_factor = doc.topic_histogram + adjustment
        global_topic_factor = self.model.global_histogram + adjustment
        return (
            (topic_word_factor + self.word_prior)
            * (document_topic_factor + self.topic_prior)
            / (global_topic_factor + self.model.num_words * self.word_prior)
        )

    def document_gibbs_sampling(self, doc: Document, update_model: bool) -> None:
        """Re-draw the topic of every occurrence in *doc*, in cursor order."""
        cursor = doc.cursor()
        while not cursor.done():
            word = cursor.word()
            old_topic = cursor.topic()
            distribution = self.topic_distribution(doc, word, old_topic, update_model)
            new_topic = get_accumulative_sample(distribution, self.rng)
            if new_topic == -1:
                raise InvariantViolation(f"Cannot sample from: {distribution.tolist()}")

            if update_model:
                self.model.reassign_topic(word, old_topic, new_topic)
            cursor.set_topic(new_topic)
            cursor.advance()

    def corpus_gibbs_sampling(
        self,
        corpus: list[Document],
        update_model: bool,
        burn_in: bool,
    ) -> None:
        """Sweep every document once, then fold the model into the accumulator.

        The accumulator is only written when it exists, the sweep updated
        the model, and the sweep is not part of burn-in.
        """
        for doc in corpus:
            self.document_gibbs_sampling(doc, update_model)

        if self.accum_model is not None and update_model and not burn_in:
            self.accum_model.accumulate(self.model)
            logger.debug("Accumulated live model into accumulator")

    # ── Log-likelihood ────────────────────────────────────────────────

    def topic_given_document(self, doc: Document) -> np.ndarray:
        """Smoothed ``P(z | d)`` for every topic."""
        num_topics = self.model.num_topics
        smoothed_doc_length = doc.length() + self.topic_prior * num_topics
        return (doc.topic_histogram + self.topic_prior) / smoothed_doc_length

    def document_log_likelihood(self, doc: Document) -> float:
        """Sum over occurrences of ``ln sum_z P(w | z) P(z | d)``.

        ``P(w | z)`` is smoothed with the document length as the scale of
        the word prior in the denominator.
        """
        prob_topic_given_document = self.topic_given_document(doc)
        global_topic_histogram = self.model.global_histogram
        doc_length = doc.length()

        log_likelihood = 0.0
        cursor = doc.cursor()
        while not cursor.done():
            word_topic_histogram = self.model.word_histogram(cursor.word())
            prob_word_given_topic = (word_topic_histogram + self.word_prior) / (
                global_topic_histogram + doc_length * self.word_prior
            )
            prob_word = float(np.dot(prob_word_given_topic, prob_topic_given_document))
            log_likelihood += math.log(prob_word)
            cursor.advance()
        return log_likelihood

    def corpus_log_likelihood(self, corpus: list[Document]) -> float:
        return sum(self.document_log_likelihood(doc) for doc in corpus)
