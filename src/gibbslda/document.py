"""Documents: word occurrences, their topic labels and a topic histogram.

A document keeps its words sorted and grouped by unique word.  Every
occurrence owns one slot in ``wordtopics`` holding its current topic, and
``wordtopics_indices[i]`` is the first slot owned by ``unique_words[i]``::

    unique_words:        WORD1     WORD2  WORD3
    wordtopics_indices:  |         |      |
    wordtopics:          0 3 4 0   0 3    1
"""

from __future__ import annotations

import numpy as np

from gibbslda.errors import DocumentError, InvariantViolation
from gibbslda.sampling import new_histogram


class Document:
    """Occurrences of one text, grouped by unique word."""

    def __init__(
        self,
        unique_words: list[str],
        wordtopics_indices: list[int],
        wordtopics: np.ndarray,
        topic_histogram: np.ndarray,
    ) -> None:
        self.unique_words = unique_words
        self.wordtopics_indices = wordtopics_indices
        self.wordtopics = wordtopics
        self.topic_histogram = topic_histogram

    @classmethod
    def from_text(cls, text: str, num_topics: int) -> Document:
        """Parse whitespace-separated *text* into a Document.

        Every occurrence starts at topic 0, so the histogram begins as
        ``[n, 0, ..., 0]``.

        Parameters
        ----------
        text : str
            Words separated by runs of whitespace.
        num_topics : int
            Number of topics *K*; must be at least 2.

        Returns
        -------
        Document

        Raises
        ------
        DocumentError
            If *num_topics* < 2 or the text holds fewer than two words.
        """
        if num_topics <= 1:
            raise DocumentError(f"num_topics must be >= 2, got {num_topics}")

        words = text.split()
        if len(words) <= 1:
            raise DocumentError(f"Document has less than 2 words: {text!r}")
        words.sort()

        unique_words: list[str] = []
        indices: list[int] = []
        prev_word = None
        for i, word in enumerate(words):
            if word != prev_word:
                prev_word = word
                unique_words.append(word)
                indices.append(i)

        histogram = new_histogram(num_topics)
        histogram[0] = len(words)

        doc = cls(
            unique_words=unique_words,
            wordtopics_indices=indices,
            wordtopics=np.zeros(len(words), dtype=np.int64),
            topic_histogram=histogram,
        )
        if not doc.is_valid():
            raise DocumentError(f"Document is invalid: {text!r}")
        return doc

    @property
    def num_topics(self) -> int:
        return len(self.topic_histogram)

    def length(self) -> int:
        """Number of word occurrences (not unique words)."""
        return len(self.wordtopics)

    def is_valid(self) -> bool:
        return (
            len(self.unique_words) >= 1
            and len(self.wordtopics_indices) == len(self.unique_words)
            and len(self.wordtopics) >= 2
            and len(self.topic_histogram) >= 2
        )

    def cursor(self) -> OccurrenceCursor:
        """Return a cursor positioned on the first occurrence."""
        return OccurrenceCursor(self)

    def words(self) -> list[str]:
        """Every occurrence's word, in cursor order."""
        out: list[str] = []
        bounds = self.wordtopics_indices[1:] + [self.length()]
        for word, start, stop in zip(self.unique_words, self.wordtopics_indices, bounds):
            out.extend([word] * (stop - start))
        return out

    def __repr__(self) -> str:
        return (
            f"Document(unique_words={self.unique_words}, "
            f"wordtopics_indices={self.wordtopics_indices}, "
            f"wordtopics={self.wordtopics.tolist()}, "
            f"topic_histogram={self.topic_histogram.tolist()})"
        )


class OccurrenceCursor:
    """Forward-only walk over a document's occurrences.

    Visits unique words in sorted order and, within a word, its occurrences
    in slot order.  ``set_topic`` keeps the document histogram in step with
    the labels.  Using any accessor once ``done()`` is true raises
    ``InvariantViolation``.
    """

    def __init__(self, doc: Document) -> None:
        if not doc.is_valid():
            raise DocumentError("Cannot iterate over an invalid Document")
        self._doc = doc
        self._unique_word_index = 0
        self._word_topic_index = 0

    def done(self) -> bool:
        num_unique = len(self._doc.unique_words)
        if self._unique_word_index > num_unique:
            raise InvariantViolation(
                f"unique_word_index = {self._unique_word_index}, "
                f"len(unique_words) = {num_unique}"
            )
        return self._unique_word_index == num_unique

    def _check_not_done(self, operation: str) -> None:
        if self.done():
            raise InvariantViolation(f"Must not call {operation}() when done() is true.")

    def advance(self) -> None:
        self._check_not_done("advance")
        doc = self._doc
        self._word_topic_index += 1
        next_word = self._unique_word_index + 1
        if self._word_topic_index >= len(doc.wordtopics) or (
            next_word < len(doc.wordtopics_indices)
            and self._word_topic_index >= doc.wordtopics_indices[next_word]
        ):
            self._unique_word_index = next_word

    def word(self) -> str:
        self._check_not_done("word")
        return self._doc.unique_words[self._unique_word_index]

    def topic(self) -> int:
        self._check_not_done("topic")
        return int(self._doc.wordtopics[self._word_topic_index])

    def set_topic(self, new_topic: int) -> None:
        """Relabel the current occurrence and move its histogram count."""
        self._check_not_done("set_topic")
        num_topics = len(self._doc.topic_histogram)
        if new_topic < 0:
            raise InvariantViolation(f"new_topic ({new_topic}) is less than 0")
        if new_topic >= num_topics:
            raise InvariantViolation(
                f"new_topic ({new_topic}) >= num_topics ({num_topics})"
            )
        histogram = self._doc.topic_histogram
        histogram[self.topic()] -= 1
        histogram[new_topic] += 1
        self._doc.wordtopics[self._word_topic_index] = new_topic
