"""Topic-count tables for a whole corpus, and their flat text format.

A model maps every known word to a per-topic histogram and keeps a global
histogram equal to the column sums of all word histograms.  Unseen words
read as an all-zero histogram without being inserted.

File format, one line per word (fields separated by whitespace)::

    word_0   N(word_0, topic_0)  N(word_0, topic_1) ...
    word_1   N(word_1, topic_0)  N(word_1, topic_1) ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import numpy as np

from gibbslda.errors import InvariantViolation, ModelFormatError
from gibbslda.sampling import new_histogram

if TYPE_CHECKING:
    from gibbslda.document import Document

logger = logging.getLogger(__name__)

MAX_MODEL_LINE_LENGTH = 1024 * 1024  # at most 1 MiB per line


class Model:
    """Per-word and global topic histograms."""

    def __init__(self, num_topics: int) -> None:
        self.topic_histograms: dict[str, np.ndarray] = {}
        self.global_histogram = new_histogram(num_topics)
        self._zero_histogram = new_histogram(num_topics)
        self._zero_histogram.flags.writeable = False

    @classmethod
    def from_corpus(cls, num_topics: int, corpus: list[Document]) -> Model:
        """Count the current topic assignment of every occurrence in *corpus*."""
        model = cls(num_topics)
        for doc in corpus:
            cursor = doc.cursor()
            while not cursor.done():
                model.increment_topic(cursor.word(), cursor.topic(), 1)
                cursor.advance()
        return model

    # ── Accessors ─────────────────────────────────────────────────────

    @property
    def num_topics(self) -> int:
        return len(self.global_histogram)

    @property
    def num_words(self) -> int:
        """Vocabulary size: distinct words known to the model."""
        return len(self.topic_histograms)

    def word_histogram(self, word: str) -> np.ndarray:
        """Topic histogram of *word*; a read-only zero histogram if unseen."""
        return self.topic_histograms.get(word, self._zero_histogram)

    def words(self) -> Iterator[str]:
        return iter(self.topic_histograms)

    def __contains__(self, word: object) -> bool:
        return word in self.topic_histograms

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        if self.num_topics != other.num_topics:
            return False
        if not np.array_equal(self.global_histogram, other.global_histogram):
            return False
        for word in set(self.topic_histograms) | set(other.topic_histograms):
            if not np.array_equal(self.word_histogram(word), other.word_histogram(word)):
                return False
        return True

    def __repr__(self) -> str:
        return (
            f"Model(num_topics={self.num_topics}, num_words={self.num_words}, "
            f"global_histogram={self.global_histogram.tolist()})"
        )

    # ── Counting ──────────────────────────────────────────────────────

    def increment_topic(self, word: str, topic: int, count: int) -> None:
        """Add *count* to ``N(word, topic)`` and to the global ``N(topic)``."""
        if topic < 0 or topic >= self.num_topics:
            raise InvariantViolation(
                f"topic ({topic}) out of range for num_topics ({self.num_topics})"
            )
        histogram = self.topic_histograms.get(word)
        if histogram is None:
            histogram = new_histogram(self.num_topics)
            self.topic_histograms[word] = histogram

        histogram[topic] += count
        self.global_histogram[topic] += count

    def reassign_topic(self, word: str, old_topic: int, new_topic: int) -> None:
        """Move one occurrence of *word* from *old_topic* to *new_topic*."""
        self.increment_topic(word, old_topic, -1)
        self.increment_topic(word, new_topic, 1)

    def accumulate(self, other: Model) -> None:
        """Add every count of *other* into this model."""
        if self.num_topics != other.num_topics:
            raise InvariantViolation(
                f"model has ({self.num_topics}) topics; "
                f"other has ({other.num_topics}) topics."
            )
        for word, counts in other.topic_histograms.items():
            histogram = self.topic_histograms.get(word)
            if histogram is None:
                histogram = new_histogram(self.num_topics)
                self.topic_histograms[word] = histogram
            histogram += counts
            self.global_histogram += counts

    # ── Persistence ───────────────────────────────────────────────────

    def save(self, path: Path | str) -> None:
        """Write the model to *path*, one line per word, words sorted.

        Parameters
        ----------
        path : Path | str
            Destination file; parent directories are created.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for word in sorted(self.topic_histograms):
                counts = " ".join(str(int(c)) for c in self.topic_histograms[word])
                f.write(f"{word} {counts}\n")
        logger.debug(f"Saved {self.num_words} words x {self.num_topics} topics to {path}")


def load_model(
    path: Path | str,
    max_line_length: int = MAX_MODEL_LINE_LENGTH,
) -> Model:
    """Load a model saved by ``Model.save``.

    The number of topics is the field count of the first data line minus
    one.  Blank lines are skipped.

    Parameters
    ----------
    path : Path | str
        Model file.
    max_line_length : int
        Longest accepted line, in characters.

    Returns
    -------
    Model
        With the global histogram rebuilt from the column sums.

    Raises
    ------
    ModelFormatError
        Unreadable or non-UTF-8 file, a line with fewer than three
        fields, an inconsistent field count, a duplicated word, a
        non-integer count, an over-long line, or no data line at all.
    """
    model: Model | None = None
    try:
        with open(path, encoding="utf-8") as f:
            while True:
                line = f.readline(max_line_length + 1)
                if not line:
                    break
                if len(line.rstrip("\r\n")) > max_line_length:
                    raise ModelFormatError(f"Encountered a long line: {line[:80]}...")

                fields = line.split()
                if not fields:
                    continue
                if len(fields) < 3:
                    raise ModelFormatError(f"Invalid line: {line.rstrip()}")

                word = fields[0]
                if model is None:
                    model = Model(len(fields) - 1)
                elif len(fields) - 1 != model.num_topics:
                    raise ModelFormatError(f"Inconsistent num_topics: {line.rstrip()}")
                if word in model.topic_histograms:
                    raise ModelFormatError(f"Found duplicated word: {word}")

                try:
                    counts = np.array([int(c) for c in fields[1:]], dtype=np.int64)
                except ValueError as exc:
                    raise ModelFormatError(
                        f"Failed conversion to int in line: {line.rstrip()}"
                    ) from exc
                model.topic_histograms[word] = counts
                model.global_histogram += counts
    except (OSError, UnicodeDecodeError) as exc:
        raise ModelFormatError(f"Cannot read file: {path} ({exc})") from exc

    if model is None:
        raise ModelFormatError(f"No valid line in file: {path}")

    logger.info(f"Loaded model from {path}: {model.num_words} words, {model.num_topics} topics")
    return model
