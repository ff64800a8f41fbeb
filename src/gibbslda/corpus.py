"""Corpus loading: one document per line, words separated by whitespace."""

from __future__ import annotations

import logging
from pathlib import Path

from unidecode import unidecode

from gibbslda.document import Document
from gibbslda.errors import CorpusError, DocumentError

logger = logging.getLogger(__name__)

MAX_CORPUS_LINE_LENGTH = 1024 * 1024

Corpus = list[Document]


def normalize_line(line: str) -> str:
    """Strip accents and lowercase, e.g. ``"Café"`` -> ``"cafe"``."""
    return unidecode(line).lower()


def load_corpus(
    path: Path | str,
    num_topics: int,
    max_line_length: int = MAX_CORPUS_LINE_LENGTH,
    normalize: bool = False,
) -> Corpus:
    """Read a corpus file into a list of Documents.

    Lines with fewer than two words are skipped.  Every other line must
    parse into a Document; the first one that does not aborts the load.

    Parameters
    ----------
    path : Path | str
        Text file, one document per line.
    num_topics : int
        Number of topics *K* used to size each document's histogram.
    max_line_length : int
        Longest accepted line, in characters.
    normalize : bool
        If True, transliterate to ASCII and lowercase before splitting.

    Returns
    -------
    list[Document]

    Raises
    ------
    CorpusError
        Unreadable or non-UTF-8 file, an over-long line, or a line that
        cannot become a Document.
    """
    corpus: Corpus = []
    skipped = 0
    try:
        with open(path, encoding="utf-8") as f:
            line_no = 0
            at_line_start = True
            while True:
                line = f.readline(max_line_length + 1)
                if not line:
                    break
                if at_line_start:
                    line_no += 1
                at_line_start = line.endswith("\n")
                text = line.rstrip("\r\n")
                if len(text) > max_line_length:
                    raise CorpusError(f"Encountered a long line ({path}:{line_no})")

                if normalize:
                    text = normalize_line(text)
                if len(text.split()) <= 1:
                    skipped += 1
                    continue

                try:
                    corpus.append(Document.from_text(text, num_topics))
                except DocumentError as exc:
                    raise CorpusError(
                        f"Cannot create document from line {line_no} of {path}: {exc}"
                    ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusError(f"Cannot read file: {path} ({exc})") from exc

    logger.info(f"Loaded {len(corpus)} documents from {path} ({skipped} lines skipped)")
    return corpus


def corpus_texts(corpus: Corpus) -> list[list[str]]:
    """Token lists of every document, for coherence scoring."""
    return [doc.words() for doc in corpus]


def count_occurrences(corpus: Corpus) -> int:
    return sum(doc.length() for doc in corpus)
