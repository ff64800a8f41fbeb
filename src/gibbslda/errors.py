"""Exception types shared by the sampler, the document store and the loaders.

Two tiers:

* ``LoadError`` and its subclasses are recoverable.  They abort the current
  load (a corpus line, a model file) and carry a human-readable reason.
* ``InvariantViolation`` signals a programming error or corrupted counts.
  Nothing in the package catches it.
"""

from __future__ import annotations


class LoadError(ValueError):
    """Input could not be turned into a Document, Corpus or Model."""


class DocumentError(LoadError):
    """Text is unusable as a document (too few words, bad topic count)."""


class CorpusError(LoadError):
    """Corpus file is unreadable or contains an invalid line."""


class ModelFormatError(LoadError):
    """Model file is unreadable or malformed."""


class InvariantViolation(RuntimeError):
    """Count bookkeeping was asked to do something that cannot be valid."""
