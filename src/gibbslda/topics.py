"""Topic identification: top terms, labels and coherence of a trained model.

Topic-word probabilities come straight from the counts::

    P(w | k) = (N(w, k) + beta) / (N(k) + V * beta)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from gensim.corpora import Dictionary
from gensim.models import CoherenceModel

if TYPE_CHECKING:
    from gibbslda.model import Model


def topic_word_probabilities(
    model: Model,
    topic_id: int,
    word_prior: float = 0.01,
) -> dict[str, float]:
    """Smoothed ``P(word | topic_id)`` for every word known to *model*."""
    denominator = model.global_histogram[topic_id] + model.num_words * word_prior
    return {
        word: float((model.topic_histograms[word][topic_id] + word_prior) / denominator)
        for word in model.words()
    }


def get_topic_terms(
    model: Model,
    topic_id: int,
    topn: int = 10,
    word_prior: float = 0.01,
) -> list[tuple[str, float]]:
    """Get the top *N* terms and their probabilities for a topic.

    Parameters
    ----------
    model : Model
        Trained (usually accumulated) model.
    topic_id : int
        The ID of the topic (0 to K-1).
    topn : int
        Number of top terms to retrieve.
    word_prior : float
        Symmetric Dirichlet prior used to smooth the counts.

    Returns
    -------
    list[tuple[str, float]]
        (word, probability) pairs, most probable first; ties by word.
    """
    probs = topic_word_probabilities(model, topic_id, word_prior)
    ranked = sorted(probs.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:topn]


def generate_topic_label(terms: list[tuple[str, float]]) -> str:
    """Join the top 3 words of *terms*, e.g. ``"machine, learning, model"``."""
    sorted_terms = sorted(terms, key=lambda x: x[1], reverse=True)
    top_words = [word for word, prob in sorted_terms[:3]]
    return ", ".join(top_words)


def get_all_topic_labels(
    model: Model,
    topn: int = 10,
    word_prior: float = 0.01,
) -> dict[int, str]:
    """Mapping of ``{topic_id: label}`` for every topic in *model*."""
    labels = {}
    for topic_id in range(model.num_topics):
        terms = get_topic_terms(model, topic_id, topn=topn, word_prior=word_prior)
        labels[topic_id] = generate_topic_label(terms)
    return labels


def export_topic_terms(
    model: Model,
    out_dir: Path,
    topn: int = 10,
    word_prior: float = 0.01,
) -> pd.DataFrame:
    """Export top terms with weights for every topic to CSV and JSON.

    Parameters
    ----------
    model : Model
        Trained model.
    out_dir : Path
        Directory to write ``topic_terms.csv`` and ``topic_terms.json``.
    topn : int
        Number of top terms per topic.
    word_prior : float
        Smoothing prior for the weights.

    Returns
    -------
    pd.DataFrame
        Flat table with columns: topic_id, label, rank, term, weight.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    rows: list[dict] = []
    json_topics: list[dict] = []

    for topic_id in range(model.num_topics):
        terms = get_topic_terms(model, topic_id, topn=topn, word_prior=word_prior)
        label = generate_topic_label(terms)

        json_entry: dict = {
            "topic_id": topic_id,
            "label": label,
            "count": int(model.global_histogram[topic_id]),
            "terms": [],
        }
        for rank, (term, weight) in enumerate(terms, start=1):
            rows.append(
                {
                    "topic_id": topic_id,
                    "label": label,
                    "rank": rank,
                    "term": term,
                    "weight": weight,
                }
            )
            json_entry["terms"].append({"rank": rank, "term": term, "weight": weight})
        json_topics.append(json_entry)

    df = pd.DataFrame(rows, columns=["topic_id", "label", "rank", "term", "weight"])
    df.to_csv(out_dir / "topic_terms.csv", index=False)

    with open(out_dir / "topic_terms.json", "w") as f:
        json.dump(json_topics, f, indent=2)

    return df


def compute_coherence(
    model: Model,
    texts: list[list[str]],
    topn: int = 10,
    coherence: str = "u_mass",
) -> float:
    """Score the top terms of every topic with Gensim's ``CoherenceModel``.

    Parameters
    ----------
    model : Model
        Trained model.
    texts : list[list[str]]
        Tokenised documents the coherence statistics are counted on.
    topn : int
        Terms per topic.
    coherence : str
        Any measure ``CoherenceModel`` accepts. ``u_mass`` only needs the
        bag-of-words corpus; ``c_v`` also reads the texts.

    Returns
    -------
    float
        Mean coherence over topics, ``nan`` when no topic has terms.
    """
    topics = [
        [word for word, _ in get_topic_terms(model, topic_id, topn=topn)]
        for topic_id in range(model.num_topics)
    ]
    topics = [t for t in topics if t]
    if not topics or not texts:
        return float("nan")

    dictionary = Dictionary(texts)
    bow_corpus = [dictionary.doc2bow(text) for text in texts]
    coherence_model = CoherenceModel(
        topics=topics,
        texts=texts,
        corpus=bow_corpus,
        dictionary=dictionary,
        coherence=coherence,
        topn=min(len(t) for t in topics),
    )
    return float(np.nanmean(coherence_model.get_coherence_per_topic()))
