"""Tests for gibbslda.document — Document construction and the occurrence cursor."""

import pytest

from gibbslda.document import Document
from gibbslda.errors import DocumentError, InvariantViolation

K = 3
CONTENT = "apple orange apple"


def visit(doc):
    """(word, topic) of every occurrence, in cursor order."""
    out = []
    cursor = doc.cursor()
    while not cursor.done():
        out.append((cursor.word(), cursor.topic()))
        cursor.advance()
    return out


# ── Document.from_text ────────────────────────────────────────────────


class TestFromText:
    @pytest.mark.parametrize("text", ["", "   ", "orange", "  orange \t"])
    def test_rejects_fewer_than_two_words(self, text):
        with pytest.raises(DocumentError):
            Document.from_text(text, K)

    @pytest.mark.parametrize("k", [0, 1])
    def test_rejects_fewer_than_two_topics(self, k):
        with pytest.raises(DocumentError):
            Document.from_text(CONTENT, k)

    def test_layout(self):
        doc = Document.from_text(CONTENT, K)
        assert doc.unique_words == ["apple", "orange"]
        assert doc.wordtopics_indices == [0, 2]
        assert doc.wordtopics.tolist() == [0, 0, 0]
        assert doc.topic_histogram.tolist() == [3, 0, 0]
        assert doc.length() == 3
        assert doc.num_topics == K

    def test_all_mass_starts_at_topic_zero(self):
        for k in (2, 5, 10):
            doc = Document.from_text("b a c a  d\te", k)
            assert doc.topic_histogram[0] == doc.length() == 6
            assert doc.topic_histogram[1:].sum() == 0
            assert set(doc.wordtopics.tolist()) == {0}

    def test_words_sorted_lexicographically(self):
        doc = Document.from_text("zebra Apple cat apple", 2)
        assert doc.unique_words == ["Apple", "apple", "cat", "zebra"]

    def test_words_expands_occurrences(self):
        doc = Document.from_text("b a b c b", 2)
        assert doc.words() == ["a", "b", "b", "b", "c"]

    def test_single_repeated_word(self):
        doc = Document.from_text("echo echo", 2)
        assert doc.unique_words == ["echo"]
        assert visit(doc) == [("echo", 0), ("echo", 0)]


# ── OccurrenceCursor ──────────────────────────────────────────────────


class TestOccurrenceCursor:
    def test_visits_occurrences_in_order(self):
        doc = Document.from_text(CONTENT, K)
        assert visit(doc) == [("apple", 0), ("apple", 0), ("orange", 0)]

    def test_last_word_with_several_occurrences(self):
        doc = Document.from_text("apple orange orange orange", K)
        assert [w for w, _ in visit(doc)] == ["apple", "orange", "orange", "orange"]

    def test_set_topic_moves_histogram_count(self):
        doc = Document.from_text(CONTENT, K)
        cursor = doc.cursor()
        cursor.set_topic(2)
        cursor.advance()
        cursor.advance()
        cursor.set_topic(1)
        assert doc.wordtopics.tolist() == [2, 0, 1]
        assert doc.topic_histogram.tolist() == [1, 1, 1]
        assert visit(doc) == [("apple", 2), ("apple", 0), ("orange", 1)]

    def test_set_same_topic_is_a_no_op(self):
        doc = Document.from_text(CONTENT, K)
        cursor = doc.cursor()
        cursor.set_topic(0)
        assert doc.topic_histogram.tolist() == [3, 0, 0]

    def test_histogram_sums_to_length(self):
        doc = Document.from_text("a b c d e f g", 4)
        cursor = doc.cursor()
        topic = 0
        while not cursor.done():
            cursor.set_topic(topic % 4)
            topic += 1
            assert doc.topic_histogram.sum() == doc.length()
            assert (doc.topic_histogram >= 0).all()
            cursor.advance()
        assert doc.topic_histogram.tolist() == [2, 2, 2, 1]

    @pytest.mark.parametrize("topic", [-1, K, K + 5])
    def test_set_topic_out_of_range(self, topic):
        doc = Document.from_text(CONTENT, K)
        with pytest.raises(InvariantViolation):
            doc.cursor().set_topic(topic)
        assert doc.topic_histogram.tolist() == [3, 0, 0]

    def test_accessors_past_end_are_fatal(self):
        doc = Document.from_text(CONTENT, K)
        cursor = doc.cursor()
        for _ in range(3):
            cursor.advance()
        assert cursor.done()
        for call in (cursor.advance, cursor.word, cursor.topic, lambda: cursor.set_topic(0)):
            with pytest.raises(InvariantViolation):
                call()
