"""Test cases for the TF-IDF document index."""

import math
import threading

import numpy as np
import pytest

from chart_assistant.domain.entities import Document, DocumentType
from chart_assistant.exceptions import InvalidDocumentError, DocumentIndexError
from chart_assistant.infrastructure.storage import TfidfDocumentIndex, tokenize, cosine_similarity


def _ids(documents):
    return [doc.id for doc in documents]


class TestTokenize:
    """Test the shared tokenizer."""

    def test_lowercases_and_strips_punctuation(self):
        tokens = tokenize("Hello, World! It's a by-product of Q3_2024.")
        assert tokens == ["hello", "world", "product", "q3_2024"]

    def test_drops_short_tokens(self):
        assert tokenize("an ox is by me") == []

    def test_keeps_repeated_tokens(self):
        assert tokenize("year over year") == ["year", "over", "year"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("   \n\t ") == []


class TestCosineSimilarity:

    def test_identical_direction(self):
        assert cosine_similarity(np.array([1.0, 2.0]), np.array([2.0, 4.0])) == pytest.approx(1.0)

    def test_zero_magnitude_is_zero(self):
        assert cosine_similarity(np.zeros(3), np.array([1.0, 0.0, 0.0])) == 0.0
        assert cosine_similarity(np.zeros(0), np.zeros(0)) == 0.0


class TestAddDocument:
    """Test insertion and vector maintenance."""

    def test_vocabulary_in_first_seen_order(self, populated_index):
        assert populated_index.vocabulary == [
            "revenue", "grew", "year", "over", "driven", "pricing",
            "maintenance", "downtime", "caused", "throughput", "loss", "this", "quarter",
            "headcount", "stable", "across", "regions",
        ]

    def test_all_vectors_match_vocabulary_size(self, document_index, sample_documents):
        for doc in sample_documents:
            document_index.add_document(doc)
            size = len(document_index.vocabulary)
            assert all(len(d.vector) == size for d in document_index.get_all_documents())

    def test_prior_vectors_are_recomputed(self, document_index, sample_documents):
        first = sample_documents[0]
        document_index.add_document(first)
        assert len(first.vector) == 6

        document_index.add_document(sample_documents[1])
        assert len(first.vector) == 13

    def test_tfidf_weights(self, populated_index, sample_documents):
        vocab = populated_index.vocabulary
        doc1, doc2, doc3 = sample_documents

        # N = 3; "year" occurs twice in a 7-token document and only in doc 1
        assert doc1.vector[vocab.index("year")] == pytest.approx(2 / 7 * math.log(3 / 2))
        assert doc2.vector[vocab.index("maintenance")] == pytest.approx(1 / 7 * math.log(3 / 2))
        # "quarter" is in two of three documents: ln(3 / 3) == 0
        assert doc3.vector[vocab.index("quarter")] == pytest.approx(0.0)
        # absent terms weigh nothing
        assert doc3.vector[vocab.index("revenue")] == pytest.approx(0.0)

    def test_vocabulary_grows_monotonically(self, document_index):
        texts = [
            "chart shows revenue growth",
            "revenue growth chart",  # nothing new
            "margin compression visible",
        ]
        sizes = []
        for i, text in enumerate(texts):
            document_index.add_document(Document(id=str(i), content=text))
            sizes.append(len(document_index.vocabulary))

        assert sizes == [4, 4, 7]

    def test_empty_content_is_valid(self, document_index):
        document_index.add_document(Document(id="a", content="quarterly revenue"))
        document_index.add_document(Document(id="empty", content=""))

        empty = document_index.get_all_documents()[1]
        assert document_index.count() == 2
        assert len(empty.vector) == 2
        assert not empty.vector.any()

    def test_missing_content_is_rejected(self, document_index):
        document_index.add_document(Document(id="a", content="quarterly revenue"))

        with pytest.raises(InvalidDocumentError) as exc_info:
            document_index.add_document(Document(id="broken", content=None))

        assert isinstance(exc_info.value, DocumentIndexError)
        assert exc_info.value.details["document_id"] == "broken"
        assert document_index.count() == 1
        assert document_index.vocabulary == ["quarterly", "revenue"]

    def test_duplicate_ids_are_distinct_entries(self, document_index):
        document_index.add_document(Document(id="dup", content="first revenue note"))
        document_index.add_document(Document(id="dup", content="second revenue note"))

        assert _ids(document_index.get_all_documents()) == ["dup", "dup"]
        assert len(document_index) == 2

    def test_ids_are_not_validated(self, document_index):
        document_index.add_document(Document(id="", content="unnamed revenue note"))

        assert _ids(document_index.get_all_documents()) == [""]

    def test_metadata_is_passed_through(self, document_index):
        doc = Document.create("a1", "bar chart of sales", DocumentType.ANALYSIS, analysis_id="a1", domain="sales")
        document_index.add_document(doc)

        stored = document_index.get_all_documents()[0]
        assert stored.metadata["type"] == "analysis"
        assert stored.metadata["domain"] == "sales"
        assert "timestamp" in stored.metadata


class TestSearchSimilar:
    """Test similarity queries."""

    def test_example_query(self, populated_index):
        results = populated_index.search_with_scores("revenue pricing trend", 2)

        assert [r.document.id for r in results] == ["1"]
        # revenue and pricing match; "year" weighs double in doc 1
        assert results[0].score == pytest.approx(2 / (math.sqrt(2) * 3))

    def test_two_disjoint_documents_have_zero_weights(self, document_index, sample_documents):
        # With N=2 every term has df=1, so ln(2 / 2) zeroes all weights
        document_index.add_document(sample_documents[0])
        document_index.add_document(sample_documents[1])

        assert document_index.search_similar("revenue pricing trend", 2) == []

    def test_self_similarity_ranks_first(self, populated_index, sample_documents):
        target = sample_documents[1]
        results = populated_index.search_with_scores(target.content, 3)

        assert results[0].document is target
        assert results[0].score == pytest.approx(1.0)

    def test_single_document_matches_itself(self, document_index):
        # N=1 gives negative idf, but query and document share the sign
        document_index.add_document(Document(id="only", content="pie chart of market share"))

        assert _ids(document_index.search_similar("market share", 5)) == ["only"]

    def test_ties_keep_insertion_order(self, document_index):
        for doc_id, content in [
            ("a", "alpha beta gamma"),
            ("b", "alpha beta gamma"),
            ("c", "delta epsilon zeta"),
            ("d", "theta iota kappa"),
        ]:
            document_index.add_document(Document(id=doc_id, content=content))

        results = document_index.search_with_scores("alpha", 5)
        assert [r.document.id for r in results] == ["a", "b"]
        assert results[0].score == results[1].score

    def test_results_ordered_by_similarity(self, document_index):
        for doc_id, content in [
            ("weak", "revenue appears once among many other unrelated words here"),
            ("strong", "revenue revenue revenue"),
            ("none", "downtime throughput loss"),
            ("other", "headcount stable regions"),
        ]:
            document_index.add_document(Document(id=doc_id, content=content))

        results = document_index.search_with_scores("revenue", 5)
        assert [r.document.id for r in results] == ["strong", "weak"]
        assert [r.rank for r in results] == [0, 1]
        assert results[0].score > results[1].score

    def test_deterministic(self, populated_index):
        first = _ids(populated_index.search_similar("quarter revenue pricing", 3))
        second = _ids(populated_index.search_similar("quarter revenue pricing", 3))
        assert first == second

    def test_no_overlap_returns_nothing(self, populated_index):
        assert populated_index.search_similar("zebra giraffe savanna", 5) == []

    def test_empty_corpus(self, document_index):
        assert document_index.search_similar("revenue", 5) == []
        assert document_index.search_with_scores("revenue", 5) == []

    def test_empty_and_short_queries(self, populated_index):
        assert populated_index.search_similar("", 5) == []
        assert populated_index.search_similar("a an of", 5) == []

    def test_top_k_boundaries(self, populated_index):
        assert populated_index.search_similar("revenue pricing", 0) == []
        assert populated_index.search_similar("revenue pricing", -1) == []
        assert _ids(populated_index.search_similar("revenue pricing", 10)) == ["1"]

    def test_top_k_truncates(self, document_index):
        # revenue must stay rare enough for a positive idf: df=5 of N=10
        for i in range(5):
            document_index.add_document(Document(id=f"r{i}", content=f"revenue report number{i}"))
            document_index.add_document(Document(id=f"m{i}", content=f"maintenance log entry{i}"))

        assert len(document_index.search_similar("revenue", 2)) == 2

    def test_query_does_not_mutate_index(self, populated_index):
        vocabulary = populated_index.vocabulary
        vectors = [doc.vector.copy() for doc in populated_index.get_all_documents()]

        populated_index.search_similar("brand new words entirely revenue", 3)

        assert populated_index.vocabulary == vocabulary
        for before, doc in zip(vectors, populated_index.get_all_documents()):
            assert np.array_equal(before, doc.vector)

    def test_min_similarity_floor_is_configurable(self, sample_documents):
        index = TfidfDocumentIndex(min_similarity=0.5)
        for doc in sample_documents:
            index.add_document(doc)

        # the example query scores about 0.47
        assert index.search_similar("revenue pricing trend", 2) == []


class TestClearAndSnapshot:
    """Test clear() and get_all_documents()."""

    def test_clear_resets_fully(self, populated_index):
        populated_index.clear()

        assert populated_index.get_all_documents() == []
        assert populated_index.vocabulary == []
        assert populated_index.search_similar("revenue", 3) == []

        doc = Document(id="new", content="scatter plot of churn")
        populated_index.add_document(doc)
        assert populated_index.vocabulary == ["scatter", "plot", "churn"]
        assert len(doc.vector) == 3

    def test_clear_is_idempotent(self, document_index):
        document_index.clear()
        document_index.clear()
        assert document_index.count() == 0

    def test_snapshot_is_a_copy(self, populated_index):
        snapshot = populated_index.get_all_documents()
        snapshot.clear()

        assert populated_index.count() == 3
        assert _ids(populated_index.get_all_documents()) == ["1", "2", "3"]


class TestConcurrentAccess:
    """Insertions and searches from several threads share one index."""

    def test_searches_during_insertions(self, document_index):
        errors = []
        done = threading.Event()

        def writer():
            try:
                for i in range(300):
                    document_index.add_document(
                        Document.create(str(i), f"word{i}x{i} common shared text", DocumentType.CHAT)
                    )
            except Exception as e:
                errors.append(e)
            finally:
                done.set()

        def reader():
            try:
                while not done.is_set():
                    document_index.search_with_scores("word1x1 word3x3 common", top_k=5)
                    document_index.get_all_documents()
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert document_index.count() == 300
        sizes = {len(doc.vector) for doc in document_index.get_all_documents()}
        assert sizes == {len(document_index.vocabulary)}
