"""In-memory TF-IDF document index."""

import re
import threading
from collections import Counter
from typing import Dict, List, Optional

import numpy as np

from ...domain.entities import Document, SearchResult
from ...domain.repositories import DocumentIndexRepository
from ...exceptions import InvalidDocumentError
from ...logging_config import get_logger

logger = get_logger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")

DEFAULT_MIN_SIMILARITY = 0.1


def tokenize(text: str) -> List[str]:
    """Lowercase, blank out punctuation, split on whitespace, keep tokens longer than 2 chars."""
    return [t for t in _NON_WORD.sub(" ", text.lower()).split() if len(t) > 2]


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


class TfidfDocumentIndex(DocumentIndexRepository):
    """Lexical similarity index over a small, session-scoped corpus.

    Every insertion recomputes all vectors because both the vocabulary and
    the idf denominator change. Weights follow ``tf * ln(N / (df + 1))``.
    All public operations hold one re-entrant lock, so a search never
    observes a half-applied insertion.
    """

    def __init__(self, min_similarity: float = DEFAULT_MIN_SIMILARITY):
        self.min_similarity = min_similarity
        self._documents: List[Document] = []
        # term -> column; dict order is the vector enumeration order
        self._vocabulary: Dict[str, int] = {}
        # per-document term counts and token totals, parallel to _documents
        self._term_counts: List[Counter] = []
        self._token_totals: List[int] = []
        self._idf: Optional[np.ndarray] = None
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return self.count()

    @property
    def vocabulary(self) -> List[str]:
        with self._lock:
            return list(self._vocabulary)

    def add_document(self, document: Document) -> None:
        """Add a document and recompute the vectors of the whole corpus."""
        if not isinstance(getattr(document, "content", None), str):
            raise InvalidDocumentError(
                message="Document content is missing",
                details={"document_id": getattr(document, "id", None)}
            )

        tokens = tokenize(document.content)
        with self._lock:
            for token in tokens:
                if token not in self._vocabulary:
                    self._vocabulary[token] = len(self._vocabulary)

            self._documents.append(document)
            self._term_counts.append(Counter(tokens))
            self._token_totals.append(len(tokens))
            self._recompute_vectors()

            logger.debug(
                f"Indexed document {document.id} ({len(tokens)} tokens); "
                f"corpus={len(self._documents)} vocabulary={len(self._vocabulary)}"
            )

    def search_similar(self, query: str, top_k: int = 5) -> List[Document]:
        return [result.document for result in self.search_with_scores(query, top_k)]

    def search_with_scores(self, query: str, top_k: int = 5) -> List[SearchResult]:
        tokens = tokenize(query or "")
        with self._lock:
            if not self._documents or top_k <= 0:
                return []

            query_vector = self._tfidf_vector(Counter(tokens), len(tokens))
            scored = [
                (cosine_similarity(query_vector, doc.vector), position)
                for position, doc in enumerate(self._documents)
            ]
            # sorted() is stable, so equal scores keep insertion order
            ranked = sorted(scored, key=lambda item: -item[0])

            results = []
            for score, position in ranked:
                if len(results) >= top_k or score <= self.min_similarity:
                    break
                results.append(SearchResult(document=self._documents[position], score=score, rank=len(results)))
            return results

    def get_all_documents(self) -> List[Document]:
        with self._lock:
            return list(self._documents)

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def clear(self) -> None:
        with self._lock:
            self._documents = []
            self._vocabulary = {}
            self._term_counts = []
            self._token_totals = []
            self._idf = None
        logger.info("Document index cleared")

    def _recompute_vectors(self) -> None:
        doc_freq = np.zeros(len(self._vocabulary))
        for counts in self._term_counts:
            for term in counts:
                doc_freq[self._vocabulary[term]] += 1
        self._idf = np.log(len(self._documents) / (doc_freq + 1))

        for doc, counts, total in zip(self._documents, self._term_counts, self._token_totals):
            doc.vector = self._tfidf_vector(counts, total)

    def _tfidf_vector(self, counts: Counter, total: int) -> np.ndarray:
        tf = np.zeros(len(self._vocabulary))
        if total:
            for term, count in counts.items():
                column = self._vocabulary.get(term)
                if column is not None:
                    tf[column] = count / total
        return tf * self._idf
