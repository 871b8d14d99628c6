"""Abstract document index interface."""

from abc import ABC, abstractmethod
from typing import List

from ..entities import Document, SearchResult


class DocumentIndexRepository(ABC):
    """Abstract interface for similarity-searchable document storage."""

    @abstractmethod
    def add_document(self, document: Document) -> None:
        """Add a document and refresh every stored vector."""
        pass

    @abstractmethod
    def search_similar(self, query: str, top_k: int = 5) -> List[Document]:
        """Return up to ``top_k`` documents most similar to ``query``."""
        pass

    @abstractmethod
    def search_with_scores(self, query: str, top_k: int = 5) -> List[SearchResult]:
        """Same as ``search_similar`` but keeps the similarity scores."""
        pass

    @abstractmethod
    def get_all_documents(self) -> List[Document]:
        """Snapshot of all documents in insertion order."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Get total number of documents in the index."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all documents and the vocabulary."""
        pass
