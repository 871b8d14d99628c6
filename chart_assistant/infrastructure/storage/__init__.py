"""Storage infrastructure module."""

from .tfidf_document_index import TfidfDocumentIndex, tokenize, cosine_similarity

__all__ = ['TfidfDocumentIndex', 'tokenize', 'cosine_similarity']
