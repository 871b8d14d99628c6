"""Repository interfaces package."""

from .document_index_repository import DocumentIndexRepository
from .llm_repository import LLMRepository

__all__ = [
    'DocumentIndexRepository',
    'LLMRepository'
]
