"""Retrieval context domain service."""

from typing import List

from ..entities import Document
from ..repositories import DocumentIndexRepository
from ...error_handler import handle_errors


class ContextService:
    """Turns past analyses and chat turns into prompt context."""

    def __init__(self, document_index: DocumentIndexRepository, top_k: int = 3):
        self._index = document_index
        self.top_k = top_k

    def retrieve(self, message: str) -> List[Document]:
        return self._index.search_similar(message, self.top_k)

    @handle_errors(default_return="")
    def build_context(self, message: str) -> str:
        """Join the contents of the most similar documents.

        Retrieval problems are logged and yield an empty context; the caller
        then sends the message without augmentation.
        """
        return "\n\n".join(doc.content for doc in self.retrieve(message))

    @staticmethod
    def build_prompt(message: str, context: str) -> str:
        if context:
            return f"Context: {context}\n\nUser: {message}"
        return message
