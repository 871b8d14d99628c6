"""Abstract LLM repository interface."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from ..entities import AIModel


class LLMRepository(ABC):
    """Abstract interface for LLM operations."""

    @abstractmethod
    def generate_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> str:
        """Generate an answer using the LLM."""
        pass

    @abstractmethod
    def stream_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> Iterator[str]:
        """Generate an answer token by token."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the LLM is available."""
        pass
