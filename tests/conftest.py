"""Test configuration and fixtures."""

import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from typing import Iterator, Optional

from chart_assistant.container import Container
from chart_assistant.domain.entities import AIModel, Document, DocumentType
from chart_assistant.domain.repositories import LLMRepository
from chart_assistant.domain.services import ContextService
from chart_assistant.infrastructure.storage import TfidfDocumentIndex


class MockLLMRepository(LLMRepository):
    """Mock implementation of LLMRepository for testing."""

    def __init__(self, mock_response: str = "Mock LLM response"):
        self.mock_response = mock_response
        self.call_count = 0
        self.last_prompt = None
        self.prompts = []

    def generate_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> str:
        self.call_count += 1
        self.last_prompt = prompt
        self.prompts.append(prompt)
        return self.mock_response

    def stream_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> Iterator[str]:
        reply = self.generate_answer(prompt, model, image_url)
        for word in reply.split(" "):
            yield word + " "

    def is_available(self) -> bool:
        return True


@pytest.fixture
def mock_llm_repository():
    """Provide mock LLM repository."""
    return MockLLMRepository()


@pytest.fixture
def document_index():
    """Provide an empty document index."""
    return TfidfDocumentIndex()


@pytest.fixture
def sample_documents():
    """Three small documents with mostly disjoint vocabularies."""
    return [
        Document.create("1", "revenue grew year over year driven by pricing", DocumentType.ANALYSIS),
        Document.create("2", "maintenance downtime caused throughput loss this quarter", DocumentType.ANALYSIS),
        Document.create("3", "headcount stable across regions this quarter", DocumentType.CHAT),
    ]


@pytest.fixture
def populated_index(document_index, sample_documents):
    """Provide an index holding the sample documents."""
    for doc in sample_documents:
        document_index.add_document(doc)
    return document_index


@pytest.fixture
def context_service(document_index):
    return ContextService(document_index, top_k=3)


@pytest.fixture
def test_container(mock_llm_repository, document_index):
    """Provide container with mocked dependencies."""
    container = Container()

    # Override with mocks
    container._llm_repository = mock_llm_repository
    container._document_index = document_index

    return container
