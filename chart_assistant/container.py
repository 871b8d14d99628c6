"""Dependency injection container for Clean Architecture."""

from typing import Optional

from . import config
from .domain.entities import AIModel
from .domain.repositories import DocumentIndexRepository, LLMRepository
from .domain.services import ContextService
from .infrastructure.storage import TfidfDocumentIndex
from .infrastructure.llm import SimulatedLLMClient
from .application.use_cases import AnalysisUseCase, ChatUseCase
from .error_handler import validate_config
from .logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_SETTINGS = ["RAG_MIN_SIMILARITY", "RAG_TOP_K", "DEFAULT_MODEL", "LLM_SEED"]


class Container:
    """Dependency injection container.

    One container owns one session's state (document index, histories).
    Build a new one per session or test instead of sharing a global.
    """

    def __init__(self, settings: Optional[dict] = None):
        self.settings = {**config.as_dict(), **(settings or {})}
        validate_config(self.settings, REQUIRED_SETTINGS, context="Container")

        self._document_index: Optional[DocumentIndexRepository] = None
        self._llm_repository: Optional[LLMRepository] = None
        self._context_service: Optional[ContextService] = None
        self._analysis_use_case: Optional[AnalysisUseCase] = None
        self._chat_use_case: Optional[ChatUseCase] = None

    @property
    def default_model(self) -> AIModel:
        return AIModel.from_value(self.settings["DEFAULT_MODEL"])

    def document_index(self) -> DocumentIndexRepository:
        """Get document index instance."""
        if self._document_index is None:
            logger.info("Creating TfidfDocumentIndex instance")
            self._document_index = TfidfDocumentIndex(
                min_similarity=self.settings["RAG_MIN_SIMILARITY"]
            )
        return self._document_index

    def llm_repository(self) -> LLMRepository:
        """Get LLM repository instance."""
        if self._llm_repository is None:
            logger.info("Creating simulated LLM client")
            self._llm_repository = SimulatedLLMClient(
                seed=self.settings["LLM_SEED"],
                latency=self.settings.get("LLM_SIMULATED_LATENCY") or 0.0
            )
        return self._llm_repository

    def context_service(self) -> ContextService:
        if self._context_service is None:
            self._context_service = ContextService(
                document_index=self.document_index(),
                top_k=self.settings["RAG_TOP_K"]
            )
        return self._context_service

    def analysis_use_case(self) -> AnalysisUseCase:
        if self._analysis_use_case is None:
            self._analysis_use_case = AnalysisUseCase(
                llm_repository=self.llm_repository(),
                document_index=self.document_index()
            )
        return self._analysis_use_case

    def chat_use_case(self) -> ChatUseCase:
        if self._chat_use_case is None:
            self._chat_use_case = ChatUseCase(
                llm_repository=self.llm_repository(),
                document_index=self.document_index(),
                context_service=self.context_service()
            )
        return self._chat_use_case

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._document_index = None
        self._llm_repository = None
        self._context_service = None
        self._analysis_use_case = None
        self._chat_use_case = None
        logger.info("Container reset")
