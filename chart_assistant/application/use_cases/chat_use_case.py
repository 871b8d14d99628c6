"""Chat use case implementation."""

import uuid
from typing import Iterator, List, Optional

from ...domain.entities import AIModel, ChatMessage, Document, DocumentType
from ...domain.repositories import DocumentIndexRepository, LLMRepository
from ...domain.services import ContextService
from ...logging_config import get_logger

logger = get_logger(__name__)


class ChatUseCase:
    """Use case for chatting about analysed charts, optionally with RAG context."""

    def __init__(
        self,
        llm_repository: LLMRepository,
        document_index: DocumentIndexRepository,
        context_service: ContextService
    ):
        self._llm_repo = llm_repository
        self._index = document_index
        self._context_service = context_service
        self._history: List[ChatMessage] = []

    @property
    def history(self) -> List[ChatMessage]:
        return list(self._history)

    def send_message(
        self,
        message: str,
        model: AIModel,
        use_rag: bool = False,
        image_url: Optional[str] = None
    ) -> Optional[ChatMessage]:
        """Send a message and return the assistant reply; blank messages are ignored."""
        if not message or not message.strip():
            return None

        prompt = self._start_turn(message, use_rag, image_url)
        reply = self._llm_repo.generate_answer(prompt, model, image_url)
        return self._finish_turn(message, reply)

    def stream_message(
        self,
        message: str,
        model: AIModel,
        use_rag: bool = False,
        image_url: Optional[str] = None
    ) -> Iterator[str]:
        """Yield reply tokens as they arrive; the turn is recorded once the stream ends."""
        if not message or not message.strip():
            return

        prompt = self._start_turn(message, use_rag, image_url)
        tokens = []
        for token in self._llm_repo.stream_answer(prompt, model, image_url):
            tokens.append(token)
            yield token
        self._finish_turn(message, "".join(tokens))

    def clear_history(self) -> None:
        self._history.clear()
        logger.info("Chat history cleared")

    def _start_turn(self, message: str, use_rag: bool, image_url: Optional[str]) -> str:
        self._history.append(ChatMessage(
            id=uuid.uuid4().hex, role="user", content=message, image_url=image_url
        ))
        context = self._context_service.build_context(message) if use_rag else ""
        if use_rag:
            logger.info(f"RAG context: {len(context)} chars for message '{message[:50]}'")
        return self._context_service.build_prompt(message, context)

    def _finish_turn(self, message: str, reply: str) -> ChatMessage:
        assistant_message = ChatMessage(id=uuid.uuid4().hex, role="assistant", content=reply)
        self._index.add_document(Document.create(
            id=assistant_message.id,
            content=f"User: {message}\nAssistant: {reply}",
            doc_type=DocumentType.CHAT,
            timestamp=assistant_message.timestamp,
            chat_id=assistant_message.id
        ))
        self._history.append(assistant_message)
        return assistant_message
