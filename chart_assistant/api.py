"""FastAPI backend for the Chart Assistant.

Endpoints:
  POST   /analyses          -> run the question battery on a chart image URL
  DELETE /analyses          -> clear analysis history and the document index
  POST   /chat              -> {message, model, use_rag} returns the assistant reply
  POST   /chat/stream       -> same, as a text/event-stream of tokens
  DELETE /chat              -> clear chat history
  GET    /documents         -> indexed documents
  POST   /documents         -> index a document directly
  DELETE /documents         -> clear the document index
  GET    /documents/search  -> similar documents with scores
  POST   /format            -> structured analysis JSON rendered as text
  GET    /models, GET /health
"""

import json
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from .config import API_HOST, API_PORT, DEFAULT_SEARCH_K, FORMAT_MAX_BULLETS, FRONTEND_PORT
from .container import Container
from .domain.entities import AIModel, Analysis, ChartAnalysis, ChatMessage, Document, DocumentType
from .domain.services import FormatOptions, format_analysis_markdown
from .exceptions import (
    ChartAssistantError, AnalysisError, DocumentIndexError, FormattingError,
    InvalidDocumentError, LLMError
)
from .error_handler import log_error
from .logging_config import get_logger

logger = get_logger(__name__)


class AnalyzeRequest(BaseModel):
    image_url: str
    model: Optional[str] = None


class ChatRequest(BaseModel):
    message: str
    model: Optional[str] = None
    use_rag: bool = False
    image_url: Optional[str] = None


class DocumentRequest(BaseModel):
    id: str
    content: Optional[str] = None
    type: Literal["analysis", "chat"] = "chat"
    metadata: Dict[str, Any] = Field(default_factory=dict)


def _status_for(exc: ChartAssistantError) -> int:
    if isinstance(exc, (InvalidDocumentError, FormattingError)):
        return 422
    if isinstance(exc, AnalysisError):
        return 400
    if isinstance(exc, LLMError):
        return 502  # Bad Gateway
    if isinstance(exc, DocumentIndexError):
        return 503  # Service Unavailable
    return 500


def _document_to_dict(doc: Document) -> Dict[str, Any]:
    return {"id": doc.id, "content": doc.content, "metadata": doc.metadata}


def _message_to_dict(message: ChatMessage) -> Dict[str, Any]:
    return {
        "id": message.id,
        "role": message.role,
        "content": message.content,
        "timestamp": message.timestamp,
        "image_url": message.image_url,
    }


def _analysis_to_dict(analysis: Analysis) -> Dict[str, Any]:
    return {
        "id": analysis.id,
        "image_url": analysis.image_url,
        "model": analysis.model.value,
        "timestamp": analysis.timestamp,
        "results": [
            {"question": r.question, "answer": r.answer, "confidence": r.confidence}
            for r in analysis.results
        ],
    }


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Build an application bound to its own container (one session per app)."""
    container = container or Container()
    app = FastAPI(title="Chart Assistant")
    app.state.container = container

    @app.exception_handler(ChartAssistantError)
    async def chart_assistant_exception_handler(request, exc: ChartAssistantError):
        log_error(exc, f"API error in {request.url.path}")
        return JSONResponse(
            status_code=_status_for(exc),
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.details
            }
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            f"http://127.0.0.1:{FRONTEND_PORT}",
            f"http://localhost:{FRONTEND_PORT}",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def resolve_model(value: Optional[str]) -> AIModel:
        if value is None:
            return container.default_model
        try:
            return AIModel.from_value(value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/models")
    def models() -> Dict[str, Any]:
        return {
            "default": container.default_model.value,
            "models": [
                {"id": m.value, "name": m.display_name, "provider_model": m.provider_name}
                for m in AIModel
            ]
        }

    @app.post("/analyses")
    def analyze(req: AnalyzeRequest) -> Dict[str, Any]:
        model = resolve_model(req.model)
        analysis = container.analysis_use_case().execute(req.image_url, model)
        return _analysis_to_dict(analysis)

    @app.get("/analyses")
    def list_analyses() -> Dict[str, Any]:
        return {"analyses": [_analysis_to_dict(a) for a in container.analysis_use_case().history]}

    @app.delete("/analyses")
    def clear_analyses() -> Dict[str, Any]:
        container.analysis_use_case().clear_history()
        return {"status": "cleared", "documents": container.document_index().count()}

    @app.post("/chat")
    def chat(req: ChatRequest) -> Dict[str, Any]:
        if not req.message.strip():
            return JSONResponse({"error": "empty message"}, status_code=400)
        model = resolve_model(req.model)

        logger.info(f"Chat request: {req.message[:50]}... (model={model.value}, rag={req.use_rag})")
        reply = container.chat_use_case().send_message(
            req.message, model, use_rag=req.use_rag, image_url=req.image_url
        )
        return _message_to_dict(reply)

    @app.post("/chat/stream")
    def chat_stream(req: ChatRequest):
        if not req.message.strip():
            return JSONResponse({"error": "empty message"}, status_code=400)
        model = resolve_model(req.model)
        tokens = container.chat_use_case().stream_message(
            req.message, model, use_rag=req.use_rag, image_url=req.image_url
        )

        def events():
            for token in tokens:
                yield f"data: {json.dumps({'token': token})}\n\n"
            yield "data: [DONE]\n\n"

        return StreamingResponse(
            events(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"}
        )

    @app.get("/chat")
    def chat_history() -> Dict[str, Any]:
        return {"messages": [_message_to_dict(m) for m in container.chat_use_case().history]}

    @app.delete("/chat")
    def clear_chat() -> Dict[str, str]:
        container.chat_use_case().clear_history()
        return {"status": "cleared"}

    @app.get("/documents")
    def list_documents() -> Dict[str, Any]:
        docs = container.document_index().get_all_documents()
        return {"count": len(docs), "documents": [_document_to_dict(d) for d in docs]}

    @app.post("/documents", status_code=201)
    def add_document(req: DocumentRequest) -> Dict[str, Any]:
        doc = Document(
            id=req.id,
            content=req.content,
            metadata={**req.metadata, "timestamp": datetime.now(), "type": DocumentType(req.type).value}
        )
        container.document_index().add_document(doc)
        return _document_to_dict(doc)

    @app.delete("/documents")
    def clear_documents() -> Dict[str, str]:
        container.document_index().clear()
        return {"status": "cleared"}

    @app.get("/documents/search")
    def search_documents(
        q: str = Query(..., description="Free-text query"),
        k: int = Query(DEFAULT_SEARCH_K, ge=0, le=50, description="Maximum number of results")
    ) -> Dict[str, Any]:
        results = container.document_index().search_with_scores(q, k)
        return {
            "query": q,
            "results": [
                {**_document_to_dict(r.document), "score": r.score, "rank": r.rank}
                for r in results
            ]
        }

    @app.post("/format")
    def format_analysis(
        analysis: ChartAnalysis,
        max_bullets: int = Query(FORMAT_MAX_BULLETS, ge=0, le=50),
        include_empty: bool = Query(False)
    ) -> Dict[str, str]:
        options = FormatOptions(max_bullets_per_section=max_bullets, include_empty_sections=include_empty)
        return {"markdown": format_analysis_markdown(analysis, options)}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chart_assistant.api:create_app", factory=True, host=API_HOST, port=API_PORT)
