"""Chart analysis use case implementation."""

import uuid
from typing import List, Optional

from ...domain.entities import AIModel, Analysis, AnalysisResult, Document, DocumentType
from ...domain.repositories import DocumentIndexRepository, LLMRepository
from ...exceptions import AnalysisError
from ...error_handler import handle_errors
from ...logging_config import get_logger

logger = get_logger(__name__)

# Battery of questions asked about every uploaded chart
ANALYSIS_QUESTIONS = [
    "What type of chart or graph is this?",
    "What are the main trends visible in this data?",
    "What are the key numerical values or data points?",
    "What insights can be drawn from this visualization?",
    "Are there any notable anomalies or outliers in the data?",
    "What time period does this chart cover?",
    "What do the axis labels and titles indicate?",
]


class AnalysisUseCase:
    """Use case for analysing an uploaded chart."""

    def __init__(
        self,
        llm_repository: LLMRepository,
        document_index: DocumentIndexRepository,
        questions: Optional[List[str]] = None
    ):
        self._llm_repo = llm_repository
        self._index = document_index
        self.questions = list(questions or ANALYSIS_QUESTIONS)
        self._history: List[Analysis] = []

    @property
    def history(self) -> List[Analysis]:
        """Analyses, newest first."""
        return list(self._history)

    @handle_errors(reraise=True)
    def execute(self, image_url: str, model: AIModel) -> Analysis:
        """Run the question battery against a chart and index the result."""
        if not image_url or not image_url.strip():
            raise AnalysisError(message="No chart image to analyse")

        logger.info(f"Analysing chart with {model.display_name} ({len(self.questions)} questions)")
        results = [
            AnalysisResult(
                question=question,
                answer=self._llm_repo.generate_answer(f"Analyze this chart: {question}", model, image_url)
            )
            for question in self.questions
        ]

        analysis = Analysis(id=uuid.uuid4().hex, image_url=image_url, results=results, model=model)
        self._index.add_document(Document.create(
            id=analysis.id,
            content=analysis.to_document_content(),
            doc_type=DocumentType.ANALYSIS,
            timestamp=analysis.timestamp,
            analysis_id=analysis.id
        ))
        self._history.insert(0, analysis)
        return analysis

    def clear_history(self) -> None:
        """Forget all analyses, including what RAG mode can retrieve."""
        self._history.clear()
        self._index.clear()
        logger.info("Analysis history cleared")
