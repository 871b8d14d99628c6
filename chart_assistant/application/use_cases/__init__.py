"""Application use cases package."""

from .analysis_use_case import AnalysisUseCase, ANALYSIS_QUESTIONS
from .chat_use_case import ChatUseCase

__all__ = ['AnalysisUseCase', 'ANALYSIS_QUESTIONS', 'ChatUseCase']
