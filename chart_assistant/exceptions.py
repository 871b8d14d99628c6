"""Custom exceptions for the Chart Assistant application."""

from typing import Optional


class ChartAssistantError(Exception):
    """Base exception for all Chart Assistant errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class DocumentIndexError(ChartAssistantError):
    """Raised when document index operations fail."""
    pass


class InvalidDocumentError(DocumentIndexError):
    """Raised when a document handed to the index has no content."""
    pass


class LLMError(ChartAssistantError):
    """Raised when LLM operations fail."""
    pass


class AnalysisError(ChartAssistantError):
    """Raised when a chart analysis cannot be run."""
    pass


class FormattingError(ChartAssistantError):
    """Raised when analysis output cannot be formatted."""
    pass


class ConfigurationError(ChartAssistantError):
    """Raised when configuration is invalid."""
    pass
