"""Domain services package."""

from .context_service import ContextService
from .analysis_formatter import FormatOptions, format_analysis_markdown

__all__ = [
    'ContextService',
    'FormatOptions',
    'format_analysis_markdown'
]
