"""Domain entities package."""

from .document import Document, DocumentType, SearchResult
from .analysis import AIModel, Analysis, AnalysisResult, ChatMessage
from .chart_analysis import ChartAnalysis, Metric, Timeframe, KeyValue, Comparison, Outlier

__all__ = [
    'Document',
    'DocumentType',
    'SearchResult',
    'AIModel',
    'Analysis',
    'AnalysisResult',
    'ChatMessage',
    'ChartAnalysis',
    'Metric',
    'Timeframe',
    'KeyValue',
    'Comparison',
    'Outlier'
]
