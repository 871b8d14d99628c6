"""Chart analysis and chat entities."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class AIModel(Enum):
    """Vision models offered to the user."""
    SCOUT = "scout"
    MAVERICK = "maverick"

    @property
    def provider_name(self) -> str:
        return _MODEL_CONFIG[self][0]

    @property
    def display_name(self) -> str:
        return _MODEL_CONFIG[self][1]

    @classmethod
    def from_value(cls, value) -> AIModel:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Invalid model: {value}") from None


_MODEL_CONFIG = {
    AIModel.SCOUT: ("meta-llama/llama-4-scout-17b-16e-instruct", "Llama 4 Scout 17B (Vision)"),
    AIModel.MAVERICK: ("meta-llama/llama-4-maverick-17b-128e-instruct", "Llama 4 Maverick 17B (Vision)"),
}


@dataclass
class AnalysisResult:
    """One question of the analysis battery and the model's answer."""
    question: str
    answer: str
    confidence: Optional[float] = None


@dataclass
class Analysis:
    """A completed analysis of one chart image."""
    id: str
    image_url: str
    results: List[AnalysisResult]
    model: AIModel
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Analysis ID cannot be empty")

    def to_document_content(self) -> str:
        return "\n".join(f"{r.question}: {r.answer}" for r in self.results)


@dataclass
class ChatMessage:
    """A single chat turn."""
    id: str
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ("user", "assistant"):
            raise ValueError("Role must be 'user' or 'assistant'")
