"""Domain entities for the document index."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np


class DocumentType(Enum):
    """What produced an indexed document."""
    ANALYSIS = "analysis"
    CHAT = "chat"


@dataclass
class Document:
    """A unit of indexed text plus caller-owned metadata.

    ``vector`` is written by the index on every insertion and should never be
    set by callers.
    """
    id: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    vector: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        id: str,
        content: str,
        doc_type: DocumentType,
        timestamp: Optional[datetime] = None,
        **extra: Any
    ) -> Document:
        """Build a document with the standard ``timestamp``/``type`` metadata."""
        metadata = {"timestamp": timestamp or datetime.now(), "type": doc_type.value}
        metadata.update(extra)
        return cls(id=id, content=content, metadata=metadata)

    @property
    def doc_type(self) -> Optional[str]:
        return self.metadata.get("type")


@dataclass
class SearchResult:
    """A retrieved document with its cosine similarity to the query."""
    document: Document
    score: float
    rank: int

    def __post_init__(self) -> None:
        if self.rank < 0:
            raise ValueError("Rank must be non-negative")
