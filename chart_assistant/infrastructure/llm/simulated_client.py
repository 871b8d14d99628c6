"""Offline LLM implementation with canned, reproducible replies."""

import random
import re
import time
from typing import Iterator, Optional

from ...domain.entities import AIModel
from ...domain.repositories import LLMRepository
from ...exceptions import LLMError
from ...logging_config import get_logger

logger = get_logger(__name__)

CHART_RESPONSES = [
    "Based on my analysis using {model}, this appears to be a comprehensive data visualization "
    "showing multiple data series with clear trending patterns.",
    "The visualization demonstrates significant correlations between variables, with notable peaks "
    "and valleys that suggest seasonal or cyclical patterns in the underlying data.",
    "Key insights from this chart include upward trends in the primary metrics, with confidence "
    "intervals indicating statistical significance in the observed patterns.",
    "This data representation shows clear segmentation across different categories, with varying "
    "performance levels that warrant further investigation into root causes.",
]

CHAT_RESPONSES = [
    "Using advanced {model} analysis capabilities, I can help you understand the patterns and "
    "insights in your chart data.",
    "Based on the context of our previous analysis, I notice several interesting correlations that "
    "might be relevant to your question.",
    "Let me analyze this in the context of the chart data we've been discussing. The patterns suggest "
    "a steady trajectory with a few points worth a closer look.",
    "From an analytical perspective, considering the data visualization we're examining, the most "
    "useful next step is to compare the latest period against the baseline.",
]

_TOKEN = re.compile(r"\S+\s*")


class SimulatedLLMClient(LLMRepository):
    """Stand-in for the hosted vision model, usable without network access."""

    def __init__(self, seed: int = 42, latency: float = 0.0):
        self._rng = random.Random(seed)
        self.latency = latency

    def is_available(self) -> bool:
        return True

    def generate_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> str:
        if not prompt or not prompt.strip():
            raise LLMError(message="Prompt cannot be empty")

        logger.info(f"Generating simulated response with model: {model.provider_name}")
        if self.latency:
            time.sleep(self.latency)

        lowered = prompt.lower()
        pool = CHART_RESPONSES if "chart" in lowered or "graph" in lowered else CHAT_RESPONSES
        return self._rng.choice(pool).format(model=model.display_name)

    def stream_answer(self, prompt: str, model: AIModel, image_url: Optional[str] = None) -> Iterator[str]:
        reply = self.generate_answer(prompt, model, image_url)
        for token in _TOKEN.findall(reply):
            yield token
