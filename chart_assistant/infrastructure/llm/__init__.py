"""LLM infrastructure module."""

from .simulated_client import SimulatedLLMClient

__all__ = ['SimulatedLLMClient']
