"""Infrastructure layer module."""

from . import llm
from . import storage

__all__ = ['llm', 'storage']
