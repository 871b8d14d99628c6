"""Domain package."""

from . import entities
from . import repositories  
from . import services

__all__ = ['entities', 'repositories', 'services']
