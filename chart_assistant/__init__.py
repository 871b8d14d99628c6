"""Chart Assistant: chart analysis with retrieval-augmented chat."""

__version__ = "0.1.0"
