import os
from dotenv import load_dotenv

load_dotenv()

# Basic settings
DATA_DIR = os.path.abspath(os.getenv("DATA_DIR", "data"))
LOG_DIR = os.path.abspath(os.getenv("LOG_DIR", os.path.join(DATA_DIR, "logs")))

# Retrieval (RAG mode) configuration
# Results at or below this cosine similarity are never returned.
RAG_MIN_SIMILARITY = float(os.getenv("RAG_MIN_SIMILARITY", "0.1"))
# Number of past documents injected as chat context
RAG_TOP_K = int(os.getenv("RAG_TOP_K", "3"))
DEFAULT_SEARCH_K = int(os.getenv("DEFAULT_SEARCH_K", "5"))

# LLM configuration
DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "scout")
LLM_SEED = int(os.getenv("LLM_SEED", "42"))
LLM_SIMULATED_LATENCY = float(os.getenv("LLM_SIMULATED_LATENCY", "0.0"))

# Analysis formatting
FORMAT_MAX_BULLETS = int(os.getenv("FORMAT_MAX_BULLETS", "6"))

# API Configuration
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
FRONTEND_PORT = int(os.getenv("FRONTEND_PORT", "5173"))


def as_dict() -> dict:
    """Snapshot of the settings the container depends on."""
    return {
        "RAG_MIN_SIMILARITY": RAG_MIN_SIMILARITY,
        "RAG_TOP_K": RAG_TOP_K,
        "DEFAULT_SEARCH_K": DEFAULT_SEARCH_K,
        "DEFAULT_MODEL": DEFAULT_MODEL,
        "LLM_SEED": LLM_SEED,
        "LLM_SIMULATED_LATENCY": LLM_SIMULATED_LATENCY,
    }
