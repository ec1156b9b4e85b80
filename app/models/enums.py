"""
Enums for type-safe values across the application.
"""
from enum import Enum


class LLMRole(str, Enum):
    """Role for LLM provider messages (OpenAI/Gemini/Groq compatible)."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class LLMProviderType(str, Enum):
    """Supported LLM provider types for configuration."""
    GEMINI = "gemini"
    GROQ = "groq"


class ContentType(str, Enum):
    """Kind of content being summarized; selects prompt and fallback heuristics."""
    TEXT = "text"
    LECTURE = "lecture"
    BOOK = "book"
    NOTES = "notes"


class SummarySource(str, Enum):
    """How a summary was produced."""
    GENERATED_BY_MODEL = "generated_by_model"
    EXTRACTIVE_FALLBACK = "extractive_fallback"
    VERBATIM = "verbatim"


class ModelTier(str, Enum):
    """Model tier selected from the consecutive quota error count."""
    STANDARD = "standard"
    DEGRADED = "degraded"


class QuotaOutcome(str, Enum):
    """Rate limiter transition taken after a quota error."""
    ROTATED = "rotated"
    COOLDOWN = "cooldown"
