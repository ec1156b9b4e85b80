"""
Provider abstraction layer for generative and YouTube content sources.
"""
from app.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
    LLMProviderError,
    LLMQuotaError,
)
from app.core.providers.youtube_provider import (
    VideoInfoProvider,
    MetadataStrategy,
    TranscriptStrategy,
)

__all__ = [
    # LLM
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "LLMProviderError",
    "LLMQuotaError",
    # YouTube
    "VideoInfoProvider",
    "MetadataStrategy",
    "TranscriptStrategy",
]
