"""
Dependency injection factories for FastAPI.

This module provides factory functions for creating service instances.
The key pool, rate limiter and HTTP client are process-wide singletons
(`lru_cache`), shared by every request for the life of the process.
"""
from functools import lru_cache

import httpx

from app.core.config import settings
from app.core.providers.llm_provider import LLMProvider
from app.core.providers.gemini_provider import GeminiProvider
from app.core.providers.groq_provider import GroqProvider
from app.core.providers.youtube_provider import (
    VideoInfoProvider,
    VideoInfoMetadataStrategy,
    WatchPageMetadataStrategy,
    PlaceholderMetadataStrategy,
    TranscriptApiStrategy,
    CaptionTrackStrategy,
)
from app.models.enums import LLMProviderType, ModelTier
from app.services.key_pool import ApiKeyPool
from app.services.rate_limiter import RateLimiter
from app.services.extractive import ExtractiveSummarizer
from app.services.summarization import SummarizationService, ProviderFactory
from app.services.youtube import YouTubeService
from app.services.web import WebPageService
from app.services.chat import ChatService


# =============================================================================
# SHARED STATE
# =============================================================================

@lru_cache
def get_key_pool() -> ApiKeyPool:
    """API keys of the configured summary provider."""
    return ApiKeyPool(settings.summary_api_keys)


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide rate limiter guarding the generative API."""
    return RateLimiter(key_pool=get_key_pool())


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Shared HTTP client for scraping and caption downloads."""
    return httpx.AsyncClient(
        timeout=settings.YOUTUBE_PROVIDER_TIMEOUT_SECONDS,
        follow_redirects=True,
    )


# =============================================================================
# PROVIDER FACTORIES
# =============================================================================

@lru_cache
def get_provider_factory() -> ProviderFactory:
    """
    Get a factory building one LLM provider per API key.

    Default: Gemini (configured in settings.SUMMARY_LLM_PROVIDER)
    """
    provider_type = settings.SUMMARY_LLM_PROVIDER

    @lru_cache(maxsize=None)
    def build(api_key: str) -> LLMProvider:
        if provider_type == LLMProviderType.GEMINI:
            return GeminiProvider(api_key=api_key, model_name=settings.GEMINI_MODEL_NAME)
        elif provider_type == LLMProviderType.GROQ:
            return GroqProvider(api_key=api_key, model_name=settings.GROQ_MODEL_NAME)
        raise ValueError(f"Unknown LLM provider: {provider_type}")

    return build


def get_model_names() -> dict[ModelTier, str]:
    """Model name per tier for the configured provider."""
    if settings.SUMMARY_LLM_PROVIDER == LLMProviderType.GROQ:
        return {
            ModelTier.STANDARD: settings.GROQ_MODEL_NAME,
            ModelTier.DEGRADED: settings.GROQ_DEGRADED_MODEL_NAME,
        }
    return {
        ModelTier.STANDARD: settings.GEMINI_MODEL_NAME,
        ModelTier.DEGRADED: settings.GEMINI_DEGRADED_MODEL_NAME,
    }


@lru_cache
def get_video_info_provider() -> VideoInfoProvider:
    """yt-dlp video info provider with its per-video cache."""
    return VideoInfoProvider()


# =============================================================================
# SERVICE FACTORIES
# =============================================================================

@lru_cache
def get_summarization_service() -> SummarizationService:
    """Get the degrading summarization service."""
    return SummarizationService(
        rate_limiter=get_rate_limiter(),
        provider_factory=get_provider_factory(),
        models=get_model_names(),
        extractive=ExtractiveSummarizer(),
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
    )


@lru_cache
def get_youtube_service() -> YouTubeService:
    """
    Get YouTube service with its provider chains.

    Wires together:
    - Metadata: yt-dlp info -> watch page scrape -> placeholder
    - Transcript: youtube-transcript-api -> yt-dlp caption track
    """
    info_provider = get_video_info_provider()
    http_client = get_http_client()
    return YouTubeService(
        metadata_strategies=[
            VideoInfoMetadataStrategy(info_provider),
            WatchPageMetadataStrategy(http_client),
            PlaceholderMetadataStrategy(),
        ],
        transcript_strategies=[
            TranscriptApiStrategy(),
            CaptionTrackStrategy(info_provider, http_client),
        ],
        timeout_seconds=settings.YOUTUBE_PROVIDER_TIMEOUT_SECONDS,
    )


@lru_cache
def get_web_page_service() -> WebPageService:
    """Get web page service for non-YouTube URLs."""
    return WebPageService(
        http_client=get_http_client(),
        timeout_seconds=settings.URL_FETCH_TIMEOUT_SECONDS,
    )


@lru_cache
def get_chat_service() -> ChatService:
    """Get chat service sharing the rate limiter with summarization."""
    return ChatService(
        rate_limiter=get_rate_limiter(),
        provider_factory=get_provider_factory(),
        models=get_model_names(),
        summarization_service=get_summarization_service(),
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
    )
