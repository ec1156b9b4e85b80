"""
Degrading summarization service.

This module provides the SummarizationService class, the single entry point
for turning text into a summary. It never raises: when the generative API is
cooling down, rate limited on every key, or failing, it falls back to the
deterministic ExtractiveSummarizer.

Policy, evaluated in order:
1. Cooldown active: extractive fallback, no external call.
2. Content shorter than 200 characters: returned verbatim.
3. Up to max(key count, 2) rounds against the generative API, rotating keys
   and degrading the model tier as the RateLimiter dictates.
4. Rounds exhausted: extractive fallback.
"""
import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger

from app.core.constants import SummarizationConfig
from app.core.prompts import SummarizationPrompts
from app.core.providers.llm_provider import (
    LLMMessage,
    LLMProvider,
    LLMProviderError,
    LLMQuotaError,
)
from app.models import (
    ContentType,
    LLMRole,
    ModelTier,
    QuotaOutcome,
    SummarizationResult,
    SummarySource,
)
from app.services.extractive import ExtractiveSummarizer
from app.services.rate_limiter import RateLimiter


ProviderFactory = Callable[[str], LLMProvider]
Sleep = Callable[[float], Awaitable[None]]


def truncate_for_processing(
    content: str, limit: int = SummarizationConfig.MAX_INPUT_CHARS
) -> str:
    """Cut content to the processing limit, marking the cut."""
    if len(content) <= limit:
        return content
    return content[:limit] + SummarizationConfig.TRUNCATION_SUFFIX


class SummarizationService:
    """
    Orchestrates generative summarization with key rotation and fallback.

    Attributes:
        rate_limiter: Shared limiter (and, through it, the key pool).
        provider_factory: Builds an LLMProvider bound to a given API key.
        models: Model name per tier.
        extractive: Fallback summarizer.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        provider_factory: ProviderFactory,
        models: dict[ModelTier, str],
        extractive: Optional[ExtractiveSummarizer] = None,
        timeout_seconds: Optional[float] = 60.0,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the summarization service.

        Args:
            rate_limiter: Process-wide rate limiter.
            provider_factory: Callable returning a provider for an API key.
            models: Model names for the standard and degraded tiers.
            extractive: Fallback summarizer (a default one is created if omitted).
            timeout_seconds: Bound on each generative call; expiry is retryable.
            sleep: Awaitable pause used between rounds.
        """
        self.rate_limiter = rate_limiter
        self.provider_factory = provider_factory
        self.models = models
        self.extractive = extractive or ExtractiveSummarizer()
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    async def summarize(
        self,
        content: str,
        content_type: ContentType = ContentType.TEXT,
        is_metadata_only: bool = False,
    ) -> SummarizationResult:
        """
        Summarize content, degrading instead of failing.

        Args:
            content: Text to summarize.
            content_type: Selects the prompt template and fallback heuristics.
            is_metadata_only: Content is synthesized video metadata rather
                than a real transcript.

        Returns:
            SummarizationResult tagged with how the text was produced.
        """
        if not self.rate_limiter.is_available():
            logger.info(
                f"In cooldown period until {self.rate_limiter.cooldown_until}; "
                "using extractive summary"
            )
            return self._fallback(content, content_type)

        if len(content) < SummarizationConfig.VERBATIM_THRESHOLD:
            logger.info(f"Content too short to summarize ({len(content)} chars); returning verbatim")
            return SummarizationResult(text=content, source=SummarySource.VERBATIM)

        key_pool = self.rate_limiter.key_pool
        max_rounds = max(key_pool.size, SummarizationConfig.MIN_ROUNDS)
        messages = self._build_messages(content, content_type, is_metadata_only)

        for attempt in range(1, max_rounds + 1):
            key_index, api_key = key_pool.current()
            tier = self.rate_limiter.model_tier
            model = self.models[tier]
            logger.info(
                f"Summarization attempt {attempt}/{max_rounds} using key "
                f"{key_index + 1}/{key_pool.size} ({model})"
            )

            try:
                response = await self._generate(api_key, messages, model)
            except LLMQuotaError as e:
                logger.warning(f"Quota error on key {key_index + 1}: {e}")
                outcome = self.rate_limiter.record_quota_error(key_index)
                if outcome == QuotaOutcome.COOLDOWN:
                    return self._fallback(content, content_type)
                await self._sleep(SummarizationConfig.ROTATION_DELAY_SECONDS)
                continue
            except (LLMProviderError, asyncio.TimeoutError) as e:
                logger.error(f"Generative API error on attempt {attempt}: {e!r}")
                if attempt < max_rounds and key_pool.size > 1:
                    self.rate_limiter.rotate_after_error(key_index)
                    await self._sleep(SummarizationConfig.RETRY_DELAY_SECONDS)
                continue

            self.rate_limiter.record_success()
            logger.info(f"Generated response: {len(response)} chars")

            if is_metadata_only:
                response = SummarizationPrompts.METADATA_NOTE + response
            return SummarizationResult(text=response, source=SummarySource.GENERATED_BY_MODEL)

        logger.warning(f"All {max_rounds} summarization attempts failed; using extractive summary")
        return self._fallback(content, content_type)

    async def _generate(self, api_key: str, messages: list[LLMMessage], model: str) -> str:
        provider = self.provider_factory(api_key)
        call = provider.generate_text(
            messages=messages,
            temperature=SummarizationConfig.TEMPERATURE,
            max_tokens=SummarizationConfig.MAX_OUTPUT_TOKENS,
            model=model,
        )
        response = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        return response.content

    def _build_messages(
        self, content: str, content_type: ContentType, is_metadata_only: bool
    ) -> list[LLMMessage]:
        label = "Video metadata" if is_metadata_only else "Content"
        return [
            LLMMessage(
                role=LLMRole.SYSTEM,
                content=SummarizationPrompts.for_content_type(content_type, is_metadata_only),
            ),
            LLMMessage(
                role=LLMRole.USER,
                content=f"{label}:\n{content}",
            ),
        ]

    def _fallback(self, content: str, content_type: ContentType) -> SummarizationResult:
        return SummarizationResult(
            text=self.extractive.summarize(content, content_type),
            source=SummarySource.EXTRACTIVE_FALLBACK,
        )
