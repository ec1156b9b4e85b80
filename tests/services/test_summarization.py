import asyncio
import pytest
from unittest.mock import AsyncMock
from datetime import timedelta

from app.core.prompts import SummarizationPrompts
from app.core.providers.llm_provider import LLMProviderError, LLMQuotaError
from app.models import ContentType, LLMRole, SummarySource
from app.services.summarization import SummarizationService, truncate_for_processing


def build_service(limiter, provider, models, keys_used=None, **kwargs):
    def factory(api_key):
        if keys_used is not None:
            keys_used.append(api_key)
        return provider

    return SummarizationService(
        rate_limiter=limiter,
        provider_factory=factory,
        models=models,
        sleep=kwargs.pop("sleep", AsyncMock()),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_cooldown_skips_generation(single_key_limiter, make_provider, models, long_text):
    """While cooling down, no generative call is made and the fallback is used."""
    provider = make_provider(["Generated"])
    service = build_service(single_key_limiter, provider, models)
    single_key_limiter.record_quota_error()

    result = await service.summarize(long_text, ContentType.TEXT)

    assert result.source == SummarySource.EXTRACTIVE_FALLBACK
    assert "## Beginning" in result.text
    assert provider.calls == []


@pytest.mark.asyncio
async def test_generation_resumes_after_cooldown(single_key_limiter, clock, make_provider, models, long_text):
    provider = make_provider(["Generated"])
    service = build_service(single_key_limiter, provider, models)
    single_key_limiter.record_quota_error()
    clock.advance(minutes=1)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.GENERATED_BY_MODEL
    assert single_key_limiter.cooldown_until is None


@pytest.mark.asyncio
async def test_short_content_returned_verbatim(single_key_limiter, make_provider, models):
    provider = make_provider(["Generated"])
    service = build_service(single_key_limiter, provider, models)

    result = await service.summarize("Short note about nothing.", ContentType.NOTES)

    assert result.source == SummarySource.VERBATIM
    assert result.text == "Short note about nothing."
    assert provider.calls == []


@pytest.mark.asyncio
async def test_successful_generation(single_key_limiter, make_provider, models, long_text):
    provider = make_provider(["## Summary\nPhotosynthesis in brief."])
    service = build_service(single_key_limiter, provider, models)

    result = await service.summarize(long_text, ContentType.LECTURE)

    assert result.source == SummarySource.GENERATED_BY_MODEL
    assert result.text == "## Summary\nPhotosynthesis in brief."

    call = provider.calls[0]
    assert call["model"] == "standard-model"
    assert call["temperature"] == 0.4
    assert call["max_tokens"] == 2048
    assert call["messages"][0].role == LLMRole.SYSTEM
    assert call["messages"][0].content == SummarizationPrompts.LECTURE
    assert long_text in call["messages"][1].content


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content_type, prompt",
    [
        (ContentType.TEXT, SummarizationPrompts.TEXT),
        (ContentType.BOOK, SummarizationPrompts.BOOK),
        (ContentType.NOTES, SummarizationPrompts.NOTES),
    ],
)
async def test_prompt_per_content_type(single_key_limiter, make_provider, models, long_text, content_type, prompt):
    provider = make_provider(["ok"])
    service = build_service(single_key_limiter, provider, models)

    await service.summarize(long_text, content_type)

    assert provider.calls[0]["messages"][0].content == prompt


@pytest.mark.asyncio
async def test_metadata_only_uses_metadata_prompt_and_note(single_key_limiter, make_provider, models, long_text):
    provider = make_provider(["A video about plants."])
    service = build_service(single_key_limiter, provider, models)

    result = await service.summarize(long_text, ContentType.LECTURE, is_metadata_only=True)

    assert provider.calls[0]["messages"][0].content == SummarizationPrompts.LECTURE_METADATA_ONLY
    assert result.text.startswith("# Summary Based on Limited Metadata")
    assert result.text.endswith("A video about plants.")


@pytest.mark.asyncio
async def test_quota_error_rotates_key_and_retries(multi_key_limiter, make_provider, models, long_text):
    provider = make_provider([LLMQuotaError("429 quota"), "Generated"])
    keys_used = []
    sleep = AsyncMock()
    service = build_service(multi_key_limiter, provider, models, keys_used=keys_used, sleep=sleep)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.GENERATED_BY_MODEL
    assert keys_used == ["key-a", "key-b"]
    assert multi_key_limiter.key_pool.index == 1
    sleep.assert_awaited_once_with(0.5)
    # Success resets the limiter
    assert multi_key_limiter.error_count == 0


@pytest.mark.asyncio
async def test_quota_error_with_single_key_enters_cooldown(single_key_limiter, clock, make_provider, models, long_text):
    provider = make_provider([LLMQuotaError("quota exceeded")])
    service = build_service(single_key_limiter, provider, models)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.EXTRACTIVE_FALLBACK
    assert len(provider.calls) == 1
    assert single_key_limiter.cooldown_until == clock.now + timedelta(minutes=1)


@pytest.mark.asyncio
async def test_quota_on_every_key_exhausts_rounds(multi_key_limiter, make_provider, models, long_text):
    provider = make_provider([LLMQuotaError("429")])
    service = build_service(multi_key_limiter, provider, models)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.EXTRACTIVE_FALLBACK
    assert len(provider.calls) == 3
    assert multi_key_limiter.error_count == 3
    assert multi_key_limiter.is_available()


@pytest.mark.asyncio
async def test_other_errors_single_key_retry_without_rotation(single_key_limiter, make_provider, models, long_text):
    provider = make_provider([LLMProviderError("boom")])
    sleep = AsyncMock()
    service = build_service(single_key_limiter, provider, models, sleep=sleep)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.EXTRACTIVE_FALLBACK
    assert len(provider.calls) == 2
    assert single_key_limiter.error_count == 0
    assert single_key_limiter.is_available()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_other_errors_rotate_keys_between_rounds(multi_key_limiter, make_provider, models, long_text):
    provider = make_provider([LLMProviderError("500"), LLMProviderError("500"), "Recovered"])
    keys_used = []
    sleep = AsyncMock()
    service = build_service(multi_key_limiter, provider, models, keys_used=keys_used, sleep=sleep)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.GENERATED_BY_MODEL
    assert keys_used == ["key-a", "key-b", "key-c"]
    assert sleep.await_count == 2
    sleep.assert_awaited_with(1.0)


@pytest.mark.asyncio
async def test_timeout_counts_as_retryable_error(single_key_limiter, models, long_text):
    class SlowProvider:
        calls = 0

        async def generate_text(self, **kwargs):
            SlowProvider.calls += 1
            await asyncio.sleep(10)

    service = build_service(single_key_limiter, SlowProvider(), models, timeout_seconds=0.01)

    result = await service.summarize(long_text)

    assert result.source == SummarySource.EXTRACTIVE_FALLBACK
    assert SlowProvider.calls == 2
    assert single_key_limiter.cooldown_until is None


@pytest.mark.asyncio
async def test_degraded_model_after_repeated_quota_errors(multi_key_limiter, make_provider, models, long_text):
    for _ in range(3):
        multi_key_limiter.record_quota_error()
    provider = make_provider(["Generated"])
    service = build_service(multi_key_limiter, provider, models)

    await service.summarize(long_text)

    assert provider.calls[0]["model"] == "degraded-model"
    assert multi_key_limiter.error_count == 0


def test_truncate_for_processing():
    assert truncate_for_processing("abc", limit=5) == "abc"
    truncated = truncate_for_processing("abcdefgh", limit=5)
    assert truncated == "abcde... (content truncated for processing)"
