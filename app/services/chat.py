"""
Follow-up chat about previously summarized content.

The client keeps the conversation; each request carries the new message and
the history. Messages that ask for a summary are routed to the
SummarizationService, and questions are answered from the latest assistant
summary in the history. The generative call shares the process-wide
RateLimiter with summarization, so cooldowns and key rotation apply here too.
"""
import asyncio
from typing import Optional, Sequence

from loguru import logger

from app.core.constants import ChatConfig
from app.core.prompts import ChatPrompts
from app.core.providers.llm_provider import LLMMessage, LLMProviderError, LLMQuotaError
from app.models import ChatHistoryMessage, ContentType, LLMRole, ModelTier, QuotaOutcome
from app.services.rate_limiter import RateLimiter
from app.services.summarization import (
    ProviderFactory,
    SummarizationService,
    truncate_for_processing,
)


class ChatService:
    """
    Answers chat messages without ever failing the caller.

    Every failure mode (cooldown, quota, provider error, missing summary) maps
    to a canned reply from ChatPrompts.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        provider_factory: ProviderFactory,
        models: dict[ModelTier, str],
        summarization_service: SummarizationService,
        timeout_seconds: Optional[float] = 60.0,
    ):
        self.rate_limiter = rate_limiter
        self.provider_factory = provider_factory
        self.models = models
        self.summarization_service = summarization_service
        self.timeout_seconds = timeout_seconds

    async def reply(
        self,
        message: str,
        history: Sequence[ChatHistoryMessage] = (),
        content_type: ContentType = ContentType.TEXT,
    ) -> str:
        """
        Produce the assistant's reply to a chat message.

        Args:
            message: The user's new message.
            history: Previous turns, oldest first.
            content_type: Type of the content discussed; used for summaries
                and for the reply after a key rotation.

        Returns:
            str: A summary, an answer from the latest summary, or a canned reply.
        """
        available = self.rate_limiter.is_available()

        if not available and len(message) < ChatConfig.SHORT_MESSAGE_CHARS:
            logger.info("Chat message during cooldown; returning limited-capability reply")
            return ChatPrompts.COOLDOWN_SHORT_MESSAGE

        if self._asks_for_summary(message):
            logger.info(f"Chat message is a summarization request ({len(message)} chars)")
            return await self._summarize(message, content_type)

        summaries = [
            turn.content
            for turn in history
            if turn.role == LLMRole.ASSISTANT and len(turn.content) > ChatConfig.SUMMARY_MIN_CHARS
        ]

        if not summaries:
            if len(message) > ChatConfig.IMPLICIT_SUMMARY_MIN_CHARS:
                logger.info("No previous summary; treating long chat message as content")
                return await self._summarize(message, ContentType.TEXT)
            return ChatPrompts.NO_SUMMARY

        if not available:
            return ChatPrompts.COOLDOWN_WITH_SUMMARY

        return await self._answer(message, summaries[-1], content_type)

    @staticmethod
    def _asks_for_summary(message: str) -> bool:
        lowered = message.lower()
        return len(message) > ChatConfig.SUMMARIZE_REQUEST_MIN_CHARS and any(
            keyword in lowered for keyword in ChatConfig.SUMMARIZE_KEYWORDS
        )

    async def _summarize(self, message: str, content_type: ContentType) -> str:
        result = await self.summarization_service.summarize(
            truncate_for_processing(message), content_type
        )
        return result.text

    async def _answer(self, question: str, summary: str, content_type: ContentType) -> str:
        key_pool = self.rate_limiter.key_pool
        key_index, api_key = key_pool.current()
        model = self.models[self.rate_limiter.model_tier]

        messages = [
            LLMMessage(
                role=LLMRole.SYSTEM,
                content=ChatPrompts.SYSTEM_INSTRUCTIONS.format(
                    summary=summary[: ChatConfig.SUMMARY_CONTEXT_CHARS]
                ),
            ),
            LLMMessage(role=LLMRole.USER, content=question),
        ]

        logger.debug(f"Answering chat question with key {key_index + 1}/{key_pool.size} ({model})")
        try:
            call = self.provider_factory(api_key).generate_text(
                messages=messages,
                temperature=ChatConfig.TEMPERATURE,
                max_tokens=ChatConfig.MAX_OUTPUT_TOKENS,
                model=model,
            )
            response = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except LLMQuotaError as e:
            logger.warning(f"Quota error while answering chat question: {e}")
            outcome = self.rate_limiter.record_quota_error(key_index)
            if outcome == QuotaOutcome.ROTATED:
                subject = ChatPrompts.SUBJECTS.get(content_type, ChatPrompts.DEFAULT_SUBJECT)
                return ChatPrompts.KEY_ROTATED.format(subject=subject)
            return ChatPrompts.QUOTA_COOLDOWN
        except (LLMProviderError, asyncio.TimeoutError) as e:
            logger.error(f"Chat error: {e!r}")
            return ChatPrompts.GENERIC_FAILURE

        self.rate_limiter.record_success()
        return response.content
