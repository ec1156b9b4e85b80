"""
Groq (Llama) implementation of LLMProvider.

This module provides a vendor-specific implementation for the Groq API
(fast Llama inference) while conforming to the LLMProvider interface.
"""
from typing import Optional

from groq import APITimeoutError, AsyncGroq, RateLimitError
from loguru import logger

from app.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
    LLMProviderError,
    LLMQuotaError,
    is_quota_message,
)


class GroqProvider(LLMProvider):
    """
    Groq implementation of LLMProvider.

    Uses the Groq SDK for fast Llama model inference.

    Example:
        provider = GroqProvider(
            api_key="your-api-key",
            model_name="llama-3.3-70b-versatile",
        )
        response = await provider.generate_text(messages)
    """

    def __init__(self, api_key: str, model_name: str = "llama-3.3-70b-versatile"):
        """
        Initialize the Groq provider.

        Args:
            api_key: Groq API key.
            model_name: Default model (e.g., "llama-3.3-70b-versatile").
        """
        # Retries are driven by the summarization rounds, not the SDK
        self.client = AsyncGroq(api_key=api_key, max_retries=0)
        self.model_name = model_name

    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """Generate text completion using Groq."""
        model_name = model or self.model_name
        # Groq message format is OpenAI compatible
        groq_messages = [
            {"role": msg.role.value, "content": msg.content}
            for msg in messages
        ]

        logger.debug(f"Sending request to Groq ({model_name})")
        try:
            response = await self.client.chat.completions.create(
                model=model_name,
                messages=groq_messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except RateLimitError as e:
            raise LLMQuotaError(str(e)) from e
        except APITimeoutError as e:
            raise LLMProviderError(f"Groq request timed out: {e}") from e
        except Exception as e:
            if is_quota_message(str(e)):
                raise LLMQuotaError(str(e)) from e
            raise LLMProviderError(f"Groq request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMProviderError("Groq returned an empty response")

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
            logger.debug(f"Groq token usage: {usage}")

        return LLMResponse(
            content=content,
            model=model_name,
            usage=usage,
        )
