"""
Google Gemini implementation of LLMProvider.

This module provides a vendor-specific implementation for the Gemini API
while conforming to the LLMProvider interface.
"""
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from loguru import logger

from app.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
    LLMProviderError,
    LLMQuotaError,
    is_quota_message,
)
from app.models.enums import LLMRole


class GeminiProvider(LLMProvider):
    """
    Google Gemini implementation of LLMProvider.

    Uses the google-generativeai SDK for async text generation. The SDK keeps
    its API key module-global, so the key is re-applied before every call.
    """

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Google AI API key.
            model_name: Default Gemini model (e.g., "gemini-2.5-flash").
        """
        self.api_key = api_key
        self.model_name = model_name

    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text completion using Gemini.

        Gemini uses a single prompt format, so messages are converted
        to a structured text prompt.
        """
        model_name = model or self.model_name
        prompt = self._format_messages(messages)

        config = genai.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        )

        genai.configure(api_key=self.api_key)
        generative_model = genai.GenerativeModel(model_name)

        logger.debug(f"Sending request to Gemini ({model_name})")
        try:
            response = await generative_model.generate_content_async(
                prompt,
                generation_config=config,
            )
            text = response.text
        except (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests) as e:
            raise LLMQuotaError(str(e)) from e
        except google_exceptions.DeadlineExceeded as e:
            raise LLMProviderError(f"Gemini request timed out: {e}") from e
        except Exception as e:
            if is_quota_message(str(e)):
                raise LLMQuotaError(str(e)) from e
            raise LLMProviderError(f"Gemini request failed: {e}") from e

        if not text:
            raise LLMProviderError("Gemini returned an empty response")

        usage = None
        if response.usage_metadata:
            usage = {
                "prompt_tokens": response.usage_metadata.prompt_token_count,
                "completion_tokens": response.usage_metadata.candidates_token_count,
                "total_tokens": response.usage_metadata.total_token_count,
            }
            logger.debug(f"Gemini token usage: {usage}")

        return LLMResponse(
            content=text,
            model=model_name,
            usage=usage,
        )

    def _format_messages(self, messages: list[LLMMessage]) -> str:
        """
        Convert universal messages to Gemini prompt format.

        Since Gemini prefers a single prompt, we format messages
        with role labels for context.
        """
        parts = []
        for msg in messages:
            if msg.role == LLMRole.SYSTEM:
                parts.append(f"System Instructions: {msg.content}\n\n")
            elif msg.role == LLMRole.USER:
                parts.append(f"User: {msg.content}\n")
            elif msg.role == LLMRole.ASSISTANT:
                parts.append(f"Assistant: {msg.content}\n")
        return "".join(parts)
