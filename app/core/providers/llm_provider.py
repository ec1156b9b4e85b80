"""
Abstract base class for LLM providers.

This module defines a vendor-neutral interface for interacting with
Large Language Models. Concrete implementations (Gemini, Groq) must implement
this interface and translate every vendor failure into one of the two
exception types below, so callers never branch on SDK-specific errors.
"""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.enums import LLMRole


QUOTA_ERROR_MARKERS = ("429", "quota", "rate limit", "resource_exhausted")


class LLMProviderError(Exception):
    """A generative call failed for a reason other than quota."""


class LLMQuotaError(LLMProviderError):
    """A generative call was rejected because of quota or rate limiting."""


def is_quota_message(message: str) -> bool:
    """Heuristic quota detection for errors without a dedicated type."""
    lowered = message.lower()
    return any(marker in lowered for marker in QUOTA_ERROR_MARKERS)


class LLMMessage(BaseModel):
    """Vendor-neutral message format for LLM conversations."""

    role: LLMRole
    content: str

    model_config = ConfigDict(frozen=True)


class LLMResponse(BaseModel):
    """Standardized response from an LLM provider."""

    content: str
    model: str
    usage: Optional[dict[str, int]] = None

    model_config = ConfigDict(frozen=True)


class LLMProvider(ABC):
    """
    Abstract interface for LLM providers.

    One provider instance is bound to one API key. The model may be overridden
    per call so the caller can switch to a degraded tier without rebuilding
    the provider.
    """

    @abstractmethod
    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate text completion from messages.

        Args:
            messages: List of conversation messages.
            temperature: Sampling temperature (0.0-1.0).
            max_tokens: Maximum tokens to generate (None for model default).
            model: Model override for this call (None for the provider default).

        Returns:
            LLMResponse containing generated content and metadata.

        Raises:
            LLMQuotaError: The key hit a quota or rate limit.
            LLMProviderError: Any other failure, including empty responses.
        """
        ...
