"""
Shared pytest fixtures and configuration.
"""
import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from app.core.providers.llm_provider import LLMProvider, LLMMessage, LLMResponse
from app.main import app
from app.models import ModelTier
from app.services.key_pool import ApiKeyPool
from app.services.rate_limiter import RateLimiter


class FakeClock:
    """Controllable clock for the rate limiter."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class ScriptedProvider(LLMProvider):
    """
    LLM provider replaying a script of outcomes.

    Each entry is either a string (returned as content) or an exception
    instance (raised). The last entry repeats once the script runs out.
    """

    def __init__(self, script: list[Union[str, Exception]]):
        self.script = list(script)
        self.calls: list[dict] = []

    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> LLMResponse:
        self.calls.append(
            {"messages": messages, "temperature": temperature, "max_tokens": max_tokens, "model": model}
        )
        outcome = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=model or "fake")


MODELS = {ModelTier.STANDARD: "standard-model", ModelTier.DEGRADED: "degraded-model"}

LONG_TEXT = (
    "Photosynthesis converts light energy into chemical energy. "
    "It is an important process for nearly all life on Earth. "
    "Remember that chlorophyll absorbs mostly red and blue light. "
) * 10


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def single_key_limiter(clock):
    return RateLimiter(ApiKeyPool(["key-a"]), clock=clock)


@pytest.fixture
def multi_key_limiter(clock):
    return RateLimiter(ApiKeyPool(["key-a", "key-b", "key-c"]), clock=clock)


@pytest.fixture
def long_text():
    return LONG_TEXT


@pytest.fixture
def override_dependencies():
    """Clear FastAPI dependency overrides after each test that sets them."""
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
def models():
    return dict(MODELS)


@pytest.fixture
def make_provider():
    """Build a ScriptedProvider from a list of outcomes."""
    return ScriptedProvider
