"""
Application configuration using pydantic-settings.
"""
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.enums import LLMProviderType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    PROJECT_NAME: str = "Smart Content Summarizer"

    # Generative provider used for summaries
    SUMMARY_LLM_PROVIDER: LLMProviderType = LLMProviderType.GEMINI

    # Gemini API (comma-separated keys enable rotation)
    GEMINI_API_KEYS: Union[List[str], str] = []
    GEMINI_MODEL_NAME: str = "gemini-2.5-flash"
    GEMINI_DEGRADED_MODEL_NAME: str = "gemini-2.5-flash-lite"

    # Groq API
    GROQ_API_KEYS: Union[List[str], str] = []
    GROQ_MODEL_NAME: str = "llama-3.3-70b-versatile"
    GROQ_DEGRADED_MODEL_NAME: str = "llama-3.1-8b-instant"

    @field_validator("GEMINI_API_KEYS", "GROQ_API_KEYS", mode="before")
    @classmethod
    def assemble_api_keys(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    # Timeouts (seconds)
    LLM_TIMEOUT_SECONDS: float = 60.0
    YOUTUBE_PROVIDER_TIMEOUT_SECONDS: float = 30.0
    URL_FETCH_TIMEOUT_SECONDS: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def summary_api_keys(self) -> List[str]:
        """API keys for the configured summary provider."""
        if self.SUMMARY_LLM_PROVIDER == LLMProviderType.GROQ:
            return list(self.GROQ_API_KEYS)
        return list(self.GEMINI_API_KEYS)


settings = Settings()
