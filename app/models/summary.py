"""
Core models for the summarization pipeline.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ContentType, ModelTier, SummarySource


class SummarizationRequest(BaseModel):
    """A unit of content to summarize."""

    content: str = Field(min_length=1)
    content_type: ContentType = ContentType.TEXT
    is_metadata_only: bool = False

    model_config = ConfigDict(frozen=True)


class SummarizationResult(BaseModel):
    """Summary text tagged with how it was produced."""

    text: str
    source: SummarySource

    model_config = ConfigDict(frozen=True)


class RateLimiterState(BaseModel):
    """Point-in-time view of the shared rate limiter."""

    error_count: int = Field(default=0, ge=0)
    cooldown_until: Optional[datetime] = None
    current_model_tier: ModelTier = ModelTier.STANDARD
    in_cooldown: bool = False
    key_index: int = 0
    key_count: int = 1

    model_config = ConfigDict(frozen=True)
