"""
Pydantic models for API request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import ContentType, LLMRole, SummarySource
from app.models.summary import RateLimiterState


class TextSummaryRequest(BaseModel):
    """Request model for plain text summarization."""

    text: str = Field(min_length=1)
    type: ContentType = ContentType.TEXT

    model_config = ConfigDict(extra="forbid")


class YoutubeSummaryRequest(BaseModel):
    """Request model for YouTube video summarization."""

    url: str = Field(min_length=1)
    type: ContentType = ContentType.LECTURE

    model_config = ConfigDict(extra="forbid")

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class UrlSummaryRequest(BaseModel):
    """Request model for summarizing any URL (YouTube or web page)."""

    url: str = Field(min_length=1)
    type: ContentType

    model_config = ConfigDict(extra="forbid")

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class SummaryResponse(BaseModel):
    """Response model for a summary."""

    summary: str
    source: SummarySource
    title: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class YoutubeSummaryResponse(SummaryResponse):
    """Response model for a YouTube summary including video details."""

    video_id: str
    author: str
    duration: int
    is_metadata_only: bool

    model_config = ConfigDict(frozen=True)


class ChatHistoryMessage(BaseModel):
    """A previous turn of the chat, as kept by the client."""

    role: LLMRole
    content: str

    model_config = ConfigDict(frozen=True)


class ChatRequest(BaseModel):
    """Request model for chat messages."""

    message: str = Field(min_length=1)
    type: ContentType = ContentType.TEXT
    history: list[ChatHistoryMessage] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ChatResponse(BaseModel):
    """Response model for chat messages."""

    response: str

    model_config = ConfigDict(frozen=True)


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    status: str
    project: str
    timestamp: datetime
    rate_limiting: RateLimiterState

    model_config = ConfigDict(frozen=True)
