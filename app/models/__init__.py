from .youtube import (
    YtDlpCaptionFormat,
    YtDlpVideoInfo,
    TranscriptSegment,
    CaptionTrack,
    VideoMetadata,
    TranscriptResult,
    VideoContent,
)
from .summary import SummarizationRequest, SummarizationResult, RateLimiterState
from .api import (
    TextSummaryRequest,
    YoutubeSummaryRequest,
    UrlSummaryRequest,
    SummaryResponse,
    YoutubeSummaryResponse,
    HealthResponse,
    ChatHistoryMessage,
    ChatRequest,
    ChatResponse,
)
from .enums import LLMRole, LLMProviderType, ContentType, SummarySource, ModelTier, QuotaOutcome
