from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from app.core.constants import YouTubeConfig

# --- Internal Parsing Models (yt-dlp) ---

class YtDlpCaptionFormat(BaseModel):
    url: Optional[str] = None
    ext: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(extra='ignore')

class YtDlpVideoInfo(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    uploader: Optional[str] = None
    channel: Optional[str] = None
    duration: Optional[float] = None
    description: Optional[str] = None
    subtitles: Dict[str, List[YtDlpCaptionFormat]] = Field(default_factory=dict)
    automatic_captions: Dict[str, List[YtDlpCaptionFormat]] = Field(default_factory=dict)

    model_config = ConfigDict(extra='ignore')

# --- Core Data Models ---

class TranscriptSegment(BaseModel):
    text: str
    start: float = 0.0
    duration: float = 0.0

    model_config = ConfigDict(frozen=True)

class CaptionTrack(BaseModel):
    language_code: str
    url: str
    ext: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

class VideoMetadata(BaseModel):
    title: str
    author: str = YouTubeConfig.UNKNOWN_AUTHOR
    duration_seconds: int = Field(default=0, ge=0)
    description: str = YouTubeConfig.UNKNOWN_DESCRIPTION

    model_config = ConfigDict(frozen=True)

class TranscriptResult(BaseModel):
    text: str
    is_metadata_only: bool = False

    model_config = ConfigDict(frozen=True)

class VideoContent(BaseModel):
    video_id: str = Field(min_length=11, max_length=11)
    title: str
    author: str
    duration_seconds: int = Field(default=0, ge=0)
    description: str = ""
    transcript_text: str
    is_metadata_only: bool = False

    @property
    def duration_label(self) -> str:
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes} minutes {seconds} seconds"

    @property
    def content(self) -> str:
        """Metadata header plus transcript, as handed to the summarizer."""
        body = self.transcript_text if self.is_metadata_only else f"Transcript:\n{self.transcript_text}"
        return (
            f"Title: {self.title}\n"
            f"Author: {self.author}\n"
            f"Duration: {self.duration_label}\n\n"
            f"{body}"
        )
