"""
YouTube service for resolving a video URL into summarizable content.
"""
import asyncio
import re
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from loguru import logger

from app.core.exceptions import InvalidUrlError, ProviderUnavailableError, UpstreamFetchError
from app.core.providers.youtube_provider import (
    MetadataStrategy,
    PlaceholderMetadataStrategy,
    TranscriptStrategy,
)
from app.models import TranscriptResult, VideoContent, VideoMetadata

T = TypeVar("T")

VIDEO_ID_PATTERNS = (
    re.compile(
        r"(?:youtube\.com/(?:[^/\n\s]+/\S+/|(?:v|e(?:mbed)?|shorts|live)/|\S*?[?&]v=)|youtu\.be/)"
        r"([a-zA-Z0-9_-]{11})"
    ),
    re.compile(r"^([a-zA-Z0-9_-]{11})$"),
)


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the 11-character video id from a YouTube URL or bare id.

    Accepts watch, youtu.be, embed, v, e, shorts and live URL shapes.
    """
    url = url.strip()
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def build_metadata_transcript(metadata: VideoMetadata) -> str:
    """Stand-in transcript used when no captions can be retrieved."""
    return (
        "VIDEO METADATA (transcript unavailable):\n"
        f"Title: {metadata.title}\n"
        f"Channel: {metadata.author}\n"
        f"Description: {metadata.description}\n\n"
        "Note: This is metadata only. No transcript was available for this video."
    )


class YouTubeService:
    """
    Resolves YouTube URLs into VideoContent through ordered fallback chains.

    Metadata chain (never fails):
        video-info provider -> watch page scrape -> placeholder.
    Transcript chain:
        transcript provider -> caption track -> synthesized metadata transcript.

    Every strategy call is bounded by a timeout, and a timeout counts as a
    strategy failure.
    """

    def __init__(
        self,
        metadata_strategies: Sequence[MetadataStrategy],
        transcript_strategies: Sequence[TranscriptStrategy],
        timeout_seconds: Optional[float] = 30.0,
    ):
        """
        Initialize the YouTubeService.

        Args:
            metadata_strategies: Metadata sources, best first. A placeholder
                strategy is appended if the list does not end with one.
            transcript_strategies: Real transcript sources, best first.
            timeout_seconds: Bound on each strategy call.
        """
        metadata_strategies = list(metadata_strategies)
        if not metadata_strategies or not isinstance(
            metadata_strategies[-1], PlaceholderMetadataStrategy
        ):
            metadata_strategies.append(PlaceholderMetadataStrategy())

        self.metadata_strategies = metadata_strategies
        self.transcript_strategies = list(transcript_strategies)
        self.timeout_seconds = timeout_seconds

    async def _run_chain(
        self,
        strategies: Sequence,
        video_id: str,
        kind: str,
        accept: Callable[[T], bool] = bool,
    ) -> Optional[T]:
        """Return the first accepted strategy result, or None if all fail."""
        for strategy in strategies:
            try:
                call: Awaitable[T] = strategy.fetch(video_id)
                result = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning(f"{kind} strategy '{strategy.name}' timed out for {video_id}")
                continue
            except Exception as e:
                logger.warning(f"{kind} strategy '{strategy.name}' failed for {video_id}: {e}")
                continue

            if not accept(result):
                logger.warning(f"{kind} strategy '{strategy.name}' returned no data for {video_id}")
                continue

            logger.info(f"Video {video_id}: {kind} resolved via '{strategy.name}'")
            return result

        return None

    async def fetch_metadata(self, video_id: str) -> VideoMetadata:
        """
        Fetch video metadata, degrading through the strategy chain.

        Returns:
            VideoMetadata; at worst a placeholder built from the id.
        """
        metadata = await self._run_chain(
            self.metadata_strategies, video_id, "Metadata", accept=lambda m: m is not None
        )
        if metadata is None:
            # Only reachable with a misbehaving custom placeholder strategy
            raise ProviderUnavailableError(f"All metadata strategies failed for {video_id}")
        return metadata

    async def _fetch_real_transcript(self, video_id: str) -> Optional[str]:
        text = await self._run_chain(
            self.transcript_strategies,
            video_id,
            "Transcript",
            accept=lambda t: bool(t and t.strip()),
        )
        return text.strip() if text else None

    async def fetch_transcript(
        self, video_id: str, metadata: Optional[VideoMetadata] = None
    ) -> TranscriptResult:
        """
        Fetch transcript text, falling back to a metadata-only stand-in.

        Args:
            video_id: 11-character video id.
            metadata: Already-resolved metadata for the stand-in; fetched if
                omitted and needed.
        """
        text = await self._fetch_real_transcript(video_id)
        if text:
            return TranscriptResult(text=text)

        logger.warning(f"No transcript found for {video_id}. Falling back to metadata.")
        if metadata is None:
            metadata = await self.fetch_metadata(video_id)
        return TranscriptResult(text=build_metadata_transcript(metadata), is_metadata_only=True)

    async def resolve(self, url: str) -> VideoContent:
        """
        Resolve a YouTube URL into metadata plus transcript.

        Metadata and transcript are fetched concurrently.

        Raises:
            InvalidUrlError: No video id could be extracted.
            UpstreamFetchError: The metadata chain itself raised.
        """
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidUrlError(url)

        logger.info(f"Processing YouTube video: {video_id}")

        try:
            metadata, transcript_text = await asyncio.gather(
                self.fetch_metadata(video_id),
                self._fetch_real_transcript(video_id),
            )
        except Exception as e:
            logger.error(f"Error fetching video data for {video_id}: {e}")
            raise UpstreamFetchError(f"Failed to fetch video data for '{video_id}'.") from e

        if transcript_text:
            transcript = TranscriptResult(text=transcript_text)
        else:
            logger.warning(f"No transcript found for {video_id}. Falling back to metadata.")
            transcript = TranscriptResult(
                text=build_metadata_transcript(metadata), is_metadata_only=True
            )

        return VideoContent(
            video_id=video_id,
            title=metadata.title,
            author=metadata.author,
            duration_seconds=metadata.duration_seconds,
            description=metadata.description,
            transcript_text=transcript.text,
            is_metadata_only=transcript.is_metadata_only,
        )
