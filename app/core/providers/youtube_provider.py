"""
YouTube content providers used by the resolver's fallback chains.

Each strategy is a small named object that either returns usable data or
raises. The resolver iterates an ordered list of them, so new providers can be
added without touching call sites.

Providers:
- VideoInfoProvider: yt-dlp extraction (metadata and caption track discovery).
- Metadata strategies: yt-dlp info, watch page <title> scrape, placeholder.
- Transcript strategies: youtube-transcript-api segments, caption track payload.
"""
import asyncio
import re
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from cachetools import TTLCache
from loguru import logger
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from youtube_transcript_api import YouTubeTranscriptApi, NoTranscriptFound
from yt_dlp import YoutubeDL

from app.core.constants import YouTubeConfig, WebFetchConfig
from app.core.exceptions import ProviderUnavailableError
from app.models import CaptionTrack, TranscriptSegment, VideoMetadata, YtDlpVideoInfo


CAPTION_TEXT_RE = re.compile(r"<text[^>]*>(.*?)</text>", re.DOTALL)
CAPTION_PARAGRAPH_RE = re.compile(r"<p[^>]*>(.*?)</p>", re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")

# Order matters: "&amp;" first, as YouTube double-escapes caption entities
HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def unescape_entities(text: str) -> str:
    """Unescape the five standard HTML entities."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def parse_caption_payload(payload: str) -> str:
    """
    Reduce a caption track payload to plain text.

    Timed-text XML (<text> elements) and TTML (<p> elements) are read element
    by element; anything else has all tags stripped.
    """
    pieces = CAPTION_TEXT_RE.findall(payload) or CAPTION_PARAGRAPH_RE.findall(payload)
    if not pieces:
        pieces = [payload]

    texts = []
    for piece in pieces:
        text = unescape_entities(TAG_RE.sub("", piece))
        text = " ".join(text.split())
        if text:
            texts.append(text)
    return " ".join(texts)


def select_caption_track(tracks: list[CaptionTrack]) -> Optional[CaptionTrack]:
    """Pick the English-tagged track if present, else the first one."""
    for track in tracks:
        code = track.language_code.lower()
        if code == "en" or code.startswith("en-"):
            return track
        if track.name and "english" in track.name.lower():
            return track
    return tracks[0] if tracks else None


class VideoInfoProvider:
    """
    yt-dlp backed video-info provider.

    Extracted info is cached per video id for a short time, and an extraction
    already in flight is shared, so the concurrent metadata and caption legs of
    one resolution trigger a single yt-dlp call.
    """

    def __init__(self, cache: Optional[TTLCache] = None):
        self._cache: TTLCache[str, YtDlpVideoInfo] = (
            cache
            if cache is not None
            else TTLCache(
                maxsize=YouTubeConfig.INFO_CACHE_SIZE,
                ttl=YouTubeConfig.INFO_CACHE_TTL_SECONDS,
            )
        )
        self._inflight: dict[str, asyncio.Task] = {}

    def _extract_info_sync(self, video_id: str) -> Optional[dict]:
        ydl_opts = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
        }

        with YoutubeDL(ydl_opts) as ydl:
            return ydl.extract_info(
                YouTubeConfig.WATCH_URL.format(video_id=video_id), download=False
            )

    async def get_info(self, video_id: str) -> YtDlpVideoInfo:
        cached = self._cache.get(video_id)
        if cached is not None:
            return cached

        # Concurrent callers for the same id await one extraction
        task = self._inflight.get(video_id)
        if task is None:
            task = asyncio.create_task(self._extract_info(video_id))
            self._inflight[video_id] = task
            task.add_done_callback(lambda _: self._inflight.pop(video_id, None))

        # A caller's timeout must not cancel the shared extraction
        return await asyncio.shield(task)

    async def _extract_info(self, video_id: str) -> YtDlpVideoInfo:
        info_dict = await asyncio.to_thread(self._extract_info_sync, video_id)
        if not info_dict:
            raise ProviderUnavailableError(f"yt-dlp returned no info for {video_id}")

        info = YtDlpVideoInfo(**info_dict)
        self._cache[video_id] = info
        return info

    async def get_caption_tracks(self, video_id: str) -> list[CaptionTrack]:
        """
        List caption tracks, manual subtitles before automatic captions.

        For each language the format listed earliest in
        YouTubeConfig.CAPTION_EXT_PRIORITY wins.
        """
        info = await self.get_info(video_id)
        tracks: list[CaptionTrack] = []

        for caption_dict in (info.subtitles, info.automatic_captions):
            for language_code, formats in caption_dict.items():
                usable = [f for f in formats if f.url]
                if not usable:
                    continue
                best = min(
                    usable,
                    key=lambda f: (
                        YouTubeConfig.CAPTION_EXT_PRIORITY.index(f.ext)
                        if f.ext in YouTubeConfig.CAPTION_EXT_PRIORITY
                        else len(YouTubeConfig.CAPTION_EXT_PRIORITY)
                    ),
                )
                tracks.append(
                    CaptionTrack(
                        language_code=language_code,
                        url=best.url,
                        ext=best.ext,
                        name=best.name,
                    )
                )

        return tracks


# --- Metadata strategies ---

class MetadataStrategy(ABC):
    """A source of video metadata."""

    name: str = "metadata"

    @abstractmethod
    async def fetch(self, video_id: str) -> VideoMetadata:
        ...


class VideoInfoMetadataStrategy(MetadataStrategy):
    name = "video-info"

    def __init__(self, info_provider: VideoInfoProvider):
        self.info_provider = info_provider

    async def fetch(self, video_id: str) -> VideoMetadata:
        info = await self.info_provider.get_info(video_id)
        if not info.title:
            raise ProviderUnavailableError(f"No title in video info for {video_id}")

        return VideoMetadata(
            title=info.title,
            author=info.uploader or info.channel or YouTubeConfig.UNKNOWN_AUTHOR,
            duration_seconds=max(int(info.duration or 0), 0),
            description=info.description or YouTubeConfig.UNKNOWN_DESCRIPTION,
        )


class WatchPageMetadataStrategy(MetadataStrategy):
    """Scrape the <title> tag of the public watch page."""

    name = "watch-page"

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def fetch(self, video_id: str) -> VideoMetadata:
        response = await self.http_client.get(
            YouTubeConfig.WATCH_URL.format(video_id=video_id),
            headers={"User-Agent": WebFetchConfig.USER_AGENT},
        )
        response.raise_for_status()

        soup = BeautifulSoup(response.text, "html.parser")
        if not soup.title or not soup.title.string:
            raise ProviderUnavailableError(f"No <title> on watch page for {video_id}")

        title = soup.title.string.replace(" - YouTube", "").strip()
        if not title or title == "YouTube":
            raise ProviderUnavailableError(f"Watch page title is empty for {video_id}")

        return VideoMetadata(title=title)


class PlaceholderMetadataStrategy(MetadataStrategy):
    """Last resort: synthesize metadata from the video id. Never fails."""

    name = "placeholder"

    async def fetch(self, video_id: str) -> VideoMetadata:
        return VideoMetadata(title=f"YouTube Video (ID: {video_id})")


# --- Transcript strategies ---

class TranscriptStrategy(ABC):
    """A source of real transcript text."""

    name: str = "transcript"

    @abstractmethod
    async def fetch(self, video_id: str) -> str:
        ...


class TranscriptApiStrategy(TranscriptStrategy):
    """
    Timed text segments from youtube-transcript-api.

    Prefers English, then any manual track, then any generated track.
    """

    name = "transcript-api"

    def _fetch_sync(self, video_id: str):
        transcript_list = YouTubeTranscriptApi().list(video_id)

        try:
            return transcript_list.find_transcript(YouTubeConfig.PREFERRED_LANGUAGES).fetch()
        except NoTranscriptFound:
            pass

        for t in transcript_list:
            if not t.is_generated:
                logger.info(f"Video {video_id}: Using Manual transcript in '{t.language}'")
                return t.fetch()

        for t in transcript_list:
            if t.is_generated:
                logger.info(f"Video {video_id}: Using Automatic transcript in '{t.language}'")
                return t.fetch()

        return None

    async def fetch(self, video_id: str) -> str:
        raw_transcript = await asyncio.to_thread(self._fetch_sync, video_id)
        if not raw_transcript:
            raise ProviderUnavailableError(f"No transcript tracks for {video_id}")

        segments = [
            TranscriptSegment(text=item.text, start=item.start, duration=item.duration)
            for item in raw_transcript
        ]
        return " ".join(seg.text.strip() for seg in segments if seg.text.strip())


class CaptionTrackStrategy(TranscriptStrategy):
    """Caption track discovered through the video-info provider."""

    name = "caption-track"

    def __init__(self, info_provider: VideoInfoProvider, http_client: httpx.AsyncClient):
        self.info_provider = info_provider
        self.http_client = http_client

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _download(self, url: str) -> str:
        response = await self.http_client.get(url)
        response.raise_for_status()
        return response.text

    async def fetch(self, video_id: str) -> str:
        tracks = await self.info_provider.get_caption_tracks(video_id)
        track = select_caption_track(tracks)
        if track is None:
            raise ProviderUnavailableError(f"No caption tracks for {video_id}")

        logger.info(f"Video {video_id}: Using caption track '{track.language_code}' ({track.ext})")
        payload = await self._download(track.url)
        return parse_caption_payload(payload)
