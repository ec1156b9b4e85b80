"""
Application-wide constants and configuration limits.

Grouped into static classes for namespace management and discoverability.
"""


class SummarizationConfig:
    """Configuration for the generative summarization pipeline."""
    VERBATIM_THRESHOLD = 200  # Characters; shorter content is returned as-is
    MIN_ROUNDS = 2  # Attempts when the key pool has a single key
    TEMPERATURE = 0.4
    MAX_OUTPUT_TOKENS = 2048
    ROTATION_DELAY_SECONDS = 0.5  # Pause after rotating on a quota error
    RETRY_DELAY_SECONDS = 1.0  # Pause before retrying after other errors
    MAX_INPUT_CHARS = 15_000
    TRUNCATION_SUFFIX = "... (content truncated for processing)"


class RateLimitConfig:
    """Cooldown and model degradation thresholds."""
    DEGRADE_AFTER_ERRORS = 2  # Degraded tier once error_count exceeds this
    MAX_COOLDOWN_MINUTES = 30


class ExtractiveSummaryConfig:
    """Configuration for the no-network fallback summary."""
    FULL_TEXT_THRESHOLD = 1000  # Characters; shorter content is shown in full
    SECTION_SENTENCES = 3
    MAX_KEY_POINTS = 5
    FALLBACK_UNIT_WIDTH = 200  # Unit size when text has no terminal punctuation
    DEFAULT_TITLE = "Content Summary"


class YouTubeConfig:
    """Configuration for YouTube content resolution."""
    WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
    INFO_CACHE_SIZE = 64
    INFO_CACHE_TTL_SECONDS = 600
    PREFERRED_LANGUAGES = ("en", "en-US", "en-GB")
    CAPTION_EXT_PRIORITY = ("srv1", "ttml", "srv3", "srv2", "vtt", "json3")
    UNKNOWN_AUTHOR = "Unknown Author"
    UNKNOWN_DESCRIPTION = "Description unavailable"


class WebFetchConfig:
    """Configuration for generic web page fetching."""
    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    MAX_CONTENT_CHARS = 15_000


class ChatConfig:
    """Configuration for follow-up questions about a previous summary."""
    TEMPERATURE = 0.7
    MAX_OUTPUT_TOKENS = 1024
    SHORT_MESSAGE_CHARS = 200  # Shorter messages get a canned reply during cooldown
    SUMMARIZE_REQUEST_MIN_CHARS = 200  # Longer messages asking for a summary are summarized
    IMPLICIT_SUMMARY_MIN_CHARS = 500  # Longer messages without prior summary are summarized
    SUMMARY_MIN_CHARS = 100  # Assistant turns longer than this count as summaries
    SUMMARY_CONTEXT_CHARS = 1000
    SUMMARIZE_KEYWORDS = ("summarize", "summary")
