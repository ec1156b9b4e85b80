"""
Extractive fallback summarization.

This module provides the ExtractiveSummarizer class that builds a structured
summary from existing sentences when the generative API is unavailable. It
makes no network calls and is fully deterministic.

Layout of the produced document:
- Overview
- Beginning, Middle Section, Ending (three sentences each)
- Possible Key Points (lecture content only, when marker phrases occur)
- Full Content Length
"""
import re
import textwrap
from typing import Optional

from app.core.constants import ExtractiveSummaryConfig
from app.models import ContentType


SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")
TITLE_LINE_RE = re.compile(r"\s*Title:[ \t]*([^\n]+)")

KEY_POINT_MARKERS = (
    "important",
    "key point",
    "remember",
    "note that",
    "significant",
    "crucial",
    "essential",
    "fundamental",
    "critical",
    "main concept",
)
KEY_POINT_RE = re.compile("|".join(re.escape(m) for m in KEY_POINT_MARKERS), re.IGNORECASE)


class ExtractiveSummarizer:
    """
    Beginning/middle/end extraction with lecture key-point detection.

    Example:
        summarizer = ExtractiveSummarizer()
        text = summarizer.summarize(long_transcript, ContentType.LECTURE)
    """

    def __init__(
        self,
        full_text_threshold: int = ExtractiveSummaryConfig.FULL_TEXT_THRESHOLD,
        section_sentences: int = ExtractiveSummaryConfig.SECTION_SENTENCES,
        max_key_points: int = ExtractiveSummaryConfig.MAX_KEY_POINTS,
    ):
        """
        Initialize the extractive summarizer.

        Args:
            full_text_threshold: Content shorter than this is returned in full.
            section_sentences: Sentences per Beginning/Middle/Ending section.
            max_key_points: Maximum distinct key-point markers listed.
        """
        self.full_text_threshold = full_text_threshold
        self.section_sentences = section_sentences
        self.max_key_points = max_key_points

    def summarize(self, content: str, content_type: ContentType = ContentType.TEXT) -> str:
        """
        Build an extractive summary.

        Args:
            content: Text to summarize.
            content_type: Lecture content additionally gets key points.

        Returns:
            Markdown summary.
        """
        title = self.extract_title(content) or ExtractiveSummaryConfig.DEFAULT_TITLE

        if len(content) < self.full_text_threshold:
            return (
                f"# {title}\n\n{content}\n\n"
                "_Note: This content was short enough to present in full._"
            )

        sentences = self.split_sentences(content)
        count = self.section_sentences

        beginning = " ".join(sentences[:count])
        middle_start = max(len(sentences) // 2 - 1, 0)
        middle = " ".join(sentences[middle_start:middle_start + count])
        ending = " ".join(sentences[-count:])

        key_points: list[str] = []
        if content_type == ContentType.LECTURE:
            key_points = self.find_key_points(content)

        sections = [
            f"# {title} - Basic Summary",
            "## Overview\nThis is a basic extractive summary created without AI due to API limitations.",
            f"## Beginning\n{beginning}",
            f"## Middle Section\n{middle}",
            f"## Ending\n{ending}",
        ]
        if key_points:
            sections.append("## Possible Key Points\n" + "\n".join(f"- {p}" for p in key_points))
        sections.append(
            f"## Full Content Length\nThe original content is {len(content)} characters long."
        )
        sections.append(
            "_Note: This is a basic extraction summary created when AI summarization "
            "was unavailable. For better results, try again later or with a different API key._"
        )
        return "\n\n".join(sections)

    @staticmethod
    def extract_title(content: str) -> Optional[str]:
        """Title from a leading `Title: <value>` line, if any."""
        match = TITLE_LINE_RE.match(content)
        if not match:
            return None
        return match.group(1).strip() or None

    @staticmethod
    def split_sentences(content: str) -> list[str]:
        """
        Split on terminal punctuation (. ! ?).

        Text without any terminal punctuation is word-wrapped into fixed-width
        units instead, so long unpunctuated transcripts still yield sections.
        """
        sentences = [s.strip() for s in SENTENCE_RE.findall(content) if s.strip()]
        if sentences:
            return sentences
        return textwrap.wrap(content, ExtractiveSummaryConfig.FALLBACK_UNIT_WIDTH) or [content]

    def find_key_points(self, content: str) -> list[str]:
        """Distinct marker phrases in order of first appearance."""
        found: list[str] = []
        for match in KEY_POINT_RE.finditer(content):
            phrase = match.group(0).lower()
            if phrase not in found:
                found.append(phrase)
                if len(found) >= self.max_key_points:
                    break
        return found
