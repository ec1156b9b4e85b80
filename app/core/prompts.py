"""
Centralized configuration for LLM Prompts.

Prompts are grouped by service. Each content type gets its own summarization
template, and lecture content has a separate one for videos whose
transcript was replaced by metadata.
"""
from app.models.enums import ContentType


class ChatPrompts:
    """System prompts and canned replies for the follow-up chat."""

    SYSTEM_INSTRUCTIONS = """You answer questions about content that was summarized earlier.
Only use information from the summary below. If the answer isn't in the summary, say so.

### SUMMARY:
{summary}
"""

    COOLDOWN_SHORT_MESSAGE = (
        "I'm currently operating with limited capabilities due to API rate limits. "
        "I can help with basic questions, but for complex processing or summarization, "
        "please try again later."
    )

    COOLDOWN_WITH_SUMMARY = (
        "I'm currently operating with limited capabilities due to API rate limits. "
        "I can see you've shared content that I've summarized before. If you have "
        "questions about that content, please keep them simple and specific, or try "
        "again later when full service is restored."
    )

    NO_SUMMARY = (
        "I don't have any previous summary to reference. Would you like me to "
        "summarize some content for you? You can share a YouTube link, a web page, "
        "or paste text to summarize."
    )

    KEY_ROTATED = (
        "I encountered a temporary issue. Let me try to answer based on what I recall: "
        "The summary you're asking about covered key points about {subject}. "
        "Could you ask a more specific question about a particular aspect of it?"
    )

    QUOTA_COOLDOWN = (
        "I'm currently experiencing technical limitations due to API usage limits. "
        "I can help with basic questions, but for more complex processing, please try "
        "again later. If you have a specific question about the content I summarized "
        "earlier, please make it as clear and direct as possible."
    )

    GENERIC_FAILURE = (
        "I'm having trouble processing your question right now. Could you try asking "
        "in a different way or try again later?"
    )

    SUBJECTS = {
        ContentType.LECTURE: "a lecture",
        ContentType.BOOK: "a book",
    }
    DEFAULT_SUBJECT = "some content"


class SummarizationPrompts:
    """System prompts for the summarization pipeline."""

    LECTURE = """You are an expert lecture summarizer.
Summarize the lecture concisely.
Create a structured summary with the main points and key concepts.
Bold important terms with ** **.
Use markdown formatting with headers and bullet points."""

    LECTURE_METADATA_ONLY = """You are summarizing a video for which no transcript is available.
You only have its metadata (title, channel, description).
Create a brief, best-effort summary of what this video appears to be about.
Do not invent details that the metadata does not support."""

    BOOK = """You are an expert literary summarizer.
Summarize this book content briefly.
Include the main themes and key points.
Use markdown formatting."""

    NOTES = """You are an expert note organizer.
Organize these notes concisely.
Create a clear structure with the main points, grouped under short headers.
Use markdown bullet points."""

    TEXT = """You are an expert content summarizer.
Summarize the following text concisely.
Start with a short overview, then list the key points.
Use markdown formatting."""

    METADATA_NOTE = (
        "# Summary Based on Limited Metadata\n\n"
        "_Note: This summary was created using only the video's metadata, "
        "as a transcript was unavailable._\n\n"
    )

    @classmethod
    def for_content_type(cls, content_type: ContentType, is_metadata_only: bool = False) -> str:
        """Select the instruction template for a content type."""
        if content_type == ContentType.LECTURE:
            return cls.LECTURE_METADATA_ONLY if is_metadata_only else cls.LECTURE
        if content_type == ContentType.BOOK:
            return cls.BOOK
        if content_type == ContentType.NOTES:
            return cls.NOTES
        return cls.TEXT
