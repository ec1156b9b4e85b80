"""
API endpoints for text, YouTube and URL summarization, and follow-up chat.
"""
from fastapi import APIRouter, Depends
from loguru import logger
import time

from app.models.api import (
    TextSummaryRequest,
    YoutubeSummaryRequest,
    UrlSummaryRequest,
    SummaryResponse,
    YoutubeSummaryResponse,
    ChatRequest,
    ChatResponse,
)
from app.api.dependencies import (
    get_summarization_service,
    get_youtube_service,
    get_web_page_service,
    get_chat_service,
)
from app.services.summarization import SummarizationService, truncate_for_processing
from app.services.youtube import YouTubeService, extract_video_id
from app.services.web import WebPageService
from app.services.chat import ChatService


router = APIRouter()


@router.post("/summarize/text", response_model=SummaryResponse)
async def summarize_text(
    payload: TextSummaryRequest,
    summarization_service: SummarizationService = Depends(get_summarization_service),
):
    """
    Summarizes pasted text.

    Args:
        payload: The text and its content type.
        summarization_service: The degrading summarization pipeline.

    Returns:
        SummaryResponse: The summary and how it was produced.
    """
    logger.info(f"Incoming text summarization request ({len(payload.text)} chars, type={payload.type.value})")

    start_time = time.perf_counter()
    result = await summarization_service.summarize(
        truncate_for_processing(payload.text), payload.type
    )
    duration = time.perf_counter() - start_time
    logger.info(f"Summarization completed in {duration:.2f}s ({result.source.value})")
    return SummaryResponse(summary=result.text, source=result.source)


@router.post("/summarize/youtube", response_model=YoutubeSummaryResponse)
async def summarize_youtube(
    payload: YoutubeSummaryRequest,
    youtube_service: YouTubeService = Depends(get_youtube_service),
    summarization_service: SummarizationService = Depends(get_summarization_service),
):
    """
    Summarizes a YouTube video from its transcript, or from its metadata when
    no transcript can be retrieved.

    Args:
        payload: The video URL (or bare id) and content type.
        youtube_service: Resolves the URL into video content.
        summarization_service: The degrading summarization pipeline.

    Returns:
        YoutubeSummaryResponse: The summary with video details.
    """
    logger.info(f"Incoming request for YouTube URL: {payload.url}")

    start_time = time.perf_counter()
    video = await youtube_service.resolve(payload.url)
    result = await summarization_service.summarize(
        video.content, payload.type, video.is_metadata_only
    )
    duration = time.perf_counter() - start_time
    logger.info(f"YouTube summarization completed in {duration:.2f}s ({result.source.value})")

    return YoutubeSummaryResponse(
        summary=result.text,
        source=result.source,
        title=video.title,
        video_id=video.video_id,
        author=video.author,
        duration=video.duration_seconds,
        is_metadata_only=video.is_metadata_only,
    )


@router.post("/summarize/url", response_model=SummaryResponse)
async def summarize_url(
    payload: UrlSummaryRequest,
    youtube_service: YouTubeService = Depends(get_youtube_service),
    web_page_service: WebPageService = Depends(get_web_page_service),
    summarization_service: SummarizationService = Depends(get_summarization_service),
):
    """
    Summarizes any URL. YouTube URLs go through the video resolver, other
    URLs are fetched and reduced to plain text.

    Args:
        payload: The URL and content type.
        youtube_service: Resolves YouTube URLs.
        web_page_service: Fetches other web pages.
        summarization_service: The degrading summarization pipeline.

    Returns:
        SummaryResponse: The summary, with the video title for YouTube URLs.
    """
    logger.info(f"Incoming request for URL: {payload.url}")

    if extract_video_id(payload.url):
        video = await youtube_service.resolve(payload.url)
        result = await summarization_service.summarize(
            video.content, payload.type, video.is_metadata_only
        )
        return SummaryResponse(summary=result.text, source=result.source, title=video.title)

    content = await web_page_service.fetch_text(payload.url)
    result = await summarization_service.summarize(content, payload.type)
    return SummaryResponse(summary=result.text, source=result.source)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Answers a chat message about previously summarized content.

    Args:
        payload: The message, the client-held history and the content type.
        chat_service: The service handling the business logic.

    Returns:
        ChatResponse: The assistant's reply.
    """
    logger.info(f"Incoming chat message ({len(payload.message)} chars, {len(payload.history)} history turns)")

    start_time = time.perf_counter()
    response_text = await chat_service.reply(payload.message, payload.history, payload.type)
    duration = time.perf_counter() - start_time
    logger.info(f"Chat reply generated in {duration:.2f}s")
    return ChatResponse(response=response_text)
