"""
Integration tests for the summarization API endpoints.
"""
import pytest
from datetime import datetime
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from app.api.dependencies import (
    get_chat_service,
    get_rate_limiter,
    get_summarization_service,
    get_web_page_service,
    get_youtube_service,
)
from app.core.exceptions import UpstreamFetchError
from app.main import app
from app.models import VideoContent
from app.services.chat import ChatService
from app.services.summarization import SummarizationService
from app.services.youtube import YouTubeService


client = TestClient(app)

VIDEO = VideoContent(
    video_id="dQw4w9WgXcQ",
    title="Never Gonna Give You Up",
    author="Rick Astley",
    duration_seconds=213,
    description="The official video.",
    transcript_text="We're no strangers to love. " * 20,
)


@pytest.fixture
def scripted_provider(make_provider):
    return make_provider(["## Summary\nA generated summary."])


@pytest.fixture
def summarization_service(override_dependencies, single_key_limiter, scripted_provider, models):
    """Real summarization pipeline backed by a scripted provider."""
    service = SummarizationService(
        rate_limiter=single_key_limiter,
        provider_factory=lambda api_key: scripted_provider,
        models=models,
        sleep=AsyncMock(),
    )
    override_dependencies[get_summarization_service] = lambda: service
    return service


@pytest.fixture
def mock_youtube_service(override_dependencies):
    service = MagicMock()
    service.resolve = AsyncMock(return_value=VIDEO)
    override_dependencies[get_youtube_service] = lambda: service
    return service


@pytest.fixture
def mock_web_page_service(override_dependencies):
    service = MagicMock()
    service.fetch_text = AsyncMock()
    override_dependencies[get_web_page_service] = lambda: service
    return service


def test_summarize_text(summarization_service, long_text):
    response = client.post("/api/v1/summarize/text", json={"text": long_text, "type": "book"})

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == "## Summary\nA generated summary."
    assert data["source"] == "generated_by_model"
    assert data["title"] is None
    assert "X-Request-ID" in response.headers


def test_summarize_short_text_verbatim(summarization_service, scripted_provider):
    response = client.post("/api/v1/summarize/text", json={"text": "Buy milk."})

    assert response.status_code == 200
    assert response.json() == {"summary": "Buy milk.", "source": "verbatim", "title": None}
    assert scripted_provider.calls == []


def test_summarize_text_validation(summarization_service):
    assert client.post("/api/v1/summarize/text", json={"text": ""}).status_code == 422
    assert client.post("/api/v1/summarize/text", json={"text": "x", "type": "poem"}).status_code == 422


def test_summarize_text_fallback_during_cooldown(summarization_service, single_key_limiter, long_text):
    single_key_limiter.record_quota_error()

    response = client.post("/api/v1/summarize/text", json={"text": long_text})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "extractive_fallback"
    assert "## Overview" in data["summary"]


def test_summarize_youtube(summarization_service, scripted_provider, mock_youtube_service):
    response = client.post(
        "/api/v1/summarize/youtube",
        json={"url": " https://youtu.be/dQw4w9WgXcQ "},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["video_id"] == "dQw4w9WgXcQ"
    assert data["title"] == "Never Gonna Give You Up"
    assert data["author"] == "Rick Astley"
    assert data["duration"] == 213
    assert data["is_metadata_only"] is False
    assert data["source"] == "generated_by_model"
    mock_youtube_service.resolve.assert_awaited_once_with("https://youtu.be/dQw4w9WgXcQ")

    user_message = scripted_provider.calls[0]["messages"][1].content
    assert "Title: Never Gonna Give You Up" in user_message
    assert "Transcript:\nWe're no strangers" in user_message


def test_summarize_youtube_invalid_url(override_dependencies, summarization_service):
    override_dependencies[get_youtube_service] = lambda: YouTubeService([], [])

    response = client.post("/api/v1/summarize/youtube", json={"url": "https://example.com/video"})

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/problem+json"
    problem = response.json()
    assert problem["status"] == 400
    assert problem["title"] == "Bad Request"
    assert "https://example.com/video" in problem["detail"]
    assert problem["instance"] == "/api/v1/summarize/youtube"


def test_summarize_youtube_upstream_failure(summarization_service, mock_youtube_service):
    mock_youtube_service.resolve.side_effect = UpstreamFetchError()

    response = client.post("/api/v1/summarize/youtube", json={"url": "dQw4w9WgXcQ"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to fetch video data."


def test_summarize_url_routes_youtube(summarization_service, mock_youtube_service, mock_web_page_service):
    response = client.post(
        "/api/v1/summarize/url",
        json={"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "type": "lecture"},
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Never Gonna Give You Up"
    mock_youtube_service.resolve.assert_awaited_once()
    mock_web_page_service.fetch_text.assert_not_awaited()


def test_summarize_url_web_page(summarization_service, mock_youtube_service, mock_web_page_service, long_text):
    mock_web_page_service.fetch_text.return_value = f"URL: https://example.com/article\n\n{long_text}"

    response = client.post(
        "/api/v1/summarize/url",
        json={"url": "https://example.com/article", "type": "text"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "generated_by_model"
    assert data["title"] is None
    mock_web_page_service.fetch_text.assert_awaited_once_with("https://example.com/article")
    mock_youtube_service.resolve.assert_not_awaited()


def test_summarize_url_requires_type(summarization_service):
    response = client.post("/api/v1/summarize/url", json={"url": "https://example.com"})

    assert response.status_code == 422


def test_health(override_dependencies, multi_key_limiter):
    multi_key_limiter.record_quota_error()
    override_dependencies[get_rate_limiter] = lambda: multi_key_limiter

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")).tzinfo is not None
    assert data["rate_limiting"]["error_count"] == 1
    assert data["rate_limiting"]["key_index"] == 1
    assert data["rate_limiting"]["key_count"] == 3
    assert data["rate_limiting"]["in_cooldown"] is False
    assert data["rate_limiting"]["current_model_tier"] == "standard"


@pytest.fixture
def chat_service(override_dependencies, summarization_service, single_key_limiter, scripted_provider, models):
    service = ChatService(
        rate_limiter=single_key_limiter,
        provider_factory=lambda api_key: scripted_provider,
        models=models,
        summarization_service=summarization_service,
    )
    override_dependencies[get_chat_service] = lambda: service
    return service


def test_chat_answers_from_history(chat_service, scripted_provider, long_text):
    summary = "## Summary\n" + "Chlorophyll absorbs red and blue light. " * 4
    response = client.post(
        "/api/v1/chat",
        json={
            "message": "Which light does chlorophyll absorb?",
            "type": "lecture",
            "history": [
                {"role": "user", "content": long_text},
                {"role": "assistant", "content": summary},
            ],
        },
    )

    assert response.status_code == 200
    assert response.json() == {"response": "## Summary\nA generated summary."}
    assert summary in scripted_provider.calls[0]["messages"][0].content


def test_chat_without_summary(chat_service, scripted_provider):
    response = client.post("/api/v1/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert "summarize" in response.json()["response"]
    assert scripted_provider.calls == []


def test_chat_validation(chat_service):
    response = client.post("/api/v1/chat", json={"message": ""})

    assert response.status_code == 422
