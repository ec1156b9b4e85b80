"""
Generic web page fetching for non-YouTube URLs.
"""
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from app.core.constants import WebFetchConfig
from app.services.summarization import truncate_for_processing


STRIPPED_TAGS = ["head", "nav", "script", "style"]


def html_to_text(html: str) -> str:
    """Drop head, nav, script and style elements and return the remaining text."""
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(STRIPPED_TAGS):
        tag.decompose()

    return " ".join(soup.get_text(" ", strip=True).split())


class WebPageService:
    """Fetches a web page and reduces it to summarizable plain text."""

    def __init__(self, http_client: httpx.AsyncClient, timeout_seconds: Optional[float] = 10.0):
        self.http_client = http_client
        self.timeout_seconds = timeout_seconds

    async def fetch_text(self, url: str) -> str:
        """
        Fetch a URL as plain text prefixed with the URL.

        Never raises: on failure the returned text says the page could not be
        fetched, so the summarizer still has something to work with.
        """
        try:
            response = await self.http_client.get(
                url,
                headers={"User-Agent": WebFetchConfig.USER_AGENT},
                timeout=self.timeout_seconds,
                follow_redirects=True,
            )
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Could not fetch {url}: {e!r}")
            return f"URL: {url}\n\nCould not fetch content from this URL."

        text = html_to_text(response.text)
        logger.info(f"Fetched {url}: {len(text)} chars of text")
        text = truncate_for_processing(text, WebFetchConfig.MAX_CONTENT_CHARS)
        return f"URL: {url}\n\n{text}"
