"""
Shared test fixtures.

Provides pytest fixtures and builders for:
- Podcast configuration rooted in a temporary directory
- Runtime settings with short timeouts
- RSS documents and requests-like responses
"""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import requests

from podcast_dl.config import FeedDescriptor, PodcastConfiguration, Settings
from podcast_dl.ingestion.feed_fetcher import FeedItem, FeedLink


def make_rss(items: Iterable[Tuple[str, Optional[str]]], title: str = "My Podcast") -> bytes:
    """
    Build an RSS 2.0 document.

    Args:
        items: (title, enclosure_url) pairs in document order; a None
            enclosure_url produces an item without an enclosure
        title: Channel title
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"><channel>',
        f"<title>{title}</title>",
        "<link>https://example.com/</link>",
    ]
    for item_title, enclosure in items:
        parts.append("<item>")
        parts.append(f"<title>{item_title}</title>")
        parts.append("<link>https://example.com/episodes/page</link>")
        parts.append("<pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>")
        if enclosure:
            parts.append(f'<enclosure url="{enclosure}" type="audio/mpeg" length="1024"/>')
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "\n".join(parts).encode("utf-8")


def make_feed_response(content: bytes, status_error: Optional[Exception] = None) -> MagicMock:
    """Build a requests.Response-like mock for a feed document."""
    response = MagicMock()
    response.content = content
    response.headers = {"Content-Type": "application/rss+xml; charset=utf-8"}
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


def make_stream_response(
    chunks: List[bytes],
    status_error: Optional[Exception] = None,
    fail_after: Optional[int] = None,
) -> MagicMock:
    """
    Build a streaming requests.Response-like mock usable as a context manager.

    Args:
        chunks: Chunks yielded by iter_content
        status_error: Exception raised by raise_for_status
        fail_after: Raise a ConnectionError after yielding this many chunks
    """
    response = MagicMock()
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    if status_error is not None:
        response.raise_for_status.side_effect = status_error

    def _iter_content(chunk_size=None):
        for i, chunk in enumerate(chunks):
            if fail_after is not None and i >= fail_after:
                raise requests.exceptions.ConnectionError("connection reset")
            yield chunk

    response.iter_content.side_effect = _iter_content
    return response


def make_item(
    title: str = "Ep 42",
    enclosure: Optional[str] = "https://cdn.example.com/ep42.mp3",
    feed_url: str = "https://example.com/a.rss",
) -> FeedItem:
    """Build a FeedItem with an alternate link and an optional enclosure."""
    links = [FeedLink(rel="alternate", href="https://example.com/episodes/page", type="text/html")]
    if enclosure:
        links.append(FeedLink(rel="enclosure", href=enclosure, type="audio/mpeg"))
    return FeedItem(title=title, links=links, feed_url=feed_url)


@pytest.fixture
def feed_a() -> FeedDescriptor:
    return FeedDescriptor(
        id="0b6f3c4e-1d2a-4f5b-9c8d-7e6f5a4b3c2d",
        rss_url="https://example.com/a.rss",
        download_sub_folder="show-a",
    )


@pytest.fixture
def feed_b() -> FeedDescriptor:
    return FeedDescriptor(
        id="9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d",
        rss_url="https://example.com/b.rss",
        download_sub_folder="show-b",
    )


@pytest.fixture
def podcast_config(tmp_path: Path, feed_a, feed_b) -> PodcastConfiguration:
    """
    Configuration with two feeds rooted in a temporary directory.

    Returns:
        PodcastConfiguration: downloads under tmp_path/downloads
    """
    return PodcastConfiguration(
        download_folder=tmp_path / "downloads",
        log_folder=tmp_path / "logs",
        last_downloaded_file_name="last.txt",
        podcasts=[feed_a, feed_b],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        feed_timeout=5,
        download_timeout=5,
        chunk_size=4,
        user_agent="podcast-dl-tests",
        log_level="DEBUG",
    )
