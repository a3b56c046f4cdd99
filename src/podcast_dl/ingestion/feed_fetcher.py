"""
Newest-item lookup for podcast RSS feeds.

Fetches a feed document over HTTP and returns its first item in document
order, which podcast feeds publish newest-first. Items are never re-sorted
by date.

Example:
    >>> item = fetch_newest("https://example.com/podcast/rss")
    >>> print(item.title, item.enclosure_url())
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

import feedparser
import requests
from dateutil import parser as date_parser

from podcast_dl.errors import FeedUnreachable, NoEnclosureFound, NoItemFound

logger = logging.getLogger(__name__)

ENCLOSURE_REL = "enclosure"
DEFAULT_TIMEOUT = 30  # seconds


# ---------------------------------------------------------------------------
#  Data models
# ---------------------------------------------------------------------------

@dataclass
class FeedLink:
    """
    A single link of a feed item.

    Attributes:
        rel: Link relationship (``alternate``, ``enclosure``, ...)
        href: Link target
        type: MIME type, if the feed declares one
    """

    rel: str
    href: str
    type: str = ""


@dataclass
class FeedItem:
    """
    The newest item of a feed.

    Attributes:
        title: Item title, used as the dedup key
        links: All links of the item, in document order
        published: Publication date as ISO-8601 string, or empty
        feed_url: URL of the feed the item came from
    """

    title: str
    links: List[FeedLink] = field(default_factory=list)
    published: str = ""
    feed_url: str = ""

    def enclosure_url(self) -> str:
        """
        Return the target of the first link whose relationship is ``enclosure``.

        Raises:
            NoEnclosureFound: If the item has no enclosure link
        """
        for link in self.links:
            if link.rel == ENCLOSURE_REL and link.href:
                return link.href
        raise NoEnclosureFound(
            f"Could not find newest item enclosure for podcast {self.feed_url}",
            feed_url=self.feed_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


# ---------------------------------------------------------------------------
#  Core functions
# ---------------------------------------------------------------------------

def fetch_newest(
    feed_url: str,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: Optional[str] = None,
) -> FeedItem:
    """
    Fetch a feed and return its first item.

    Args:
        feed_url: URL of the podcast RSS feed
        timeout: Request timeout in seconds
        user_agent: Optional User-Agent header

    Returns:
        FeedItem for the first item in document order

    Raises:
        FeedUnreachable: If the feed cannot be retrieved
        NoItemFound: If the feed has no items
    """
    headers = {"User-Agent": user_agent} if user_agent else {}

    try:
        response = requests.get(feed_url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as exc:
        raise FeedUnreachable(
            f"Could not fetch podcast feed {feed_url}: {exc}",
            feed_url=feed_url,
        ) from exc

    feed = feedparser.parse(
        response.content,
        response_headers={k.lower(): v for k, v in response.headers.items()},
    )

    if not feed.entries:
        reason = f" ({feed.bozo_exception})" if feed.bozo else ""
        raise NoItemFound(
            f"Could not find newest item for podcast {feed_url}{reason}",
            feed_url=feed_url,
        )

    if feed.bozo:
        logger.debug("Feed %s parsed with errors: %s", feed_url, feed.bozo_exception)

    return _to_feed_item(feed.entries[0], feed_url)


def _to_feed_item(entry: Any, feed_url: str) -> FeedItem:
    """
    Build a FeedItem from a feedparser entry.

    The title falls back to the entry id so untitled items still get a
    stable dedup key.
    """
    title = entry.get("title") or entry.get("id") or ""

    links = [
        FeedLink(
            rel=link.get("rel", ""),
            href=link.get("href", ""),
            type=link.get("type", ""),
        )
        for link in entry.get("links", [])
    ]

    return FeedItem(
        title=title,
        links=links,
        published=_normalize_date(entry.get("published", "")),
        feed_url=feed_url,
    )


def _normalize_date(raw_date: str) -> str:
    """Normalize an RSS date to ISO-8601; unparseable dates are kept as-is."""
    if not raw_date:
        return ""
    try:
        return date_parser.parse(raw_date).isoformat()
    except (ValueError, OverflowError):
        return raw_date
