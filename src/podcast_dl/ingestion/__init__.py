"""
Ingestion module: feed lookup, enclosure download and the per-feed
last-downloaded marker.
"""

from podcast_dl.ingestion.dedup_store import marker_value, read_last, write_last
from podcast_dl.ingestion.downloader import download_enclosure, filename_from_url
from podcast_dl.ingestion.feed_fetcher import FeedItem, FeedLink, fetch_newest

__all__ = [
    "FeedItem",
    "FeedLink",
    "fetch_newest",
    "download_enclosure",
    "filename_from_url",
    "marker_value",
    "read_last",
    "write_last",
]
