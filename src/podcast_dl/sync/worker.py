"""
Single-feed synchronization.

``sync_feed()`` runs one feed through its steps:

1. fetch the newest item
2. locate its enclosure
3. compare its title with the feed's marker file
4. download the enclosure when the title differs
5. record the new title in the marker file

The steps run strictly in order. The marker is only written after the
download has completed, so a failure at any step leaves it at the
previous success and the next cycle retries the same item.

The worker never raises: every error ends up in the returned
``SyncResult`` and in the log, so sibling feeds are unaffected.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from podcast_dl.config import FeedDescriptor, PodcastConfiguration, Settings, get_settings
from podcast_dl.errors import SyncError
from podcast_dl.ingestion.dedup_store import marker_value, read_last, write_last
from podcast_dl.ingestion.downloader import download_enclosure
from podcast_dl.ingestion.feed_fetcher import fetch_newest

logger = logging.getLogger(__name__)


class SyncStep(str, Enum):
    """Step of the per-feed workflow."""
    FETCH = "fetch"
    LOCATE_ENCLOSURE = "locate_enclosure"
    COMPARE = "compare"
    DOWNLOAD = "download"
    RECORD = "record"


class SyncOutcome(str, Enum):
    """Terminal state of a feed synchronization."""
    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    NEW = "new"
    FAILED = "failed"


_FAILURE_MESSAGES = {
    SyncStep.FETCH: "Could not find newest item",
    SyncStep.LOCATE_ENCLOSURE: "Could not find enclosure",
    SyncStep.COMPARE: "Could not read last downloaded item",
    SyncStep.DOWNLOAD: "Error downloading newest podcast",
    SyncStep.RECORD: "Could not record downloaded item",
}


@dataclass
class SyncResult:
    """
    Result of synchronizing one feed.

    Attributes:
        feed_id: Identifier of the feed descriptor
        feed_url: URL of the feed
        outcome: Terminal state reached
        title: Title of the newest item, if it was fetched
        enclosure_url: Enclosure URL of the newest item, if located
        downloaded_path: Path of the downloaded file on DOWNLOADED
        failed_step: Step that failed on FAILED
        error: Error message on FAILED
    """

    feed_id: str
    feed_url: str
    outcome: SyncOutcome = SyncOutcome.FAILED
    title: Optional[str] = None
    enclosure_url: Optional[str] = None
    downloaded_path: Optional[Path] = None
    failed_step: Optional[SyncStep] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != SyncOutcome.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "feed_id": self.feed_id,
            "feed_url": self.feed_url,
            "outcome": self.outcome.value,
            "title": self.title,
            "enclosure_url": self.enclosure_url,
            "downloaded_path": str(self.downloaded_path) if self.downloaded_path else None,
            "failed_step": self.failed_step.value if self.failed_step else None,
            "error": self.error,
        }


def sync_feed(
    feed: FeedDescriptor,
    config: PodcastConfiguration,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
) -> SyncResult:
    """
    Synchronize one feed and report what happened.

    Args:
        feed: Feed to check
        config: Podcast configuration (download root, marker file name)
        settings: Runtime settings (uses default if None)
        dry_run: If True, detect a new item without downloading or recording

    Returns:
        SyncResult describing the terminal state. Never raises.

    Example:
        >>> result = sync_feed(config.podcasts[0], config)
        >>> print(result.outcome)
    """
    if settings is None:
        settings = get_settings()

    result = SyncResult(feed_id=feed.id, feed_url=feed.rss_url)
    step = SyncStep.FETCH

    try:
        item = fetch_newest(
            feed.rss_url,
            timeout=settings.feed_timeout,
            user_agent=settings.user_agent,
        )
        result.title = item.title

        step = SyncStep.LOCATE_ENCLOSURE
        result.enclosure_url = item.enclosure_url()

        step = SyncStep.COMPARE
        marker_path = config.marker_path(feed)
        last_title = read_last(marker_path)
        if last_title is not None and last_title == marker_value(item.title):
            logger.debug("No new episode for %s (last: %s)", feed.rss_url, last_title)
            result.outcome = SyncOutcome.SKIPPED
            return result

        if dry_run:
            logger.info("[dry-run] New episode for %s: %s", feed.rss_url, item.title)
            result.outcome = SyncOutcome.NEW
            return result

        step = SyncStep.DOWNLOAD
        result.downloaded_path = download_enclosure(
            result.enclosure_url,
            config.feed_folder(feed),
            timeout=settings.download_timeout,
            chunk_size=settings.chunk_size,
            user_agent=settings.user_agent,
        )

        step = SyncStep.RECORD
        write_last(marker_path, item.title)

    except SyncError as exc:
        return _fail(result, step, exc)
    except Exception as exc:
        logger.exception("Unexpected error syncing %s", feed.rss_url)
        return _fail(result, step, exc, logged=True)

    logger.info("Downloaded new episode for %s: %s", feed.rss_url, item.title)
    result.outcome = SyncOutcome.DOWNLOADED
    return result


def _fail(
    result: SyncResult,
    step: SyncStep,
    exc: Exception,
    logged: bool = False,
) -> SyncResult:
    """Mark a result as FAILED at ``step`` and log it unless already logged."""
    result.outcome = SyncOutcome.FAILED
    result.failed_step = step
    result.error = str(exc)
    if not logged:
        logger.error(
            "%s for podcast %s (id=%s): %s",
            _FAILURE_MESSAGES[step],
            result.feed_url,
            result.feed_id,
            exc,
        )
    return result
