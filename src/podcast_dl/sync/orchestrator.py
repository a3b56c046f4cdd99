"""
Check cycle across all configured feeds.

Runs one ``sync_feed()`` per feed on its own thread and waits for every
one of them before returning. Feeds share nothing but the logging
handlers; a failing feed never stops the others.

Example:
    >>> from podcast_dl.sync.orchestrator import run_cycle
    >>> result = run_cycle(config)
    >>> print(f"{result.downloaded} downloaded, {result.failed} failed")
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from podcast_dl.config import PodcastConfiguration, Settings, get_settings
from podcast_dl.sync.worker import SyncOutcome, SyncResult, sync_feed

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """
    Result of one check cycle.

    Attributes:
        started_at: ISO-8601 timestamp of the cycle start
        finished_at: ISO-8601 timestamp of the cycle end
        dry_run: Whether downloads were suppressed
        results: One SyncResult per configured feed, in configuration order
    """

    started_at: str = ""
    finished_at: str = ""
    dry_run: bool = False
    results: List[SyncResult] = field(default_factory=list)

    def _count(self, outcome: SyncOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def downloaded(self) -> int:
        return self._count(SyncOutcome.DOWNLOADED)

    @property
    def skipped(self) -> int:
        return self._count(SyncOutcome.SKIPPED)

    @property
    def new(self) -> int:
        return self._count(SyncOutcome.NEW)

    @property
    def failed(self) -> int:
        return self._count(SyncOutcome.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "dry_run": self.dry_run,
            "feed_count": len(self.results),
            "downloaded": self.downloaded,
            "skipped": self.skipped,
            "new": self.new,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def run_cycle(
    config: PodcastConfiguration,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
) -> CycleResult:
    """
    Check every configured feed once, concurrently.

    One worker thread is started per feed. The call returns only after all
    of them have finished, whatever their outcome.

    Args:
        config: Podcast configuration with the feeds to check
        settings: Runtime settings (uses default if None)
        dry_run: If True, report new items without downloading them

    Returns:
        CycleResult with one SyncResult per feed
    """
    if settings is None:
        settings = get_settings()

    result = CycleResult(started_at=_now(), dry_run=dry_run)
    feeds = list(config.podcasts)

    logger.info("Checking for new podcasts...")

    if feeds:
        with ThreadPoolExecutor(
            max_workers=len(feeds),
            thread_name_prefix="podcast-sync",
        ) as executor:
            futures = [
                executor.submit(sync_feed, feed, config, settings, dry_run)
                for feed in feeds
            ]
            logger.info("Waiting for podcasts to finish...")
            result.results = [future.result() for future in futures]

    result.finished_at = _now()
    logger.info("Done checking podcasts.")
    logger.info(
        "%d feed(s): %d downloaded, %d new, %d skipped, %d failed",
        len(result.results),
        result.downloaded,
        result.new,
        result.skipped,
        result.failed,
    )
    return result
