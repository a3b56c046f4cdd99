"""
Exception taxonomy for podcast-dl.

Every failure inside a feed synchronization is a ``SyncError`` subclass so
the sync worker can catch it at its boundary and turn it into a result.
"""

from typing import Optional


class PodcastDLError(Exception):
    """Base exception for all podcast-dl errors."""

    pass


class ConfigError(PodcastDLError):
    """The podcast configuration file is missing, unreadable or invalid."""

    pass


class SyncError(PodcastDLError):
    """
    A failure while synchronizing a single feed.

    Attributes:
        feed_url: URL of the feed being synchronized, if known
    """

    def __init__(self, message: str, feed_url: Optional[str] = None) -> None:
        super().__init__(message)
        self.feed_url = feed_url


class FeedUnreachable(SyncError):
    """The feed document could not be retrieved."""

    pass


class NoItemFound(SyncError):
    """The feed document contains no items."""

    pass


class NoEnclosureFound(SyncError):
    """The newest item has no link with an ``enclosure`` relationship."""

    pass


class TransferError(SyncError):
    """Network or filesystem failure while downloading an enclosure."""

    pass


class StorageError(SyncError):
    """Marker file read/write or folder creation failed."""

    pass
