"""
podcast-dl

Checks a set of podcast RSS feeds and downloads the newest episode of each
feed whenever it differs from the last one downloaded.
"""

__version__ = "0.1.0"

from podcast_dl.config import PodcastConfiguration, Settings, load_podcast_config

__all__ = ["PodcastConfiguration", "Settings", "load_podcast_config", "__version__"]
