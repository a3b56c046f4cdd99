"""
Tests for configuration loading and runtime settings.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from podcast_dl.config import (
    DEFAULT_MARKER_FILE_NAME,
    FeedDescriptor,
    PodcastConfiguration,
    Settings,
    load_podcast_config,
)
from podcast_dl.errors import ConfigError


ORIGINAL_STYLE_CONFIG = {
    "DownloadFolder": "/srv/podcasts",
    "LogFolder": "/var/log/podcast-dl",
    "LastDownloadedFileName": "lastdownloaded.txt",
    "Podcasts": [
        {
            "Id": "3f2b8c1e-5a4d-4e2f-9b1c-0d7e6f5a4b3c",
            "RssUrl": "https://example.com/a.rss",
            "DownloadSubFolder": "show-a",
        },
        {
            "Id": "7c6b5a4d-3e2f-4a1b-8c9d-0e1f2a3b4c5d",
            "RssUrl": "https://example.com/b.rss",
            "DownloadSubFolder": "show-b",
        },
    ],
}


class TestLoadPodcastConfig:
    """Tests for load_podcast_config()."""

    def test_pascal_case_json(self, tmp_path):
        """Configuration files using PascalCase keys load as-is."""
        path = tmp_path / "podcasts.json"
        path.write_text(json.dumps(ORIGINAL_STYLE_CONFIG), encoding="utf-8")

        config = load_podcast_config(path)

        assert config.download_folder == Path("/srv/podcasts")
        assert config.log_folder == Path("/var/log/podcast-dl")
        assert config.last_downloaded_file_name == "lastdownloaded.txt"
        assert len(config.podcasts) == 2
        assert config.podcasts[0].rss_url == "https://example.com/a.rss"
        assert config.podcasts[1].download_sub_folder == "show-b"

    def test_snake_case_yaml(self, tmp_path):
        """YAML files with snake_case keys are accepted."""
        path = tmp_path / "podcasts.yaml"
        path.write_text(
            "download_folder: /srv/podcasts\n"
            "log_folder: /var/log/podcast-dl\n"
            "podcasts:\n"
            "  - id: show-a\n"
            "    rss_url: https://example.com/a.rss\n"
            "    download_sub_folder: show-a\n",
            encoding="utf-8",
        )

        config = load_podcast_config(path)

        assert config.podcasts[0].id == "show-a"
        assert config.last_downloaded_file_name == DEFAULT_MARKER_FILE_NAME

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_podcast_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "podcasts.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigError, match="Could not parse"):
            load_podcast_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "podcasts.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ConfigError, match="must contain an object"):
            load_podcast_config(path)

    def test_missing_required_field(self, tmp_path):
        """A feed without a URL fails validation."""
        data = dict(ORIGINAL_STYLE_CONFIG)
        data["Podcasts"] = [{"Id": "x", "DownloadSubFolder": "show"}]
        path = tmp_path / "podcasts.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_podcast_config(path)


class TestPaths:
    """Tests for the per-feed path helpers."""

    def test_feed_folder_and_marker_path(self, tmp_path):
        feed = FeedDescriptor(id="a", rss_url="https://example.com/a.rss", download_sub_folder="show-a")
        config = PodcastConfiguration(
            download_folder=tmp_path,
            log_folder=tmp_path / "logs",
            last_downloaded_file_name="last.txt",
            podcasts=[feed],
        )

        assert config.feed_folder(feed) == tmp_path / "show-a"
        assert config.marker_path(feed) == tmp_path / "show-a" / "last.txt"
        assert config.log_file == tmp_path / "logs" / "podcast.log"

    def test_feed_descriptor_is_immutable(self):
        feed = FeedDescriptor(id="a", rss_url="https://example.com/a.rss", download_sub_folder="show-a")

        with pytest.raises(Exception):
            feed.rss_url = "https://evil.example.com/"


class TestSettings:
    """Tests for environment-driven runtime settings."""

    def test_defaults(self, monkeypatch):
        for name in ("FEED_TIMEOUT", "DOWNLOAD_TIMEOUT", "CHUNK_SIZE", "LOG_LEVEL"):
            monkeypatch.delenv(f"PODCAST_DL_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.feed_timeout == 30.0
        assert settings.download_timeout == 300.0
        assert settings.chunk_size == 65536
        assert settings.user_agent.startswith("podcast-dl/")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PODCAST_DL_FEED_TIMEOUT", "5")
        monkeypatch.setenv("PODCAST_DL_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.feed_timeout == 5.0
        assert settings.log_level == "DEBUG"

    def test_lowercase_log_level_accepted(self, monkeypatch):
        monkeypatch.setenv("PODCAST_DL_LOG_LEVEL", "warning")

        settings = Settings(_env_file=None)

        assert settings.log_level == "WARNING"

    def test_unknown_log_level_rejected(self, monkeypatch):
        """An unknown level fails validation instead of reaching the logging setup."""
        monkeypatch.setenv("PODCAST_DL_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
