"""
Configuration management for podcast-dl.

Two layers are kept apart:

- ``Settings`` -- runtime knobs (timeouts, chunk size, user agent, log
  level) read from ``PODCAST_DL_`` environment variables or a ``.env``
  file via pydantic-settings.
- ``PodcastConfiguration`` -- the podcast configuration file passed on the
  command line: download root, log folder, marker file name and the list
  of monitored feeds. JSON or YAML, PascalCase or snake_case keys.
"""

import json
from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_pascal
from pydantic_settings import BaseSettings, SettingsConfigDict

from podcast_dl import __version__
from podcast_dl.errors import ConfigError


DEFAULT_MARKER_FILE_NAME = "last_downloaded.txt"
LOG_FILE_NAME = "podcast.log"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    """
    Runtime settings with environment variable support.

    Example:
        export PODCAST_DL_FEED_TIMEOUT=10
        export PODCAST_DL_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="PODCAST_DL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    feed_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for fetching a feed document"
    )
    download_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Connect/read timeout in seconds for enclosure downloads"
    )
    chunk_size: int = Field(
        default=65536,
        gt=0,
        description="Chunk size in bytes for streaming downloads"
    )
    user_agent: str = Field(
        default=f"podcast-dl/{__version__}",
        description="User-Agent header sent with every request"
    )
    log_level: LogLevel = Field(
        default="INFO",
        description="Console log level (DEBUG, INFO, WARNING or ERROR)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


class _PascalModel(BaseModel):
    """Accepts both the PascalCase keys of the original files and snake_case."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
    )


class FeedDescriptor(_PascalModel):
    """
    One monitored podcast.

    Attributes:
        id: Opaque identifier (a UUID in most configuration files)
        rss_url: URL of the podcast feed
        download_sub_folder: Folder under the download root for this feed
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
    )

    id: str
    rss_url: str = Field(min_length=1)
    download_sub_folder: str = Field(min_length=1)


class PodcastConfiguration(_PascalModel):
    """
    Parsed podcast configuration file.

    Attributes:
        download_folder: Root folder for all downloads
        log_folder: Folder receiving ``podcast.log``
        last_downloaded_file_name: Name of the per-feed marker file
        podcasts: Feeds to check on every cycle
    """

    download_folder: Path
    log_folder: Path
    last_downloaded_file_name: str = DEFAULT_MARKER_FILE_NAME
    podcasts: List[FeedDescriptor] = Field(default_factory=list)

    def feed_folder(self, feed: FeedDescriptor) -> Path:
        """Destination folder for a feed's downloads and marker file."""
        return self.download_folder / feed.download_sub_folder

    def marker_path(self, feed: FeedDescriptor) -> Path:
        """Path of the file recording the last downloaded title for a feed."""
        return self.feed_folder(feed) / self.last_downloaded_file_name

    @property
    def log_file(self) -> Path:
        return self.log_folder / LOG_FILE_NAME


def load_podcast_config(path: Path) -> PodcastConfiguration:
    """
    Load and validate a podcast configuration file.

    Files ending in ``.yaml`` or ``.yml`` are read as YAML, everything else
    as JSON.

    Args:
        path: Path to the configuration file

    Returns:
        Validated PodcastConfiguration

    Raises:
        ConfigError: If the file is missing, unreadable, malformed or
            fails validation

    Example:
        >>> config = load_podcast_config(Path("podcasts.json"))
        >>> print(f"Checking {len(config.podcasts)} podcasts")
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read configuration file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not parse configuration file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain an object")

    try:
        return PodcastConfiguration.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def get_settings() -> Settings:
    """
    Get the runtime settings.

    Returns:
        Settings: merged from environment variables and ``.env``
    """
    return Settings()
