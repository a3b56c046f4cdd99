"""
Streaming enclosure downloader.

Saves a podcast enclosure under its own file name (the last path segment
of its URL) inside a destination folder. An existing file of the same name
is overwritten; a failed transfer leaves whatever was written so far.
"""

import logging
import posixpath
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import requests

from podcast_dl.errors import StorageError, TransferError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300  # seconds
DEFAULT_CHUNK_SIZE = 65536


def filename_from_url(url: str) -> str:
    """
    Derive a local file name from the last path segment of a URL.

    Query string and fragment are ignored and percent-escapes decoded.

    Args:
        url: Enclosure URL

    Returns:
        File name, e.g. ``ep42.mp3`` for ``https://cdn/ep42.mp3?x=1``

    Raises:
        TransferError: If the URL path has no usable last segment
    """
    segment = posixpath.basename(unquote(urlsplit(url).path))
    if segment in ("", ".", ".."):
        raise TransferError(f"Could not derive a file name from {url}")
    return segment


def download_enclosure(
    url: str,
    destination_folder: Path,
    timeout: float = DEFAULT_TIMEOUT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    user_agent: Optional[str] = None,
) -> Path:
    """
    Download an enclosure into ``destination_folder``.

    Args:
        url: Enclosure URL
        destination_folder: Folder to save the file in (created if absent)
        timeout: Connect/read timeout in seconds
        chunk_size: Bytes per streamed chunk
        user_agent: Optional User-Agent header

    Returns:
        Path of the written file

    Raises:
        StorageError: If the destination folder cannot be created
        TransferError: On any network error, HTTP error status or write failure

    Example:
        >>> download_enclosure("https://cdn.example.com/ep42.mp3", Path("podcasts/show"))
        PosixPath('podcasts/show/ep42.mp3')
    """
    output_path = Path(destination_folder) / filename_from_url(url)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Could not create folder {output_path.parent}: {exc}") from exc

    logger.info("Downloading podcast %s -> %s", url, output_path)

    headers = {"User-Agent": user_agent} if user_agent else {}
    downloaded = 0

    try:
        with requests.get(url, headers=headers, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            with open(output_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        downloaded += len(chunk)
    except requests.exceptions.RequestException as exc:
        raise TransferError(f"Failed to download {url}: {exc}") from exc
    except OSError as exc:
        raise TransferError(f"Failed to write {output_path}: {exc}") from exc

    logger.info("Download complete: %s (%.1f MB)", output_path, downloaded / 1024 / 1024)
    return output_path
