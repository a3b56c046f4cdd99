"""
Per-feed record of the last downloaded episode.

The marker file holds the title of the last item whose media was fully
written to disk. Only the first line is read; the writer always produces
exactly one line and replaces the file in a single rename.
"""

import os
from pathlib import Path
from typing import Optional

from podcast_dl.errors import StorageError


def marker_value(title: str) -> str:
    """
    Return the single-line form of a title as stored in a marker file.

    Args:
        title: Item title, possibly containing line breaks

    Returns:
        The title with each line break replaced by a space; all other
        characters, surrounding whitespace included, are kept
    """
    return " ".join(title.splitlines())


def read_last(marker_path: Path) -> Optional[str]:
    """
    Read the last downloaded title for a feed.

    Args:
        marker_path: Path to the feed's marker file

    Returns:
        First line of the marker file, or None if it is absent or empty

    Raises:
        StorageError: If the file exists but cannot be read
    """
    if not marker_path.exists():
        return None

    try:
        lines = marker_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageError(f"Could not read marker file {marker_path}: {exc}") from exc

    return lines[0] if lines else None


def write_last(marker_path: Path, title: str) -> None:
    """
    Replace the marker file with a single line holding ``title``.

    Creates the parent folders if needed. The content is written to a
    temporary sibling first and renamed over the marker.

    Args:
        marker_path: Path to the feed's marker file
        title: Title of the item that was just downloaded

    Raises:
        StorageError: If the folder or file cannot be written
    """
    tmp = marker_path.parent / f".{marker_path.name}.{os.getpid()}.tmp"
    try:
        marker_path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(marker_value(title) + "\n", encoding="utf-8")
        tmp.replace(marker_path)
    except OSError as exc:
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            pass
        raise StorageError(f"Could not write marker file {marker_path}: {exc}") from exc
