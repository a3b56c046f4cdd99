"""
Command-line interface for podcast-dl.

Usage:
    podcast-dl podcasts.json                 # Check all feeds, download new episodes
    podcast-dl podcasts.json --dry-run       # Report new episodes without downloading
    podcast-dl podcasts.json --output-json   # JSON output for automation
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from podcast_dl import __version__
from podcast_dl.config import LOG_LEVELS, get_settings, load_podcast_config
from podcast_dl.errors import ConfigError
from podcast_dl.logging_config import PACKAGE_LOGGER, configure_logging

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with code 1 on malformed arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(
            "There must be one argument containing the path to the podcast config file.",
            file=sys.stderr,
        )
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="podcast-dl",
        description="Download the newest episode of each configured podcast feed",
    )
    parser.add_argument(
        "config",
        help="Path to the podcast configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report new episodes without downloading them",
    )
    parser.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Print the cycle result as JSON (for automation)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Console log level (default: PODCAST_DL_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"ERROR: Invalid PODCAST_DL_ settings: {exc}", file=sys.stderr)
        return 1

    try:
        config = load_podcast_config(args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    level = args.log_level or settings.log_level
    try:
        configure_logging(config.log_folder, level)
    except OSError as exc:
        configure_logging(None, level)
        logger.warning("Could not open log folder %s: %s", config.log_folder, exc)

    from podcast_dl.sync.orchestrator import run_cycle

    try:
        result = run_cycle(config, settings=settings, dry_run=args.dry_run)
    except Exception:
        logger.exception("Error downloading podcasts")
        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()
        return 1

    if args.output_json:
        print(result.to_json())

    return 0


if __name__ == "__main__":
    sys.exit(main())
