"""CLI entry point for hackerreader."""

from __future__ import annotations

import argparse
import logging
import sys

import hackerreader.io.logging_setup
from hackerreader.io.hn_api import COLLECTIONS, HackerNewsClient
from hackerreader.io.settings import get_config_path, load_reader_settings, save_known_settings
from hackerreader.tui.app import HackerReaderApp
from hackerreader.tui.theme import THEMES, get_theme

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hackerreader",
        description="Keyboard-driven Hacker News reader for the terminal",
    )
    parser.add_argument(
        "--collection",
        choices=COLLECTIONS,
        default=None,
        help="Story list to browse (default: topstories)",
    )
    parser.add_argument("--api-url", default=None, help="Base URL of the item API")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "--tick-interval",
        type=float,
        default=None,
        help="Seconds between fetch batches (default: 1.0)",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(THEMES),
        default=None,
        help="Color theme (default: dracula)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Remember the given options in the settings file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for the log file (default: $HACKERREADER_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # [LAW:single-enforcer] Runtime logger configuration is centralized in io.logging_setup.
    log_runtime = hackerreader.io.logging_setup.configure(level=args.log_level)
    logger.info("log file: %s (level %s)", log_runtime.file_path, log_runtime.level_name)
    logger.debug("settings file: %s", get_config_path())

    overrides = {
        "collection": args.collection,
        "api_url": args.api_url,
        "request_timeout": args.timeout,
        "tick_interval": args.tick_interval,
        "theme": args.theme,
    }
    if args.save:
        save_known_settings(overrides)
    settings = load_reader_settings(overrides)
    if settings.theme not in THEMES:
        logger.warning("unknown theme %r, using dracula", settings.theme)
    client = HackerNewsClient(
        settings.api_url,
        timeout=settings.request_timeout,
        collection=settings.collection,
    )
    app = HackerReaderApp(client, settings, get_theme(settings.theme))
    app.run()
    return_code = app.return_code or 0
    if return_code:
        logger.error("exited with code %d", return_code)
    return return_code


if __name__ == "__main__":
    sys.exit(main())
