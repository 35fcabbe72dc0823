"""Command line entry point for the news reader TUI."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from news_reader.action_messages import build_invalid_category_error
from news_reader.config import load_config
from news_reader.models import CATEGORIES, CONFIG_APP_NAME, DEFAULT_PROXY_URL, UserConfig

logger = logging.getLogger(__name__)

DEBUG_LOG_NAME = "debug.log"
DEBUG_LOG_MAX_BYTES = 5 * 1024 * 1024
DEBUG_LOG_BACKUPS = 3
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Environment hints honoured by Rich/Textual; value = (set, unset)
_COLOR_ENV = {
    "never": ("NO_COLOR", "FORCE_COLOR"),
    "always": ("FORCE_COLOR", "NO_COLOR"),
}

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_NO_TTY = 2


def _debug_log_path() -> Path:
    return Path(user_config_dir(CONFIG_APP_NAME)) / DEBUG_LOG_NAME


def _configure_logging(debug: bool) -> None:
    """Silence logging for the TUI, or send DEBUG records to a rotating file.

    Textual owns the terminal, so nothing may be written to stderr while the
    app runs.
    """
    if not debug:
        logging.disable(logging.CRITICAL)
        return

    log_file = _debug_log_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=DEBUG_LOG_MAX_BYTES,
        backupCount=DEBUG_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    if color_mode in _COLOR_ENV:
        enable, disable = _COLOR_ENV[color_mode]
        os.environ[enable] = "1"
        os.environ.pop(disable, None)
        return
    # auto: let the terminal decide, but keep an explicit NO_COLOR from the user
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _print_tty_help() -> None:
    lines = [
        "Error: news-reader requires an interactive TTY for the full UI.",
        "Next steps:",
        "  - Run news-reader directly in a terminal session",
        "  - Query the proxy directly: curl <proxy-url>/api/news/all",
        "  - Use --help for command documentation",
    ]
    print("\n".join(lines), file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="news-reader",
        description="Browse news headlines three at a time in a TUI",
    )
    parser.add_argument(
        "--proxy-url",
        metavar="URL",
        help=f"Base URL of the news proxy (default: config value or {DEFAULT_PROXY_URL})",
    )

    selection = parser.add_argument_group("starting selection")
    selection.add_argument(
        "--category",
        help=f"Start on a category: {', '.join(CATEGORIES)}",
    )
    selection.add_argument(
        "--search",
        metavar="TEXT",
        help="Start with a search instead of a category",
    )
    selection.add_argument(
        "--no-restore",
        action="store_true",
        help="Ignore the category and search saved from the last run",
    )

    behaviour = parser.add_argument_group("behaviour")
    behaviour.add_argument(
        "--no-prefetch",
        action="store_true",
        help="Do not prefetch neighbouring pages",
    )
    behaviour.add_argument(
        "--debug",
        action="store_true",
        help=f"Write debug logs to {_debug_log_path()}",
    )

    display = parser.add_argument_group("display")
    display.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode (default: auto)",
    )
    display.add_argument(
        "--no-color",
        action="store_true",
        help="Same as --color never",
    )
    display.add_argument(
        "--ascii",
        action="store_true",
        help="Use ASCII-only icons for limited terminals",
    )
    return parser


def _normalize_category(raw: str | None) -> str | None:
    return raw.strip().lower() if raw is not None else None


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Run the TUI. Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    category = _normalize_category(args.category)
    if category is not None and category not in CATEGORIES:
        print(build_invalid_category_error(args.category, CATEGORIES), file=sys.stderr)
        return EXIT_USAGE

    configure_color_mode_fn("never" if args.no_color else args.color)
    configure_logging_fn(args.debug)
    logger.debug("news-reader starting, cwd=%s", Path.cwd())

    config = load_config_fn()
    if args.proxy_url:
        config.proxy_url = args.proxy_url.strip().rstrip("/")

    if not validate_interactive_tty_fn():
        _print_tty_help()
        return EXIT_NO_TTY

    if app_factory is None:
        from news_reader.app import NewsReaderApp

        app_factory = NewsReaderApp

    app = app_factory(
        config,
        restore_session=not args.no_restore,
        category=category,
        search=args.search,
        prefetch=False if args.no_prefetch else None,
        ascii_icons=args.ascii,
    )
    app.run()
    return EXIT_OK


__all__ = [
    "EXIT_NO_TTY",
    "EXIT_OK",
    "EXIT_USAGE",
    "_configure_color_mode",
    "_configure_logging",
    "_validate_interactive_tty",
    "main",
]
