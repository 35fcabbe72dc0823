"""Run the news proxy with uvicorn: ``python -m news_reader.proxy``."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from news_reader.proxy.app import create_app
from news_reader.proxy.settings import ProxySettings

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and serve until interrupted. Returns exit code."""
    settings = ProxySettings()
    parser = argparse.ArgumentParser(description="Serve the news-reader proxy")
    parser.add_argument("--host", default=settings.HOST, help="Bind address (default: HOST)")
    parser.add_argument(
        "--port", type=int, default=settings.PORT, help="Bind port (default: PORT or 5177)"
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="info", help="Log level (default: info)"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
