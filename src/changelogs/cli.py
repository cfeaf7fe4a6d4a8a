#!/usr/bin/env python3
"""
Changelog Server CLI
====================

Command-line entry point for the changelog server.

Examples:
    # Serve ./changelogs on port 3000
    changelog-server

    # Serve /srv/mods/changelogs on port 8080 without access logs
    changelog-server --directory /srv/mods --port 8080 --quiet
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from changelogs.config import reload_settings
from changelogs.logging_config import setup_logging
from changelogs.server import start_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changelog-server",
        description="Serve plain-text mod changelogs over HTTP",
    )
    parser.add_argument("-a", "--address", dest="host", help="The address to bind to (default: 0.0.0.0)")
    parser.add_argument("-p", "--port", type=int, help="The port to bind to (default: 3000)")
    parser.add_argument(
        "-d",
        "--directory",
        dest="base_dir",
        type=Path,
        help="Directory containing the changelogs folder (default: current directory)",
    )
    parser.add_argument("--changelogs-dir", help="Name of the changelogs folder (default: changelogs)")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const=True,
        default=None,
        help="Disable access logging",
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument(
        "--json-logs",
        action="store_const",
        const=True,
        default=None,
        help="Emit JSON log lines",
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this rotating file")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict:
    """Settings overrides for every flag given on the command line."""
    return {key: value for key, value in vars(args).items() if value is not None}


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = reload_settings(**overrides_from_args(args))
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 2

    setup_logging(settings.log_level, json_logs=settings.json_logs, log_file=settings.log_file)
    logger.info("Starting Changelog Server.")

    try:
        start_server(settings)
    except OSError:
        logger.exception("Failed to load changelogs from %s", settings.changelog_root)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
