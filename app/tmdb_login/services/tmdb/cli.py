#!/usr/bin/env python3
"""TheMovieDB login CLI."""
import argparse
import getpass
import sys
from typing import List, Optional

from tmdb_login.config.settings import configure_logging
from tmdb_login.core.error.exceptions import ConfigurationException

from .service import get_tmdb_service
from .types import HandshakeResult

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def report(result: HandshakeResult) -> None:
    """Print the handshake outcome."""
    if result.success:
        print("Login successful")
        print(f"Session ID: {result.session_id}")
        print(f"User ID: {result.user_id}")
    else:
        print(result.message, file=sys.stderr)
        print(f"Reason: {result.reason}", file=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log in to TheMovieDB")
    parser.add_argument("--username", "-u", required=True, help="TheMovieDB username")
    parser.add_argument(
        "--password", "-p",
        help="TheMovieDB password (prompted for when omitted)"
    )
    parser.add_argument(
        "--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
        help="Application log level (defaults to APP_LOG_LEVEL)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        configure_logging(args.log_level)
        service = get_tmdb_service()
    except ConfigurationException as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")

    result = service.login(args.username, password, on_complete=report)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
