"""Command-line entry for calview_lite."""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn

from . import run_calendar


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for calview_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="calview-lite",
        description="Print a day-by-day agenda of a directory of calendar event files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m calview_lite ~/.calendars/work                      # whole calendar
  python -m calview_lite ~/.calendars/work 20240301 20240331    # March 2024 only
        """,
    )

    parser.add_argument(
        "directory",
        nargs="?",
        help="Calendar directory (default: calendar_dir from the config file)",
    )
    parser.add_argument("start", nargs="?", help="Window start, YYYYMMDD or YYYYMMDDTHHMMSS")
    parser.add_argument("end", nargs="?", help="Window end, YYYYMMDD or YYYYMMDDTHHMMSS")
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Config file (default: $CALVIEW_CONFIG or ~/.config/calview_lite/config.yaml)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Run the calview_lite CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)
    sys.exit(run_calendar(args))


if __name__ == "__main__":
    main()
