"""calview_lite - day-by-day agenda view of a directory of calendar event files.

Query surface:
    load_calendar(directory) -> LoadedCalendar
    build_day_view(entries, window_start, window_end) -> DayView
"""

__version__ = "0.1.0"

import logging
import os
import sys
from typing import Any, Optional

from colorlog import ColoredFormatter

from .config_loader import Config, load_config
from .lite_datetime_utils import FREQ_YEARLY, advance, current_instant, parse_temporal
from .lite_day_projector import build_day_view, project_day_buckets
from .lite_exceptions import (
    CalviewLiteError,
    LiteCalendarIOError,
    LiteDateParseError,
    LiteDateRangeError,
)
from .lite_loader import load_calendar
from .lite_logging import configure_lite_logging
from .lite_models import CalendarEntry, DayBucket, DayPlacement, DayView, LoadedCalendar
from .lite_renderer import RenderedDayView, render_day_view

__all__ = [
    "CalendarEntry",
    "CalviewLiteError",
    "Config",
    "DayBucket",
    "DayPlacement",
    "DayView",
    "LiteCalendarIOError",
    "LiteDateParseError",
    "LiteDateRangeError",
    "LoadedCalendar",
    "RenderedDayView",
    "build_day_view",
    "load_calendar",
    "load_config",
    "project_day_buckets",
    "render_day_view",
    "run_calendar",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to stderr.

    Honors CALVIEW_DEBUG (truthy values: "1", "true", "yes", "on"), which
    forces DEBUG verbosity without changing code.
    """
    debug_env = os.environ.get("CALVIEW_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def _resolve_window(args: Any, cfg: Config) -> tuple[int, int]:
    """Window bounds from command line arguments, falling back to config.

    Raises:
        LiteDateParseError: If a bound is not a supported date string
        LiteDateRangeError: If the default end falls past year 9999
    """
    start_text = getattr(args, "start", None) or cfg.window_start
    window_start = parse_temporal(start_text).instant

    end_text = getattr(args, "end", None)
    if end_text:
        window_end = parse_temporal(end_text).instant
    else:
        window_end = advance(current_instant(), cfg.window_years_ahead, FREQ_YEARLY)
    return window_start, window_end


def run_calendar(args: Optional[object] = None) -> int:
    """Load a calendar directory and print its day view.

    Args:
        args: Namespace with ``directory``, ``start``, ``end``, ``config`` and
            ``debug`` attributes (all optional)

    Returns:
        Process exit status: 0 on success, 1 when the window is invalid or the
        directory cannot be loaded, 2 when no directory was given
    """
    _init_logging(os.environ.get("CALVIEW_LOG_LEVEL"))
    logger = logging.getLogger(__name__)

    debug = bool(getattr(args, "debug", False))
    cfg = load_config(getattr(args, "config", None))
    configure_lite_logging(debug_mode=debug)
    if not debug and not os.environ.get("CALVIEW_LOG_LEVEL"):
        logging.getLogger().setLevel(getattr(logging, cfg.log_level, logging.INFO))

    directory = getattr(args, "directory", None) or cfg.calendar_dir
    if not directory:
        print("Usage: calview-lite <dir> [<start_date>] [<end_date>]", file=sys.stderr)
        return 2

    try:
        window_start, window_end = _resolve_window(args, cfg)
    except (LiteDateParseError, LiteDateRangeError) as e:
        logger.error("Invalid window bound: %s", e)
        return 1

    calendar = load_calendar(directory, cfg)
    if not calendar.available:
        return 1

    view = build_day_view(calendar.entries, window_start, window_end, settings=cfg)
    rendered = render_day_view(view)

    logger.debug(
        "Rendered %d lines for calendar %r (today at line %s)",
        len(rendered.lines),
        calendar.name,
        rendered.current_line,
    )
    for line in rendered.lines:
        print(line)
    return 0
