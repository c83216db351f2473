"""
Central logging configuration for calview_lite.

Sets per-module levels for the parsing and projection pipeline so that a
normal run only reports diagnostics (discarded entries, unreadable files,
runaway rules) while debug mode surfaces the per-file and per-rule detail.
"""

import logging
import os
from typing import Optional

LITE_MODULES = [
    "calview_lite",
    "calview_lite.config_loader",
    "calview_lite.lite_datetime_utils",
    "calview_lite.lite_day_projector",
    "calview_lite.lite_entry_builder",
    "calview_lite.lite_loader",
    "calview_lite.lite_record_parser",
    "calview_lite.lite_rrule_expander",
]


def configure_lite_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for calview_lite modules.

    Args:
        debug_mode: Whether to enable debug logging for calview_lite modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        CALVIEW_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        CALVIEW_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("CALVIEW_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("CALVIEW_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exists (preserve the colorlog setup from __init__.py)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    module_level = logging.DEBUG if final_debug else logging.INFO
    for module in LITE_MODULES:
        logging.getLogger(module).setLevel(module_level)

    if final_debug:
        root_logger.debug("Debug logging enabled for calview_lite modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in LITE_MODULES:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
