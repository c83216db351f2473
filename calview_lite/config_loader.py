"""calview_lite.config_loader

Config loader for calview_lite.

- Reads YAML through PyYAML (JSON is valid YAML, so JSON files load too).
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override (falling back to the CALVIEW_CONFIG env var).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .lite_loader import MAX_FILE_SIZE_BYTES
from .lite_rrule_expander import MAX_OCCURRENCES_PER_RULE

logger = logging.getLogger(__name__)

CONFIG_ENV = "CALVIEW_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "calview_lite" / "config.yaml"


@dataclass
class Config:
    """Typed configuration for calview_lite.

    Fields:
        calendar_dir: default calendar directory when none is given on the command line
        window_start: default window start (YYYYMMDD or YYYYMMDDTHHMMSS)
        window_years_ahead: default window end, in years after now (1..1000)
        max_occurrences_per_rule: per-rule expansion cap (1..1000)
        max_total_occurrences: expansion budget across all entries of one query
        max_file_size_bytes: event files above this size are skipped
        log_level: logging level name
    """

    calendar_dir: str | None = None
    window_start: str = "19000101"
    window_years_ahead: int = 100
    max_occurrences_per_rule: int = MAX_OCCURRENCES_PER_RULE
    max_total_occurrences: int = 100000
    max_file_size_bytes: int = MAX_FILE_SIZE_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int and out-of-range values are
        clamped, logging a warning for every coercion.
        """
        if data is None:
            data = {}

        def _coerce_int(key: str, default: int, minimum: int, maximum: int | None = None) -> int:
            raw = data.get(key, default)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default
            if value < minimum:
                logger.warning("%s %d below minimum; coercing to %d", key, value, minimum)
                return minimum
            if maximum is not None and value > maximum:
                logger.warning("%s %d above maximum; coercing to %d", key, value, maximum)
                return maximum
            return value

        calendar_dir = data.get("calendar_dir")
        if calendar_dir is not None:
            calendar_dir = str(calendar_dir)

        window_start = data.get("window_start", "19000101")
        window_start = str(window_start) if window_start is not None else "19000101"

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            calendar_dir=calendar_dir,
            window_start=window_start,
            window_years_ahead=_coerce_int("window_years_ahead", 100, 1, 1000),
            max_occurrences_per_rule=_coerce_int(
                "max_occurrences_per_rule", MAX_OCCURRENCES_PER_RULE, 1, MAX_OCCURRENCES_PER_RULE
            ),
            max_total_occurrences=_coerce_int("max_total_occurrences", 100000, 1),
            max_file_size_bytes=_coerce_int("max_file_size_bytes", MAX_FILE_SIZE_BYTES, 1),
            log_level=log_level,
        )


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to $CALVIEW_CONFIG,
              then ~/.config/calview_lite/config.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises ValueError.
    """
    env_path = os.environ.get(CONFIG_ENV)
    p = Path(path or env_path or DEFAULT_CONFIG_PATH).expanduser()
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.debug("Config file %s not found; using defaults", p)
        return Config()

    loaded = yaml.safe_load(p.read_text())
    # safe_load returns None for empty files
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, loaded)
        raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
    cfg = Config.from_dict(loaded)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
