"""Date/date-time parsing and calendar arithmetic - calview_lite.

All instants are integer seconds since the epoch interpreted as floating
local time: the host's local calendar rules convert between wall-clock
fields and instants, and no TZID or UTC offset is honoured.
"""

import logging
import os
import re
from datetime import datetime, timedelta
from typing import Optional

from dateutil import parser as dateutil_parser

from .lite_exceptions import LiteDateParseError, LiteDateRangeError
from .lite_models import DatePrecision, TemporalValue

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

FREQ_DAILY = "DAILY"
FREQ_WEEKLY = "WEEKLY"
FREQ_MONTHLY = "MONTHLY"
FREQ_YEARLY = "YEARLY"
SUPPORTED_FREQUENCIES = (FREQ_DAILY, FREQ_WEEKLY, FREQ_MONTHLY, FREQ_YEARLY)

TEST_TIME_ENV = "CALVIEW_TEST_TIME"

_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
# A trailing Z is tolerated and ignored: values are floating local time.
_DATETIME_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})Z?$")


def instant_from_datetime(dt: datetime) -> int:
    """Convert a naive local datetime to an instant.

    Args:
        dt: Naive datetime holding local wall-clock fields

    Returns:
        Seconds since the epoch
    """
    return int(dt.timestamp())


def datetime_from_instant(instant: int) -> datetime:
    """Convert an instant to a naive local datetime.

    Raises:
        LiteDateRangeError: If the instant falls outside years 1..9999
    """
    try:
        return datetime.fromtimestamp(instant)
    except (ValueError, OverflowError, OSError) as e:
        raise LiteDateRangeError(f"Instant {instant} is out of range: {e}") from e


def compose_local(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> int:
    """Recompose local calendar fields into an instant, normalising overflow.

    Behaves like C ``mktime``: a month outside 1..12 rolls into neighbouring
    years and a day outside the month rolls into neighbouring months
    (e.g. January 31 plus one month is March 2 or 3).

    Args:
        year: Calendar year
        month: Month, may be out of range
        day: Day of month, may be out of range
        hour: Hour 0..23
        minute: Minute 0..59
        second: Second 0..59

    Returns:
        Instant for the normalised local wall-clock time

    Raises:
        LiteDateRangeError: If the normalised date falls outside years 1..9999
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        normalised = datetime(year, month, 1, hour, minute, second) + timedelta(days=day - 1)
        return instant_from_datetime(normalised)
    except (ValueError, OverflowError, OSError) as e:
        raise LiteDateRangeError(
            f"Date {year:04d}-{month:02d} day {day} is out of range: {e}"
        ) from e


def parse_temporal(value: str) -> TemporalValue:
    """Parse a DTSTART-style value.

    Handles:
    - Date format: 20240310 -> DATE at local midnight
    - Date-time format: 20240310T093000 -> DATETIME at that local time

    Args:
        value: Raw field value

    Returns:
        Parsed TemporalValue

    Raises:
        LiteDateParseError: If the value has any other shape or names an
            impossible calendar date/time
    """
    text = value.strip() if value is not None else ""

    match = _DATETIME_PATTERN.match(text)
    if match:
        precision = DatePrecision.DATETIME
        fields = [int(group) for group in match.groups()]
    else:
        match = _DATE_PATTERN.match(text)
        if not match:
            raise LiteDateParseError(f"Invalid date format: {value!r}")
        precision = DatePrecision.DATE
        fields = [int(group) for group in match.groups()] + [0, 0, 0]

    try:
        wall_clock = datetime(*fields)
    except ValueError as e:
        raise LiteDateParseError(f"Invalid date format: {value!r} ({e})") from e

    return TemporalValue(precision=precision, instant=instant_from_datetime(wall_clock))


def parse_temporal_optional(value: Optional[str]) -> Optional[TemporalValue]:
    """Parse an optional value, returning None when absent or malformed."""
    if value is None:
        return None

    try:
        return parse_temporal(value)
    except LiteDateParseError as e:
        logger.debug("Ignoring unparseable optional date value: %s", e)
        return None


def start_of_day(instant: int) -> int:
    """Return local midnight of the calendar day containing ``instant``.

    Goes through calendar decomposition rather than modular arithmetic so
    days shortened or lengthened by offset transitions land on midnight.
    """
    dt = datetime_from_instant(instant)
    return compose_local(dt.year, dt.month, dt.day)


def advance(instant: int, interval: int, unit: Optional[str]) -> int:
    """Move ``instant`` forward by ``interval`` units of a recurrence frequency.

    DAILY adds days, WEEKLY adds 7-day steps, MONTHLY adds months and YEARLY
    adds years to the decomposed local fields, then recomposes with
    ``compose_local`` normalisation. A negative interval moves backwards.

    Args:
        instant: Starting instant
        interval: Number of units to add
        unit: One of SUPPORTED_FREQUENCIES

    Returns:
        The advanced instant, or ``instant`` unchanged for an absent or
        unrecognised unit

    Raises:
        LiteDateRangeError: If either end of the step falls outside years 1..9999
    """
    dt = datetime_from_instant(instant)
    year, month, day = dt.year, dt.month, dt.day

    if unit == FREQ_DAILY:
        day += interval
    elif unit == FREQ_WEEKLY:
        day += interval * 7
    elif unit == FREQ_MONTHLY:
        month += interval
    elif unit == FREQ_YEARLY:
        year += interval
    else:
        return instant

    return compose_local(year, month, day, dt.hour, dt.minute, dt.second)


def get_current_time() -> datetime:
    """Get the current local time, respecting the test time override.

    Returns:
        Naive local datetime (from CALVIEW_TEST_TIME when set and parseable)
    """
    test_time = os.environ.get(TEST_TIME_ENV)
    if test_time:
        try:
            dt = dateutil_parser.parse(test_time)
            return dt.astimezone().replace(tzinfo=None) if dt.tzinfo else dt
        except (ValueError, OverflowError) as e:
            logger.warning(f"Invalid {TEST_TIME_ENV}: {test_time}, error: {e}")

    return datetime.now()


def current_instant() -> int:
    """Current time as an instant."""
    return instant_from_datetime(get_current_time())


def format_day_label(day: int) -> str:
    """Format a day as e.g. ``Sun 2024-03-10``."""
    return datetime_from_instant(day).strftime("%a %Y-%m-%d")


def format_clock_time(instant: int) -> str:
    """Format a time as e.g. ``09:30AM``."""
    return datetime_from_instant(instant).strftime("%I:%M%p")
