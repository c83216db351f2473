import logging
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from calview_lite.lite_datetime_utils import instant_from_datetime
from calview_lite.lite_logging import LITE_MODULES
from calview_lite.lite_models import CalendarEntry, DatePrecision, TemporalValue


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear calview environment overrides so host settings cannot leak in."""
    for name in ("CALVIEW_TEST_TIME", "CALVIEW_DEBUG", "CALVIEW_LOG_LEVEL", "CALVIEW_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_logger_levels() -> Generator[None, Any, None]:
    """Restore levels changed by configure_lite_logging() / the CLI."""
    names = ["", *LITE_MODULES]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def instant_at() -> Callable[..., int]:
    """Return a helper building a local instant from wall-clock fields."""

    def _instant_at(
        year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
    ) -> int:
        return instant_from_datetime(datetime(year, month, day, hour, minute, second))

    return _instant_at


@pytest.fixture
def make_entry(instant_at: Callable[..., int]) -> Callable[..., CalendarEntry]:
    """Return a factory for CalendarEntry objects.

    ``start``/``end``/``recurrence_id`` are field tuples, (Y, M, D) for
    DATE precision or (Y, M, D, h, m[, s]) for DATETIME precision.
    """

    def _value(fields: Optional[tuple]) -> Optional[TemporalValue]:
        if fields is None:
            return None
        precision = DatePrecision.DATE if len(fields) == 3 else DatePrecision.DATETIME
        return TemporalValue(precision=precision, instant=instant_at(*fields))

    def _make_entry(
        start: tuple,
        end: Optional[tuple] = None,
        summary: str = "Event",
        rrule: Optional[str] = None,
        recurrence_id: Optional[tuple] = None,
        source_path: str = "/cal/event.ics",
    ) -> CalendarEntry:
        return CalendarEntry(
            start=_value(start),
            end=_value(end),
            rrule=rrule,
            summary=summary,
            recurrence_id=_value(recurrence_id),
            source_path=source_path,
        )

    return _make_entry


# ==================== Calendar Test Data Fixtures ====================


@pytest.fixture
def sample_ics_recurring() -> str:
    """
    Return a calendar file with a weekly meeting and one moved occurrence.

    Occurrences: 2024-03-04, 11 (moved to 14:00), 18 and 25, 09:00-09:30.
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//calview test//EN
BEGIN:VEVENT
UID:weekly-sync@calview.test
DTSTART:20240304T090000
DTEND:20240304T093000
RRULE:FREQ=WEEKLY;COUNT=4
SUMMARY:  Weekly sync
END:VEVENT
BEGIN:VEVENT
UID:weekly-sync@calview.test
RECURRENCE-ID:20240311T090000
DTSTART:20240311T140000
DTEND:20240311T143000
SUMMARY:Weekly sync (moved)
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_all_day_span() -> str:
    """Return a calendar file with a three-day all-day event (Mar 12-14)."""
    return """BEGIN:VCALENDAR
VERSION:2.0
BEGIN:VEVENT
UID:offsite@calview.test
DTSTART;VALUE=DATE:20240312
DTEND;VALUE=DATE:20240315
SUMMARY:Offsite
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_invalid_start() -> str:
    """Return a calendar file whose only event has an unparseable DTSTART."""
    return """BEGIN:VCALENDAR
BEGIN:VEVENT
DTSTART:not-a-date
SUMMARY:Broken
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def calendar_dir(
    tmp_path: Path,
    sample_ics_recurring: str,
    sample_ics_all_day_span: str,
    sample_ics_invalid_start: str,
) -> Path:
    """Create a calendar directory named ``work`` with three event files."""
    directory = tmp_path / "work"
    directory.mkdir()
    (directory / "sync.ics").write_text(sample_ics_recurring, encoding="utf-8")
    (directory / "offsite.ics").write_text(sample_ics_all_day_span, encoding="utf-8")
    (directory / "broken.ics").write_text(sample_ics_invalid_start, encoding="utf-8")
    (directory / "archive").mkdir()
    (directory / "archive" / "old.ics").write_text(sample_ics_all_day_span, encoding="utf-8")
    return directory
