"""Data models for event parsing and day projection - calview_lite."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DatePrecision(str, Enum):
    """Precision of a parsed DTSTART/DTEND/RECURRENCE-ID value."""

    DATE = "date"
    DATETIME = "datetime"


class SpanPosition(str, Enum):
    """Where a day placement falls within a multi-day all-day occurrence."""

    NONE = "none"
    START = "start"
    MIDDLE = "middle"
    END = "end"


class TemporalValue(BaseModel):
    """An instant with its source precision.

    DATE values always carry local midnight of their calendar day, so two
    DATE values are equal exactly when they name the same day.
    """

    precision: DatePrecision
    instant: int = Field(..., description="Seconds since the epoch, floating local time")

    model_config = ConfigDict(frozen=True)

    @property
    def is_date(self) -> bool:
        """Check if this value is date-only (all-day)."""
        return self.precision == DatePrecision.DATE


class RawRecord(BaseModel):
    """Key/value fields of one BEGIN:VEVENT ... END:VEVENT block."""

    fields: dict[str, str] = Field(default_factory=dict)
    source_path: str

    def get(self, key: str) -> Optional[str]:
        """Get a raw field value by its exact (case-sensitive) key."""
        return self.fields.get(key)


class CalendarEntry(BaseModel):
    """Validated in-memory representation of one event.

    Expanded occurrences are CalendarEntry values too; the model is frozen so
    rebinding start/end always goes through ``model_copy(update=...)`` and no
    occurrence shares state with its source entry or its siblings.
    """

    start: TemporalValue
    end: Optional[TemporalValue] = Field(default=None, description="Exclusive end")
    rrule: Optional[str] = Field(default=None, description="Raw RRULE text")
    summary: str = ""
    recurrence_id: Optional[TemporalValue] = Field(
        default=None, description="Instant of the occurrence this exception replaces"
    )
    source_path: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def is_exception(self) -> bool:
        """Check if this entry overrides a single occurrence of another entry."""
        return self.recurrence_id is not None

    @property
    def is_recurring(self) -> bool:
        """Check if this entry carries a recurrence rule."""
        return bool(self.rrule)

    @property
    def duration_seconds(self) -> int:
        """Fixed start-to-end offset (zero when there is no end)."""
        if self.end is None:
            return 0
        return self.end.instant - self.start.instant

    def rebind(self, start_instant: int) -> "CalendarEntry":
        """Return an independent copy moved to ``start_instant``, keeping duration."""
        new_start = self.start.model_copy(update={"instant": start_instant})
        new_end = None
        if self.end is not None:
            new_end = self.end.model_copy(
                update={"instant": start_instant + self.duration_seconds}
            )
        return self.model_copy(update={"start": new_start, "end": new_end})


class DayPlacement(BaseModel):
    """One occurrence placed on one calendar day."""

    occurrence: CalendarEntry
    span: SpanPosition = SpanPosition.NONE

    model_config = ConfigDict(frozen=True)


class DayBucket(BaseModel):
    """All placements intersecting one calendar day, in sorted order."""

    day: int = Field(..., description="Start-of-day instant")
    placements: list[DayPlacement] = Field(default_factory=list)

    @property
    def occurrences(self) -> list[CalendarEntry]:
        """Occurrences in this bucket, in placement order."""
        return [placement.occurrence for placement in self.placements]


class DayView(BaseModel):
    """Result of one day-bucket projection."""

    buckets: list[DayBucket] = Field(default_factory=list)
    window_start: int
    window_end: int
    today: int = Field(..., description="Start-of-day instant used for the today marker")
    today_index: Optional[int] = Field(
        default=None, description="Index into buckets of today's bucket, when present"
    )
    occurrence_count: int = 0

    def bucket_for(self, day: int) -> Optional[DayBucket]:
        """Find the bucket for a start-of-day instant."""
        for bucket in self.buckets:
            if bucket.day == day:
                return bucket
        return None


class LoadedCalendar(BaseModel):
    """Entries loaded from one calendar directory."""

    name: str
    directory: str
    entries: list[CalendarEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    available: bool = True
    file_count: int = 0
    discarded_count: int = 0

    def add_error(self, error: str) -> None:
        """Add a diagnostic message."""
        self.errors.append(error)
