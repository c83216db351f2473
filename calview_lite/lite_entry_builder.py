"""Mapping of raw event records onto CalendarEntry - calview_lite."""

import logging
from typing import Optional

from .lite_datetime_utils import parse_temporal, parse_temporal_optional
from .lite_exceptions import LiteDateParseError
from .lite_models import CalendarEntry, RawRecord

logger = logging.getLogger(__name__)

KEY_DTSTART = "DTSTART"
KEY_DTEND = "DTEND"
KEY_RRULE = "RRULE"
KEY_SUMMARY = "SUMMARY"
KEY_RECURRENCE_ID = "RECURRENCE-ID"


class LiteEntryBuilder:
    """Builds validated CalendarEntry objects from RawRecord field maps."""

    def build(self, record: RawRecord) -> Optional[CalendarEntry]:
        """Build one entry.

        Args:
            record: Raw record from the record parser

        Returns:
            CalendarEntry, or None when DTSTART is missing or unparseable
        """
        raw_start = record.get(KEY_DTSTART)
        if raw_start is None:
            logger.warning("No start date for: %s", record.source_path)
            return None

        try:
            start = parse_temporal(raw_start)
        except LiteDateParseError as e:
            logger.warning("No start date for: %s (%s)", record.source_path, e)
            return None

        rrule = record.get(KEY_RRULE)
        return CalendarEntry(
            start=start,
            end=parse_temporal_optional(record.get(KEY_DTEND)),
            rrule=rrule.strip() if rrule and rrule.strip() else None,
            summary=(record.get(KEY_SUMMARY) or "").strip(),
            recurrence_id=parse_temporal_optional(record.get(KEY_RECURRENCE_ID)),
            source_path=record.source_path,
        )

    def build_all(self, records: list[RawRecord]) -> list[CalendarEntry]:
        """Build entries for every record, dropping the ones without a start."""
        entries = []
        for record in records:
            entry = self.build(record)
            if entry is not None:
                entries.append(entry)
        return entries


def build_entry(record: RawRecord) -> Optional[CalendarEntry]:
    """Build one entry from a raw record."""
    return LiteEntryBuilder().build(record)


def build_entries(records: list[RawRecord]) -> list[CalendarEntry]:
    """Build entries from raw records, discarding those without a usable start."""
    return LiteEntryBuilder().build_all(records)
