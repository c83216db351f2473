"""Day-bucket projection of expanded occurrences - calview_lite.

Turns a list of entries into a DayView: recurring entries are expanded over
the query window, exceptions substituted, occurrences stably sorted by start
and then spread across every calendar day they intersect.
"""

import logging
from typing import Any, Optional

from .lite_datetime_utils import FREQ_DAILY, advance, current_instant, start_of_day
from .lite_exceptions import LiteDateRangeError
from .lite_models import CalendarEntry, DayBucket, DayPlacement, DayView, SpanPosition
from .lite_rrule_expander import LiteRRuleExpander

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOTAL_OCCURRENCES = 100000


class LiteDayProjector:
    """Stateless projector from entries and a window onto day buckets."""

    def __init__(self, settings: Any = None):
        """Initialize projector.

        Args:
            settings: Optional configuration object providing
                ``max_occurrences_per_rule`` and ``max_total_occurrences``
        """
        self.expander = LiteRRuleExpander(settings)
        budget = getattr(settings, "max_total_occurrences", DEFAULT_MAX_TOTAL_OCCURRENCES)
        self.max_total_occurrences = int(budget) if budget else DEFAULT_MAX_TOTAL_OCCURRENCES

    def project(
        self,
        entries: list[CalendarEntry],
        window_start: int,
        window_end: int,
        now: Optional[int] = None,
    ) -> DayView:
        """Expand, sort and bucket entries for the inclusive window.

        Args:
            entries: Loaded entries, exceptions included
            window_start: Inclusive window start instant
            window_end: Inclusive window end instant
            now: Instant used for the today marker (defaults to current time)

        Returns:
            DayView with buckets sorted by day
        """
        occurrences = self._expand_all(entries, window_start, window_end)

        # sorted() is stable: equal starts keep entry order
        occurrences = sorted(occurrences, key=lambda occurrence: occurrence.start.instant)

        first_day = start_of_day(window_start)
        buckets: dict[int, list[DayPlacement]] = {}
        placed = 0

        for occurrence in occurrences:
            start = occurrence.start.instant
            if start > window_end or start < window_start:
                continue

            placed += 1
            last_day = self._last_day(occurrence)
            day = start_of_day(start)
            while True:
                if first_day <= day <= window_end:
                    buckets.setdefault(day, []).append(
                        DayPlacement(
                            occurrence=occurrence,
                            span=self._classify(occurrence, day, last_day),
                        )
                    )
                if occurrence.end is None:
                    break
                try:
                    day = start_of_day(advance(day, 1, FREQ_DAILY))
                except LiteDateRangeError:
                    break
                # end is exclusive; nothing after window_end is placed
                if day >= occurrence.end.instant or day > window_end:
                    break

        today = start_of_day(now if now is not None else current_instant())
        sorted_days = sorted(buckets)
        view = DayView(
            buckets=[DayBucket(day=day, placements=buckets[day]) for day in sorted_days],
            window_start=window_start,
            window_end=window_end,
            today=today,
            today_index=sorted_days.index(today) if today in buckets else None,
            occurrence_count=placed,
        )

        logger.debug(
            "Projected %d occurrences from %d entries onto %d days",
            placed,
            len(entries),
            len(view.buckets),
        )
        return view

    def _expand_all(
        self, entries: list[CalendarEntry], window_start: int, window_end: int
    ) -> list[CalendarEntry]:
        """Expand every base entry, substituting exceptions."""
        exceptions = [entry for entry in entries if entry.is_exception]
        base_entries = [entry for entry in entries if not entry.is_exception]

        occurrences: list[CalendarEntry] = []
        for index, entry in enumerate(base_entries):
            remaining = self.max_total_occurrences - len(occurrences)
            if remaining <= 0:
                logger.warning(
                    "Expansion budget of %d occurrences exhausted; skipping %d remaining entries",
                    self.max_total_occurrences,
                    len(base_entries) - index,
                )
                break
            expanded = self.expander.expand_event(
                entry, exceptions, window_start, window_end, max_occurrences=remaining
            )
            occurrences.extend(expanded[:remaining])

        return occurrences

    def _last_day(self, occurrence: CalendarEntry) -> Optional[int]:
        """Last calendar day an occurrence covers: the day before its exclusive end.

        None when the end lies past the representable calendar.
        """
        if occurrence.end is None:
            return start_of_day(occurrence.start.instant)
        try:
            return start_of_day(advance(occurrence.end.instant, -1, FREQ_DAILY))
        except LiteDateRangeError:
            return None

    def _classify(
        self, occurrence: CalendarEntry, day: int, last_day: Optional[int]
    ) -> SpanPosition:
        """Classify a placement of a multi-day all-day occurrence."""
        first_day = occurrence.start.instant
        if not occurrence.start.is_date or first_day == last_day:
            return SpanPosition.NONE
        if day == first_day:
            return SpanPosition.START
        if day == last_day:
            return SpanPosition.END
        if first_day < day and (last_day is None or day < last_day):
            return SpanPosition.MIDDLE
        return SpanPosition.NONE


def project_day_buckets(
    entries: list[CalendarEntry],
    window_start: int,
    window_end: int,
    now: Optional[int] = None,
    settings: Any = None,
) -> DayView:
    """Project entries onto day buckets for the inclusive window."""
    return LiteDayProjector(settings).project(entries, window_start, window_end, now)


def build_day_view(
    entries: list[CalendarEntry],
    window_start: int,
    window_end: int,
    now: Optional[int] = None,
    settings: Any = None,
) -> DayView:
    """Query surface for the presentation layer: day buckets plus today marker."""
    return project_day_buckets(entries, window_start, window_end, now, settings)
