"""Plain-text rendering of a DayView - calview_lite."""

from dataclasses import dataclass, field
from typing import Optional

from .lite_datetime_utils import format_clock_time, format_day_label
from .lite_exceptions import LiteDateRangeError
from .lite_models import CalendarEntry, DayPlacement, DayView, SpanPosition

SPAN_PREFIXES = {
    SpanPosition.START: "|->",
    SpanPosition.MIDDLE: "<->",
    SpanPosition.END: "<-|",
}


@dataclass
class RenderedDayView:
    """Text lines for a DayView.

    Fields:
        lines: one line per placement, day label on the first line of each day
        line_entries: 1-based line number -> occurrence shown on that line
        current_line: first line of today's day, or None
    """

    lines: list[str] = field(default_factory=list)
    line_entries: dict[int, CalendarEntry] = field(default_factory=dict)
    current_line: Optional[int] = None


def _time_column(placement: DayPlacement) -> str:
    occurrence = placement.occurrence
    if occurrence.start.is_date:
        return ""
    start_time = format_clock_time(occurrence.start.instant)
    end_time = ""
    if occurrence.end is not None:
        try:
            end_time = format_clock_time(occurrence.end.instant)
        except LiteDateRangeError:
            # end past the representable calendar prints blank
            end_time = ""
    return f"{start_time:>7} - {end_time:>7}"


def _summary_column(placement: DayPlacement) -> str:
    prefix = SPAN_PREFIXES.get(placement.span, "")
    return prefix + placement.occurrence.summary


def render_day_view(view: DayView) -> RenderedDayView:
    """Render day buckets as aligned text lines.

    Args:
        view: Result of build_day_view()

    Returns:
        RenderedDayView with lines, line-to-occurrence map and today's line
    """
    rendered = RenderedDayView()

    for index, bucket in enumerate(view.buckets):
        if index == view.today_index:
            rendered.current_line = len(rendered.lines) + 1
        day_label = format_day_label(bucket.day)

        for position, placement in enumerate(bucket.placements):
            time_column = _time_column(placement)
            summary = _summary_column(placement)
            if position == 0:
                line = f"{day_label} {time_column:>17} {summary}"
            else:
                line = f" {time_column:>31} {summary}"
            rendered.lines.append(line)
            rendered.line_entries[len(rendered.lines)] = placement.occurrence

    return rendered
