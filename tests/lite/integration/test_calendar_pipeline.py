"""End-to-end tests: calendar directory -> entries -> day view -> text lines."""

import pytest

from calview_lite import build_day_view, load_calendar, render_day_view
from calview_lite.__main__ import main
from calview_lite.lite_datetime_utils import parse_temporal
from calview_lite.lite_entry_builder import build_entries
from calview_lite.lite_record_parser import parse_records

pytestmark = pytest.mark.integration

BLANK_TIME = " " * 17

EXPECTED_MARCH_LINES = [
    "Mon 2024-03-11 02:00PM - 02:30PM Weekly sync (moved)",
    f"Tue 2024-03-12 {BLANK_TIME} |->Offsite",
    f"Wed 2024-03-13 {BLANK_TIME} <->Offsite",
    f"Thu 2024-03-14 {BLANK_TIME} <-|Offsite",
    "Mon 2024-03-18 09:00AM - 09:30AM Weekly sync",
]


def _window(start: str, end: str) -> tuple[int, int]:
    return parse_temporal(start).instant, parse_temporal(end).instant


def test_directory_to_rendered_lines(calendar_dir, instant_at):
    calendar = load_calendar(str(calendar_dir))
    view = build_day_view(
        calendar.entries, *_window("20240310", "20240320"), now=instant_at(2024, 3, 13, 10, 0)
    )
    rendered = render_day_view(view)

    assert rendered.lines == EXPECTED_MARCH_LINES
    assert rendered.current_line == 3
    assert rendered.line_entries[1].is_exception
    assert rendered.line_entries[5].start.instant == instant_at(2024, 3, 18, 9, 0)
    assert calendar.discarded_count == 1


def test_whole_calendar_window(sample_ics_recurring, instant_at):
    entries = build_entries(parse_records(sample_ics_recurring, "/cal/sync.ics"))
    view = build_day_view(entries, *_window("19000101", "21000101"), now=instant_at(2024, 1, 1))

    assert [bucket.day for bucket in view.buckets] == [
        instant_at(2024, 3, 4),
        instant_at(2024, 3, 11),
        instant_at(2024, 3, 18),
        instant_at(2024, 3, 25),
    ]
    assert [o.summary for b in view.buckets for o in b.occurrences] == [
        "Weekly sync",
        "Weekly sync (moved)",
        "Weekly sync",
        "Weekly sync",
    ]
    assert view.today_index is None


def test_repeated_queries_are_independent(calendar_dir, instant_at):
    calendar = load_calendar(str(calendar_dir))
    window = _window("20240310", "20240320")
    first = render_day_view(build_day_view(calendar.entries, *window, now=instant_at(2024, 3, 1)))
    second = render_day_view(build_day_view(calendar.entries, *window, now=instant_at(2024, 3, 1)))

    assert first.lines == second.lines == EXPECTED_MARCH_LINES
    assert calendar.entries[1].start.instant == instant_at(2024, 3, 4, 9, 0)


def test_cli_prints_day_view(calendar_dir, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("CALVIEW_CONFIG", str(tmp_path / "no-config.yaml"))
    monkeypatch.setenv("CALVIEW_TEST_TIME", "2024-03-13T10:00:00")

    with pytest.raises(SystemExit) as exc_info:
        main([str(calendar_dir), "20240310", "20240320"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.splitlines() == EXPECTED_MARCH_LINES


def test_cli_window_with_time_of_day(calendar_dir, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("CALVIEW_CONFIG", str(tmp_path / "no-config.yaml"))

    with pytest.raises(SystemExit) as exc_info:
        main([str(calendar_dir), "20240318T090000", "20240318T090000"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.splitlines() == [EXPECTED_MARCH_LINES[-1]]
