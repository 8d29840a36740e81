from datetime import date, datetime, time, timezone

from app.core.dates import (
    as_date, format_clock_time, format_event_date, format_local_date,
    format_short_date, format_weekend_range, parse_local_date
)


def test_date_only_string_parses_to_calendar_date():
    assert parse_local_date("2026-01-09") == date(2026, 1, 9)


def test_timestamp_string_parses_to_aware_datetime():
    parsed = parse_local_date("2026-01-09T23:30:00Z")
    assert parsed == datetime(2026, 1, 9, 23, 30, tzinfo=timezone.utc)


def test_format_local_date_keeps_late_evening_on_same_day():
    assert format_local_date(datetime(2026, 1, 9, 23, 59)) == "2026-01-09"
    assert format_local_date(date(2026, 3, 1)) == "2026-03-01"


def test_as_date_accepts_strings_dates_and_datetimes():
    assert as_date("2026-01-09") == date(2026, 1, 9)
    assert as_date(datetime(2026, 1, 9, 8, 0)) == date(2026, 1, 9)
    assert as_date(date(2026, 1, 9)) == date(2026, 1, 9)


def test_short_date_and_weekend_range():
    assert format_short_date("2026-01-05") == "Jan 5"
    assert format_weekend_range("2026-01-09", "2026-01-11") == "Jan 9 - Jan 11"
    assert format_weekend_range(date(2026, 1, 30), date(2026, 2, 1)) == "Jan 30 - Feb 1"


def test_clock_time_is_twelve_hour():
    assert format_clock_time("15:30") == "3:30 PM"
    assert format_clock_time("00:05") == "12:05 AM"
    assert format_clock_time("12:00") == "12:00 PM"
    assert format_clock_time(time(9, 7)) == "9:07 AM"


def test_event_date_with_and_without_time():
    assert format_event_date("2026-01-05") == "Mon, Jan 5"
    assert format_event_date("2026-01-05", "15:30") == "Mon, Jan 5 at 3:30 PM"
