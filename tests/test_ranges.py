from datetime import date, datetime

from budget_core.ranges import RANGE_TOKENS, DateRange, parse_date, resolve_range


NOW = datetime(2025, 1, 25, 14, 30)


def test_week_keeps_time_of_day():
    rng = resolve_range("week", NOW)
    assert rng.start == datetime(2025, 1, 18, 14, 30)
    assert rng.end == NOW


def test_today_starts_at_midnight():
    rng = resolve_range("today", NOW)
    assert rng.start == datetime(2025, 1, 25)
    assert rng.end == NOW


def test_month_quarter_year_go_back_calendar_months():
    assert resolve_range("month", NOW).start == datetime(2024, 12, 25, 14, 30)
    assert resolve_range("quarter", datetime(2025, 5, 15)).start == datetime(2025, 2, 15)
    assert resolve_range("year", NOW).start == datetime(2024, 1, 25, 14, 30)


def test_month_clamps_to_shorter_month():
    assert resolve_range("month", datetime(2025, 3, 31)).start == datetime(2025, 2, 28)
    assert resolve_range("year", datetime(2024, 2, 29)).start == datetime(2023, 2, 28)


def test_all_and_unknown_tokens_start_at_earliest_instant():
    assert resolve_range("all", NOW).start == datetime.min
    assert resolve_range("fortnight", NOW) == DateRange(datetime.min, NOW)


def test_every_token_yields_ordered_range():
    for token in RANGE_TOKENS:
        rng = resolve_range(token, NOW)
        assert rng.start <= rng.end
        assert rng.end == NOW


def test_contains_is_inclusive():
    rng = resolve_range("week", NOW)
    assert rng.contains(rng.start)
    assert rng.contains(rng.end)
    assert not rng.contains(datetime(2025, 1, 26))


def test_parse_date():
    assert parse_date("2025-01-25") == date(2025, 1, 25)
    assert parse_date("2025-01-25T10:00:00") == date(2025, 1, 25)
    assert parse_date(date(2025, 1, 1)) == date(2025, 1, 1)
    assert parse_date("not a date") is None
    assert parse_date("2025-13-01") is None
    assert parse_date("") is None
    assert parse_date(None) is None
