from datetime import date

from pickfeed.utils.records import Record, add_days, parse_record, week_key, win_pct


def test_parse_record_basic() -> None:
    assert parse_record("10-5") == Record(10, 5)


def test_parse_record_malformed_degrades_to_zero() -> None:
    assert parse_record("abc-def") == Record(0, 0)
    assert parse_record("") == Record(0, 0)
    assert parse_record(None) == Record(0, 0)
    assert parse_record("7") == Record(7, 0)
    assert parse_record("x-4") == Record(0, 4)


def test_parse_record_keeps_leading_integer_and_ignores_extra_segments() -> None:
    assert parse_record("12abc-3") == Record(12, 3)
    assert parse_record("45-20-3") == Record(45, 20)


def test_win_pct_handles_empty_record() -> None:
    assert win_pct(Record(0, 0)) == 0.0
    assert round(win_pct(Record(45, 20)), 2) == 0.69


def test_add_days_and_week_key() -> None:
    assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)
    assert week_key(date(2024, 1, 1)) == "2024-W1"
    assert week_key(date(2024, 1, 8)) == "2024-W2"
