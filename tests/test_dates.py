from datetime import date

import pytest

from trip_tools.dates import (
    DateRange,
    add_days,
    agent_date_context,
    assert_future_date,
    assert_valid_date_range,
    date_context,
    parse_to_canonical,
    relative_description,
    validate_date,
    validate_date_range,
)
from trip_tools.errors import ValidationError

from conftest import TODAY


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-03-01", "2026-03-01"),
        ("2026-03-01T10:30:00Z", "2026-03-01"),
        ("13/02/2026", "2026-02-13"),
        ("02/03/2026", "2026-02-03"),
        ("today", "2026-01-01"),
        ("tomorrow", "2026-01-02"),
        ("next week", "2026-01-08"),
        ("in 3 days", "2026-01-04"),
        ("March 5", "2026-03-05"),
        ("March 5, 2027", "2027-03-05"),
        ("5 March", "2026-03-05"),
        ("5th march 2027", "2027-03-05"),
    ],
)
def test_parse_to_canonical_accepts_supported_formats(value, expected):
    assert parse_to_canonical(value, today=TODAY) == expected


@pytest.mark.parametrize(
    "value", ["", None, "2026-02-30", "31/31/2026", "sometime soon", "Smarch 5", "in 99999999 days", "in 9999999999 days"]
)
def test_parse_to_canonical_rejects_unreadable_or_impossible(value):
    assert parse_to_canonical(value, today=TODAY) is None


def test_offsets_past_the_calendar_edge_are_invalid():
    assert parse_to_canonical("tomorrow", today=date.max) is None
    result = validate_date("in 99999999 days", today=TODAY)
    assert result.is_valid is False
    assert "Invalid date format" in result.error


def test_bare_month_day_rolls_into_next_year_once_passed():
    assert parse_to_canonical("March 5", today=date(2026, 6, 1)) == "2027-03-05"
    # Today itself has not passed yet.
    assert parse_to_canonical("June 1", today=date(2026, 6, 1)) == "2026-06-01"


def test_leap_day_rolls_only_into_a_leap_year():
    assert parse_to_canonical("Feb 29", today=date(2027, 3, 1)) == "2028-02-29"
    assert parse_to_canonical("Feb 29", today=date(2026, 3, 1)) is None


def test_validate_date_flags_and_offset():
    today = validate_date("2026-01-01", today=TODAY)
    assert today.is_today and not today.is_past and not today.is_future
    assert today.days_from_now == 0

    past = validate_date("2025-12-25", today=TODAY)
    assert past.is_past and past.days_from_now == -7

    bad = validate_date("not a date", today=TODAY)
    assert not bad.is_valid
    assert bad.error == 'Invalid date format: "not a date". Please use YYYY-MM-DD format.'


def test_valid_range_counts_nights():
    result = validate_date_range("2026-01-05", "2026-01-10", today=TODAY)
    assert result.is_valid
    assert result.nights == 5
    assert (result.check_in_date, result.check_out_date) == ("2026-01-05", "2026-01-10")


def test_past_check_in_is_rejected():
    result = validate_date_range("2020-01-01", "2020-01-05", today=TODAY)
    assert not result.is_valid
    assert "cannot be in the past" in result.error
    assert "Today is 2026-01-01" in result.error


def test_range_rules_apply_in_order():
    # Unparseable check-in wins over everything else.
    assert validate_date_range("garbage", "also garbage", today=TODAY).error.startswith("Invalid check-in date")
    assert validate_date_range("2026-01-05", "garbage", today=TODAY).error.startswith("Invalid check-out date")
    # Past check-in is reported even though check-out is also before check-in.
    assert "cannot be in the past" in validate_date_range("2025-12-01", "2025-11-01", today=TODAY).error
    assert "must be after check-in" in validate_date_range("2026-01-10", "2026-01-10", today=TODAY).error


def test_thirty_nights_is_the_limit():
    assert validate_date_range("2026-01-05", "2026-02-04", today=TODAY).nights == 30
    too_long = validate_date_range("2026-01-05", "2026-02-05", today=TODAY)
    assert not too_long.is_valid
    assert too_long.nights == 31
    assert "exceeds maximum of 30 nights" in too_long.error


def test_assert_valid_date_range_returns_model():
    dr = assert_valid_date_range("2026-01-05", "2026-01-10", today=TODAY)
    assert dr == DateRange(check_in=date(2026, 1, 5), check_out=date(2026, 1, 10), nights=5)
    with pytest.raises(ValidationError, match="cannot be in the past"):
        assert_valid_date_range("2020-01-01", "2020-01-05", today=TODAY)


def test_date_range_model_refuses_inconsistent_nights():
    with pytest.raises(ValueError):
        DateRange(check_in=date(2026, 1, 5), check_out=date(2026, 1, 10), nights=4)


def test_assert_future_date_names_the_field():
    assert assert_future_date("tomorrow", today=TODAY) == "2026-01-02"
    with pytest.raises(ValidationError, match=r"Start date \(2025-12-31\) cannot be in the past"):
        assert_future_date("2025-12-31", field_name="Start date", today=TODAY)


def test_helpers_for_the_preamble():
    assert agent_date_context(TODAY) == "Today is Thursday, January 1, 2026 (2026-01-01 in ISO format)."
    assert add_days(10, TODAY) == "2026-01-11"
    assert relative_description("tomorrow", today=TODAY) == "tomorrow"
    assert relative_description("2026-01-15", today=TODAY) == "in 2 weeks"
    assert relative_description("2025-12-29", today=TODAY) == "3 days ago"


def test_date_context_describes_today(today):
    ctx = date_context(today)
    assert ctx.current_date == "2026-01-01"
    assert (ctx.current_year, ctx.current_month, ctx.current_day) == (2026, 1, 1)
    assert ctx.day_of_week == "Thursday"
