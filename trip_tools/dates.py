"""Calendar-date parsing and check-in/check-out validation.

Everything here works on local calendar dates. ``today`` can be passed
explicitly so callers (and tests) control what "now" means.
"""
from typing import Optional
import re
import time
from datetime import date, datetime, timedelta

from pydantic import BaseModel, model_validator

from .errors import ValidationError


MAX_NIGHTS = 30

_CANONICAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIMESTAMP_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})T")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_IN_DAYS_RE = re.compile(r"^in\s+(\d+)\s+days?$")
_MONTH_DAY_RE = re.compile(r"^([a-z]+)\s+(\d{1,2})(?:st|nd|rd|th)?(?:\s*,?\s*(\d{4}))?$")
_DAY_MONTH_RE = re.compile(r"^(\d{1,2})(?:st|nd|rd|th)?\s+([a-z]+)(?:\s+(\d{4}))?$")

_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class DateValidation(BaseModel):
    is_valid: bool
    iso_date: Optional[str] = None
    error: Optional[str] = None
    is_past: bool = False
    is_future: bool = False
    is_today: bool = False
    days_from_now: int = 0


class DateRangeValidation(BaseModel):
    is_valid: bool
    check_in_date: Optional[str] = None
    check_out_date: Optional[str] = None
    nights: int = 0
    error: Optional[str] = None


class DateRange(BaseModel):
    check_in: date
    check_out: date
    nights: int

    @model_validator(mode="after")
    def _check_span(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        if self.nights != (self.check_out - self.check_in).days:
            raise ValueError("nights does not match the date span")
        if not 1 <= self.nights <= MAX_NIGHTS:
            raise ValueError(f"nights must be between 1 and {MAX_NIGHTS}")
        return self


class DateContext(BaseModel):
    current_date: str
    current_year: int
    current_month: int
    current_day: int
    day_of_week: str
    timezone: str


def _today(today: Optional[date]) -> date:
    return today if today is not None else date.today()


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _shift(today: date, days: int) -> Optional[date]:
    try:
        return today + timedelta(days=days)
    except OverflowError:
        return None


def _month_day(month: int, day: int, year: Optional[int], today: date) -> Optional[date]:
    if year is not None:
        return _safe_date(year, month, day)
    candidate = _safe_date(today.year, month, day)
    if candidate is not None and candidate >= today:
        return candidate
    if candidate is None and not (month == 2 and day == 29):
        return None
    # Already passed this year (or Feb 29 outside a leap year): next year.
    return _safe_date(today.year + 1, month, day)


def _parse_natural(text: str, today: date) -> Optional[date]:
    lowered = text.lower().strip()
    if lowered == "today":
        return today
    if lowered == "tomorrow":
        return _shift(today, 1)
    if lowered == "next week":
        return _shift(today, 7)

    m = _IN_DAYS_RE.match(lowered)
    if m:
        return _shift(today, int(m.group(1)))

    m = _MONTH_DAY_RE.match(lowered)
    if m and m.group(1) in _MONTHS:
        year = int(m.group(3)) if m.group(3) else None
        return _month_day(_MONTHS[m.group(1)], int(m.group(2)), year, today)

    m = _DAY_MONTH_RE.match(lowered)
    if m and m.group(2) in _MONTHS:
        year = int(m.group(3)) if m.group(3) else None
        return _month_day(_MONTHS[m.group(2)], int(m.group(1)), year, today)

    return None


def parse_to_canonical(value, today: Optional[date] = None) -> Optional[str]:
    """Normalize a date-ish input to ``YYYY-MM-DD``; ``None`` if it can't be read."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None

    text = value.strip()
    if _CANONICAL_RE.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            return None

    m = _TIMESTAMP_RE.match(text)
    if m:
        try:
            return date.fromisoformat(m.group(1)).isoformat()
        except ValueError:
            return None

    m = _SLASH_RE.match(text)
    if m:
        first, second, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if first > 12:
            parsed = _safe_date(year, second, first)  # DD/MM/YYYY
        else:
            parsed = _safe_date(year, first, second)  # MM/DD/YYYY
        return parsed.isoformat() if parsed else None

    parsed = _parse_natural(text, _today(today))
    return parsed.isoformat() if parsed else None


def validate_date(value, today: Optional[date] = None) -> DateValidation:
    iso = parse_to_canonical(value, today=today)
    if iso is None:
        return DateValidation(
            is_valid=False,
            error=f'Invalid date format: "{value}". Please use YYYY-MM-DD format.',
        )
    offset = (date.fromisoformat(iso) - _today(today)).days
    return DateValidation(
        is_valid=True,
        iso_date=iso,
        is_past=offset < 0,
        is_future=offset > 0,
        is_today=offset == 0,
        days_from_now=offset,
    )


def validate_date_range(check_in, check_out, today: Optional[date] = None) -> DateRangeValidation:
    """Validate a stay. Rules are checked in order and the first failure wins."""
    today = _today(today)
    check_in_v = validate_date(check_in, today=today)
    if not check_in_v.is_valid:
        return DateRangeValidation(is_valid=False, error=f"Invalid check-in date: {check_in_v.error}")

    check_out_v = validate_date(check_out, today=today)
    if not check_out_v.is_valid:
        return DateRangeValidation(
            is_valid=False,
            check_in_date=check_in_v.iso_date,
            error=f"Invalid check-out date: {check_out_v.error}",
        )

    if check_in_v.is_past:
        return DateRangeValidation(
            is_valid=False,
            check_in_date=check_in_v.iso_date,
            check_out_date=check_out_v.iso_date,
            error=(
                f"Check-in date ({check_in_v.iso_date}) cannot be in the past. "
                f"Today is {today.isoformat()}."
            ),
        )

    start = date.fromisoformat(check_in_v.iso_date)
    end = date.fromisoformat(check_out_v.iso_date)
    if end <= start:
        return DateRangeValidation(
            is_valid=False,
            check_in_date=check_in_v.iso_date,
            check_out_date=check_out_v.iso_date,
            error=(
                f"Check-out date ({check_out_v.iso_date}) must be after "
                f"check-in date ({check_in_v.iso_date})."
            ),
        )

    nights = (end - start).days
    if nights > MAX_NIGHTS:
        return DateRangeValidation(
            is_valid=False,
            check_in_date=check_in_v.iso_date,
            check_out_date=check_out_v.iso_date,
            nights=nights,
            error=(
                f"Booking duration of {nights} nights exceeds maximum of {MAX_NIGHTS} nights. "
                "Please book in segments for longer stays."
            ),
        )

    return DateRangeValidation(
        is_valid=True,
        check_in_date=check_in_v.iso_date,
        check_out_date=check_out_v.iso_date,
        nights=nights,
    )


def assert_future_date(value, field_name: str = "Date", today: Optional[date] = None) -> str:
    today = _today(today)
    result = validate_date(value, today=today)
    if not result.is_valid:
        raise ValidationError(result.error or "Invalid date")
    if result.is_past:
        raise ValidationError(
            f"{field_name} ({result.iso_date}) cannot be in the past. Today is {today.isoformat()}."
        )
    return result.iso_date


def assert_valid_date_range(check_in, check_out, today: Optional[date] = None) -> DateRange:
    result = validate_date_range(check_in, check_out, today=today)
    if not result.is_valid:
        raise ValidationError(result.error or "Invalid date range")
    return DateRange(
        check_in=date.fromisoformat(result.check_in_date),
        check_out=date.fromisoformat(result.check_out_date),
        nights=result.nights,
    )


def date_context(today: Optional[date] = None) -> DateContext:
    today = _today(today)
    return DateContext(
        current_date=today.isoformat(),
        current_year=today.year,
        current_month=today.month,
        current_day=today.day,
        day_of_week=today.strftime("%A"),
        timezone=time.tzname[0],
    )


def agent_date_context(today: Optional[date] = None) -> str:
    """One-line statement of today's date for the model preamble."""
    today = _today(today)
    return (
        f"Today is {today.strftime('%A')}, {_MONTH_NAMES[today.month - 1]} {today.day}, "
        f"{today.year} ({today.isoformat()} in ISO format)."
    )


def add_days(days: int, from_date: Optional[date] = None) -> str:
    return (_today(from_date) + timedelta(days=days)).isoformat()


def relative_description(value, today: Optional[date] = None) -> str:
    result = validate_date(value, today=today)
    if not result.is_valid:
        return "invalid date"
    days = result.days_from_now
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days == -1:
        return "yesterday"
    if 0 < days <= 7:
        return f"in {days} days"
    if -7 <= days < 0:
        return f"{abs(days)} days ago"
    if 7 < days <= 30:
        return f"in {round(days / 7)} weeks"
    if days > 30:
        return f"in {round(days / 30)} months"
    return f"{abs(days)} days ago"
