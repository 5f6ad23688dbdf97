"""Payroll month keys (YYYY-MM) and clock helpers."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from payday.errors import ValidationError

_MONTH_KEY = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def month_key(day: date) -> str:
    """Month key a date belongs to."""
    return f"{day.year:04d}-{day.month:02d}"


def current_month(today: date | None = None) -> str:
    """Month key for today (or the given date)."""
    return month_key(today or date.today())


def validate_month_key(value: str) -> str:
    """Return value unchanged if it is a well-formed month key."""
    if not _MONTH_KEY.match(value or ""):
        raise ValidationError(f"Invalid month key '{value}', expected YYYY-MM")
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
