"""
Calendar dates and financial-year periods.

Transactions carry a calendar date with no time component. The trading
book is kept per financial year, labelled ``"2024-2025"`` and running from
1 April to 31 March unless configured otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta


def to_calendar_date(value: date | datetime | str) -> date:
    """
    Normalise a date-like value to a calendar ``date``.

    Strings may be plain ISO dates (``2024-05-01``) or ISO timestamps
    (``2024-05-01T00:00:00.000Z``); the written date portion is used as-is
    with no timezone conversion.

    Raises:
        ValueError: If the value is not a date or an ISO date string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            text = text.split("T", 1)[0]
        return date.fromisoformat(text)
    raise ValueError(f"Cannot parse date from {value!r}")


@dataclass(frozen=True)
class FinancialYear:
    """A financial year: inclusive start and end dates."""

    label: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _year_bounds(start_year: int, start_month: int) -> tuple[date, date]:
    start = date(start_year, start_month, 1)
    if start_month == 1:
        end = date(start_year, 12, 31)
    else:
        end = date(start_year + 1, start_month, 1) - timedelta(days=1)
    return start, end


def _label_for(start: date, end: date) -> str:
    if start.year == end.year:
        return str(start.year)
    return f"{start.year}-{end.year}"


def financial_year_from_label(label: str, start_month: int = 4) -> FinancialYear:
    """
    Build a FinancialYear from a label such as ``"2024-2025"``.

    The leading year fixes the start; the end is derived from
    ``start_month``.  A trailing year, when present, must equal that end
    year (``"2024-2031"`` is rejected).

    Raises:
        ValueError: If the label does not start with a four-digit year, its
            trailing year disagrees with the derived end, or start_month is
            outside 1..12.
    """
    if not 1 <= start_month <= 12:
        raise ValueError(f"start_month must be 1..12, got {start_month}")
    head, sep, tail = label.strip().partition("-")
    if len(head) != 4 or not head.isdigit():
        raise ValueError(f"Invalid financial year label: {label!r}")
    start, end = _year_bounds(int(head), start_month)
    if sep and tail != str(end.year):
        raise ValueError(
            f"Financial year label {label!r} does not end in {end.year}"
        )
    return FinancialYear(label=_label_for(start, end), start=start, end=end)


def financial_year_containing(day: date, start_month: int = 4) -> FinancialYear:
    """Return the financial year that contains ``day``."""
    if not 1 <= start_month <= 12:
        raise ValueError(f"start_month must be 1..12, got {start_month}")
    start_year = day.year if day.month >= start_month else day.year - 1
    start, end = _year_bounds(start_year, start_month)
    return FinancialYear(label=_label_for(start, end), start=start, end=end)
