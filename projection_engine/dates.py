"""
Month arithmetic helpers.

Every function returns a new date; nothing is adjusted in place, so the same
anchor date can be reused across any number of payment splits.
"""

from datetime import date

from dateutil.relativedelta import relativedelta


def start_of_month(value: date) -> date:
    """First day of the month containing value."""
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of shorter months."""
    return value + relativedelta(months=months)


def months_between(earlier: date, later: date) -> int:
    """
    Number of complete months from earlier to later.

    A month only counts once the day-of-month has been reached, and the
    result truncates toward zero, so it is negative when later < earlier.
    Examples: 2025-01-01 -> 2025-12-31 is 11; 2025-01-15 -> 2026-01-15 is 12.
    """
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def month_span(start: date, end: date) -> list:
    """First-of-month dates from start's month through end's month inclusive."""
    current = start_of_month(start)
    last = start_of_month(end)
    months = []
    while current <= last:
        months.append(current)
        current = add_months(current, 1)
    return months


def month_key(value: date) -> str:
    """Canonical YYYY-MM key used for ordering and lookup."""
    return value.strftime("%Y-%m")


def month_label(value: date) -> str:
    """Display label, e.g. 'Jan 2025'."""
    return value.strftime("%b %Y")

