"""Date utilities for spendwise.

Pure functions for month calculations and formatting.
"""

from datetime import date, datetime, timedelta

from spendwise.domain.models import Month


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate inclusive date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (first_day, last_day, label) where:
        - first_day: First day of month (YYYY-MM-DD)
        - last_day: Last day of month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")

    Raises:
        ValueError: If month is not in YYYY-MM format.
    """
    dt = datetime.strptime(month, "%Y-%m")
    first = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    last = (next_month - timedelta(days=1)).strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return first, last, label


def month_of(value: date | datetime) -> Month:
    """Return the YYYY-MM month a date falls in."""
    return Month(value.strftime("%Y-%m"))


def parse_month(iso_date: str) -> Month | None:
    """Return the month of an ISO date string, or None if it is not a date.

    Args:
        iso_date: Date in YYYY-MM-DD format.

    Returns:
        Month in YYYY-MM format, or None for malformed input.
    """
    try:
        return month_of(datetime.strptime(iso_date, "%Y-%m-%d"))
    except (TypeError, ValueError):
        return None


def today_iso(today: date | None = None) -> str:
    """Return today's date (or the given date) in YYYY-MM-DD format."""
    return (today or date.today()).isoformat()
