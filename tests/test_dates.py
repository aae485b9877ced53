"""Tests for spendwise.dates pure functions."""

from datetime import date, datetime

import pytest

from spendwise.dates import month_of, month_range, parse_month, today_iso
from spendwise.domain.models import Month


class TestMonthRange:
    """Tests for month_range."""

    def test_january_range(self) -> None:
        """Should calculate range for January."""
        first, last, label = month_range(Month("2025-01"))

        assert first == "2025-01-01"
        assert last == "2025-01-31"
        assert label == "January 2025"

    def test_december_range_stays_in_year(self) -> None:
        """Should end December on the 31st of the same year."""
        first, last, label = month_range(Month("2025-12"))

        assert first == "2025-12-01"
        assert last == "2025-12-31"
        assert label == "December 2025"

    def test_february_non_leap_year(self) -> None:
        """Should handle February in non-leap year."""
        _, last, _ = month_range(Month("2025-02"))

        assert last == "2025-02-28"

    def test_february_leap_year(self) -> None:
        """Should handle February in leap year."""
        _, last, _ = month_range(Month("2024-02"))

        assert last == "2024-02-29"

    def test_thirty_day_month(self) -> None:
        """Should handle 30-day months."""
        first, last, label = month_range(Month("2025-04"))

        assert first == "2025-04-01"
        assert last == "2025-04-30"
        assert label == "April 2025"

    def test_invalid_month_format_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month format."""
        with pytest.raises(ValueError):
            month_range(Month("invalid"))

    def test_invalid_month_number_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month number."""
        with pytest.raises(ValueError):
            month_range(Month("2025-13"))


class TestMonthOf:
    """Tests for month_of and parse_month."""

    def test_month_of_date(self) -> None:
        """Should format a date as YYYY-MM."""
        assert month_of(date(2023, 5, 15)) == "2023-05"

    def test_month_of_datetime(self) -> None:
        """Should ignore the time part of a datetime."""
        assert month_of(datetime(2023, 12, 31, 23, 59)) == "2023-12"

    def test_parse_month_valid(self) -> None:
        """Should return the month of an ISO date."""
        assert parse_month("2023-05-08") == "2023-05"

    def test_parse_month_malformed(self) -> None:
        """Should return None rather than raise for malformed dates."""
        assert parse_month("not-a-date") is None
        assert parse_month("2023-02-30") is None

    def test_today_iso_with_explicit_date(self) -> None:
        """Should format the given date."""
        assert today_iso(date(2024, 1, 2)) == "2024-01-02"
