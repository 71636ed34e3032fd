"""Tests for calendar-date normalisation and financial years."""

from datetime import date, datetime

import pytest

from khata_kernel.domain.periods import (
    FinancialYear,
    financial_year_containing,
    financial_year_from_label,
    to_calendar_date,
)


class TestToCalendarDate:

    def test_date_passes_through(self):
        assert to_calendar_date(date(2024, 5, 1)) == date(2024, 5, 1)

    def test_datetime_truncated(self):
        assert to_calendar_date(datetime(2024, 5, 1, 23, 59)) == date(2024, 5, 1)

    def test_iso_string(self):
        assert to_calendar_date("2024-05-01") == date(2024, 5, 1)

    def test_timestamp_uses_written_date(self):
        """No timezone conversion: the date portion is taken as written."""
        assert to_calendar_date("2024-05-01T23:30:00.000Z") == date(2024, 5, 1)

    @pytest.mark.parametrize("bad", ["01/05/2024", "", "yesterday"])
    def test_bad_string(self, bad):
        with pytest.raises(ValueError):
            to_calendar_date(bad)

    def test_bad_type(self):
        with pytest.raises(ValueError):
            to_calendar_date(20240501)


class TestFinancialYear:

    def test_from_label_april_start(self):
        fy = financial_year_from_label("2024-2025")
        assert fy == FinancialYear("2024-2025", date(2024, 4, 1), date(2025, 3, 31))

    def test_from_label_january_start(self):
        fy = financial_year_from_label("2024", start_month=1)
        assert fy.start == date(2024, 1, 1)
        assert fy.end == date(2024, 12, 31)
        assert fy.label == "2024"

    def test_trailing_year_must_match_start_month(self):
        assert financial_year_from_label("2024-2024", start_month=1).label == "2024"
        with pytest.raises(ValueError):
            financial_year_from_label("2024-2025", start_month=1)

    def test_bare_start_year_accepted(self):
        assert financial_year_from_label("2024").label == "2024-2025"

    @pytest.mark.parametrize("label", ["", "24-25", "abcd-2025", "2024-2031", "2024-2024", "2024-"])
    def test_bad_label(self, label):
        with pytest.raises(ValueError):
            financial_year_from_label(label)

    def test_bad_start_month(self):
        with pytest.raises(ValueError):
            financial_year_from_label("2024-2025", start_month=13)

    def test_containing_before_start_month(self):
        fy = financial_year_containing(date(2025, 3, 31))
        assert fy.label == "2024-2025"

    def test_containing_on_start(self):
        fy = financial_year_containing(date(2025, 4, 1))
        assert fy.label == "2025-2026"

    def test_contains_is_inclusive(self):
        fy = financial_year_from_label("2024-2025")
        assert fy.contains(date(2024, 4, 1))
        assert fy.contains(date(2025, 3, 31))
        assert not fy.contains(date(2025, 4, 1))
