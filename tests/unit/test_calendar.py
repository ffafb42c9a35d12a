"""
Unit Tests - Calendar Windows and Record Filters
"""
from datetime import datetime, timezone

import pytest

from sales_analytics.analytics.calendar import (
    MONTH_NAMES,
    TimeWindow,
    month_index,
    month_window,
    resolve_month_window,
)
from sales_analytics.analytics.errors import InvalidMonthError
from sales_analytics.analytics.filters import build_record_filter, render_price


class TestResolveMonthWindow:
    """Tests for month name resolution"""

    @pytest.mark.parametrize("index,name", list(enumerate(MONTH_NAMES, start=1)))
    def test_every_month_spans_one_calendar_month(self, index, name):
        """Test each month resolves to its own month in the reference year, any case"""
        for variant in (name, name.upper(), name.capitalize()):
            window = resolve_month_window(variant, 2022)

            assert window.start == datetime(2022, index, 1, tzinfo=timezone.utc)
            assert window.end.day == 1
            assert (window.end.year * 12 + window.end.month) - (2022 * 12 + index) == 1

    def test_december_rolls_into_next_year(self):
        """Test December ends on January 1st of the following year"""
        window = resolve_month_window("December", 2022)

        assert window.start == datetime(2022, 12, 1, tzinfo=timezone.utc)
        assert window.end == datetime(2023, 1, 1, tzinfo=timezone.utc)

    def test_february_length_follows_year(self):
        """Test leap years are honoured"""
        assert resolve_month_window("february", 2024).end == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert (month_window(2023, 2).end - month_window(2023, 2).start).days == 28
        assert (month_window(2024, 2).end - month_window(2024, 2).start).days == 29

    def test_reference_year_is_respected(self):
        """Test the configured year anchors the window"""
        assert resolve_month_window("March", 2021).start.year == 2021

    @pytest.mark.parametrize("month", ["  march ", " March\n", "March\t"])
    def test_padded_month_rejected(self, month):
        """Test surrounding whitespace makes the month invalid"""
        with pytest.raises(InvalidMonthError):
            month_index(month)
        with pytest.raises(InvalidMonthError):
            resolve_month_window(month, 2022)

    @pytest.mark.parametrize("month", ["Marchh", "Mar", "13", "3", "Sept", "janvier", "March 2022"])
    def test_unrecognized_month_raises(self, month):
        """Test anything but a full English month name is rejected"""
        with pytest.raises(InvalidMonthError) as exc_info:
            resolve_month_window(month, 2022)

        assert exc_info.value.month == month

    @pytest.mark.parametrize("month", [None, "", "   "])
    def test_absent_month_means_no_window(self, month):
        """Test absent or blank month is not an error"""
        assert resolve_month_window(month, 2022) is None

    def test_window_rejects_empty_interval(self):
        """Test start must precede end"""
        instant = datetime(2022, 1, 1, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            TimeWindow(start=instant, end=instant)


class TestRecordFilter:
    """Tests for the record filter builder"""

    def test_blank_search_is_dropped(self):
        """Test whitespace-only search never narrows results"""
        assert build_record_filter(search="   ").search is None
        assert build_record_filter(search="").search is None

    def test_search_is_trimmed(self):
        """Test surrounding whitespace is removed from the search text"""
        assert build_record_filter(search=" shirt ").search == "shirt"

    def test_criteria_are_carried(self):
        """Test window, sold flag and price range pass through"""
        window = month_window(2022, 3)
        record_filter = build_record_filter(window=window, sold=True, price_range=(0, 100))

        assert record_filter.window == window
        assert record_filter.sold is True
        assert record_filter.price_range == (0, 100)

    @pytest.mark.parametrize(
        "price,text",
        [(19, "19"), (19.0, "19"), (329.85, "329.85"), (0, "0"), (100.5, "100.5")],
    )
    def test_render_price(self, price, text):
        """Test integral prices render without a fractional part"""
        assert render_price(price) == text
