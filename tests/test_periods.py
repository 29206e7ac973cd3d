"""Tests for period resolution."""

import pytest
from datetime import date

from timeloop.periods import DateRange, Period, resolve_period

THURSDAY = date(2024, 3, 14)


class TestResolvePeriod:

    def test_today(self):
        assert resolve_period(Period.TODAY, THURSDAY) == DateRange(THURSDAY, THURSDAY)

    def test_week_starts_monday(self):
        window = resolve_period(Period.THIS_WEEK, THURSDAY)

        assert window == DateRange(date(2024, 3, 11), THURSDAY)

    def test_week_on_sunday_reaches_back_six_days(self):
        sunday = date(2024, 3, 17)

        window = resolve_period(Period.THIS_WEEK, sunday)

        assert window.start == date(2024, 3, 11)
        assert window.end == sunday

    def test_week_on_monday_is_one_day(self):
        monday = date(2024, 3, 11)

        assert resolve_period(Period.THIS_WEEK, monday) == DateRange(monday, monday)

    def test_month(self):
        assert resolve_period(Period.THIS_MONTH, THURSDAY) == DateRange(date(2024, 3, 1), THURSDAY)

    def test_last_30_days_crosses_month(self):
        window = resolve_period(Period.LAST_30_DAYS, THURSDAY)

        assert window == DateRange(date(2024, 2, 13), THURSDAY)

    def test_all_is_unbounded(self):
        assert resolve_period(Period.ALL, THURSDAY) is None

    def test_custom_returned_as_given(self):
        window = resolve_period(
            Period.CUSTOM, THURSDAY, start=date(2023, 1, 1), end=date(2023, 6, 30)
        )

        assert window == DateRange(date(2023, 1, 1), date(2023, 6, 30))

    def test_custom_inverted_kept(self):
        window = resolve_period(
            Period.CUSTOM, THURSDAY, start=date(2024, 5, 1), end=date(2024, 4, 1)
        )

        assert window.start > window.end
        assert not window.contains(date(2024, 4, 15))

    @pytest.mark.parametrize("start,end", [(None, None), (date(2024, 1, 1), None), (None, date(2024, 1, 1))])
    def test_custom_needs_both_bounds(self, start, end):
        with pytest.raises(ValueError):
            resolve_period(Period.CUSTOM, THURSDAY, start=start, end=end)

    def test_accepts_plain_strings(self):
        assert resolve_period("this-month", THURSDAY).start == date(2024, 3, 1)

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            resolve_period("fortnight", THURSDAY)

    def test_bounds_ignored_for_named_periods(self):
        window = resolve_period(Period.TODAY, THURSDAY, start=date(2020, 1, 1), end=date(2020, 1, 2))

        assert window == DateRange(THURSDAY, THURSDAY)

    def test_defaults_to_current_date(self):
        window = resolve_period(Period.TODAY)

        assert window.start == window.end == date.today()


class TestDateRange:

    def test_contains_is_inclusive(self):
        window = DateRange(date(2024, 3, 1), date(2024, 3, 31))

        assert window.contains(date(2024, 3, 1))
        assert window.contains(date(2024, 3, 31))
        assert not window.contains(date(2024, 4, 1))

    def test_str(self):
        assert str(DateRange(date(2024, 3, 1), date(2024, 3, 31))) == "2024-03-01..2024-03-31"
