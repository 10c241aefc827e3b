"""Tests for due-date phrase resolution."""

from datetime import date, datetime

import pytest

from tasktracker.core.dates import add_months, end_of_month, resolve_due_date, weekday_number


# 2026-01-29 is a Thursday
@pytest.fixture
def now():
    return datetime(2026, 1, 29, 10, 0)


@pytest.fixture
def monday():
    return datetime(2026, 1, 26, 8, 15)


@pytest.fixture
def friday():
    return datetime(2026, 1, 30, 12, 0)


@pytest.fixture
def saturday():
    return datetime(2026, 1, 31, 21, 30)


class TestWeekdayNumber:
    def test_sunday_is_one(self):
        assert weekday_number(date(2026, 2, 1)) == 1

    def test_monday_is_two(self):
        assert weekday_number(date(2026, 1, 26)) == 2

    def test_saturday_is_seven(self):
        assert weekday_number(date(2026, 1, 31)) == 7


class TestSameDayPhrases:
    @pytest.mark.parametrize("phrase", ["today", "tonight", "Today", "TONIGHT"])
    def test_today_is_five_pm(self, now, phrase):
        assert resolve_due_date(phrase, now) == datetime(2026, 1, 29, 17, 0)

    @pytest.mark.parametrize("phrase", ["by eod", "By End Of Day", "by end of day"])
    def test_end_of_day_is_2359(self, now, phrase):
        assert resolve_due_date(phrase, now) == datetime(2026, 1, 29, 23, 59)

    def test_by_eod_late_at_night_still_same_day(self):
        late = datetime(2026, 1, 29, 23, 59, 59)
        assert resolve_due_date("by eod", late) == datetime(2026, 1, 29, 23, 59)


class TestTomorrow:
    def test_tomorrow_is_start_of_next_day(self, now):
        assert resolve_due_date("tomorrow", now) == datetime(2026, 1, 30, 0, 0)

    def test_tomorrow_morning_is_start_of_next_day(self, now):
        assert resolve_due_date("Tomorrow Morning", now) == datetime(2026, 1, 30, 0, 0)

    @pytest.mark.parametrize("phrase", ["tomorrow afternoon", "tomorrow evening"])
    def test_tomorrow_later_is_five_pm(self, now, phrase):
        assert resolve_due_date(phrase, now) == datetime(2026, 1, 30, 17, 0)

    def test_tomorrow_crosses_month(self, saturday):
        assert resolve_due_date("tomorrow", saturday) == datetime(2026, 2, 1, 0, 0)


class TestThisWeekend:
    def test_from_thursday(self, now):
        assert resolve_due_date("this weekend", now) == datetime(2026, 1, 31)

    def test_from_monday_is_five_days_out(self, monday):
        assert resolve_due_date("this weekend", monday) == datetime(2026, 1, 31)

    def test_on_saturday_is_next_saturday(self, saturday):
        assert resolve_due_date("this weekend", saturday) == datetime(2026, 2, 7)

    def test_from_sunday(self):
        assert resolve_due_date("this weekend", datetime(2026, 2, 1, 9, 0)) == datetime(2026, 2, 7)


class TestEndOfWeek:
    def test_from_thursday(self, now):
        assert resolve_due_date("end of week", now) == datetime(2026, 1, 30)

    def test_on_friday_is_next_friday(self, friday):
        assert resolve_due_date("end of week", friday) == datetime(2026, 2, 6)

    def test_from_saturday(self, saturday):
        assert resolve_due_date("end of week", saturday) == datetime(2026, 2, 6)


class TestWeekdayNames:
    def test_later_this_week(self, now):
        assert resolve_due_date("friday", now) == datetime(2026, 1, 30)

    def test_same_weekday_is_a_week_out(self, now):
        assert resolve_due_date("Thursday", now) == datetime(2026, 2, 5)

    def test_earlier_weekday_wraps(self, now):
        assert resolve_due_date("monday", now) == datetime(2026, 2, 2)

    def test_sunday_from_saturday(self, saturday):
        assert resolve_due_date("sunday", saturday) == datetime(2026, 2, 1)


class TestWeeksAndMonths:
    def test_next_week(self, now):
        assert resolve_due_date("next week", now) == datetime(2026, 2, 5)

    def test_next_month(self):
        assert resolve_due_date("next month", datetime(2026, 1, 15, 9, 0)) == datetime(2026, 2, 15)

    def test_next_month_clamps_to_short_month(self):
        assert resolve_due_date("next month", datetime(2026, 1, 31, 9, 0)) == datetime(2026, 2, 28)

    def test_next_month_crosses_year(self):
        assert resolve_due_date("next month", datetime(2026, 12, 10)) == datetime(2027, 1, 10)

    def test_end_of_month(self, now):
        assert resolve_due_date("end of month", now) == datetime(2026, 1, 31)

    def test_end_of_month_leap_february(self):
        assert resolve_due_date("end of month", datetime(2028, 2, 3, 12, 0)) == datetime(2028, 2, 29)

    def test_end_of_month_on_last_day(self):
        assert resolve_due_date("end of month", datetime(2026, 4, 30, 18, 0)) == datetime(2026, 4, 30)


class TestUnresolvable:
    @pytest.mark.parametrize("phrase", [None, "", "this week", "someday", "next tuesday", "2026-02-01"])
    def test_returns_none(self, now, phrase):
        assert resolve_due_date(phrase, now) is None


class TestHelpers:
    def test_add_months_keeps_time(self):
        assert add_months(datetime(2026, 3, 31, 17, 0), 1) == datetime(2026, 4, 30, 17, 0)

    def test_add_months_many(self):
        assert add_months(datetime(2026, 1, 31), 13) == datetime(2027, 2, 28)

    def test_end_of_month_drops_time(self):
        assert end_of_month(datetime(2026, 6, 5, 13, 45)) == datetime(2026, 6, 30)
