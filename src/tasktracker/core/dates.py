"""Due-date phrase resolution - pure calendar arithmetic, no I/O."""

import calendar
from datetime import date, datetime, time, timedelta

# 1 = Sunday .. 7 = Saturday
WEEKDAY_NUMBERS = {
    "sunday": 1,
    "monday": 2,
    "tuesday": 3,
    "wednesday": 4,
    "thursday": 5,
    "friday": 6,
    "saturday": 7,
}

SATURDAY = 7
FRIDAY = 6

END_OF_BUSINESS = time(17, 0)
END_OF_DAY = time(23, 59)


def weekday_number(d: date) -> int:
    """Weekday of a date, numbered 1=Sunday through 7=Saturday."""
    return d.isoweekday() % 7 + 1


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def at_time(day: datetime, t: time) -> datetime:
    return datetime.combine(day.date(), t, tzinfo=day.tzinfo)


def add_months(day: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last))


def end_of_month(day: datetime) -> datetime:
    """Midnight of the last day of `day`'s month."""
    last = calendar.monthrange(day.year, day.month)[1]
    return start_of_day(day.replace(day=last))


def _days_until(target: int, current: int) -> int:
    """Distance to the next `target` weekday; same day counts as a full week."""
    days = (target - current + 7) % 7
    return 7 if days == 0 else days


def resolve_due_date(phrase: str | None, now: datetime) -> datetime | None:
    """
    Resolve a vague due-date phrase to a concrete datetime relative to `now`.

    Matching is case-insensitive on the whole phrase. Unrecognized phrases
    resolve to None rather than raising.

    Pure function - no I/O, no wall clock.
    """
    if phrase is None:
        return None

    key = phrase.strip().lower()
    today = start_of_day(now)
    weekday = weekday_number(today)

    match key:
        case "today" | "tonight":
            return at_time(today, END_OF_BUSINESS)
        case "tomorrow" | "tomorrow morning":
            return today + timedelta(days=1)
        case "tomorrow afternoon" | "tomorrow evening":
            return at_time(today + timedelta(days=1), END_OF_BUSINESS)
        case "this weekend":
            return today + timedelta(days=_days_until(SATURDAY, weekday))
        case "next week":
            return today + timedelta(weeks=1)
        case "next month":
            return add_months(today, 1)
        case "by end of day" | "by eod":
            return at_time(today, END_OF_DAY)
        case "end of week":
            return today + timedelta(days=_days_until(FRIDAY, weekday))
        case "end of month":
            return end_of_month(today)
        case _ if key in WEEKDAY_NUMBERS:
            days = WEEKDAY_NUMBERS[key] - weekday
            if days <= 0:
                days += 7
            return today + timedelta(days=days)
        case _:
            return None
