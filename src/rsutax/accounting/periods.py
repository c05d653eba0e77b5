"""Date ranges for tax periods. All ranges are inclusive on both ends."""

import calendar
from datetime import date, timedelta
from typing import Iterator, NamedTuple

from rsutax.exceptions import InvalidPeriodError


class DateRange(NamedTuple):
    start: date
    end: date


def parse_date(value: date | str) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise InvalidPeriodError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def year_range(year: int) -> DateRange:
    return DateRange(date(year, 1, 1), date(year, 12, 31))


def month_range(year: int, month: int) -> DateRange:
    if not 1 <= month <= 12:
        raise InvalidPeriodError("Month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(date(year, month, 1), date(year, month, last_day))


def quarter_range(year: int, quarter: int) -> DateRange:
    if not 1 <= quarter <= 4:
        raise InvalidPeriodError("Quarter must be between 1 and 4")
    start_month = (quarter - 1) * 3 + 1
    end_month = start_month + 2
    return DateRange(date(year, start_month, 1), month_range(year, end_month).end)


def is_date_in_range(day: date, period: DateRange) -> bool:
    return period.start <= day <= period.end


def business_days(start: date, end: date) -> Iterator[date]:
    """Yield Monday to Friday dates from start to end inclusive."""
    current = start
    while current <= end:
        if current.weekday() < 5:
            yield current
        current += timedelta(days=1)
