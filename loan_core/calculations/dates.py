"""Calendar helpers shared by the installment and aggregation code."""

from datetime import date, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from loan_core.models.financial.enums import TimeWindow


def resolve_as_of(as_of: date | None) -> date:
    """Return ``as_of`` or today's date when the caller did not inject one."""
    return as_of if as_of is not None else date.today()


def add_months(start: date, months: int) -> date:
    """Advance ``start`` by calendar months.

    The day of month is clamped to the last day of the target month, so
    2024-01-31 plus one month is 2024-02-29.
    """
    return start + relativedelta(months=months)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day + relativedelta(day=31)


def iter_months(first: date, last: date) -> Iterator[date]:
    """Yield the first day of every month from ``first`` through ``last``."""
    current = start_of_month(first)
    while current <= last:
        yield current
        current = add_months(current, 1)


def days_until(target: date, as_of: date) -> int:
    """Whole days from ``as_of`` to ``target`` (negative when past)."""
    return (target - as_of).days


def window_start(time_window: TimeWindow, as_of: date) -> date | None:
    """Earliest start date included by ``time_window``; ``None`` means unbounded."""
    days = time_window.days
    if days is None:
        return None
    return as_of - timedelta(days=days)
