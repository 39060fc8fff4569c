"""Premium schedule helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Tuple

from dateutil.relativedelta import relativedelta


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise TypeError(f"Unsupported date-like value: {value!r}")


def add_months(dt: date, months: int) -> date:
    """Shift ``dt`` by a number of months, clipping to the month end."""
    return dt + relativedelta(months=months)


def premium_schedule(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    frequency_months: int = 3,
) -> List[date]:
    """Generate accrual boundary dates rolling backward from ``end_date``.

    The first period is a short front stub when the tenor is not a whole
    number of periods. Both ``start_date`` and ``end_date`` are included.
    """
    start = _to_date(start_date)
    end = _to_date(end_date)
    if frequency_months <= 0:
        raise ValueError("frequency_months must be positive")
    if end <= start:
        raise ValueError("end_date must be after start_date")

    dates: List[date] = [end]
    step = 1
    current = add_months(end, -frequency_months)
    while current > start:
        dates.append(current)
        step += 1
        # Roll from the end date each time so month-end clipping does not drift
        current = add_months(end, -frequency_months * step)
    dates.append(start)
    dates.reverse()
    return dates


def accrual_periods(
    start_date: date | datetime | str,
    end_date: date | datetime | str,
    frequency_months: int = 3,
) -> List[Tuple[date, date]]:
    """Return consecutive (accrual_start, accrual_end) pairs."""
    dates = premium_schedule(start_date, end_date, frequency_months)
    return list(zip(dates[:-1], dates[1:]))
