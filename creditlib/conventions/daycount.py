"""
Day count conventions for credit curves and CDS premium legs.

Curve times (ACT/365F in the ISDA model) and premium accrual fractions
(ACT/360 for standard CDS) are both measured through QuantLib day counters,
so the calibrator and the pricer agree on the year fraction of every date.
"""

from datetime import date, datetime
from typing import Dict, Union

import QuantLib as ql

DateLike = Union[date, datetime]


def to_date(dt: DateLike) -> date:
    """Drop the time part of a datetime."""
    return dt.date() if isinstance(dt, datetime) else dt


def _ql_date(dt: DateLike) -> ql.Date:
    d = to_date(dt)
    return ql.Date(d.day, d.month, d.year)


class DayCountConvention:
    """Named wrapper around a QuantLib day counter."""

    __slots__ = ("name", "_counter")

    def __init__(self, name: str, counter: ql.DayCounter):
        self.name = name
        self._counter = counter

    def year_fraction(self, start: DateLike, end: DateLike) -> float:
        return self._counter.yearFraction(_ql_date(start), _ql_date(end))

    def day_count(self, start: DateLike, end: DateLike) -> int:
        return self._counter.dayCount(_ql_date(start), _ql_date(end))

    def __eq__(self, other) -> bool:
        return isinstance(other, DayCountConvention) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"DayCountConvention({self.name})"


# Premium accrual basis of standard CDS contracts
ACT_360 = DayCountConvention("ACT/360", ql.Actual360())
# Time axis of ISDA discount and credit curves
ACT_365F = DayCountConvention("ACT/365F", ql.Actual365Fixed())
THIRTY_360E = DayCountConvention("30E/360", ql.Thirty360(ql.Thirty360.European))
ACT_ACT = DayCountConvention("ACT/ACT", ql.ActualActual(ql.ActualActual.ISDA))

_ALIASES: Dict[DayCountConvention, tuple] = {
    ACT_360: ("ACT/360", "ACTUAL/360", "A360"),
    ACT_365F: ("ACT/365F", "ACT/365", "ACTUAL/365F", "A365F"),
    THIRTY_360E: ("30E/360", "30/360E", "30/360 EUROPEAN"),
    ACT_ACT: ("ACT/ACT", "ACTUAL/ACTUAL", "ACT/ACT ISDA"),
}

DAY_COUNT_CONVENTIONS: Dict[str, DayCountConvention] = {
    alias: convention for convention, aliases in _ALIASES.items() for alias in aliases
}


def get_day_count_convention(
    name: Union[str, DayCountConvention],
) -> DayCountConvention:
    """Look up a convention by (case-insensitive) name; instances pass through."""
    if isinstance(name, DayCountConvention):
        return name
    try:
        return DAY_COUNT_CONVENTIONS[name.strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown day count convention: {name}. "
            f"Available: {sorted(DAY_COUNT_CONVENTIONS)}"
        ) from None
