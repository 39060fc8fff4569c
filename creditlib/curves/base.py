"""
Zero-rate curve views used for discounting and survival probabilities.
"""

import math
from datetime import date, datetime
from typing import Protocol, Tuple, Union

from creditlib.conventions.daycount import (
    DayCountConvention,
    get_day_count_convention,
)

from .nodal import NodalCurve

DateLike = Union[datetime, date, float]


class Curve(Protocol):
    """Anything that quotes discount (or survival) factors and zero rates."""

    def df(self, t: DateLike) -> float:
        """Discount or survival factor at t."""
        ...

    def zero(self, t: DateLike) -> float:
        """Continuously compounded zero rate at t."""
        ...


class ZeroRateCurve:
    """Discount factors from a nodal curve of continuously compounded zero rates.

    ``df(t) = exp(-y(t) * t)`` where ``y`` is the wrapped nodal curve. The same
    class serves ISDA discount curves and credit curves: when the nodal curve
    holds zero hazard rates, ``df`` is the survival probability.
    """

    def __init__(
        self,
        reference_date: date,
        curve: NodalCurve,
        time_day_count: Union[str, DayCountConvention] = "ACT/365F",
        name: str = "",
    ):
        """
        Initialize zero rate curve.

        Args:
            reference_date: Curve reference/valuation date
            curve: Nodal curve of zero rates against year fractions
            time_day_count: Day-count convention to convert dates to curve times
            name: Optional curve name for identification
        """
        self.reference_date = reference_date
        self.curve = curve
        self.name = name or (curve.name or "")
        self._time_day_count = get_day_count_convention(time_day_count)

    @classmethod
    def flat(
        cls,
        reference_date: date,
        rate: float,
        time_day_count: Union[str, DayCountConvention] = "ACT/365F",
        name: str = "",
    ) -> "ZeroRateCurve":
        """Flat continuously compounded zero rate curve."""
        return cls(
            reference_date,
            NodalCurve.of_single_node(1.0, rate, name=name or None),
            time_day_count,
            name,
        )

    @property
    def day_count(self) -> DayCountConvention:
        return self._time_day_count

    def year_fraction(self, dt: DateLike) -> float:
        """Curve time of a date; numbers are taken as curve times already."""
        if isinstance(dt, (int, float)):
            return float(dt)
        return self._time_day_count.year_fraction(self.reference_date, dt)

    def zero(self, t: DateLike) -> float:
        """Continuously compounded zero rate at time t."""
        return self.curve.evaluate(self.year_fraction(t))

    def df(self, t: DateLike) -> float:
        """Discount factor at time t; 1.0 at or before the reference date."""
        time_frac = self.year_fraction(t)
        if time_frac <= 0:
            return 1.0
        return math.exp(-self.curve.evaluate(time_frac) * time_frac)

    def node_times(self) -> Tuple[float, ...]:
        return self.curve.x_values

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name})"
            if self.name
            else self.__class__.__name__
        )
