"""Market conventions used by curve construction and pricing."""

from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    DayCountConvention,
    get_day_count_convention,
    to_date,
)

__all__ = [
    "DayCountConvention",
    "get_day_count_convention",
    "to_date",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
]
