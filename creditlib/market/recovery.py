"""Recovery rate providers.

The calibrator only needs the loss given default on an instrument's end date;
providers expose it through :class:`LossProvider`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Protocol, Sequence

from creditlib.conventions.daycount import ACT_365F


class LossProvider(Protocol):
    """Anything that can quote a loss given default for a date."""

    def loss_given_default(self, on: date) -> float:
        """Fraction of notional lost on default at ``on``, in (0, 1]."""
        ...


def _check_recovery(recovery: float) -> float:
    if not 0.0 <= recovery < 1.0:
        raise ValueError(f"Recovery rate must be in [0, 1): {recovery}")
    return float(recovery)


@dataclass(frozen=True)
class ConstantRecoveryRates:
    """Single recovery rate applying to every date."""

    recovery: float

    def __post_init__(self):
        _check_recovery(self.recovery)

    def recovery_rate(self, on: date) -> float:
        return self.recovery

    def loss_given_default(self, on: date) -> float:
        return 1.0 - self.recovery


class RecoveryRateCurve:
    """Term structure of recovery rates.

    Linear in ACT/365F time between the quoted dates and flat outside them.
    """

    def __init__(self, reference_date: date, dates: Sequence[date], recoveries: Sequence[float]):
        if len(dates) != len(recoveries):
            raise ValueError("Dates and recoveries must have same length")
        if not dates:
            raise ValueError("Need at least one recovery rate")

        self.reference_date = reference_date
        pairs = sorted(zip(dates, recoveries, strict=True))
        self._data: Dict[float, float] = {}
        for d, rec in pairs:
            t = ACT_365F.year_fraction(reference_date, d)
            if t in self._data:
                raise ValueError(f"Duplicate recovery date: {d}")
            self._data[t] = _check_recovery(rec)
        self._times = sorted(self._data)

    def recovery_rate(self, on: date) -> float:
        value = ACT_365F.year_fraction(self.reference_date, on)
        keys = self._times

        if value <= keys[0]:
            return self._data[keys[0]]
        if value >= keys[-1]:
            return self._data[keys[-1]]

        for idx in range(1, len(keys)):
            x0, x1 = keys[idx - 1], keys[idx]
            if x0 <= value <= x1:
                y0, y1 = self._data[x0], self._data[x1]
                weight = (value - x0) / (x1 - x0)
                return y0 + weight * (y1 - y0)

        return self._data[keys[-1]]

    def loss_given_default(self, on: date) -> float:
        return 1.0 - self.recovery_rate(on)
