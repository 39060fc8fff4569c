"""
Credit default swap instrument used for credit curve calibration.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from creditlib.conventions.daycount import DayCountConvention, get_day_count_convention
from creditlib.utils.schedule import accrual_periods


@dataclass(frozen=True)
class CdsInstrument:
    """Single-name CDS terms, per unit notional."""

    start_date: date  # Protection and accrual start
    end_date: date  # Protection end (maturity)
    coupon: float  # Running spread in decimal (e.g., 0.01 for 100bp)
    frequency_months: int = 3
    day_count: str = "ACT/360"
    pay_accrued_on_default: bool = True
    name: Optional[str] = None

    def __post_init__(self):
        """Validate terms after initialization."""
        if self.end_date <= self.start_date:
            raise ValueError(
                f"end_date {self.end_date} must be after start_date {self.start_date}"
            )
        if self.frequency_months <= 0:
            raise ValueError(f"Invalid frequency_months: {self.frequency_months}")
        # Fail fast on an unknown convention name
        get_day_count_convention(self.day_count)

    @property
    def maturity_date(self) -> date:
        return self.end_date

    @property
    def accrual_day_count(self) -> DayCountConvention:
        return get_day_count_convention(self.day_count)

    def premium_periods(self) -> List[Tuple[date, date]]:
        """Accrual periods rolling backward from the end date."""
        return accrual_periods(self.start_date, self.end_date, self.frequency_months)

    def label(self) -> str:
        return self.name or f"CDS {self.end_date.isoformat()}"
