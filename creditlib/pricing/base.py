"""Pricing interfaces consumed by curve calibration."""

from enum import Enum
from typing import Any, Protocol

from creditlib.curves.nodal import NodalCurve


class PriceType(Enum):
    """Whether accrued premium is included in the quoted price."""

    CLEAN = "CLEAN"
    DIRTY = "DIRTY"


class AccrualOnDefaultFormula(Enum):
    """Closed form used for the premium accrued up to a default.

    ORIGINAL_ISDA is the ISDA standard model up to version 1.8.2, which shifts
    accrual times by half a day. MARKIT_FIX drops the accrual built up before
    each integration sub-interval. CORRECT is the exact integral.
    """

    ORIGINAL_ISDA = "ORIGINAL_ISDA"
    MARKIT_FIX = "MARKIT_FIX"
    CORRECT = "CORRECT"


class PricingAdapter(Protocol):
    """Prices one instrument against a (possibly partially calibrated) curve.

    Implementations must be pure and continuous in the curve values; the
    calibrator additionally relies on the price being monotone in the node
    being solved close to the solution.
    """

    def price(self, instrument: Any, curve: NodalCurve) -> float:
        ...
