"""Instrument pricing used as the calibration objective."""

from .base import AccrualOnDefaultFormula, PriceType, PricingAdapter
from .cds import IsdaCdsPricer

__all__ = [
    "PricingAdapter",
    "PriceType",
    "AccrualOnDefaultFormula",
    "IsdaCdsPricer",
]
