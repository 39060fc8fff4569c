"""Per-node calibration objective."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from creditlib.curves.nodal import NodalCurve
from creditlib.pricing.base import PricingAdapter


@dataclass(frozen=True)
class NodeObjective:
    """Pricing discrepancy of one instrument as a function of one node value.

    ``curve`` holds the already solved nodes ``0..index-1`` and seed values for
    the rest; evaluating the objective never changes it.
    """

    curve: NodalCurve
    index: int
    instrument: Any
    target_price: float
    pricing_adapter: PricingAdapter

    def curve_at(self, x: float) -> NodalCurve:
        return self.curve.with_node(self.index, x)

    def __call__(self, x: float) -> float:
        return self.pricing_adapter.price(self.instrument, self.curve_at(x)) - self.target_price
