"""
Extrapolation methods applied beyond the first and last curve nodes.
"""
from .base import Extrapolator, Interpolator


class FlatExtrapolator(Extrapolator):
    """Hold the nearest node value."""

    name = "FLAT"

    def lower(self, t: float, interpolator: Interpolator) -> float:
        return float(interpolator.values[0])

    def upper(self, t: float, interpolator: Interpolator) -> float:
        return float(interpolator.values[-1])


class LinearExtrapolator(Extrapolator):
    """Extend the first or last segment linearly."""

    name = "LINEAR"

    def lower(self, t: float, interpolator: Interpolator) -> float:
        t1, t2 = interpolator.pillars[0], interpolator.pillars[1]
        y1, y2 = interpolator.values[0], interpolator.values[1]
        return float(y1 + (t - t1) * (y2 - y1) / (t2 - t1))

    def upper(self, t: float, interpolator: Interpolator) -> float:
        t1, t2 = interpolator.pillars[-2], interpolator.pillars[-1]
        y1, y2 = interpolator.values[-2], interpolator.values[-1]
        return float(y2 + (t - t2) * (y2 - y1) / (t2 - t1))


class ProductLinearExtrapolator(Extrapolator):
    """Extend ``t * y(t)`` linearly, i.e. keep the forward rate flat.

    Above the last node the forward of the final segment is carried on. Below
    the first node the only forward that reaches zero without a jump is the
    first zero value itself, so the lower side is flat in y.
    """

    name = "PRODUCT_LINEAR"

    def lower(self, t: float, interpolator: Interpolator) -> float:
        return float(interpolator.values[0])

    def upper(self, t: float, interpolator: Interpolator) -> float:
        t1, t2 = interpolator.pillars[-2], interpolator.pillars[-1]
        g1 = t1 * interpolator.values[-2]
        g2 = t2 * interpolator.values[-1]
        forward = (g2 - g1) / (t2 - t1)
        return float((g2 + forward * (t - t2)) / t)
