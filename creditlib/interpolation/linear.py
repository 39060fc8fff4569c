"""
Linear-family interpolation methods for zero rate and hazard curves.
"""
from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation on the node values."""

    name = "LINEAR"

    def interpolate(self, t: float) -> float:
        i = self._segment(t)
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        y1, y2 = self.values[i], self.values[i + 1]

        weight = (t - t1) / (t2 - t1)
        return float(y1 + weight * (y2 - y1))


class ProductLinearInterpolator(Interpolator):
    """Linear interpolation on ``t * y(t)``.

    For a zero rate curve ``t * y(t)`` is minus the log discount factor, so this
    is log-linear discounting with piecewise-flat forward rates. For a zero
    hazard curve the forward hazard rate is constant between nodes, which is the
    ISDA standard model convention.
    """

    name = "PRODUCT_LINEAR"

    def __init__(self, pillars, values):
        super().__init__(pillars, values)
        if self.pillars[0] < 0.0:
            raise ValueError(
                f"Product linear interpolation needs non-negative pillars: {self.pillars[0]}"
            )
        self.products = self.pillars * self.values

    def interpolate(self, t: float) -> float:
        i = self._segment(t)
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        g1, g2 = self.products[i], self.products[i + 1]

        if t == t1:
            # Also covers a node at t = 0, where the ratio is undefined
            return float(self.values[i])

        weight = (t - t1) / (t2 - t1)
        return float((g1 + weight * (g2 - g1)) / t)


class StepInterpolator(Interpolator):
    """Piecewise constant (step function) interpolation.

    Holds the value of the node at or immediately to the left of t, so the
    curve is discontinuous at every node.
    """

    name = "STEP"

    def interpolate(self, t: float) -> float:
        if t >= self.pillars[-1]:
            return float(self.values[-1])
        return float(self.values[self._segment(t)])
