"""Root-finding utilities (geometric bracketing followed by Brent's method)."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

Func = Callable[[float], float]

_EPS = 2.220446049250313e-16


@dataclass
class RootResult:
    root: float
    iterations: int
    converged: bool
    method: str


class RootFindingError(RuntimeError):
    """Base class for root-finding failures.

    ``node_index`` and ``node_label`` are filled in by callers that solve a
    sequence of problems (e.g. a curve bootstrap) so that the failing step can
    be identified.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.node_index: Optional[int] = None
        self.node_label: Optional[str] = None

    def __str__(self) -> str:
        if self.node_index is None:
            return self.message
        label = f" ({self.node_label})" if self.node_label else ""
        return f"node {self.node_index}{label}: {self.message}"


class BracketingFailure(RootFindingError):
    """Raised when no sign change can be located."""

    def __init__(
        self,
        message: str,
        bracket: Tuple[float, float],
        values: Tuple[float, float],
        expansions: int = 0,
    ):
        super().__init__(message)
        self.bracket = bracket
        self.values = values
        self.expansions = expansions


class RootFindingFailure(RootFindingError):
    """Raised when refinement does not converge within the iteration budget."""

    def __init__(self, message: str, bracket: Tuple[float, float], iterations: int):
        super().__init__(message)
        self.bracket = bracket
        self.iterations = iterations


def _same_sign(f_a: float, f_b: float) -> bool:
    if f_a == 0.0 or f_b == 0.0:
        return False
    return (f_a > 0.0) == (f_b > 0.0)


def _checked(func: Func, x: float, bracket, values, expansions) -> float:
    value = func(x)
    if not math.isfinite(value):
        raise BracketingFailure(
            f"Objective returned {value} at x={x}",
            bracket=bracket,
            values=values,
            expansions=expansions,
        )
    return value


def bracket_root(
    func: Func,
    lower: float,
    upper: float,
    *,
    min_x: float = -math.inf,
    max_x: float = math.inf,
    expansion: float = 1.6,
    max_expansions: int = 50,
) -> Tuple[float, float]:
    """Expand ``[lower, upper]`` geometrically until ``func`` changes sign.

    The initial points may be given in either order and are clamped into
    ``[min_x, max_x]``; ``func`` is never evaluated outside those bounds. The
    endpoint with the smaller absolute value is pushed further away from the
    other one, unless it is pinned at a bound. The returned pair keeps the
    orientation of the inputs, so the first element can be the larger one.

    Raises
    ------
    BracketingFailure
        If no sign change is found within ``max_expansions`` steps, if both
        endpoints are pinned at the bounds, or if ``func`` is not finite.
    """
    if min_x >= max_x:
        raise ValueError(f"Invalid bounds: [{min_x}, {max_x}]")
    if expansion <= 0.0:
        raise ValueError("expansion must be positive")

    x1 = min(max(lower, min_x), max_x)
    x2 = min(max(upper, min_x), max_x)
    if x1 == x2:
        # Clamping collapsed the interval; reopen it inside the bounds
        width = max(abs(upper - lower), abs(x1), 1e-4)
        if x2 + width <= max_x:
            x2 = x2 + width
        else:
            x1 = max(x1 - width, min_x)

    f1 = _checked(func, x1, (x1, x2), (math.nan, math.nan), 0)
    f2 = _checked(func, x2, (x1, x2), (f1, math.nan), 0)

    expansions = 0
    while _same_sign(f1, f2):
        x1_pinned = x1 in (min_x, max_x)
        x2_pinned = x2 in (min_x, max_x)
        if expansions >= max_expansions or (x1_pinned and x2_pinned):
            raise BracketingFailure(
                f"Failed to bracket the root: f({x1})={f1:.6e}, f({x2})={f2:.6e}",
                bracket=(x1, x2),
                values=(f1, f2),
                expansions=expansions,
            )

        move_first = abs(f1) < abs(f2)
        if move_first and x1_pinned:
            move_first = False
        elif not move_first and x2_pinned:
            move_first = True

        expansions += 1
        if move_first:
            x1 = min(max(x1 + expansion * (x1 - x2), min_x), max_x)
            f1 = _checked(func, x1, (x1, x2), (math.nan, f2), expansions)
        else:
            x2 = min(max(x2 + expansion * (x2 - x1), min_x), max_x)
            f2 = _checked(func, x2, (x1, x2), (f1, math.nan), expansions)

    logger.debug("Bracketed root in [%s, %s] after %s expansions", x1, x2, expansions)
    return x1, x2


def brent(
    func: Func,
    a: float,
    b: float,
    *,
    x_tolerance: float = 1e-12,
    f_tolerance: float = 1e-14,
    max_iter: int = 100,
) -> RootResult:
    """Brent's method on a bracketing interval.

    Parameters
    ----------
    func:
        Continuous scalar objective.
    a, b:
        Interval endpoints, in any order. ``func(a)`` and ``func(b)`` must not
        share a sign (a zero at either end is accepted).
    x_tolerance:
        Absolute tolerance on the root.
    f_tolerance:
        Absolute tolerance on the function value.
    max_iter:
        Maximum number of iterations.
    """
    f_a = func(a)
    f_b = func(b)
    if f_a == 0.0:
        return RootResult(a, 0, True, "brent")
    if f_b == 0.0:
        return RootResult(b, 0, True, "brent")
    if _same_sign(f_a, f_b) or not (math.isfinite(f_a) and math.isfinite(f_b)):
        raise BracketingFailure(
            f"Root is not bracketed: f({a})={f_a:.6e}, f({b})={f_b:.6e}",
            bracket=(a, b),
            values=(f_a, f_b),
        )

    c, f_c = a, f_a
    d = e = b - a
    for iteration in range(1, max_iter + 1):
        if _same_sign(f_b, f_c):
            c, f_c = a, f_a
            d = e = b - a
        if abs(f_c) < abs(f_b):
            a, b, c = b, c, b
            f_a, f_b, f_c = f_b, f_c, f_b

        tol1 = 2.0 * _EPS * abs(b) + 0.5 * x_tolerance
        xm = 0.5 * (c - b)
        if abs(xm) <= tol1 or abs(f_b) <= f_tolerance:
            logger.debug("Brent converged at x=%s after %s iterations", b, iteration)
            return RootResult(b, iteration, True, "brent")

        if abs(e) >= tol1 and abs(f_a) > abs(f_b):
            s = f_b / f_a
            if a == c:
                # Secant step
                p = 2.0 * xm * s
                q = 1.0 - s
            else:
                # Inverse quadratic interpolation
                q = f_a / f_c
                r = f_b / f_c
                p = s * (2.0 * xm * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            p = abs(p)
            min1 = 3.0 * xm * q - abs(tol1 * q)
            min2 = abs(e * q)
            if 2.0 * p < min(min1, min2):
                e = d
                d = p / q
            else:
                d = xm
                e = d
        else:
            d = xm
            e = d

        a, f_a = b, f_b
        if abs(d) > tol1:
            b += d
        else:
            b += math.copysign(tol1, xm)
        f_b = func(b)
        if not math.isfinite(f_b):
            raise RootFindingFailure(
                f"Objective returned {f_b} at x={b}",
                bracket=(b, c),
                iterations=iteration,
            )

    raise RootFindingFailure(
        f"Brent failed to converge within {max_iter} iterations. "
        f"Final bracket: [{min(b, c):.12g}, {max(b, c):.12g}]",
        bracket=(min(b, c), max(b, c)),
        iterations=max_iter,
    )


@dataclass(frozen=True)
class RootFinder:
    """Bracket-then-Brent solver with fixed settings."""

    x_tolerance: float = 1e-12
    f_tolerance: float = 1e-14
    max_iterations: int = 100
    expansion_factor: float = 1.6
    max_expansions: int = 50

    def bracket(
        self,
        func: Func,
        lower: float,
        upper: float,
        *,
        min_x: float = -math.inf,
        max_x: float = math.inf,
    ) -> Tuple[float, float]:
        return bracket_root(
            func,
            lower,
            upper,
            min_x=min_x,
            max_x=max_x,
            expansion=self.expansion_factor,
            max_expansions=self.max_expansions,
        )

    def solve(self, func: Func, a: float, b: float) -> RootResult:
        return brent(
            func,
            a,
            b,
            x_tolerance=self.x_tolerance,
            f_tolerance=self.f_tolerance,
            max_iter=self.max_iterations,
        )

    def find_root(
        self,
        func: Func,
        lower: float,
        upper: float,
        *,
        min_x: float = -math.inf,
        max_x: float = math.inf,
    ) -> RootResult:
        """Bracket from ``[lower, upper]`` and refine the root."""
        x1, x2 = self.bracket(func, lower, upper, min_x=min_x, max_x=max_x)
        if x1 > x2:
            # Bracketing from a negative guess leaves the endpoints reversed
            x1, x2 = x2, x1
        return self.solve(func, x1, x2)
