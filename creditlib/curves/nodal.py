"""
Immutable nodal curves.

A nodal curve is a set of (x, y) nodes with strictly increasing x-values, an
interpolation method used between nodes and two extrapolation methods used
below the first and above the last node. A curve with a single node is a
constant function. Curves are never modified in place: ``with_node`` returns
a new curve, so partially calibrated curves can be held side by side.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from creditlib.interpolation import (
    Extrapolator,
    Interpolator,
    create_interpolator,
    get_extrapolator,
    normalize_method,
)


class InvalidCurveDefinition(ValueError):
    """Raised when curve nodes or methods are malformed."""


class IndexOutOfRange(IndexError):
    """Raised when a node index does not exist on the curve."""


class NodalCurve:
    """Curve defined by explicit nodes plus interpolation/extrapolation rules."""

    __slots__ = (
        "_xs",
        "_ys",
        "_interpolation",
        "_lower_extrapolation",
        "_upper_extrapolation",
        "_name",
        "_interpolator",
        "_lower",
        "_upper",
    )

    def __init__(
        self,
        xs: Sequence[float],
        ys: Sequence[float],
        interpolation: str = "LINEAR",
        lower_extrapolation: str = "FLAT",
        upper_extrapolation: str = "FLAT",
        name: Optional[str] = None,
    ):
        """
        Initialize a nodal curve.

        Prefer the ``of_single_node`` and ``of_nodes`` constructors.

        Args:
            xs: Node x-values (year fractions), strictly increasing
            ys: Node y-values
            interpolation: Interpolation method between nodes
            lower_extrapolation: Extrapolation method below the first node
            upper_extrapolation: Extrapolation method above the last node
            name: Optional curve name, carried through every copy

        Raises:
            InvalidCurveDefinition: If the nodes or method names are invalid
        """
        xs = tuple(float(x) for x in xs)
        ys = tuple(float(y) for y in ys)
        if not xs:
            raise InvalidCurveDefinition("A curve needs at least one node")
        if len(xs) != len(ys):
            raise InvalidCurveDefinition(
                f"x-values and y-values must have same length: {len(xs)} != {len(ys)}"
            )
        if not all(math.isfinite(v) for v in xs + ys):
            raise InvalidCurveDefinition("Curve nodes must be finite")
        for i in range(1, len(xs)):
            if xs[i] <= xs[i - 1]:
                raise InvalidCurveDefinition(
                    f"x-values must be strictly increasing: "
                    f"x[{i - 1}]={xs[i - 1]}, x[{i}]={xs[i]}"
                )

        self._xs = xs
        self._ys = ys
        self._name = name
        try:
            self._interpolation = normalize_method(interpolation)
            self._lower_extrapolation = normalize_method(lower_extrapolation)
            self._upper_extrapolation = normalize_method(upper_extrapolation)
            self._lower: Extrapolator = get_extrapolator(lower_extrapolation)
            self._upper: Extrapolator = get_extrapolator(upper_extrapolation)
            self._interpolator: Optional[Interpolator] = (
                create_interpolator(interpolation, xs, ys) if len(xs) > 1 else None
            )
        except ValueError as exc:
            raise InvalidCurveDefinition(str(exc)) from exc
        if (
            len(xs) > 1
            and xs[0] < 0.0
            and self._upper_extrapolation == "PRODUCT_LINEAR"
        ):
            # y = g(x) / x is undefined at x = 0
            raise InvalidCurveDefinition(
                f"PRODUCT_LINEAR extrapolation needs non-negative x-values: {xs[0]}"
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def of_single_node(cls, x: float, y: float, name: Optional[str] = None) -> "NodalCurve":
        """Constant curve holding ``y`` everywhere, anchored at ``x``."""
        return cls((x,), (y,), name=name)

    @classmethod
    def of_nodes(
        cls,
        xs: Sequence[float],
        ys: Sequence[float],
        interpolation: str = "LINEAR",
        lower_extrapolation: str = "FLAT",
        upper_extrapolation: str = "FLAT",
        name: Optional[str] = None,
    ) -> "NodalCurve":
        return cls(xs, ys, interpolation, lower_extrapolation, upper_extrapolation, name)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def x_values(self) -> Tuple[float, ...]:
        return self._xs

    @property
    def y_values(self) -> Tuple[float, ...]:
        return self._ys

    @property
    def node_count(self) -> int:
        return len(self._xs)

    @property
    def interpolation(self) -> str:
        return self._interpolation

    @property
    def lower_extrapolation(self) -> str:
        return self._lower_extrapolation

    @property
    def upper_extrapolation(self) -> str:
        return self._upper_extrapolation

    @property
    def name(self) -> Optional[str]:
        return self._name

    def __len__(self) -> int:
        return len(self._xs)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def evaluate(self, x: float) -> float:
        """Curve value at x, interpolated inside the nodes, extrapolated outside."""
        if self._interpolator is None:
            return self._ys[0]

        xs = self._xs
        if x < xs[0]:
            return self._lower.lower(x, self._interpolator)
        if x > xs[-1]:
            return self._upper.upper(x, self._interpolator)

        i = int(np.searchsorted(xs, x))
        if xs[i] == x:
            return self._ys[i]
        return self._interpolator.interpolate(x)

    def evaluate_many(self, xs: Iterable[float]) -> np.ndarray:
        """Vector of curve values at each of ``xs``."""
        return np.array([self.evaluate(float(x)) for x in xs], dtype=float)

    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def with_node(self, index: int, y: float) -> "NodalCurve":
        """Copy of this curve with node ``index`` set to ``y``."""
        if not 0 <= index < len(self._ys):
            raise IndexOutOfRange(
                f"Node index {index} out of range for curve with {len(self._ys)} nodes"
            )
        ys = list(self._ys)
        ys[index] = y
        return self.with_y_values(ys)

    def with_y_values(self, ys: Sequence[float]) -> "NodalCurve":
        """Copy of this curve with all node values replaced."""
        return NodalCurve(
            self._xs,
            ys,
            self._interpolation,
            self._lower_extrapolation,
            self._upper_extrapolation,
            self._name,
        )

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------
    def _key(self):
        return (
            self._xs,
            self._ys,
            self._interpolation,
            self._lower_extrapolation,
            self._upper_extrapolation,
            self._name,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, NodalCurve):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        nodes = ", ".join(f"({x:.6g}, {y:.6g})" for x, y in zip(self._xs, self._ys))
        label = f"{self._name}: " if self._name else ""
        if self._interpolator is None:
            return f"NodalCurve({label}constant [{nodes}])"
        return (
            f"NodalCurve({label}[{nodes}], {self._interpolation}, "
            f"{self._lower_extrapolation}/{self._upper_extrapolation})"
        )
