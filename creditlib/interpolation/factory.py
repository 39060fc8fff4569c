"""
Factory functions for interpolators and extrapolators.
"""
from typing import Dict, Sequence, Type

from .base import Extrapolator, Interpolator
from .extrapolation import (
    FlatExtrapolator,
    LinearExtrapolator,
    ProductLinearExtrapolator,
)
from .linear import LinearInterpolator, ProductLinearInterpolator, StepInterpolator

INTERPOLATORS: Dict[str, Type[Interpolator]] = {
    "LINEAR": LinearInterpolator,
    "PRODUCT_LINEAR": ProductLinearInterpolator,
    "STEP": StepInterpolator,
    "PIECEWISE_CONSTANT": StepInterpolator,
}

EXTRAPOLATORS: Dict[str, Extrapolator] = {
    "FLAT": FlatExtrapolator(),
    "LINEAR": LinearExtrapolator(),
    "PRODUCT_LINEAR": ProductLinearExtrapolator(),
}


def normalize_method(method: str) -> str:
    """Canonical registry key for a method name."""
    return method.strip().upper().replace("-", "_").replace(" ", "_")


def create_interpolator(method: str,
                        pillars: Sequence[float],
                        values: Sequence[float]) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method name
        pillars: Node x-values
        values: Node y-values

    Returns:
        Configured interpolator
    """
    key = normalize_method(method)
    if key not in INTERPOLATORS:
        raise ValueError(f"Unknown interpolation method: {method}. "
                         f"Available: {', '.join(INTERPOLATORS)}")
    return INTERPOLATORS[key](pillars, values)


def get_extrapolator(method: str) -> Extrapolator:
    """Look up a (stateless) extrapolator by method name."""
    key = normalize_method(method)
    if key not in EXTRAPOLATORS:
        raise ValueError(f"Unknown extrapolation method: {method}. "
                         f"Available: {', '.join(EXTRAPOLATORS)}")
    return EXTRAPOLATORS[key]
