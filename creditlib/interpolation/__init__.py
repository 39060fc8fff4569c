"""
Interpolation and extrapolation methods for nodal curves.

Interpolators work between the first and last node; extrapolators take over
outside that range. Both are selected by name through the factory functions.
"""

# Base classes
from .base import Extrapolator, Interpolator

# Extrapolation methods
from .extrapolation import (
    FlatExtrapolator,
    LinearExtrapolator,
    ProductLinearExtrapolator,
)

# Factory and utilities
from .factory import create_interpolator, get_extrapolator, normalize_method

# Interpolation methods
from .linear import LinearInterpolator, ProductLinearInterpolator, StepInterpolator

__all__ = [
    # Base classes
    'Interpolator',
    'Extrapolator',

    # Interpolation methods
    'LinearInterpolator',
    'ProductLinearInterpolator',
    'StepInterpolator',

    # Extrapolation methods
    'FlatExtrapolator',
    'LinearExtrapolator',
    'ProductLinearExtrapolator',

    # Factory and utilities
    'create_interpolator',
    'get_extrapolator',
    'normalize_method',
]
