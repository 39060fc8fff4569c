"""
Curves package - nodal curves and the discount/survival views built on them.

Main APIs:
---------
    - NodalCurve: immutable (x, y) node curve with pluggable interpolation
    - ZeroRateCurve: discount or survival factors from a zero-rate NodalCurve
"""

from .base import Curve, ZeroRateCurve
from .nodal import IndexOutOfRange, InvalidCurveDefinition, NodalCurve

__all__ = [
    "NodalCurve",
    "ZeroRateCurve",
    "Curve",
    # Errors
    "InvalidCurveDefinition",
    "IndexOutOfRange",
]
