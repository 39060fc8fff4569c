"""Credit Curve Calibration Library.

This package bootstraps credit (zero hazard rate) curves from CDS quotes:
each instrument in maturity order fixes one curve node by root finding on the
instrument's pricing error.

Key modules:
- calibration: Sequential bootstrap calibrator
- curves: Immutable nodal curves and discount/survival views
- interpolation: Interpolators and extrapolators for nodal curves
- pricing: Pricing adapters (ISDA-style CDS pricer)
- market: Recovery rate providers
- instruments: CDS instrument definition
- utils: Root finding and schedule generation
- conventions: Day count conventions
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Main modules are imported via subpackages
    "calibration",
    "curves",
    "interpolation",
    "pricing",
    "market",
    "instruments",
    "utils",
    "conventions",
]
