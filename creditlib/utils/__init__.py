"""Numerical and date utilities."""

from .rootfinding import (
    BracketingFailure,
    RootFinder,
    RootFindingError,
    RootFindingFailure,
    RootResult,
    bracket_root,
    brent,
)
from .schedule import accrual_periods, add_months, premium_schedule

__all__ = [
    # Root finding
    "RootFinder",
    "RootResult",
    "RootFindingError",
    "BracketingFailure",
    "RootFindingFailure",
    "bracket_root",
    "brent",
    # Schedules
    "add_months",
    "premium_schedule",
    "accrual_periods",
]
