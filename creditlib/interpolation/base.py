"""
Base classes for nodal curve interpolation and extrapolation.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np


class Interpolator(ABC):
    """Base class for interpolation between curve nodes."""

    name: str = ""

    def __init__(self, pillars: Sequence[float], values: Sequence[float]):
        """
        Initialize interpolator.

        Args:
            pillars: Node x-values (year fractions), strictly increasing
            values: Node y-values
        """
        if len(pillars) != len(values):
            raise ValueError("Pillars and values must have same length")
        if len(pillars) < 2:
            raise ValueError("Need at least 2 points for interpolation")

        self.pillars = np.asarray(pillars, dtype=float)
        self.values = np.asarray(values, dtype=float)

        if np.any(np.diff(self.pillars) <= 0.0):
            raise ValueError("Pillars must be strictly increasing")

    @abstractmethod
    def interpolate(self, t: float) -> float:
        """Interpolate value at time t (first node <= t <= last node)."""
        pass

    def interpolate_many(self, times: Sequence[float]) -> List[float]:
        """Interpolate values at multiple times."""
        return [self.interpolate(t) for t in times]

    def _segment(self, t: float) -> int:
        """Index ``i`` of the segment ``[pillars[i], pillars[i + 1]]`` holding t."""
        i = int(np.searchsorted(self.pillars, t, side="right")) - 1
        return min(max(i, 0), len(self.pillars) - 2)


class Extrapolator(ABC):
    """Base class for extrapolation outside the node range.

    Extrapolators are stateless and read the nodes from the interpolator
    they are applied to.
    """

    name: str = ""

    @abstractmethod
    def lower(self, t: float, interpolator: Interpolator) -> float:
        """Value for t below the first node."""
        pass

    @abstractmethod
    def upper(self, t: float, interpolator: Interpolator) -> float:
        """Value for t above the last node."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
