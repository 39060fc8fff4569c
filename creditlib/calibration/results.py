"""Result dataclasses for the credit curve calibration stack."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from creditlib.curves.nodal import NodalCurve


@dataclass(frozen=True)
class NodeResult:
    """Single node solved during the bootstrap."""

    index: int
    label: str
    maturity: date
    time: float
    loss_given_default: float
    guess: float
    bracket: Tuple[float, float]
    value: float
    iterations: int
    residual: float


@dataclass(frozen=True)
class CalibrationResult:
    """Calibrated curve together with per-node diagnostics."""

    curve: NodalCurve
    nodes: List[NodeResult]
    seed_curve: Optional[NodalCurve] = None

    @property
    def max_abs_residual(self) -> float:
        return max((abs(n.residual) for n in self.nodes), default=0.0)

    def to_frame(self) -> pd.DataFrame:
        """One row per node, indexed by node position."""
        rows = []
        for node in self.nodes:
            row = asdict(node)
            row["bracket_lower"], row["bracket_upper"] = row.pop("bracket")
            rows.append(row)
        return pd.DataFrame(rows).set_index("index")
