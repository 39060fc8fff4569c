"""Sequential bootstrap of a credit curve, one node per instrument."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, List, Optional, Sequence

from creditlib.curves.nodal import NodalCurve
from creditlib.market.recovery import LossProvider
from creditlib.pricing.base import AccrualOnDefaultFormula, PricingAdapter
from creditlib.utils.rootfinding import RootFindingError

from .base import CalibrationConfig, CreditCurveCalibrator
from .objective import NodeObjective
from .results import CalibrationResult, NodeResult

logger = logging.getLogger(__name__)


class SimpleCreditCurveCalibrator(CreditCurveCalibrator):
    """Bootstrap calibrator.

    Nodes are solved in maturity order. Node ``i`` is solved with nodes
    ``0..i-1`` fixed at their solved values and nodes ``i+1..n-1`` still at
    their seed guesses, then fixed for the rest of the run. Each node is solved
    exactly once; there is no global refinement pass.
    """

    def _calibrate(
        self,
        instruments: List[Any],
        target_prices: List[float],
        times: List[float],
        lgds: List[float],
        pricing_adapter: PricingAdapter,
    ) -> CalibrationResult:
        cfg = self.config
        guesses = [
            self.initial_guess(inst.coupon, price, t, lgd)
            for inst, price, t, lgd in zip(instruments, target_prices, times, lgds, strict=True)
        ]
        seed = self.seed_curve(times, guesses)
        curve = seed
        finder = cfg.root_finder()
        deadline = self._deadline()
        nodes: List[NodeResult] = []

        for i, instrument in enumerate(instruments):
            self._check_deadline(deadline, i)
            label = self._label(instrument, i)
            objective = NodeObjective(
                curve=curve,
                index=i,
                instrument=instrument,
                target_price=target_prices[i],
                pricing_adapter=pricing_adapter,
            )
            lower = cfg.bracket_lower_factor * guesses[i]
            upper = cfg.bracket_upper_factor * guesses[i]

            try:
                bracket = finder.bracket(
                    objective, lower, upper, min_x=cfg.min_value, max_x=cfg.max_value
                )
                x1, x2 = bracket
                if x1 > x2:
                    # Negative guess: the bracket comes back reversed
                    x1, x2 = x2, x1
                result = finder.solve(objective, x1, x2)
            except RootFindingError as exc:
                exc.node_index = i
                exc.node_label = label
                logger.error(
                    "Calibration failed at node %s (%s, maturity %s, guess %.6g): %s",
                    i,
                    label,
                    instrument.end_date,
                    guesses[i],
                    exc.message,
                )
                raise

            curve = objective.curve_at(result.root)
            residual = objective(result.root)
            nodes.append(
                NodeResult(
                    index=i,
                    label=label,
                    maturity=instrument.end_date,
                    time=times[i],
                    loss_given_default=lgds[i],
                    guess=guesses[i],
                    bracket=(x1, x2),
                    value=result.root,
                    iterations=result.iterations,
                    residual=residual,
                )
            )
            log = logger.info if cfg.verbose else logger.debug
            log(
                "  node %s (%s): t=%.6f guess=%.8f bracket=[%.8f, %.8f] value=%.10f "
                "iterations=%s residual=%.3e",
                i,
                label,
                times[i],
                guesses[i],
                x1,
                x2,
                result.root,
                result.iterations,
                residual,
            )

        return CalibrationResult(curve=curve, nodes=nodes, seed_curve=seed)


def calibrate_credit_curve(
    valuation_date: date,
    instruments: Sequence[Any],
    target_prices: Sequence[float],
    loss_provider: LossProvider,
    pricing_adapter: PricingAdapter,
    config: Optional[CalibrationConfig] = None,
    accrual_on_default_formula: Optional[AccrualOnDefaultFormula] = None,
) -> NodalCurve:
    """One-line credit curve bootstrap."""
    if accrual_on_default_formula is not None:
        config = replace(
            config or CalibrationConfig(),
            accrual_on_default_formula=accrual_on_default_formula,
        )
    calibrator = SimpleCreditCurveCalibrator(valuation_date, config)
    return calibrator.calibrate(instruments, target_prices, loss_provider, pricing_adapter)
