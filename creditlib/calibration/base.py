"""Base framework for credit curve calibration."""

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Sequence

from creditlib.conventions.daycount import get_day_count_convention
from creditlib.curves.nodal import NodalCurve
from creditlib.market.recovery import LossProvider
from creditlib.pricing.base import AccrualOnDefaultFormula, PricingAdapter
from creditlib.utils.rootfinding import RootFinder

from .results import CalibrationResult

logger = logging.getLogger(__name__)


class InstrumentOrderError(ValueError):
    """Raised when calibration instruments are not in ascending maturity order."""


class CalibrationTimeout(RuntimeError):
    """Raised when a calibration exceeds its configured deadline."""

    def __init__(self, message: str, solved_nodes: int):
        super().__init__(message)
        self.solved_nodes = solved_nodes


@dataclass
class CalibrationConfig:
    """Configuration for the calibration process."""

    interpolation: str = "PRODUCT_LINEAR"
    lower_extrapolation: str = "FLAT"
    upper_extrapolation: str = "PRODUCT_LINEAR"
    day_count_convention: str = "ACT/365F"
    curve_name: str = "CREDIT"
    # Initial bracket around each node's guess
    bracket_lower_factor: float = 0.8
    bracket_upper_factor: float = 1.25
    # Hazard rates cannot be negative
    min_value: float = 0.0
    max_value: float = math.inf
    expansion_factor: float = 1.6
    max_expansions: int = 50
    x_tolerance: float = 1e-12
    f_tolerance: float = 1e-14
    max_iterations: int = 100
    # Overrides the pricing adapter's formula when set
    accrual_on_default_formula: Optional[AccrualOnDefaultFormula] = None
    timeout: Optional[float] = None  # seconds, checked between node solves
    verbose: bool = False

    def root_finder(self) -> RootFinder:
        return RootFinder(
            x_tolerance=self.x_tolerance,
            f_tolerance=self.f_tolerance,
            max_iterations=self.max_iterations,
            expansion_factor=self.expansion_factor,
            max_expansions=self.max_expansions,
        )


class CreditCurveCalibrator(ABC):
    """
    Abstract base class for credit curve calibrators.

    Handles what every calibrator shares:
    - Valuation date and curve time axis
    - Input validation (lengths, maturity order, loss rates)
    - Initial guesses and the seed curve
    - Deadline tracking between node solves

    Subclasses implement :meth:`_calibrate`.
    """

    def __init__(self, valuation_date: date, config: Optional[CalibrationConfig] = None):
        """
        Initialize calibrator.

        Args:
            valuation_date: Curve valuation date; node times are measured from it
            config: Calibration configuration (optional)
        """
        self.valuation_date = valuation_date
        self.config = config or CalibrationConfig()
        self._time_axis = get_day_count_convention(self.config.day_count_convention)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def calibrate(
        self,
        instruments: Sequence[Any],
        target_prices: Sequence[float],
        loss_provider: LossProvider,
        pricing_adapter: PricingAdapter,
    ) -> NodalCurve:
        """
        Calibrate a curve that reprices every instrument to its target.

        Args:
            instruments: Instruments sorted by strictly ascending ``end_date``;
                each exposes ``end_date`` and ``coupon``
            target_prices: Target price of each instrument (e.g. points upfront)
            loss_provider: Loss given default lookup by date
            pricing_adapter: Prices an instrument against a curve

        Returns:
            Calibrated curve with one node per instrument
        """
        return self.calibrate_detailed(
            instruments, target_prices, loss_provider, pricing_adapter
        ).curve

    def calibrate_detailed(
        self,
        instruments: Sequence[Any],
        target_prices: Sequence[float],
        loss_provider: LossProvider,
        pricing_adapter: PricingAdapter,
    ) -> CalibrationResult:
        """Same as :meth:`calibrate` but also returns per-node diagnostics."""
        instruments = list(instruments)
        target_prices = [float(p) for p in target_prices]
        self._validate(instruments, target_prices)
        pricing_adapter = self._with_formula(pricing_adapter)

        times = [self._year_fraction(inst) for inst in instruments]
        lgds = [self._loss_given_default(loss_provider, inst) for inst in instruments]

        logger.info(
            "Calibrating %s curve from %s instruments (valuation %s)",
            self.config.curve_name,
            len(instruments),
            self.valuation_date,
        )
        result = self._calibrate(instruments, target_prices, times, lgds, pricing_adapter)
        logger.info(
            "Calibrated %s curve: max residual %.3e",
            self.config.curve_name,
            result.max_abs_residual,
        )
        return result

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------
    @staticmethod
    def initial_guess(coupon: float, target_price: float, t: float, lgd: float) -> float:
        """Credit triangle hazard estimate, with the upfront spread over the tenor."""
        return (coupon + target_price / t) / lgd

    def seed_curve(self, times: Sequence[float], guesses: Sequence[float]) -> NodalCurve:
        """Curve holding every guess, built in one shot."""
        if len(times) == 1:
            return NodalCurve.of_single_node(times[0], guesses[0], name=self.config.curve_name)
        return NodalCurve.of_nodes(
            times,
            guesses,
            self.config.interpolation,
            self.config.lower_extrapolation,
            self.config.upper_extrapolation,
            name=self.config.curve_name,
        )

    def _deadline(self) -> Optional[float]:
        if self.config.timeout is None:
            return None
        return time.monotonic() + self.config.timeout

    def _check_deadline(self, deadline: Optional[float], solved_nodes: int) -> None:
        if deadline is not None and time.monotonic() > deadline:
            logger.error(
                "Calibration of %s timed out after %s nodes",
                self.config.curve_name,
                solved_nodes,
            )
            raise CalibrationTimeout(
                f"Calibration exceeded {self.config.timeout}s after {solved_nodes} nodes",
                solved_nodes=solved_nodes,
            )

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def _validate(self, instruments: List[Any], target_prices: List[float]) -> None:
        if not instruments:
            raise ValueError("Need at least one instrument to calibrate")
        if len(instruments) != len(target_prices):
            raise ValueError(
                f"Got {len(instruments)} instruments but {len(target_prices)} target prices"
            )
        for i in range(1, len(instruments)):
            prev, curr = instruments[i - 1].end_date, instruments[i].end_date
            if curr <= prev:
                raise InstrumentOrderError(
                    f"Instruments must be sorted by strictly ascending maturity: "
                    f"instrument {i} ends {curr}, instrument {i - 1} ends {prev}"
                )

    def _with_formula(self, pricing_adapter: PricingAdapter) -> PricingAdapter:
        formula = self.config.accrual_on_default_formula
        if formula is None:
            return pricing_adapter
        with_formula = getattr(pricing_adapter, "with_formula", None)
        if with_formula is None:
            raise ValueError(
                f"{type(pricing_adapter).__name__} does not support choosing "
                f"the accrual-on-default formula"
            )
        return with_formula(formula)

    def _year_fraction(self, instrument: Any) -> float:
        t = self._time_axis.year_fraction(self.valuation_date, instrument.end_date)
        if t <= 0.0:
            raise ValueError(
                f"Instrument {self._label(instrument)} matures on or before "
                f"the valuation date {self.valuation_date}"
            )
        return t

    def _loss_given_default(self, loss_provider: LossProvider, instrument: Any) -> float:
        lgd = loss_provider.loss_given_default(instrument.end_date)
        if not 0.0 < lgd <= 1.0:
            raise ValueError(
                f"Loss given default for {self._label(instrument)} must be in (0, 1]: {lgd}"
            )
        return lgd

    @staticmethod
    def _label(instrument: Any, index: Optional[int] = None) -> str:
        name = getattr(instrument, "name", None)
        if name:
            return str(name)
        return f"#{index}" if index is not None else repr(instrument)

    @abstractmethod
    def _calibrate(
        self,
        instruments: List[Any],
        target_prices: List[float],
        times: List[float],
        lgds: List[float],
        pricing_adapter: PricingAdapter,
    ) -> CalibrationResult:
        """
        Solve the curve from validated inputs.

        Args:
            instruments: Instruments in ascending maturity order
            target_prices: Target price per instrument
            times: Maturity year fraction per instrument
            lgds: Loss given default per instrument
            pricing_adapter: Instrument pricer

        Returns:
            Calibrated curve and diagnostics
        """
        pass
