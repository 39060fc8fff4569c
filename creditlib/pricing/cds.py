"""
ISDA-style CDS pricer.

Both legs are integrated on a grid made of the instrument's schedule dates and
the nodes of the discount and credit curves. Within each grid interval the
forward interest rate and the forward hazard rate are constant, so every
integral has a closed form (the ISDA standard model scheme).
"""

from __future__ import annotations

import math
from datetime import date
from typing import List, Tuple

from creditlib.curves.base import ZeroRateCurve
from creditlib.curves.nodal import NodalCurve
from creditlib.instruments.cds import CdsInstrument
from creditlib.market.recovery import LossProvider

from .base import AccrualOnDefaultFormula, PriceType

# Below this |forward * dt| the closed forms are replaced by Taylor expansions
_SMALL = 1e-5
# Half-day shift of accrual times in the ISDA model up to 1.8.2
_HALF_DAY = 1.0 / 730.0


def _log_factor(curve: ZeroRateCurve, t: float) -> float:
    """Minus the log discount (or survival) factor, ``y(t) * t``."""
    return curve.curve.evaluate(t) * t if t > 0.0 else 0.0


class IsdaCdsPricer:
    """Prices CDS instruments off a discount curve and a credit curve.

    Prices are per unit notional from the protection buyer's side: protection
    leg minus coupon times risky annuity. With ``PriceType.CLEAN`` the accrued
    premium is added back, which makes the clean price the points upfront.
    """

    def __init__(
        self,
        valuation_date: date,
        discount_curve: ZeroRateCurve,
        recovery_rates: LossProvider,
        price_type: PriceType = PriceType.CLEAN,
        formula: AccrualOnDefaultFormula | str = AccrualOnDefaultFormula.ORIGINAL_ISDA,
    ):
        """
        Initialize pricer.

        Args:
            valuation_date: Valuation date, also the credit curve reference date
            discount_curve: ISDA zero rate discount curve
            recovery_rates: Loss given default provider
            price_type: Clean or dirty price
            formula: Accrual-on-default closed form
        """
        if discount_curve.reference_date != valuation_date:
            raise ValueError(
                f"Discount curve reference date {discount_curve.reference_date} "
                f"differs from valuation date {valuation_date}"
            )
        self.valuation_date = valuation_date
        self.discount_curve = discount_curve
        self.recovery_rates = recovery_rates
        self.price_type = price_type
        self.formula = AccrualOnDefaultFormula(formula)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def price(self, instrument: CdsInstrument, credit_curve: NodalCurve) -> float:
        """Clean or dirty price of the instrument under ``credit_curve``."""
        survival = self.survival_curve(credit_curve)
        value = self._protection_leg(instrument, survival) - (
            instrument.coupon * self._risky_annuity(instrument, survival)
        )
        if self.price_type is PriceType.CLEAN:
            value += instrument.coupon * self.accrued_premium(instrument)
        return value

    def par_spread(self, instrument: CdsInstrument, credit_curve: NodalCurve) -> float:
        """Coupon that gives the instrument a zero dirty value."""
        survival = self.survival_curve(credit_curve)
        annuity = self._risky_annuity(instrument, survival)
        if annuity <= 0.0:
            raise ValueError(f"Non-positive risky annuity for {instrument.label()}")
        return self._protection_leg(instrument, survival) / annuity

    def protection_leg(self, instrument: CdsInstrument, credit_curve: NodalCurve) -> float:
        return self._protection_leg(instrument, self.survival_curve(credit_curve))

    def risky_annuity(self, instrument: CdsInstrument, credit_curve: NodalCurve) -> float:
        """Risky PV01 per unit coupon, including accrual on default if paid."""
        return self._risky_annuity(instrument, self.survival_curve(credit_curve))

    def accrued_premium(self, instrument: CdsInstrument) -> float:
        """Accrual fraction of the period running on the valuation date."""
        for start, end in instrument.premium_periods():
            if start <= self.valuation_date < end:
                return instrument.accrual_day_count.year_fraction(start, self.valuation_date)
        return 0.0

    def with_formula(self, formula: AccrualOnDefaultFormula | str) -> "IsdaCdsPricer":
        """Copy of this pricer using another accrual-on-default formula."""
        return IsdaCdsPricer(
            self.valuation_date,
            self.discount_curve,
            self.recovery_rates,
            self.price_type,
            formula,
        )

    def survival_curve(self, credit_curve: NodalCurve) -> ZeroRateCurve:
        """Survival probabilities on the discount curve's time axis."""
        return ZeroRateCurve(self.valuation_date, credit_curve, self.discount_curve.day_count)

    # ------------------------------------------------------------------
    # Legs
    # ------------------------------------------------------------------
    def _protection_leg(self, instrument: CdsInstrument, survival: ZeroRateCurve) -> float:
        if instrument.end_date <= self.valuation_date:
            return 0.0
        start = max(instrument.start_date, self.valuation_date)
        t_start = self._time(start)
        t_end = self._time(instrument.end_date)

        total = 0.0
        for a, b in self._intervals(t_start, t_end, survival):
            hazard, forward, pq_a, dt = self._interval_terms(a, b, survival)
            x = forward * dt
            if abs(x) < _SMALL:
                total += hazard * pq_a * dt * (1.0 - x / 2.0 + x * x / 6.0)
            else:
                total += hazard * pq_a * (1.0 - math.exp(-x)) / forward

        lgd = self.recovery_rates.loss_given_default(instrument.end_date)
        return lgd * total

    def _risky_annuity(self, instrument: CdsInstrument, survival: ZeroRateCurve) -> float:
        day_count = instrument.accrual_day_count
        total = 0.0
        for start, end in instrument.premium_periods():
            if end <= self.valuation_date:
                continue
            alpha = day_count.year_fraction(start, end)
            t_end = self._time(end)
            log_pq = _log_factor(self.discount_curve, t_end) + _log_factor(survival, t_end)
            total += alpha * math.exp(-log_pq)
            if instrument.pay_accrued_on_default:
                total += self._accrual_on_default(
                    self._time(start), t_end, alpha, survival
                )
        return total

    def _accrual_on_default(
        self, t_start: float, t_end: float, alpha: float, survival: ZeroRateCurve
    ) -> float:
        """Expected discounted accrued premium paid on default within a period."""
        omega = _HALF_DAY if self.formula is AccrualOnDefaultFormula.ORIGINAL_ISDA else 0.0
        total = 0.0
        for a, b in self._intervals(max(t_start, 0.0), t_end, survival):
            hazard, forward, pq_a, dt = self._interval_terms(a, b, survival)
            if self.formula is AccrualOnDefaultFormula.MARKIT_FIX:
                accrued = 0.0
            else:
                accrued = a - t_start + omega
            x = forward * dt
            if abs(x) < _SMALL:
                first = dt * (1.0 - x / 2.0 + x * x / 6.0)
                second = dt * dt * (0.5 - x / 3.0 + x * x / 8.0)
            else:
                e_x = math.exp(-x)
                first = (1.0 - e_x) / forward
                second = (1.0 - e_x) / forward**2 - dt * e_x / forward
            total += hazard * pq_a * (accrued * first + second)
        # Curve time to accrual fraction
        return alpha / (t_end - t_start) * total

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _time(self, target_date: date) -> float:
        return self.discount_curve.year_fraction(target_date)

    def _intervals(
        self, t_start: float, t_end: float, survival: ZeroRateCurve
    ) -> List[Tuple[float, float]]:
        knots = {t_start, t_end}
        for t in survival.node_times() + self.discount_curve.node_times():
            if t_start < t < t_end:
                knots.add(t)
        grid = sorted(knots)
        return list(zip(grid[:-1], grid[1:]))

    def _interval_terms(self, a: float, b: float, survival: ZeroRateCurve):
        """Forward hazard, total forward, P*Q at the start, and the length."""
        dt = b - a
        h_a, h_b = _log_factor(survival, a), _log_factor(survival, b)
        r_a, r_b = _log_factor(self.discount_curve, a), _log_factor(self.discount_curve, b)
        hazard = (h_b - h_a) / dt
        forward = hazard + (r_b - r_a) / dt
        return hazard, forward, math.exp(-(h_a + r_a)), dt
