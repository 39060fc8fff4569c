from datetime import date

import pytest

from creditlib.conventions.daycount import ACT_365F
from creditlib.curves import ZeroRateCurve
from creditlib.instruments import CdsInstrument
from creditlib.market import ConstantRecoveryRates
from creditlib.pricing import IsdaCdsPricer
from creditlib.utils.schedule import add_months

VALUATION_DATE = date(2024, 3, 20)


class LinearAdapter:
    """Toy pricer: ``scale * y(t) - coupon - shift`` at the instrument's maturity.

    Each instrument's price depends only on its own node, and the root is
    known in closed form: ``(target + coupon + shift) / scale``.
    """

    def __init__(self, scale: float, shift: float = 0.0):
        self.scale = scale
        self.shift = shift
        self.calls = 0

    def price(self, instrument, curve):
        self.calls += 1
        t = ACT_365F.year_fraction(VALUATION_DATE, instrument.end_date)
        return self.scale * curve.evaluate(t) - instrument.coupon - self.shift


def make_cds(months: int, coupon: float = 0.01, name: str | None = None) -> CdsInstrument:
    return CdsInstrument(
        start_date=VALUATION_DATE,
        end_date=add_months(VALUATION_DATE, months),
        coupon=coupon,
        name=name or f"{months}M",
    )


@pytest.fixture
def valuation_date():
    return VALUATION_DATE


@pytest.fixture
def discount_curve():
    return ZeroRateCurve.flat(VALUATION_DATE, 0.03)


@pytest.fixture
def recovery():
    return ConstantRecoveryRates(0.4)


@pytest.fixture
def pricer(discount_curve, recovery):
    return IsdaCdsPricer(VALUATION_DATE, discount_curve, recovery)


@pytest.fixture
def instruments():
    return [make_cds(6), make_cds(12), make_cds(24)]
