"""Tests for creditlib.curves: NodalCurve and ZeroRateCurve."""

import math
from datetime import date

import numpy as np
import pytest

from creditlib.curves import (
    IndexOutOfRange,
    InvalidCurveDefinition,
    NodalCurve,
    ZeroRateCurve,
)

XS = (0.5, 1.0, 2.0)
YS = (0.02, 0.03, 0.025)


def _curve(**kwargs):
    params = dict(
        interpolation="PRODUCT_LINEAR",
        lower_extrapolation="FLAT",
        upper_extrapolation="PRODUCT_LINEAR",
        name="TEST",
    )
    params.update(kwargs)
    return NodalCurve.of_nodes(XS, YS, **params)


class TestConstruction:
    def test_of_nodes(self):
        curve = _curve()
        assert curve.x_values == XS
        assert curve.y_values == YS
        assert curve.node_count == len(curve) == 3
        assert curve.interpolation == "PRODUCT_LINEAR"
        assert curve.lower_extrapolation == "FLAT"
        assert curve.upper_extrapolation == "PRODUCT_LINEAR"
        assert curve.name == "TEST"

    def test_single_node_is_constant(self):
        curve = NodalCurve.of_single_node(1.5, 0.04)
        for x in (0.0, 0.1, 1.5, 3.0, 30.0):
            assert curve.evaluate(x) == 0.04

    def test_of_nodes_with_one_node_is_constant(self):
        curve = NodalCurve.of_nodes([2.0], [0.01], "LINEAR", "LINEAR", "LINEAR")
        assert curve.evaluate(0.5) == curve.evaluate(5.0) == 0.01

    @pytest.mark.parametrize(
        "xs, ys",
        [
            ([], []),
            ([0.5, 1.0], [0.01]),
            ([1.0, 0.5], [0.01, 0.02]),
            ([0.5, 0.5], [0.01, 0.02]),
            ([0.5, math.nan], [0.01, 0.02]),
            ([0.5, 1.0], [0.01, math.inf]),
        ],
    )
    def test_invalid_nodes(self, xs, ys):
        with pytest.raises(InvalidCurveDefinition):
            NodalCurve.of_nodes(xs, ys)

    def test_unknown_methods(self):
        with pytest.raises(InvalidCurveDefinition):
            NodalCurve.of_nodes(XS, YS, interpolation="CUBIC")
        with pytest.raises(InvalidCurveDefinition):
            NodalCurve.of_nodes(XS, YS, upper_extrapolation="EXPONENTIAL")

    def test_product_linear_rejects_negative_nodes(self):
        with pytest.raises(InvalidCurveDefinition, match="non-negative"):
            NodalCurve.of_nodes([-1.0, 1.0], [0.02, 0.03], "PRODUCT_LINEAR")
        with pytest.raises(InvalidCurveDefinition, match="non-negative"):
            NodalCurve.of_nodes([-1.0, 1.0], [0.02, 0.03], "LINEAR", "FLAT", "PRODUCT_LINEAR")
        # Other methods accept negative times
        curve = NodalCurve.of_nodes([-1.0, 1.0], [0.02, 0.03], "LINEAR")
        assert curve.evaluate(0.0) == pytest.approx(0.025)

    def test_invalid_definition_is_value_error(self):
        with pytest.raises(ValueError):
            NodalCurve.of_nodes([1.0, 0.5], [0.01, 0.02])


class TestEvaluate:
    def test_exact_nodes(self):
        curve = _curve()
        for x, y in zip(XS, YS):
            assert curve.evaluate(x) == y

    def test_interpolation_and_extrapolation(self):
        curve = _curve()
        assert curve.evaluate(0.1) == 0.02
        g1, g2 = 1.0 * 0.03, 2.0 * 0.025
        assert curve.evaluate(1.5) == pytest.approx((g1 + 0.5 * (g2 - g1)) / 1.5)
        forward = g2 - g1
        assert curve.evaluate(4.0) == pytest.approx((g2 + forward * 2.0) / 4.0)

    @pytest.mark.parametrize("x", XS)
    def test_continuous_at_nodes(self, x):
        curve = _curve()
        eps = 1e-9
        assert curve.evaluate(x - eps) == pytest.approx(curve.evaluate(x), abs=1e-9)
        assert curve.evaluate(x + eps) == pytest.approx(curve.evaluate(x), abs=1e-9)

    def test_step_curve_is_discontinuous(self):
        curve = _curve(interpolation="STEP")
        assert curve.evaluate(0.999) == 0.02
        assert curve.evaluate(1.0) == 0.03

    def test_evaluate_many(self):
        curve = _curve()
        values = curve.evaluate_many([0.5, 1.0, 2.0])
        assert isinstance(values, np.ndarray)
        np.testing.assert_allclose(values, YS)

    def test_callable(self):
        curve = _curve()
        assert curve(1.0) == curve.evaluate(1.0)


class TestWithNode:
    def test_returns_new_curve(self):
        curve = _curve()
        bumped = curve.with_node(1, 0.05)
        assert bumped is not curve
        assert curve.y_values == YS
        assert bumped.y_values == (0.02, 0.05, 0.025)
        assert bumped.x_values == curve.x_values
        assert bumped.interpolation == curve.interpolation
        assert bumped.name == "TEST"

    def test_other_nodes_unaffected(self):
        curve = _curve()
        bumped = curve.with_node(2, 0.5)
        assert bumped.evaluate(0.5) == curve.evaluate(0.5)
        assert bumped.evaluate(1.0) == curve.evaluate(1.0)

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_index_out_of_range(self, index):
        with pytest.raises(IndexOutOfRange):
            _curve().with_node(index, 0.01)

    def test_index_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            NodalCurve.of_single_node(1.0, 0.01).with_node(1, 0.02)

    def test_value_equality(self):
        assert _curve() == _curve()
        assert hash(_curve()) == hash(_curve())
        assert _curve() != _curve().with_node(0, 0.021)
        assert "PRODUCT_LINEAR" in repr(_curve())


class TestZeroRateCurve:
    def test_flat_discount_factors(self):
        ref = date(2024, 3, 20)
        curve = ZeroRateCurve.flat(ref, 0.03)
        assert curve.df(ref) == 1.0
        assert curve.df(date(2025, 3, 20)) == pytest.approx(math.exp(-0.03))
        assert curve.df(2.0) == pytest.approx(math.exp(-0.06))
        assert curve.zero(5.0) == 0.03

    def test_year_fraction_uses_day_count(self):
        ref = date(2024, 3, 20)
        curve = ZeroRateCurve(ref, _curve(), time_day_count="ACT/365F")
        assert curve.year_fraction(date(2025, 3, 20)) == pytest.approx(1.0)
        assert curve.year_fraction(0.75) == 0.75
        assert curve.node_times() == XS
        assert str(curve) == "ZeroRateCurve(TEST)"
