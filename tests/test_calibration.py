"""Tests for creditlib.calibration: the sequential bootstrap."""

import logging
from types import SimpleNamespace

import pytest
from conftest import VALUATION_DATE, LinearAdapter, make_cds

import creditlib.calibration.base as calibration_base
from creditlib.calibration import (
    CalibrationConfig,
    CalibrationResult,
    CalibrationTimeout,
    InstrumentOrderError,
    SimpleCreditCurveCalibrator,
    calibrate_credit_curve,
)
from creditlib.curves import NodalCurve
from creditlib.market import ConstantRecoveryRates
from creditlib.pricing import AccrualOnDefaultFormula
from creditlib.utils.rootfinding import BracketingFailure

# Zero recovery makes the initial guess equal to the coupon for zero targets
NO_RECOVERY = ConstantRecoveryRates(0.0)


class _FixedLoss:
    def __init__(self, lgd):
        self.lgd = lgd

    def loss_given_default(self, on):
        return self.lgd


class _FlatFor(LinearAdapter):
    """Linear adapter that ignores the curve for one named instrument."""

    def __init__(self, name):
        super().__init__(1.0)
        self.name = name

    def price(self, instrument, curve):
        if instrument.name == self.name:
            return 1.0
        return super().price(instrument, curve)


@pytest.fixture
def calibrator():
    return SimpleCreditCurveCalibrator(VALUATION_DATE)


class TestWithIsdaPricer:
    def test_reprices_every_instrument(self, calibrator, instruments, pricer, recovery):
        targets = [0.0, 0.005, 0.01]
        curve = calibrator.calibrate(instruments, targets, recovery, pricer)
        assert curve.node_count == 3
        assert curve.interpolation == "PRODUCT_LINEAR"
        assert curve.name == "CREDIT"
        for inst, target in zip(instruments, targets):
            assert pricer.price(inst, curve) == pytest.approx(target, abs=1e-10)

    def test_zero_upfront_hazard_near_credit_triangle(self, calibrator, instruments, pricer, recovery):
        curve = calibrator.calibrate(instruments, [0.0, 0.0, 0.0], recovery, pricer)
        for y in curve.y_values:
            assert y == pytest.approx(0.01 / 0.6, abs=1e-3)
        for inst in instruments:
            assert abs(pricer.price(inst, curve)) < 1e-10

    def test_earlier_nodes_frozen(self, calibrator, instruments, pricer, recovery):
        base = calibrator.calibrate(instruments, [0.0, 0.0, 0.0], recovery, pricer)
        bumped = calibrator.calibrate(instruments, [0.0, 0.02, 0.0], recovery, pricer)
        assert bumped.y_values[0] == base.y_values[0]
        assert bumped.y_values[1] > base.y_values[1]

    def test_single_instrument_gives_constant_curve(self, calibrator, pricer, recovery):
        curve = calibrator.calibrate([make_cds(12)], [0.01], recovery, pricer)
        assert curve.node_count == 1
        assert curve.evaluate(0.1) == curve.evaluate(10.0) == curve.y_values[0]
        assert pricer.price(make_cds(12), curve) == pytest.approx(0.01, abs=1e-10)

    def test_detailed_result(self, calibrator, instruments, pricer, recovery):
        result = calibrator.calibrate_detailed(instruments, [0.0, 0.005, 0.01], recovery, pricer)
        assert isinstance(result, CalibrationResult)
        assert isinstance(result.seed_curve, NodalCurve)
        assert result.seed_curve.x_values == result.curve.x_values
        assert result.max_abs_residual < 1e-10
        assert [n.label for n in result.nodes] == ["6M", "12M", "24M"]
        assert all(n.loss_given_default == pytest.approx(0.6) for n in result.nodes)

        frame = result.to_frame()
        assert list(frame.index) == [0, 1, 2]
        assert {"label", "value", "guess", "bracket_lower", "bracket_upper", "residual"} <= set(
            frame.columns
        )
        assert frame.loc[2, "value"] == result.curve.y_values[2]

    def test_convenience_function(self, instruments, pricer, recovery):
        curve = calibrate_credit_curve(
            VALUATION_DATE, instruments, [0.0, 0.005, 0.01], recovery, pricer
        )
        assert curve.node_count == 3
        assert curve.x_values[1] == pytest.approx(1.0)

    def test_convenience_function_selects_formula(self, instruments, pricer, recovery):
        targets = [0.0, 0.005, 0.01]
        formula = AccrualOnDefaultFormula.MARKIT_FIX
        curve = calibrate_credit_curve(
            VALUATION_DATE, instruments, targets, recovery, pricer, accrual_on_default_formula=formula
        )
        default = calibrate_credit_curve(VALUATION_DATE, instruments, targets, recovery, pricer)
        assert curve != default
        markit = pricer.with_formula(formula)
        for inst, target in zip(instruments, targets):
            assert markit.price(inst, curve) == pytest.approx(target, abs=1e-10)

    def test_formula_needs_a_selectable_adapter(self, instruments):
        config = CalibrationConfig(accrual_on_default_formula=AccrualOnDefaultFormula.CORRECT)
        calibrator = SimpleCreditCurveCalibrator(VALUATION_DATE, config)
        with pytest.raises(ValueError, match="accrual-on-default"):
            calibrator.calibrate(instruments, [0.0] * 3, NO_RECOVERY, LinearAdapter(1.0))


class TestBracketing:
    @pytest.mark.parametrize(
        "scale, root", [(1.0 / 3.0, 0.03), (3.0, 0.01 / 3.0), (0.2, 0.05), (5.0, 0.002)]
    )
    def test_root_far_from_guess(self, calibrator, scale, root):
        adapter = LinearAdapter(scale)
        result = calibrator.calibrate_detailed([make_cds(12)], [0.0], NO_RECOVERY, adapter)
        node = result.nodes[0]
        assert node.guess == pytest.approx(0.01)
        assert node.value == pytest.approx(root, abs=1e-10)
        assert node.bracket[0] < node.bracket[1]

    def test_negative_guess(self, calibrator):
        # guess = (0.01 - 0.02 / 1) / 1 < 0; root of y - 0.06 = -0.02 is 0.04
        adapter = LinearAdapter(1.0, shift=0.05)
        result = calibrator.calibrate_detailed([make_cds(12)], [-0.02], NO_RECOVERY, adapter)
        node = result.nodes[0]
        assert node.guess == pytest.approx(-0.01)
        assert node.value == pytest.approx(0.04, abs=1e-10)
        assert node.bracket[0] >= 0.0

    def test_bounds_from_config(self):
        config = CalibrationConfig(min_value=0.0, max_value=0.03)
        calibrator = SimpleCreditCurveCalibrator(VALUATION_DATE, config)
        with pytest.raises(BracketingFailure):
            calibrator.calibrate([make_cds(12)], [0.0], NO_RECOVERY, LinearAdapter(0.2))


class TestValidation:
    def test_descending_maturities(self, calibrator):
        with pytest.raises(InstrumentOrderError):
            calibrator.calibrate(
                [make_cds(12), make_cds(6)], [0.0, 0.0], NO_RECOVERY, LinearAdapter(1.0)
            )

    def test_equal_maturities(self, calibrator):
        with pytest.raises(ValueError, match="strictly ascending"):
            calibrator.calibrate(
                [make_cds(12), make_cds(12, name="B")], [0.0, 0.0], NO_RECOVERY, LinearAdapter(1.0)
            )

    def test_length_mismatch(self, calibrator, instruments):
        with pytest.raises(ValueError, match="target prices"):
            calibrator.calibrate(instruments, [0.0, 0.0], NO_RECOVERY, LinearAdapter(1.0))

    def test_empty(self, calibrator):
        with pytest.raises(ValueError, match="at least one"):
            calibrator.calibrate([], [], NO_RECOVERY, LinearAdapter(1.0))

    @pytest.mark.parametrize("lgd", [0.0, -0.2, 1.5])
    def test_bad_loss_given_default(self, calibrator, instruments, lgd):
        adapter = LinearAdapter(1.0)
        with pytest.raises(ValueError, match="Loss given default"):
            calibrator.calibrate(instruments, [0.0] * 3, _FixedLoss(lgd), adapter)
        assert adapter.calls == 0

    def test_instrument_at_valuation_date(self):
        calibrator = SimpleCreditCurveCalibrator(make_cds(12).end_date)
        with pytest.raises(ValueError, match="on or before"):
            calibrator.calibrate([make_cds(12)], [0.0], NO_RECOVERY, LinearAdapter(1.0))


class TestFailures:
    def test_failure_names_the_node(self, calibrator, instruments, caplog):
        caplog.set_level(logging.ERROR, logger="creditlib")
        with pytest.raises(BracketingFailure) as excinfo:
            calibrator.calibrate(instruments, [0.0] * 3, NO_RECOVERY, _FlatFor("12M"))
        err = excinfo.value
        assert err.node_index == 1
        assert err.node_label == "12M"
        assert str(err).startswith("node 1 (12M): ")
        assert "Calibration failed at node 1" in caplog.text

    def test_timeout_between_nodes(self, calibrator, instruments, monkeypatch):
        clock = [0.0]
        monkeypatch.setattr(
            calibration_base, "time", SimpleNamespace(monotonic=lambda: clock[0])
        )

        class _Ticking(LinearAdapter):
            def price(self, instrument, curve):
                clock[0] += 1.0
                return super().price(instrument, curve)

        calibrator.config.timeout = 0.5
        with pytest.raises(CalibrationTimeout) as excinfo:
            calibrator.calibrate(instruments, [0.0] * 3, NO_RECOVERY, _Ticking(1.0))
        assert excinfo.value.solved_nodes == 1

    def test_no_timeout_by_default(self, calibrator, instruments):
        assert calibrator.config.timeout is None
        curve = calibrator.calibrate(instruments, [0.0] * 3, NO_RECOVERY, LinearAdapter(1.0))
        assert curve.y_values == pytest.approx([0.01] * 3)


def test_verbose_logs_each_node(instruments, caplog):
    caplog.set_level(logging.INFO, logger="creditlib")
    config = CalibrationConfig(verbose=True, curve_name="ACME")
    calibrator = SimpleCreditCurveCalibrator(VALUATION_DATE, config)
    calibrator.calibrate(instruments, [0.0] * 3, NO_RECOVERY, LinearAdapter(1.0))
    assert "Calibrating ACME curve from 3 instruments" in caplog.text
    assert "node 2 (24M)" in caplog.text
