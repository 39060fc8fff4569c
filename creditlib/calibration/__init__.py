"""Credit curve calibration."""

from .base import (
    CalibrationConfig,
    CalibrationTimeout,
    CreditCurveCalibrator,
    InstrumentOrderError,
)
from .objective import NodeObjective
from .results import CalibrationResult, NodeResult
from .simple import SimpleCreditCurveCalibrator, calibrate_credit_curve

__all__ = [
    # Calibrators
    "CreditCurveCalibrator",
    "SimpleCreditCurveCalibrator",
    "calibrate_credit_curve",
    # Configuration
    "CalibrationConfig",
    # Components
    "NodeObjective",
    "CalibrationResult",
    "NodeResult",
    # Errors
    "InstrumentOrderError",
    "CalibrationTimeout",
]
