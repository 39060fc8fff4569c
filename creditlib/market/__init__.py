"""Market data collaborators for calibration and pricing."""

from .recovery import ConstantRecoveryRates, LossProvider, RecoveryRateCurve

__all__ = [
    "LossProvider",
    "ConstantRecoveryRates",
    "RecoveryRateCurve",
]
