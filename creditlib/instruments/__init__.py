"""Calibration instruments."""

from .cds import CdsInstrument

__all__ = ["CdsInstrument"]
