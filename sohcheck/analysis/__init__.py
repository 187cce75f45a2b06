"""
SoH Check Analysis Module
Measurement validation, SoH calculation and status classification
"""
from .errors import (
    LowSocDeltaWarning,
    MeasurementValidationError,
    SoHCheckError,
    ValidationErrorKind,
)
from .soh_calculator import MeasurementInput, SoHCalculator, SoHResult, StatusTier

__all__ = [
    "SoHCalculator",
    "MeasurementInput",
    "SoHResult",
    "StatusTier",
    "SoHCheckError",
    "MeasurementValidationError",
    "ValidationErrorKind",
    "LowSocDeltaWarning",
]
