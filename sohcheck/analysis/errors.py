"""
SoH Check errors and warnings

Every rejection of a measurement is a MeasurementValidationError carrying
one ValidationErrorKind. The low SoC delta advisory is a Warning, not an
error: the caller decides whether the calculation goes ahead.
"""
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .soh_calculator import MeasurementInput


class ValidationErrorKind(str, Enum):
    """Reason a measurement was rejected"""
    MISSING_OR_NON_NUMERIC = "missing_or_non_numeric"
    NON_POSITIVE_CAPACITY = "non_positive_capacity"
    NON_POSITIVE_DISTANCE = "non_positive_distance"
    NON_POSITIVE_CONSUMPTION = "non_positive_consumption"
    SOC_OUT_OF_RANGE = "soc_out_of_range"
    SOC_ORDER_INVALID = "soc_order_invalid"
    RESULT_OUT_OF_RANGE = "result_out_of_range"


VALIDATION_MESSAGES = {
    ValidationErrorKind.MISSING_OR_NON_NUMERIC: "Please fill in all fields with numbers",
    ValidationErrorKind.NON_POSITIVE_CAPACITY: "Delivery capacity must be greater than 0",
    ValidationErrorKind.NON_POSITIVE_DISTANCE: "Trip distance must be greater than 0",
    ValidationErrorKind.NON_POSITIVE_CONSUMPTION: "Average consumption must be greater than 0",
    ValidationErrorKind.SOC_OUT_OF_RANGE: "SoC values must be between 0 and 100%",
    ValidationErrorKind.SOC_ORDER_INVALID: "SoC start must be greater than SoC end",
    ValidationErrorKind.RESULT_OUT_OF_RANGE: "Measurement values are too extreme to calculate a result",
}

LOW_SOC_DELTA_MESSAGE = (
    "The SoC difference is less than {threshold:g}%. "
    "This can lead to inaccurate results. Continue anyway?"
)


class SoHCheckError(Exception):
    """Base exception for all SoH Check errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class MeasurementValidationError(SoHCheckError):
    """A measurement field is missing, malformed or out of its domain."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        field: Optional[str] = None,
        value=None,
        message: Optional[str] = None,
    ):
        details = {"kind": kind.value}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message or VALIDATION_MESSAGES[kind], details)
        self.kind = kind
        self.field = field
        self.value = value

    def to_dict(self) -> dict:
        return {
            "error": self.kind.value,
            "field": self.field,
            "message": self.message,
        }


class LowSocDeltaWarning(Warning):
    """
    The SoC window is too narrow for a reliable capacity estimate.

    Raised after all validation passed, so the validated measurement
    travels with it for a caller that confirms and wants to continue.
    """

    def __init__(self, soc_delta: float, threshold: float, measurement: "MeasurementInput" = None):
        self.soc_delta = soc_delta
        self.threshold = threshold
        self.measurement = measurement
        self.message = LOW_SOC_DELTA_MESSAGE.format(threshold=threshold)
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "warning": "low_soc_delta",
            "soc_delta": self.soc_delta,
            "threshold": self.threshold,
            "message": self.message,
        }
