"""
SoH Check Service
Runs validation, confirmation and calculation for one measurement
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ..analysis import (
    LowSocDeltaWarning,
    MeasurementValidationError,
    SoHCalculator,
    SoHResult,
)
from ..config import get_settings

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[LowSocDeltaWarning], bool]


class OutcomeStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class CheckOutcome:
    """Outcome of a SoH check request"""
    status: OutcomeStatus
    result: Optional[SoHResult] = None
    warning: Optional[LowSocDeltaWarning] = None  # Set when the low delta prompt was shown

    @property
    def completed(self) -> bool:
        return self.status == OutcomeStatus.COMPLETED


class SoHCheckService:
    """
    Pipeline around SoHCalculator

    Validation errors propagate to the caller. A low SoC delta is put to
    the confirm callback; without a callback, or on a negative answer,
    the request is cancelled rather than failed.
    """

    def __init__(
        self,
        calculator: Optional[SoHCalculator] = None,
        track_calculations: Optional[bool] = None
    ):
        settings = get_settings()
        self.calculator = calculator or SoHCalculator(
            low_soc_delta_threshold=settings.low_soc_delta_threshold
        )
        if track_calculations is None:
            track_calculations = settings.enable_calculation_tracking
        self.track_calculations = track_calculations

    def run(
        self,
        raw: Mapping[str, Any],
        confirm: Optional[ConfirmCallback] = None
    ) -> CheckOutcome:
        """
        Check battery health for one raw measurement.

        Args:
            raw: Five raw fields as numbers or strings
            confirm: Asked whether to continue on a low SoC delta

        Returns:
            CheckOutcome, completed with a result or cancelled

        Raises:
            MeasurementValidationError: if any field is invalid
        """
        warning = None
        try:
            measurement = self.calculator.validate(raw)
        except MeasurementValidationError as e:
            logger.warning(f"Measurement rejected: {e}")
            raise
        except LowSocDeltaWarning as w:
            warning = w
            if confirm is None or not confirm(w):
                logger.info(f"Calculation cancelled at SoC delta {w.soc_delta:g}%")
                return CheckOutcome(status=OutcomeStatus.CANCELLED, warning=w)
            logger.info(f"Low SoC delta {w.soc_delta:g}% confirmed, continuing")
            measurement = w.measurement

        result = self.calculator.compute(measurement)

        if self.track_calculations:
            self._track(result)

        return CheckOutcome(status=OutcomeStatus.COMPLETED, result=result, warning=warning)

    def _track(self, result: SoHResult) -> None:
        logger.info(
            f"SoH calculated: {result.soh_percent}%, "
            f"current capacity: {result.current_capacity_kwh} kWh"
        )


# Singleton instance
_service_instance: Optional[SoHCheckService] = None


def get_soh_check_service() -> SoHCheckService:
    """
    Get the shared SoHCheckService, built from current settings.

    Returns a singleton instance for the application lifecycle.
    """
    global _service_instance

    if _service_instance is None:
        _service_instance = SoHCheckService()
        logger.info(
            "SoH check service created "
            f"(low SoC delta threshold {_service_instance.calculator.low_soc_delta_threshold:g}%)"
        )

    return _service_instance


def reset_soh_check_service() -> None:
    """Drop the shared service so the next call rebuilds it from settings."""
    global _service_instance
    _service_instance = None
