"""
State of Health (SoH) Calculator
Core battery health analysis engine for SoH Check
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

from .errors import (
    LowSocDeltaWarning,
    MeasurementValidationError,
    ValidationErrorKind,
)

logger = logging.getLogger(__name__)


class StatusTier(str, Enum):
    """Battery health status tier"""
    EXCELLENT = "excellent"  # >= 95%
    GOOD = "good"            # 85-94.9%
    FAIR = "fair"            # 75-84.9%
    POOR = "poor"            # < 75%

    @property
    def label(self) -> str:
        return TIER_LABELS[self]

    @property
    def css_class(self) -> str:
        return f"status-{self.value}"


TIER_LABELS = {
    StatusTier.EXCELLENT: "Excellent",
    StatusTier.GOOD: "Good",
    StatusTier.FAIR: "Fair (check recommended)",
    StatusTier.POOR: "Inspection recommended",
}


# Raw field name -> MeasurementInput attribute, in validation order
FIELDS = (
    ("delivery_capacity", "delivery_capacity_kwh"),
    ("trip_distance", "trip_distance_km"),
    ("avg_consumption", "avg_consumption_kwh_per_100km"),
    ("soc_start", "soc_start"),
    ("soc_end", "soc_end"),
)


def round_half_up(value: float) -> float:
    """Round to one decimal place, halves away from zero for positive values"""
    return math.floor(value * 10 + 0.5) / 10


@dataclass(frozen=True)
class MeasurementInput:
    """One validated consumption trip measurement"""
    delivery_capacity_kwh: float          # Rated capacity at delivery
    trip_distance_km: float
    avg_consumption_kwh_per_100km: float
    soc_start: float                      # 0-100
    soc_end: float                        # 0-100, below soc_start

    @property
    def soc_delta(self) -> float:
        return self.soc_start - self.soc_end


@dataclass(frozen=True)
class SoHResult:
    """Result of a single SoH calculation, rounded for display"""
    current_capacity_kwh: float
    soh_percent: float
    status_tier: StatusTier
    soc_delta: float
    consumed_energy_kwh: float

    @property
    def status_label(self) -> str:
        return self.status_tier.label

    @property
    def status_class(self) -> str:
        return self.status_tier.css_class

    @property
    def display_capacity(self) -> str:
        return f"{self.current_capacity_kwh:.1f} kWh"

    @property
    def display_soh(self) -> str:
        return f"{self.soh_percent:.1f}%"


class SoHCalculator:
    """
    Battery State of Health Calculator

    Estimates usable capacity from a single trip:
    1. Energy consumed = distance x consumption / 100
    2. Current capacity = consumed energy / SoC window x 100
    3. SoH = current capacity / delivery capacity x 100

    The calculator holds no state between calls; one instance can serve
    any number of requests.
    """

    # Minimum SoC window (percentage points) for a reliable estimate
    LOW_SOC_DELTA_THRESHOLD = 20.0

    # Status ladder, evaluated top-down
    TIER_THRESHOLDS: List[Tuple[float, StatusTier]] = [
        (95, StatusTier.EXCELLENT),
        (85, StatusTier.GOOD),
        (75, StatusTier.FAIR),
    ]

    def __init__(self, low_soc_delta_threshold: Optional[float] = None):
        """
        Initialize calculator.

        Args:
            low_soc_delta_threshold: SoC window below which the
                LowSocDeltaWarning is raised (default 20 points)
        """
        if low_soc_delta_threshold is None:
            low_soc_delta_threshold = self.LOW_SOC_DELTA_THRESHOLD
        self.low_soc_delta_threshold = low_soc_delta_threshold

    def validate(
        self,
        raw: Mapping[str, Any],
        confirmed_low_soc_delta: bool = False
    ) -> MeasurementInput:
        """
        Parse and validate the five raw measurement fields.

        Args:
            raw: Mapping of field name to number, numeric string or None
            confirmed_low_soc_delta: Skip the low SoC delta advisory

        Returns:
            Validated MeasurementInput

        Raises:
            MeasurementValidationError: on the first failed check
            LowSocDeltaWarning: if the SoC window is below the threshold
                and the caller has not confirmed it
        """
        values = {}
        for raw_name, attr in FIELDS:
            values[attr] = self._parse_number(raw_name, raw.get(raw_name))

        measurement = MeasurementInput(**values)

        if measurement.delivery_capacity_kwh <= 0:
            raise MeasurementValidationError(
                ValidationErrorKind.NON_POSITIVE_CAPACITY,
                field="delivery_capacity",
                value=measurement.delivery_capacity_kwh,
            )

        if measurement.trip_distance_km <= 0:
            raise MeasurementValidationError(
                ValidationErrorKind.NON_POSITIVE_DISTANCE,
                field="trip_distance",
                value=measurement.trip_distance_km,
            )

        if measurement.avg_consumption_kwh_per_100km <= 0:
            raise MeasurementValidationError(
                ValidationErrorKind.NON_POSITIVE_CONSUMPTION,
                field="avg_consumption",
                value=measurement.avg_consumption_kwh_per_100km,
            )

        for raw_name in ("soc_start", "soc_end"):
            soc = getattr(measurement, raw_name)
            if soc < 0 or soc > 100:
                raise MeasurementValidationError(
                    ValidationErrorKind.SOC_OUT_OF_RANGE,
                    field=raw_name,
                    value=soc,
                )

        if measurement.soc_start <= measurement.soc_end:
            raise MeasurementValidationError(
                ValidationErrorKind.SOC_ORDER_INVALID,
                field="soc_start",
                value=measurement.soc_start,
            )

        self._derive(measurement)

        if not confirmed_low_soc_delta and measurement.soc_delta < self.low_soc_delta_threshold:
            raise LowSocDeltaWarning(
                soc_delta=round_half_up(measurement.soc_delta),
                threshold=self.low_soc_delta_threshold,
                measurement=measurement,
            )

        return measurement

    def compute(self, measurement: MeasurementInput) -> SoHResult:
        """
        Calculate current capacity and SoH for a validated measurement.

        Full precision is kept until the result is built; classification
        uses the unrounded SoH.
        """
        soc_delta = measurement.soc_delta
        consumed_energy, current_capacity, soh = self._derive(measurement)

        logger.debug(
            f"soc_delta={soc_delta} consumed_energy={consumed_energy} "
            f"current_capacity={current_capacity} soh={soh}"
        )

        return SoHResult(
            current_capacity_kwh=round_half_up(current_capacity),
            soh_percent=round_half_up(soh),
            status_tier=self.classify(soh),
            soc_delta=round_half_up(soc_delta),
            consumed_energy_kwh=round_half_up(consumed_energy),
        )

    def classify(self, soh: float) -> StatusTier:
        """Classify SoH percentage into a status tier"""
        for threshold, tier in self.TIER_THRESHOLDS:
            if soh >= threshold:
                return tier
        return StatusTier.POOR

    @classmethod
    def tier_ladder(cls) -> List[Tuple[Optional[float], StatusTier]]:
        """Status ladder top-down, POOR has no lower bound"""
        return list(cls.TIER_THRESHOLDS) + [(None, StatusTier.POOR)]

    def _derive(self, measurement: MeasurementInput) -> Tuple[float, float, float]:
        """Consumed energy, current capacity and SoH at full precision"""
        consumed_energy = (
            measurement.trip_distance_km * measurement.avg_consumption_kwh_per_100km / 100
        )
        current_capacity = consumed_energy / measurement.soc_delta * 100
        soh = current_capacity / measurement.delivery_capacity_kwh * 100

        # Extreme magnitudes overflow to inf or underflow to 0
        for value in (consumed_energy, current_capacity, soh):
            if not (value > 0 and math.isfinite(value * 10)):
                raise MeasurementValidationError(
                    ValidationErrorKind.RESULT_OUT_OF_RANGE, value=value
                )

        return consumed_energy, current_capacity, soh

    def _parse_number(self, field: str, value: Any) -> float:
        """Parse one raw field, rejecting blanks and non-numbers"""
        if value is None or isinstance(value, bool):
            raise MeasurementValidationError(
                ValidationErrorKind.MISSING_OR_NON_NUMERIC, field=field, value=value
            )

        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise MeasurementValidationError(
                    ValidationErrorKind.MISSING_OR_NON_NUMERIC, field=field
                )

        try:
            number = float(value)
        except (TypeError, ValueError):
            raise MeasurementValidationError(
                ValidationErrorKind.MISSING_OR_NON_NUMERIC, field=field, value=value
            )

        if not math.isfinite(number):
            raise MeasurementValidationError(
                ValidationErrorKind.MISSING_OR_NON_NUMERIC, field=field, value=value
            )

        return number
