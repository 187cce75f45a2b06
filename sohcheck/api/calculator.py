"""
SoH Calculator API
Measurement validation and battery health calculation endpoints
"""
from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..analysis import (
    LowSocDeltaWarning,
    MeasurementInput,
    MeasurementValidationError,
    SoHCalculator,
)
from ..analysis.soh_calculator import round_half_up
from ..services import SoHCheckService, get_soh_check_service

router = APIRouter(prefix="/soh")

# Passed through unparsed so the calculator sees booleans and strings as sent
RawField = Any


# ============ Models ============

class MeasurementRequest(BaseModel):
    """Raw trip measurement as entered by the user"""
    delivery_capacity: RawField = Field(default=None, examples=[75.0])
    trip_distance: RawField = Field(default=None, examples=[150.0])
    avg_consumption: RawField = Field(default=None, examples=[18.0])
    soc_start: RawField = Field(default=None, examples=[90.0])
    soc_end: RawField = Field(default=None, examples=[20.0])

    def raw_fields(self) -> dict:
        return self.model_dump(
            include={"delivery_capacity", "trip_distance", "avg_consumption", "soc_start", "soc_end"}
        )


class CalculationRequest(MeasurementRequest):
    """Calculate request, optionally confirming a low SoC delta"""
    confirm_low_soc_delta: bool = Field(default=False)


class MeasurementResponse(BaseModel):
    """Validated measurement"""
    delivery_capacity_kwh: float
    trip_distance_km: float
    avg_consumption_kwh_per_100km: float
    soc_start: float
    soc_end: float
    soc_delta: float


class WarningResponse(BaseModel):
    warning: str
    soc_delta: float
    threshold: float
    message: str


class ValidationResponse(BaseModel):
    """Validation outcome"""
    valid: bool
    measurement: MeasurementResponse
    warnings: List[WarningResponse] = []


class DisplayResponse(BaseModel):
    current_capacity: str
    soh: str


class CalculationResponse(BaseModel):
    """Battery health result"""
    current_capacity_kwh: float
    soh_percent: float
    status_tier: str
    status_label: str
    status_class: str
    soc_delta: float
    consumed_energy_kwh: float
    display: DisplayResponse


class TierResponse(BaseModel):
    tier: str
    min_soh: Optional[float]
    label: str
    status_class: str


# ============ Helpers ============

def _measurement_response(measurement: MeasurementInput) -> MeasurementResponse:
    return MeasurementResponse(
        delivery_capacity_kwh=measurement.delivery_capacity_kwh,
        trip_distance_km=measurement.trip_distance_km,
        avg_consumption_kwh_per_100km=measurement.avg_consumption_kwh_per_100km,
        soc_start=measurement.soc_start,
        soc_end=measurement.soc_end,
        soc_delta=round_half_up(measurement.soc_delta),
    )


def _validation_failed(error: MeasurementValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=error.to_dict())


# ============ Endpoints ============

@router.post("/validate", response_model=ValidationResponse)
async def validate_measurement(request: MeasurementRequest):
    """
    Validate a measurement without calculating.

    A low SoC delta is reported as a warning; the measurement itself
    is still valid.
    """
    service = get_soh_check_service()
    warnings = []

    try:
        measurement = service.calculator.validate(request.raw_fields())
    except MeasurementValidationError as e:
        raise _validation_failed(e)
    except LowSocDeltaWarning as w:
        measurement = w.measurement
        warnings.append(WarningResponse(**w.to_dict()))

    return ValidationResponse(
        valid=True,
        measurement=_measurement_response(measurement),
        warnings=warnings
    )


@router.post("/calculate", response_model=CalculationResponse)
async def calculate_soh(request: CalculationRequest):
    """
    Calculate battery State of Health from one trip.

    Returns:
    - Current usable capacity (kWh)
    - SoH percentage
    - Status tier and label

    If the SoC window is below the warning threshold the request is
    answered with 409 until it is resent with confirm_low_soc_delta.
    """
    service: SoHCheckService = get_soh_check_service()

    try:
        outcome = service.run(
            request.raw_fields(),
            confirm=lambda warning: request.confirm_low_soc_delta
        )
    except MeasurementValidationError as e:
        raise _validation_failed(e)

    if not outcome.completed:
        detail = outcome.warning.to_dict()
        detail["requires_confirmation"] = True
        raise HTTPException(status_code=409, detail=detail)

    result = outcome.result
    return CalculationResponse(
        current_capacity_kwh=result.current_capacity_kwh,
        soh_percent=result.soh_percent,
        status_tier=result.status_tier.value,
        status_label=result.status_label,
        status_class=result.status_class,
        soc_delta=result.soc_delta,
        consumed_energy_kwh=result.consumed_energy_kwh,
        display=DisplayResponse(
            current_capacity=result.display_capacity,
            soh=result.display_soh
        )
    )


@router.get("/tiers", response_model=List[TierResponse])
async def list_tiers():
    """Status ladder, evaluated top-down"""
    return [
        TierResponse(
            tier=tier.value,
            min_soh=threshold,
            label=tier.label,
            status_class=tier.css_class
        )
        for threshold, tier in SoHCalculator.tier_ladder()
    ]
