"""
Tests for measurement validation
"""
import pytest

from sohcheck.analysis import (
    LowSocDeltaWarning,
    MeasurementValidationError,
    SoHCalculator,
    ValidationErrorKind,
)


class TestMeasurementValidation:
    """Test parsing and domain checks of raw fields"""
    
    @pytest.fixture
    def calculator(self):
        return SoHCalculator()
    
    def _assert_rejected(self, calculator, raw, kind, field=None):
        with pytest.raises(MeasurementValidationError) as exc_info:
            calculator.validate(raw)
        assert exc_info.value.kind == kind
        if field:
            assert exc_info.value.field == field
        return exc_info.value
    
    def test_valid_numbers(self, calculator, raw_measurement):
        measurement = calculator.validate(raw_measurement)
        
        assert measurement.delivery_capacity_kwh == 75.0
        assert measurement.trip_distance_km == 150.0
        assert measurement.avg_consumption_kwh_per_100km == 18.0
        assert measurement.soc_delta == 70.0
    
    def test_valid_strings(self, calculator):
        measurement = calculator.validate({
            "delivery_capacity": " 77.5 ",
            "trip_distance": "120",
            "avg_consumption": "17.2",
            "soc_start": "85",
            "soc_end": "35",
        })
        
        assert measurement.delivery_capacity_kwh == 77.5
        assert measurement.soc_end == 35.0
    
    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "12kWh", "nan", "inf", True])
    def test_missing_or_non_numeric(self, calculator, raw_measurement, value):
        raw_measurement["trip_distance"] = value
        self._assert_rejected(
            calculator, raw_measurement,
            ValidationErrorKind.MISSING_OR_NON_NUMERIC, field="trip_distance"
        )
    
    def test_absent_field(self, calculator, raw_measurement):
        del raw_measurement["soc_end"]
        self._assert_rejected(
            calculator, raw_measurement,
            ValidationErrorKind.MISSING_OR_NON_NUMERIC, field="soc_end"
        )
    
    def test_missing_checked_before_domain(self, calculator, raw_measurement):
        """A blank field wins over a non-positive one"""
        raw_measurement["delivery_capacity"] = -5
        raw_measurement["soc_end"] = ""
        self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.MISSING_OR_NON_NUMERIC
        )
    
    @pytest.mark.parametrize("value", [0, "0", -10])
    def test_non_positive_capacity(self, calculator, raw_measurement, value):
        """Zero is a number, not a missing field"""
        raw_measurement["delivery_capacity"] = value
        self._assert_rejected(
            calculator, raw_measurement,
            ValidationErrorKind.NON_POSITIVE_CAPACITY, field="delivery_capacity"
        )
    
    def test_non_positive_distance(self, calculator, raw_measurement):
        raw_measurement["trip_distance"] = 0
        self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.NON_POSITIVE_DISTANCE
        )
    
    def test_non_positive_consumption(self, calculator, raw_measurement):
        raw_measurement["avg_consumption"] = -1.5
        self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.NON_POSITIVE_CONSUMPTION
        )
    
    def test_soc_start_above_100(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 101
        self._assert_rejected(
            calculator, raw_measurement,
            ValidationErrorKind.SOC_OUT_OF_RANGE, field="soc_start"
        )
    
    def test_soc_end_negative(self, calculator, raw_measurement):
        raw_measurement["soc_end"] = -1
        self._assert_rejected(
            calculator, raw_measurement,
            ValidationErrorKind.SOC_OUT_OF_RANGE, field="soc_end"
        )
    
    def test_soc_equal(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 50
        raw_measurement["soc_end"] = 50
        self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.SOC_ORDER_INVALID
        )
    
    def test_soc_increasing(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 20
        raw_measurement["soc_end"] = 90
        self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.SOC_ORDER_INVALID
        )
    
    def test_soc_end_zero_accepted(self, calculator, raw_measurement):
        raw_measurement["soc_end"] = 0
        measurement = calculator.validate(raw_measurement)
        assert measurement.soc_end == 0.0
        assert measurement.soc_delta == 90.0
    
    def test_error_payload(self, calculator, raw_measurement):
        raw_measurement["delivery_capacity"] = 0
        error = self._assert_rejected(
            calculator, raw_measurement, ValidationErrorKind.NON_POSITIVE_CAPACITY
        )
        
        assert error.to_dict() == {
            "error": "non_positive_capacity",
            "field": "delivery_capacity",
            "message": "Delivery capacity must be greater than 0",
        }
        assert "delivery_capacity" in str(error)


class TestLowSocDeltaWarning:
    """Test the advisory for narrow SoC windows"""
    
    @pytest.fixture
    def calculator(self):
        return SoHCalculator()
    
    def test_low_delta_raises_warning(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 45
        
        with pytest.raises(LowSocDeltaWarning) as exc_info:
            calculator.validate(raw_measurement)
        
        warning = exc_info.value
        assert warning.soc_delta == 15
        assert warning.threshold == 20
        assert warning.measurement.soc_start == 60
        assert "20%" in warning.message
    
    def test_confirmed_low_delta(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 45
        
        measurement = calculator.validate(raw_measurement, confirmed_low_soc_delta=True)
        assert measurement.soc_delta == 15
    
    def test_delta_at_threshold_is_fine(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 40
        
        assert calculator.validate(raw_measurement).soc_delta == 20
    
    def test_errors_take_precedence(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 45
        raw_measurement["avg_consumption"] = 0
        
        with pytest.raises(MeasurementValidationError):
            calculator.validate(raw_measurement)
    
    def test_custom_threshold(self, raw_measurement):
        calculator = SoHCalculator(low_soc_delta_threshold=10)
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 45
        
        assert calculator.validate(raw_measurement).soc_delta == 15
    
    def test_warning_payload(self, calculator, raw_measurement):
        raw_measurement["soc_start"] = 60
        raw_measurement["soc_end"] = 45
        
        with pytest.raises(LowSocDeltaWarning) as exc_info:
            calculator.validate(raw_measurement)
        
        payload = exc_info.value.to_dict()
        assert payload["warning"] == "low_soc_delta"
        assert payload["soc_delta"] == 15


class TestResultRange:
    """Test inputs whose results overflow or underflow a float"""
    
    @pytest.fixture
    def calculator(self):
        return SoHCalculator()
    
    def test_tiny_capacity_overflows(self, calculator):
        raw = {
            "delivery_capacity": "1e-308",
            "trip_distance": 1000,
            "avg_consumption": 100,
            "soc_start": 100,
            "soc_end": 0,
        }
        
        with pytest.raises(MeasurementValidationError) as exc_info:
            calculator.validate(raw)
        assert exc_info.value.kind == ValidationErrorKind.RESULT_OUT_OF_RANGE
    
    def test_soh_underflows_to_zero(self, calculator):
        raw = {
            "delivery_capacity": "1e300",
            "trip_distance": "1e-300",
            "avg_consumption": 18,
            "soc_start": 90,
            "soc_end": 20,
        }
        
        with pytest.raises(MeasurementValidationError) as exc_info:
            calculator.validate(raw)
        assert exc_info.value.kind == ValidationErrorKind.RESULT_OUT_OF_RANGE
    
    def test_out_of_range_checked_before_low_delta(self, calculator):
        raw = {
            "delivery_capacity": "1e-308",
            "trip_distance": 1000,
            "avg_consumption": 100,
            "soc_start": 60,
            "soc_end": 50,
        }
        
        with pytest.raises(MeasurementValidationError):
            calculator.validate(raw)
