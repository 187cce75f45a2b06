"""
Pytest configuration
"""
import pytest

from sohcheck.config import get_settings
from sohcheck.services import reset_soh_check_service


@pytest.fixture(autouse=True)
def env_setup(monkeypatch):
    """Set up test environment variables"""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.delenv("LOW_SOC_DELTA_THRESHOLD", raising=False)
    get_settings.cache_clear()
    reset_soh_check_service()
    yield
    get_settings.cache_clear()
    reset_soh_check_service()


@pytest.fixture
def raw_measurement() -> dict:
    """Trip with a 70 point SoC window on a 75 kWh pack"""
    return {
        "delivery_capacity": 75,
        "trip_distance": 150,
        "avg_consumption": 18,
        "soc_start": 90,
        "soc_end": 20,
    }
