"""
Services module
"""
from .soh_check import (
    CheckOutcome,
    OutcomeStatus,
    SoHCheckService,
    get_soh_check_service,
    reset_soh_check_service,
)

__all__ = [
    "SoHCheckService",
    "CheckOutcome",
    "OutcomeStatus",
    "get_soh_check_service",
    "reset_soh_check_service",
]
