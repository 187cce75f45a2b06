"""
API routers
"""
from .calculator import router as calculator_router
from .health import router as health_router

__all__ = ["calculator_router", "health_router"]
