"""
Health Check API
System health and liveness endpoints
"""
from fastapi import APIRouter
from pydantic import BaseModel

from .. import __version__
from ..config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    app_name: str
    version: str
    app_env: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Check application health status.
    
    The calculator has no external dependencies, so a running
    process is a healthy one.
    """
    settings = get_settings()
    
    return HealthResponse(
        status="healthy",
        app_name=settings.app_name,
        version=__version__,
        app_env=settings.app_env
    )


@router.get("/live")
async def liveness_check():
    """
    Kubernetes liveness probe.
    Returns 200 if application is alive.
    """
    return {"alive": True}
