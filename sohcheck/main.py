"""
SoH Check FastAPI Application
Main entry point for the battery State of Health calculator
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import calculator_router, health_router
from .config import configure_logging, get_settings
from .services import get_soh_check_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    
    # Build the shared service up front so bad settings fail at startup
    get_soh_check_service()
    
    yield
    
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()
    configure_logging(settings.log_level)
    
    app = FastAPI(
        title=settings.app_name,
        description="Battery State of Health from a single consumption trip",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(calculator_router, prefix=settings.api_prefix, tags=["SoH"])
    
    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": __version__,
            "description": "Battery State of Health calculator",
            "docs": "/docs",
            "health": "/live",
            "endpoints": {
                "validate": f"{settings.api_prefix}/soh/validate",
                "calculate": f"{settings.api_prefix}/soh/calculate",
                "tiers": f"{settings.api_prefix}/soh/tiers"
            }
        }
    
    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "sohcheck.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
