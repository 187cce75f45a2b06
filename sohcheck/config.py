"""
SoH Check Configuration Management
Environment driven settings for the API, CLI and calculator
"""
import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""
    
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")
    
    # Application
    app_name: str = "SoH Check"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    
    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    
    # Calculator
    low_soc_delta_threshold: float = Field(default=20.0, gt=0, le=100)
    enable_calculation_tracking: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging, defaulting to the configured level"""
    level = level or get_settings().log_level
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
