"""
Application configuration
"""
from pydantic_settings import BaseSettings

from otlp_profiles_dict.policy.profile import ResolutionMode  # type: ignore


class Settings(BaseSettings):
    """Application settings"""

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_TITLE: str = "OTLP Profiles Dictionary API"
    API_VERSION: str = "0.1.0"

    # Conversion defaults (LOOSE | EXACT); per-request query params override
    MAPPING_RESOLUTION: ResolutionMode = ResolutionMode.LOOSE
    LOCATION_RESOLUTION: ResolutionMode = ResolutionMode.LOOSE

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
