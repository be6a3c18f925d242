"""
Application configuration settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Settings
    api_v1_prefix: str = "/api/v1"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Decimal places kept when reporting shape parameters
    params_decimals: int = 6

    class Config:
        env_prefix = "KEYPOINT_API_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
