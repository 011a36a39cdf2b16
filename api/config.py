"""
API configuration settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """API configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", extra="ignore")

    # API Settings
    api_title: str = "Bookshelf BFF API"
    api_version: str = "1.0.0"
    api_description: str = "Author and book resources with cross-service validation"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]


config = APIConfig()
