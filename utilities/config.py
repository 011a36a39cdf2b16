"""
Configuration management using environment variables.
Handles dependency, broker and logging settings with validation and defaults.
"""

from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BffConfig(BaseSettings):
    """
    Configuration class for the author and book services.
    Uses pydantic BaseSettings for environment variable management.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env
    )

    # Author service (dependency resolution)
    author_service_url: str = Field(default="http://localhost:8000")
    author_service_timeout: float = Field(default=5.0)

    # Redis notification channel
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_topic: str = Field(default="bff-notifications")
    notification_timeout: float = Field(default=2.0)

    # Which resource domains this process exposes
    serve_authors: bool = Field(default=True)
    serve_books: bool = Field(default=True)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @field_validator('author_service_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        """Paths are appended to the base address verbatim."""
        return v.rstrip('/')

    @field_validator('author_service_timeout')
    @classmethod
    def validate_author_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 0.1 or v > 60:
            raise ValueError('author_service_timeout must be between 0.1 and 60 seconds')
        return v

    @field_validator('notification_timeout')
    @classmethod
    def validate_notification_timeout(cls, v):
        """Publishing must never hold a request for long."""
        if v < 0.1 or v > 30:
            raise ValueError('notification_timeout must be between 0.1 and 30 seconds')
        return v

    @field_validator('redis_topic')
    @classmethod
    def validate_topic(cls, v):
        if not v.strip():
            raise ValueError('redis_topic must not be empty')
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_user_agent(self) -> str:
        """Get user agent string for outbound requests."""
        return "Bookshelf-BFF/1.0"

    def get_headers(self) -> dict:
        """Get default headers for HTTP requests."""
        return {
            "User-Agent": self.get_user_agent(),
            "Accept": "application/json",
        }


# Global configuration instance
config = BffConfig()
