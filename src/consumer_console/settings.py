"""Configuration settings for the consumer console."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Consumer console settings."""

    # Backend REST API
    API_BASE_URL: str = Field(default="http://localhost:1981")

    # HTTP client
    HTTP_TIMEOUT: float = Field(default=30.0, gt=0)
    HTTP_CONNECT_TIMEOUT: float = Field(default=5.0, gt=0)
    # 1 attempt means failed calls are never retried automatically
    HTTP_MAX_RETRIES: int = Field(default=1, ge=1)
    CIRCUIT_BREAKER_FAIL_MAX: int = Field(default=5, ge=1)
    CIRCUIT_BREAKER_RESET_TIMEOUT: float = Field(default=60.0, gt=0)

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON_FORMAT: bool = Field(default=True)

    # Display preferences
    PREFERENCES_PATH: Path = Field(
        default=Path.home() / ".consumer_console" / "preferences.json"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create settings instance
settings = Settings()
