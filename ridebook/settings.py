from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DirectionsSettings(BaseSettings):
    """Routing provider access (Google Routes API)."""

    api_key: SecretStr | None = None
    base_url: str = "https://routes.googleapis.com"
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=60.0)
    max_retries: int = Field(default=2, ge=0, le=10)
    retry_base_delay: float = Field(default=0.5, ge=0.0, le=5.0)

    model_config = SettingsConfigDict(env_prefix="DIRECTIONS_")

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Directions base URL must start with http:// or https://")
        return v.rstrip("/")


class HomeBaseSettings(BaseSettings):
    """Home-base address used for airport and short-trip pricing.

    Kept out of source control: supplied only through the environment or a
    secrets manager.
    """

    address: SecretStr | None = None

    model_config = SettingsConfigDict(env_prefix="HOME_BASE_")


class SchedulingSettings(BaseSettings):
    timezone: str = "America/New_York"

    model_config = SettingsConfigDict(env_prefix="SCHEDULING_")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class APISettings(BaseSettings):
    key: str = ""

    model_config = SettingsConfigDict(env_prefix="API_")


class CORSSettings(BaseSettings):
    origins: str = "http://localhost:3000,http://localhost:9002"

    model_config = SettingsConfigDict(env_prefix="CORS_")


class LogSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class DatabaseSettings(BaseSettings):
    path: str = "./db/ridebook.db"

    model_config = SettingsConfigDict(env_prefix="DB_")


class Settings(BaseSettings):
    directions: DirectionsSettings = Field(default_factory=DirectionsSettings)
    home_base: HomeBaseSettings = Field(default_factory=HomeBaseSettings)
    scheduling: SchedulingSettings = Field(default_factory=SchedulingSettings)
    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
