from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    currency_precision: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Decimal places fares are rounded to (round-half-up)",
    )
    ledger_enabled: bool = Field(default=True)
    register_default_classes: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="FARE_")


class RegistrySettings(BaseSettings):
    """Optimistic snapshot swap configuration for the ride class registry."""

    cas_max_attempts: int = Field(default=5, ge=1, le=20)
    cas_base_delay: float = Field(
        default=0.0,
        ge=0.0,
        le=0.1,
        description="Seconds to back off after a lost swap, doubled per attempt",
    )

    model_config = SettingsConfigDict(env_prefix="REGISTRY_")


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    engine: EngineSettings = Field(default_factory=EngineSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
