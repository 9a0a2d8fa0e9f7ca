"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}
LOG_FORMATS = {"json", "text"}


class Settings(BaseSettings):
    """
    Configuration loaded from environment variables.

    Every value has a default so the service starts with an empty environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # Server
    # ---------------------------------------------------------------------------
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    shutdown_timeout: int = Field(default=15, validation_alias="SHUTDOWN_TIMEOUT")
    keep_alive_timeout: int = Field(default=30, validation_alias="KEEP_ALIVE_TIMEOUT")

    # ---------------------------------------------------------------------------
    # Logging
    # ---------------------------------------------------------------------------
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # ---------------------------------------------------------------------------
    # Metrics / health endpoints
    # ---------------------------------------------------------------------------
    metrics_enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")
    metrics_path: str = Field(default="/metrics", validation_alias="METRICS_PATH")
    health_path: str = Field(default="/healthz", validation_alias="HEALTH_PATH")

    # ---------------------------------------------------------------------------
    # Health thresholds
    # ---------------------------------------------------------------------------
    health_memory_limit_bytes: int = Field(default=1024 * 1024 * 1024, validation_alias="HEALTH_MEMORY_LIMIT_BYTES")
    health_max_tasks: int = Field(default=1000, validation_alias="HEALTH_MAX_TASKS")
    health_min_uptime_seconds: float = Field(default=1e-6, validation_alias="HEALTH_MIN_UPTIME_SECONDS")

    # ---------------------------------------------------------------------------
    # Security / deployment
    # ---------------------------------------------------------------------------
    trusted_proxies: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16"],
        validation_alias="TRUSTED_PROXIES",
    )
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="CORS_ALLOW_ORIGINS")

    @field_validator("host", "environment", "metrics_path", "health_path", mode="before")
    @classmethod
    def _strip_strings(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def _normalize_lower(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("trusted_proxies", "cors_allow_origins", mode="before")
    @classmethod
    def _parse_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",")]
            return [item for item in items if item]
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def problems(self) -> list[str]:
        """Return a description of every setting that would make the service misbehave."""

        found: list[str] = []
        if not 0 < self.port < 65536:
            found.append(f"port out of range: {self.port}")
        if self.log_level not in LOG_LEVELS:
            found.append(f"unknown log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            found.append(f"unknown log format: {self.log_format}")
        if self.health_memory_limit_bytes <= 0:
            found.append("health memory limit must be positive")
        if self.health_max_tasks <= 0:
            found.append("health task limit must be positive")
        if not self.health_path.startswith("/"):
            found.append(f"health path must start with '/': {self.health_path}")
        if not self.metrics_path.startswith("/"):
            found.append(f"metrics path must start with '/': {self.metrics_path}")
        return found


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
