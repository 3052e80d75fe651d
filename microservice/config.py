"""
Application configuration managed via environment variables.
Uses pydantic-settings for type-safe configuration with validation.

The settings are loaded once by the process entrypoint and handed to the
application factory explicitly; nothing in the service reads them from a
module-level singleton.
"""

from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "test"]
LogLevel = Literal["fatal", "error", "warn", "info", "debug", "trace"]


class ConfigurationError(RuntimeError):
    """Raised when the environment does not describe a valid configuration."""

    def __init__(self, errors: list[tuple[str, str]]):
        self.errors = errors
        details = "; ".join(f"{name}: {reason}" for name, reason in errors)
        super().__init__(f"Invalid configuration: {details}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    node_env: Environment = "development"
    port: int = Field(default=3000, gt=0, le=65535)
    host: str = "0.0.0.0"
    database_url: str | None = None
    redis_url: str | None = None
    jwt_secret: str = Field(..., min_length=1, repr=False)
    jwt_expires_in: str = "7d"
    rate_limit_max: int = 100
    rate_limit_window: int = 900_000  # milliseconds
    log_level: LogLevel = "info"
    enable_metrics: bool = True
    metrics_path: str = "/metrics"
    bcrypt_rounds: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @property
    def is_development(self) -> bool:
        return self.node_env == "development"

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.rate_limit_window / 1000


def load_settings(env_file: str | None = ".env") -> Settings:
    """
    Build the validated settings from the process environment.

    Values from ``env_file`` only fill variables that are not already set
    in the environment. Pass ``env_file=None`` to ignore dotenv files.

    Raises:
        ConfigurationError: If any variable is missing, empty where a value
            is required, or cannot be coerced to its declared type.
    """
    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        errors = [
            (".".join(str(part) for part in error["loc"]).upper(), error["msg"])
            for error in exc.errors()
        ]
        raise ConfigurationError(errors) from exc
