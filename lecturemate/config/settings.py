"""Engine settings, read from ``LECTUREMATE_*`` environment variables or ``.env``."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings of the learning engine and its reference backend."""

    model_config = SettingsConfigDict(
        env_prefix="LECTUREMATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity
    app_name: str = Field(default="lecturemate", description="Name used in logs and log files")
    app_version: str = Field(default="0.1.0", description="Reported by /health")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="FastAPI debug mode for the sandbox")

    # Learning backend
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the learning REST backend",
    )
    api_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout for each backend request"
    )
    api_auth_token: str | None = Field(
        default=None, description="Bearer token forwarded to the backend"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum level for console and main log file"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Console renderer"
    )
    log_include_caller_info: bool = Field(
        default=False, description="Add file, function and line to each event"
    )
    log_to_file: bool = Field(default=False, description="Also write JSON log files")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=5 * 1024 * 1024, description="Rotation size of each log file"
    )
    log_file_backup_count: int = Field(default=3, description="Rotated files kept")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once per process."""
    return Settings()
