"""
DirWatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class WatcherSettings(BaseSettings):
    """Directory watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    min_interval_ms: int = Field(
        default=100,
        ge=0,
        le=60_000,
        description="Minimum gap since the last scheduled notification to open a new window",
    )
    trailing_delay_ms: int = Field(
        default=100,
        ge=0,
        le=60_000,
        description="Quiet delay between a triggering change and its notification",
    )
    channel_capacity: int = Field(default=1, ge=1, le=1024)
    recursive: bool = Field(default=True)
    use_polling: bool = Field(default=False, description="Use the polling observer")
    health_check_interval_ms: int = Field(default=1000, ge=10, le=60_000)

    @property
    def min_interval(self) -> float:
        """Minimum window interval in seconds."""
        return self.min_interval_ms / 1000.0

    @property
    def trailing_delay(self) -> float:
        """Trailing quiet delay in seconds."""
        return self.trailing_delay_ms / 1000.0

    @property
    def health_check_interval(self) -> float:
        """Observer health check interval in seconds."""
        return self.health_check_interval_ms / 1000.0


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="json")  # "json" or "console"

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: str) -> str:
        """Normalize and check the renderer name."""
        v = str(v).strip().lower()
        if v not in ("json", "console"):
            raise ValueError(f"unknown log format: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="DirWatch")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
