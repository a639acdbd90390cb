"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WindowSettings(BaseSettings):
    """Desktop window settings."""

    model_config = SettingsConfigDict(env_prefix="AEROBOT_WINDOW_", extra="ignore")

    width: int = Field(default=480, gt=0)
    height: int = Field(default=800, gt=0)
    fps: int = Field(default=60, gt=0)
    title: str = "Aerobot Descent"
    resizable: bool = True


class PersistenceSettings(BaseSettings):
    """High score storage settings."""

    model_config = SettingsConfigDict(env_prefix="AEROBOT_", extra="ignore")

    highscore_path: Path = Field(
        default_factory=lambda: Path.home() / ".aerobot" / "highscore.json"
    )
    # Remote sync is disabled when no URL is configured
    remote_url: Optional[str] = None
    remote_timeout: float = Field(default=5.0, gt=0.0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="AEROBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_file: Optional[Path] = None

    # Nested settings
    window: WindowSettings = Field(default_factory=WindowSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)

    @property
    def remote_enabled(self) -> bool:
        """Check if remote high score sync is configured."""
        return bool(self.persistence.remote_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
