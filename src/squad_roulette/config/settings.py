"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Only ambient knobs live here; the roulette rules themselves are fixed
constants in the modules that use them.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROULETTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Listing source
    api_url: str = "https://api.battlemetrics.com/servers"
    request_timeout: float = Field(default=15.0, gt=0.0)  # seconds per request

    # Initial filter range (slider positions)
    min_players: int = Field(default=60, ge=0, le=100)
    max_players: int = Field(default=100, ge=0, le=100)

    # Window
    window_width: int = 800
    window_height: int = 950
    fps: int = 60

    # Audio
    audio_enabled: bool = True
    sample_rate: int = 44100
    click_duration_ms: int = 20


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
