"""
Application settings.

Values are read from the environment (prefix ``GANTT_``) or a local ``.env``
file. Chart geometry defaults match the editor's stock layout.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the scheduling API."""

    model_config = SettingsConfigDict(
        env_prefix="GANTT_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "Gantt Scheduler"
    debug: bool = False
    log_level: str | None = None  # Falls back to DEBUG/INFO based on `debug`
    json_logs: bool = False

    # Timeline geometry (screen units)
    pixels_per_day: int = 60
    row_height: int = 36
    header_height: int = 56
    left_column_width: int = 220
    min_bar_width: int = 6

    # Connector routing
    connector_offset: int = 40
    connector_buffer: int = 10


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
