"""Process-wide settings loaded from the environment.

Uses pydantic-settings for type-safe environment variable handling.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from ganttline.engine.units import CONTAINER_WIDTH, DEFAULT_DATE_FORMAT
from ganttline.engine.view_modes import ViewMode


class GanttSettings(BaseSettings):
    """Chart defaults and runtime settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GANTT_",
        extra="ignore",
    )

    # Chart defaults
    default_view_mode: ViewMode = ViewMode.DAY
    date_format: str = DEFAULT_DATE_FORMAT
    container_width: float = CONTAINER_WIDTH

    # Text measurement
    font_dir: Optional[Path] = None

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


@lru_cache()
def get_settings() -> GanttSettings:
    """Get cached settings instance."""
    return GanttSettings()
