# src/inspection_map/config/settings.py
from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Literal, Optional

# .env is at repo root
# This file: <repo>/src/inspection_map/config/settings.py (4 levels deep)
_ENV_FILE = Path(__file__).parent.parent.parent.parent / ".env"


class ChoroplethSettings(BaseSettings):
    # Color scale
    PALETTE: Literal["Reds", "Oranges", "Blues", "Greens", "Purples"] = "Reds"
    DEFAULT_METRIC: Literal["inspections", "violations"] = "inspections"

    # Which scored inspection represents a business in the hover listing.
    # "earliest" keeps the historical behavior (first entry after an ascending
    # date sort); "latest" picks the most recent scored entry instead.
    INSPECTION_SELECTION: Literal["earliest", "latest"] = "earliest"

    # Map Generation Settings
    MAP_CENTER_LAT: Optional[float] = Field(
        default=None, description="Map center latitude (bounds center if unset)"
    )
    MAP_CENTER_LON: Optional[float] = Field(
        default=None, description="Map center longitude (bounds center if unset)"
    )
    MAP_ZOOM: int = Field(default=13, description="Initial Leaflet zoom level")
    TILE_URL: str = Field(
        default="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        description="Leaflet tile layer URL template",
    )
    TILE_ATTRIBUTION: str = Field(
        default='&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors',
        description="Attribution shown for the tile layer",
    )

    # Boundary styling
    BOUNDARY_WEIGHT: int = Field(default=3, description="Boundary stroke width in pixels")
    FILL_OPACITY: float = Field(default=0.6, description="Boundary fill opacity")
    MISSING_COLOR: str = Field(
        default="#cccccc", description="Fill for neighborhoods without an aggregate"
    )

    # Output
    OUTPUT_DIR: Optional[str] = Field(
        default=None, description="Directory for generated HTML maps"
    )
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = _ENV_FILE
        extra = "ignore"  # Ignore extra environment variables


settings = ChoroplethSettings()


def get_settings() -> ChoroplethSettings:
    """Get the settings instance."""
    return settings
