"""Shared constants: single source of truth.

Centralises provider names, upload extensions and date defaults that
would otherwise be duplicated across the geometry, provider and
navigation layers.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Data providers
# ---------------------------------------------------------------------------

OPEN_METEO = "open_meteo"
"""Default environmental data provider (Open-Meteo forecast + air quality)."""

DEFAULT_WEATHER_API_URL: str = "https://api.open-meteo.com/v1/forecast"
DEFAULT_AIR_QUALITY_API_URL: str = "https://air-quality-api.open-meteo.com/v1/air-quality"

# ---------------------------------------------------------------------------
# Geometry import
# ---------------------------------------------------------------------------

SUPPORTED_UPLOAD_EXTENSIONS: tuple[str, ...] = (".kml", ".kmz")
"""File extensions accepted for area import (checked case-insensitively)."""

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

DEFAULT_RANGE_DAYS: int = 7
"""Length of the initial date range, ending today."""

# ---------------------------------------------------------------------------
# User-facing messages
# ---------------------------------------------------------------------------

NO_AREA_MESSAGE: str = "Please draw an area or upload a KML file first"
UNPARSEABLE_AREA_MESSAGE: str = (
    "Could not read an area from the uploaded file; draw an area or upload another KML file"
)
