"""Data models.

Defines the data structures shared across the package:
- Polygon / Coordinate: canonical geometry and the query point
- DrawnGeometry / ImportedGeometry: the active area source
- DateRange / ViewCursor: temporal selection state
- WeatherRecord / AirQualityRecord / FetchResult: provider outcomes
- AnalysisHandoff: page-navigation transfer state
"""

from climate_eye.models.dates import DateRange, ViewCursor
from climate_eye.models.geometry import (
    Coordinate,
    DrawnGeometry,
    GeometrySource,
    ImportedGeometry,
    Polygon,
)
from climate_eye.models.handoff import AnalysisHandoff, HandoffError
from climate_eye.models.records import (
    AirQualityRecord,
    DailyWeather,
    FetchResult,
    MonthlySummary,
    MonthlyWeather,
    WeatherRecord,
)

__all__ = [
    "AirQualityRecord",
    "AnalysisHandoff",
    "Coordinate",
    "DailyWeather",
    "DateRange",
    "DrawnGeometry",
    "FetchResult",
    "GeometrySource",
    "HandoffError",
    "ImportedGeometry",
    "MonthlySummary",
    "MonthlyWeather",
    "Polygon",
    "ViewCursor",
    "WeatherRecord",
]
