"""Provider records and fetch results.

Weather and air-quality records are pydantic models so provider
payloads are validated at the boundary.  ``FetchResult`` is the single
outcome shown for the current ``(coordinate, date)`` pair; a new fetch
replaces it wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass
import datetime as dt

from pydantic import BaseModel, Field

from climate_eye.models.geometry import Coordinate


class WeatherRecord(BaseModel):
    """Daily weather for one point and date.

    Attributes:
        date: Calendar date the values apply to.
        temperature_max_c: Daily maximum 2 m air temperature (°C).
        temperature_min_c: Daily minimum 2 m air temperature (°C).
        precipitation_mm: Daily precipitation sum (mm).
        wind_speed_max_kmh: Daily maximum 10 m wind speed (km/h).
        relative_humidity_pct: Daily mean relative humidity (%).
        weather_code: WMO weather interpretation code.
    """

    date: dt.date
    temperature_max_c: float | None = None
    temperature_min_c: float | None = None
    precipitation_mm: float | None = None
    wind_speed_max_kmh: float | None = None
    relative_humidity_pct: float | None = None
    weather_code: int | None = None


class AirQualityRecord(BaseModel):
    """Daily air quality for one point and date.

    Values are daily means of the hourly series, except ``us_aqi`` which
    is the daily maximum (the index is defined on the worst hour).
    """

    date: dt.date
    us_aqi: int | None = None
    pm2_5: float | None = None
    pm10: float | None = None
    ozone: float | None = None
    nitrogen_dioxide: float | None = None
    carbon_monoxide: float | None = None


class DailyWeather(WeatherRecord):
    """One day of a monthly weather series."""

    condition: str = "cloudy"


class MonthlySummary(BaseModel):
    """Aggregates over a monthly weather series."""

    mean_temperature_max_c: float | None = None
    mean_temperature_min_c: float | None = None
    total_precipitation_mm: float = 0.0
    rainy_days: int = 0


class MonthlyWeather(BaseModel):
    """Daily records and summary for one calendar month."""

    year: int
    month: int
    daily_records: list[DailyWeather] = Field(default_factory=list)
    summary: MonthlySummary = Field(default_factory=MonthlySummary)


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one joined weather + air-quality request.

    Exactly one of (``weather`` and ``air_quality``) or ``error`` is set:
    a failure of either leg discards the other.
    """

    coordinate: Coordinate
    date: dt.date
    weather: WeatherRecord | None = None
    air_quality: AirQualityRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
