"""Open-Meteo adapter: weather and air quality from Open-Meteo.

Open-Meteo is free, keyless and serves both forecasts and recent
history through the same endpoints when queried with an explicit
``start_date`` / ``end_date`` window:

- Forecast API (``/v1/forecast``): daily weather variables.
- Air Quality API (``/v1/air-quality``): hourly pollutant series, which
  this adapter aggregates to daily values.

All requests use ``timezone=auto`` so a "day" is the local calendar day
at the queried point.
"""

from __future__ import annotations

import calendar
import datetime as dt
import logging
from statistics import fmean
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from climate_eye.core.constants import OPEN_METEO
from climate_eye.models.records import (
    AirQualityRecord,
    DailyWeather,
    MonthlySummary,
    MonthlyWeather,
    WeatherRecord,
)
from climate_eye.providers.base import EnvironmentalDataProvider, FetchError

if TYPE_CHECKING:
    from climate_eye.core.config import DashboardConfig

logger = logging.getLogger("climate_eye.providers.open_meteo")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DAILY_WEATHER_VARIABLES: tuple[str, ...] = (
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "wind_speed_10m_max",
    "relative_humidity_2m_mean",
    "weather_code",
)

HOURLY_AIR_VARIABLES: tuple[str, ...] = (
    "us_aqi",
    "pm2_5",
    "pm10",
    "ozone",
    "nitrogen_dioxide",
    "carbon_monoxide",
)

# Daily precipitation at or above this counts as a rainy day
RAINY_DAY_THRESHOLD_MM = 1.0

# WMO weather interpretation codes → calendar icon
_CONDITION_BY_CODE: dict[int, str] = {
    **dict.fromkeys((0, 1), "sun"),
    **dict.fromkeys((2, 3), "partly-cloudy"),
    **dict.fromkeys((45, 48), "cloudy"),
    **dict.fromkeys((51, 53, 55, 56, 57, 61, 63, 65, 66, 67, 80, 81, 82), "rain"),
    **dict.fromkeys((71, 73, 75, 77, 85, 86), "snow"),
    **dict.fromkeys((95, 96, 99), "rain"),
}


class OpenMeteoProvider(EnvironmentalDataProvider):
    """Environmental data adapter for the Open-Meteo APIs.

    Args:
        config: Dashboard configuration (endpoints and timeout).
        client: Optional shared ``httpx.AsyncClient``.  When omitted the
            adapter creates and owns one, closed by ``aclose()``.
    """

    name = OPEN_METEO

    def __init__(
        self,
        config: DashboardConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout_s)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # EnvironmentalDataProvider interface
    # ------------------------------------------------------------------

    async def fetch_weather(
        self, latitude: float, longitude: float, day: dt.date
    ) -> WeatherRecord:
        rows = await self._fetch_daily_weather(latitude, longitude, day, day)
        if day not in rows:
            msg = f"No weather data for {day.isoformat()} at ({latitude:.4f}, {longitude:.4f})"
            raise FetchError(self.name, msg, retryable=False)
        return self._build(WeatherRecord, day, rows[day])

    async def fetch_air_quality(
        self, latitude: float, longitude: float, day: dt.date
    ) -> AirQualityRecord:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "hourly": ",".join(HOURLY_AIR_VARIABLES),
            "start_date": day.isoformat(),
            "end_date": day.isoformat(),
            "timezone": "auto",
        }
        payload = await self._get(self._config.air_quality_api_url, params)
        hourly = payload.get("hourly")
        if not isinstance(hourly, dict) or not hourly.get("time"):
            msg = f"No air-quality data for {day.isoformat()} at ({latitude:.4f}, {longitude:.4f})"
            raise FetchError(self.name, msg, retryable=False)

        values: dict[str, Any] = {}
        for variable in HOURLY_AIR_VARIABLES:
            series = [v for v in hourly.get(variable) or [] if v is not None]
            if not series:
                values[variable] = None
            elif variable == "us_aqi":
                values[variable] = int(max(series))
            else:
                values[variable] = fmean(series)
        return self._build(AirQualityRecord, day, values)

    async def fetch_monthly_weather(
        self, latitude: float, longitude: float, year: int, month: int
    ) -> MonthlyWeather:
        last_day = calendar.monthrange(year, month)[1]
        first = dt.date(year, month, 1)
        last = dt.date(year, month, last_day)
        rows = await self._fetch_daily_weather(latitude, longitude, first, last)

        records = [
            self._build(
                DailyWeather,
                day,
                {**values, "condition": weather_condition(values.get("weather_code"))},
            )
            for day, values in sorted(rows.items())
        ]
        logger.info(
            "Monthly weather fetched | month=%04d-%02d | days=%d | point=(%.4f, %.4f)",
            year,
            month,
            len(records),
            latitude,
            longitude,
        )
        return MonthlyWeather(
            year=year,
            month=month,
            daily_records=records,
            summary=summarise_month(records),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_daily_weather(
        self, latitude: float, longitude: float, start: dt.date, end: dt.date
    ) -> dict[dt.date, dict[str, Any]]:
        """Fetch daily weather for an inclusive window, keyed by date."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": ",".join(DAILY_WEATHER_VARIABLES),
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "timezone": "auto",
        }
        payload = await self._get(self._config.weather_api_url, params)
        daily = payload.get("daily")
        if not isinstance(daily, dict):
            msg = "Weather response has no 'daily' block"
            raise FetchError(self.name, msg, retryable=False)
        try:
            return _daily_rows(daily)
        except ValueError as exc:
            msg = f"Weather response has malformed dates: {exc}"
            raise FetchError(self.name, msg, retryable=False) from exc

    async def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET *url* and return the decoded JSON object.

        Raises:
            FetchError: On HTTP errors, non-2xx status, or a non-JSON body.
        """
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            reason = _error_reason(exc.response)
            msg = f"HTTP {exc.response.status_code} from {url}: {reason}"
            retryable = exc.response.status_code >= 500 or exc.response.status_code == 429
            raise FetchError(self.name, msg, retryable=retryable) from exc
        except httpx.HTTPError as exc:
            msg = f"Request to {url} failed: {exc}"
            raise FetchError(self.name, msg) from exc
        except httpx.InvalidURL as exc:
            msg = f"Invalid endpoint URL {url!r}: {exc}"
            raise FetchError(self.name, msg, retryable=False) from exc
        except ValueError as exc:
            msg = f"Response from {url} is not valid JSON"
            raise FetchError(self.name, msg, retryable=False) from exc

        if not isinstance(payload, dict):
            msg = f"Response from {url} is not a JSON object"
            raise FetchError(self.name, msg, retryable=False)
        return payload

    def _build(self, model: type[Any], day: dt.date, values: dict[str, Any]) -> Any:
        """Validate *values* into *model*, mapping Open-Meteo names to fields."""
        try:
            return model(date=day, **_rename(values))
        except PydanticValidationError as exc:
            msg = f"Unexpected {model.__name__} payload for {day.isoformat()}: {exc}"
            raise FetchError(self.name, msg, retryable=False) from exc


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

_FIELD_NAMES: dict[str, str] = {
    "temperature_2m_max": "temperature_max_c",
    "temperature_2m_min": "temperature_min_c",
    "precipitation_sum": "precipitation_mm",
    "wind_speed_10m_max": "wind_speed_max_kmh",
    "relative_humidity_2m_mean": "relative_humidity_pct",
}


def _rename(values: dict[str, Any]) -> dict[str, Any]:
    return {_FIELD_NAMES.get(k, k): v for k, v in values.items()}


def _daily_rows(daily: dict[str, Any]) -> dict[dt.date, dict[str, Any]]:
    """Pivot Open-Meteo's column arrays into one dict per day."""
    times = daily.get("time") or []
    rows: dict[dt.date, dict[str, Any]] = {}
    for idx, raw_day in enumerate(times):
        day = dt.date.fromisoformat(str(raw_day))
        row: dict[str, Any] = {}
        for variable in DAILY_WEATHER_VARIABLES:
            column = daily.get(variable) or []
            row[variable] = column[idx] if idx < len(column) else None
        rows[day] = row
    return rows


def _error_reason(response: httpx.Response) -> str:
    """Extract Open-Meteo's ``{"error": true, "reason": ...}`` message."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "error"
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    return response.reason_phrase or "error"


def weather_condition(code: int | None) -> str:
    """Map a WMO weather code to a calendar icon name (``"cloudy"`` if unknown)."""
    if code is None:
        return "cloudy"
    return _CONDITION_BY_CODE.get(int(code), "cloudy")


def summarise_month(records: list[DailyWeather]) -> MonthlySummary:
    """Aggregate daily records into a monthly summary."""
    highs = [r.temperature_max_c for r in records if r.temperature_max_c is not None]
    lows = [r.temperature_min_c for r in records if r.temperature_min_c is not None]
    rain = [r.precipitation_mm for r in records if r.precipitation_mm is not None]
    return MonthlySummary(
        mean_temperature_max_c=fmean(highs) if highs else None,
        mean_temperature_min_c=fmean(lows) if lows else None,
        total_precipitation_mm=sum(rain),
        rainy_days=sum(1 for mm in rain if mm >= RAINY_DAY_THRESHOLD_MM),
    )
