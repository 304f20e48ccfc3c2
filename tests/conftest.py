"""Shared pytest fixtures for the Climate Eye test suite."""

from __future__ import annotations

import asyncio
import datetime as dt
from pathlib import Path

import pytest

from climate_eye.core.config import DashboardConfig
from climate_eye.drawing.map_host import InMemoryMapHost
from climate_eye.models.records import (
    AirQualityRecord,
    DailyWeather,
    MonthlyWeather,
    WeatherRecord,
)
from climate_eye.providers.base import EnvironmentalDataProvider, FetchError

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"

TODAY = dt.date(2024, 6, 10)


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def single_polygon_kml(data_dir: Path) -> Path:
    """Path to a one-Placemark KML with a closed 1° square at (10..11, 20..21)."""
    return data_dir / "01_single_polygon_field.kml"


@pytest.fixture()
def multi_placemark_kml(data_dir: Path) -> Path:
    """Path to a KML with two Placemarks; only the first ring is used."""
    return data_dir / "02_multi_placemark.kml"


@pytest.fixture()
def no_namespace_kml(data_dir: Path) -> Path:
    """Path to a KML without the OGC namespace declaration."""
    return data_dir / "03_no_namespace.kml"


@pytest.fixture()
def not_xml_kml(data_dir: Path) -> Path:
    """Path to a file that is not valid XML."""
    return data_dir / "04_malformed_not_xml.kml"


@pytest.fixture()
def no_coordinates_kml(data_dir: Path) -> Path:
    """Path to a well-formed KML with no <coordinates> element."""
    return data_dir / "05_no_coordinates.kml"


@pytest.fixture()
def bad_token_kml(data_dir: Path) -> Path:
    """Path to a KML whose coordinates contain a non-numeric token."""
    return data_dir / "06_bad_coordinate_token.kml"


@pytest.fixture()
def two_point_kml(data_dir: Path) -> Path:
    """Path to a KML whose first <coordinates> block has only two points."""
    return data_dir / "07_two_point_ring.kml"


# ---------------------------------------------------------------------------
# Session collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def today() -> dt.date:
    """Fixed 'today' for date-dependent tests."""
    return TODAY


@pytest.fixture()
def map_host() -> InMemoryMapHost:
    return InMemoryMapHost()


class FakeProvider(EnvironmentalDataProvider):
    """In-memory provider that records calls and can be held or made to fail.

    ``hold(day)`` makes fetches for *day* wait until ``release(day)``;
    ``fail(day)`` makes the weather leg for *day* raise ``FetchError``;
    ``fail_air_quality(day)`` does the same for the air-quality leg only.
    """

    name = "fake"

    def __init__(self, config: DashboardConfig | None = None) -> None:
        super().__init__(config or DashboardConfig())
        self.weather_calls: list[tuple[float, float, dt.date]] = []
        self.air_calls: list[tuple[float, float, dt.date]] = []
        self.monthly_calls: list[tuple[float, float, int, int]] = []
        self._gates: dict[dt.date, asyncio.Event] = {}
        self._failures: dict[dt.date, str] = {}
        self._air_failures: dict[dt.date, str] = {}

    def hold(self, day: dt.date) -> None:
        self._gates[day] = asyncio.Event()

    def release(self, day: dt.date) -> None:
        self._gates[day].set()

    def fail(self, day: dt.date, message: str = "service unavailable") -> None:
        self._failures[day] = message

    def fail_air_quality(
        self, day: dt.date, message: str = "air-quality service unavailable"
    ) -> None:
        self._air_failures[day] = message

    async def _wait(self, day: dt.date) -> None:
        gate = self._gates.get(day)
        if gate is not None:
            await gate.wait()

    async def fetch_weather(self, latitude: float, longitude: float, day: dt.date) -> WeatherRecord:
        self.weather_calls.append((latitude, longitude, day))
        await self._wait(day)
        if day in self._failures:
            raise FetchError(self.name, self._failures[day])
        return WeatherRecord(date=day, temperature_max_c=20.0 + day.day, weather_code=1)

    async def fetch_air_quality(
        self, latitude: float, longitude: float, day: dt.date
    ) -> AirQualityRecord:
        self.air_calls.append((latitude, longitude, day))
        await self._wait(day)
        if day in self._air_failures:
            raise FetchError(self.name, self._air_failures[day])
        return AirQualityRecord(date=day, us_aqi=40, pm2_5=8.5)

    async def fetch_monthly_weather(
        self, latitude: float, longitude: float, year: int, month: int
    ) -> MonthlyWeather:
        self.monthly_calls.append((latitude, longitude, year, month))
        return MonthlyWeather(
            year=year,
            month=month,
            daily_records=[DailyWeather(date=dt.date(year, month, 1), condition="sun")],
        )


@pytest.fixture()
def fake_provider() -> FakeProvider:
    return FakeProvider()
