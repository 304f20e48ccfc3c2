"""EnvironmentalDataProvider abstract base class.

Defines the contract every weather / air-quality adapter must implement.
The navigation session interacts exclusively with this interface; it
never knows which concrete provider is behind it.

Every query is point-and-date: the session reduces the selected area to
its centroid before asking.  Adapters must wrap transport and payload
failures in ``FetchError`` so the session can show a message instead of
crashing.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from climate_eye.core.exceptions import ClimateEyeError

if TYPE_CHECKING:
    import datetime as dt
    from types import TracebackType

    from climate_eye.core.config import DashboardConfig
    from climate_eye.models.records import (
        AirQualityRecord,
        MonthlyWeather,
        WeatherRecord,
    )


class EnvironmentalDataProvider(abc.ABC):
    """Abstract base class for environmental data adapters.

    Example usage::

        async with get_provider("open_meteo", config) as provider:
            weather = await provider.fetch_weather(51.5, -0.12, date(2024, 6, 8))
    """

    #: Registry name of the adapter.
    name: str = ""

    def __init__(self, config: DashboardConfig) -> None:
        self._config = config

    @property
    def config(self) -> DashboardConfig:
        """Return the dashboard configuration (read-only)."""
        return self._config

    # ------------------------------------------------------------------
    # Abstract methods: every adapter must implement these
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def fetch_weather(
        self, latitude: float, longitude: float, day: dt.date
    ) -> WeatherRecord:
        """Return daily weather at a point for one date.

        Raises:
            FetchError: On any transport or payload failure.
        """

    @abc.abstractmethod
    async def fetch_air_quality(
        self, latitude: float, longitude: float, day: dt.date
    ) -> AirQualityRecord:
        """Return daily air quality at a point for one date.

        Raises:
            FetchError: On any transport or payload failure.
        """

    @abc.abstractmethod
    async def fetch_monthly_weather(
        self, latitude: float, longitude: float, year: int, month: int
    ) -> MonthlyWeather:
        """Return every day of one calendar month plus a summary.

        Raises:
            FetchError: On any transport or payload failure.
        """

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Release network resources.  The default holds none."""

    async def __aenter__(self) -> EnvironmentalDataProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# Provider exceptions
# ---------------------------------------------------------------------------


class ProviderError(ClimateEyeError):
    """Base exception for provider adapter errors.

    Attributes:
        provider: Name of the provider that raised the error.
        message: Human-readable error description.
        retryable: Whether the user may simply try again.
    """

    default_stage = "provider"
    default_code = "PROVIDER_ERROR"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        retryable: bool = False,
    ) -> None:
        self.provider = provider
        super().__init__(message, retryable=retryable)

    def __str__(self) -> str:
        return f"[{self.provider}] {self.message}"


class FetchError(ProviderError):
    """A weather or air-quality request failed."""

    default_stage = "fetch"
    default_code = "FETCH_FAILED"

    def __init__(self, provider: str, message: str, *, retryable: bool = True) -> None:
        super().__init__(provider, message, retryable=retryable)
