"""Dashboard configuration loaded from environment variables.

All configuration values have sensible defaults so a session can be
created without any environment at all (tests, notebooks). Deployed
hosts override them through environment variables.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range.  This catches bad configuration
    at startup instead of on the first data fetch.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from climate_eye.core.constants import (
    DEFAULT_AIR_QUALITY_API_URL,
    DEFAULT_RANGE_DAYS,
    DEFAULT_WEATHER_API_URL,
    OPEN_METEO,
)
from climate_eye.core.exceptions import ClimateEyeError

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class ConfigValidationError(ClimateEyeError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Full error description including the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    """Immutable dashboard configuration.

    Attributes:
        default_range_days: Length of the initial date range ending today.
        data_provider: Registered name of the environmental data provider.
        weather_api_url: Endpoint for point-and-date weather queries.
        air_quality_api_url: Endpoint for point-and-date air-quality queries.
        request_timeout_s: HTTP timeout for a single provider request.
        centroid_epsilon: Absolute area below which a ring is treated as
            degenerate and its centroid falls back to the vertex mean.
        drop_stale_results: When ``True``, a fetch that completes after a
            newer one was issued is discarded instead of displayed.
    """

    default_range_days: int = DEFAULT_RANGE_DAYS
    data_provider: str = OPEN_METEO
    weather_api_url: str = DEFAULT_WEATHER_API_URL
    air_quality_api_url: str = DEFAULT_AIR_QUALITY_API_URL
    request_timeout_s: float = 30.0
    centroid_epsilon: float = 1e-12
    drop_stale_results: bool = False

    @classmethod
    def from_env(cls) -> DashboardConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``REQUEST_TIMEOUT_S=abc``).
        """
        config = cls(
            default_range_days=int(os.getenv("DEFAULT_RANGE_DAYS", str(DEFAULT_RANGE_DAYS))),
            data_provider=os.getenv("DATA_PROVIDER", OPEN_METEO),
            weather_api_url=os.getenv("WEATHER_API_URL", DEFAULT_WEATHER_API_URL),
            air_quality_api_url=os.getenv("AIR_QUALITY_API_URL", DEFAULT_AIR_QUALITY_API_URL),
            request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", "30")),
            centroid_epsilon=float(os.getenv("CENTROID_EPSILON", "1e-12")),
            drop_stale_results=_parse_bool(
                "DROP_STALE_RESULTS", os.getenv("DROP_STALE_RESULTS", "false")
            ),
        )
        _validate(config)
        return config


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(key, raw, "must be a boolean (true/false, 1/0, yes/no, on/off)")


def _validate(config: DashboardConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.default_range_days < 0:
        raise ConfigValidationError(
            "DEFAULT_RANGE_DAYS",
            config.default_range_days,
            "must be >= 0 (days)",
        )

    if config.request_timeout_s <= 0:
        raise ConfigValidationError(
            "REQUEST_TIMEOUT_S",
            config.request_timeout_s,
            "must be > 0 (seconds)",
        )

    if config.centroid_epsilon <= 0:
        raise ConfigValidationError(
            "CENTROID_EPSILON",
            config.centroid_epsilon,
            "must be > 0",
        )

    if not config.data_provider:
        raise ConfigValidationError(
            "DATA_PROVIDER",
            config.data_provider,
            "must not be empty",
        )

    if not config.weather_api_url:
        raise ConfigValidationError(
            "WEATHER_API_URL",
            config.weather_api_url,
            "must not be empty",
        )

    if not config.air_quality_api_url:
        raise ConfigValidationError(
            "AIR_QUALITY_API_URL",
            config.air_quality_api_url,
            "must not be empty",
        )
