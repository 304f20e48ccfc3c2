"""Provider factory: maps a configured name to an environmental data adapter.

Adapters are registered as zero-argument loaders returning the adapter
class, so an adapter module (and its HTTP stack) is imported only when
that adapter is actually requested::

    provider = get_provider(config=DashboardConfig.from_env())
    async with provider:
        weather = await provider.fetch_weather(lat, lon, day)

The name defaults to ``DashboardConfig.data_provider`` (``DATA_PROVIDER``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from climate_eye.core.config import DashboardConfig
from climate_eye.core.constants import OPEN_METEO
from climate_eye.providers.base import EnvironmentalDataProvider, ProviderError

if TYPE_CHECKING:
    from collections.abc import Callable

    AdapterLoader = Callable[[], type[EnvironmentalDataProvider]]

logger = logging.getLogger(__name__)


def _load_open_meteo() -> type[EnvironmentalDataProvider]:
    from climate_eye.providers.open_meteo import OpenMeteoProvider

    return OpenMeteoProvider


_ADAPTER_REGISTRY: dict[str, AdapterLoader] = {
    OPEN_METEO: _load_open_meteo,
}


def register_provider(name: str, loader: AdapterLoader) -> None:
    """Add or replace an adapter under *name*.

    Raises:
        ValueError: If *name* is empty.
    """
    if not name:
        msg = "Provider name must be non-empty"
        raise ValueError(msg)
    if name in _ADAPTER_REGISTRY:
        logger.info("Replacing provider adapter: %s", name)
    _ADAPTER_REGISTRY[name] = loader


def get_provider(
    name: str | None = None,
    config: DashboardConfig | None = None,
) -> EnvironmentalDataProvider:
    """Instantiate the adapter registered under *name*.

    Args:
        name: Adapter name; ``config.data_provider`` when omitted.
        config: Passed to the adapter; defaults when omitted.

    Raises:
        ProviderError: If no adapter is registered under the name.
    """
    config = config or DashboardConfig()
    name = name or config.data_provider

    try:
        loader = _ADAPTER_REGISTRY[name]
    except KeyError:
        msg = f"Unknown data provider: {name!r}. Available: {', '.join(list_providers())}"
        raise ProviderError(name, msg) from None

    provider = loader()(config)
    logger.info("Data provider ready | name=%s | timeout=%.1fs", name, config.request_timeout_s)
    return provider


def list_providers() -> list[str]:
    """Registered adapter names, sorted."""
    return sorted(_ADAPTER_REGISTRY)
