"""Environmental data provider adapters.

Implements the provider-agnostic adapter pattern:
- EnvironmentalDataProvider: Abstract base class defining the interface
- OpenMeteoProvider: Open-Meteo forecast + air-quality APIs (free, keyless)

The active provider is selected via configuration.
"""

from climate_eye.providers.base import (
    EnvironmentalDataProvider,
    FetchError,
    ProviderError,
)
from climate_eye.providers.factory import (
    get_provider,
    list_providers,
    register_provider,
)

__all__ = [
    "EnvironmentalDataProvider",
    "FetchError",
    "ProviderError",
    "get_provider",
    "list_providers",
    "register_provider",
]
