"""External data sources: elevation, forecast, geocoding and water features."""

from .base import (
    CallableForecastProvider,
    CallablePlaceLookup,
    CallableWaterFeatureLookup,
    ElevationFetcher,
    ElevationProviderDescriptor,
    ForecastProvider,
    PlaceLookup,
    WaterFeatureLookup,
)
from .factory import (
    build_elevation_providers,
    build_forecast_provider,
    build_place_lookup,
    build_water_lookup,
)
from .nominatim_client import NamedFeature
from .nws_client import ForecastPeriod

__all__ = [
    "build_elevation_providers",
    "build_forecast_provider",
    "build_place_lookup",
    "build_water_lookup",
    "CallableForecastProvider",
    "CallablePlaceLookup",
    "CallableWaterFeatureLookup",
    "ElevationFetcher",
    "ElevationProviderDescriptor",
    "ForecastPeriod",
    "ForecastProvider",
    "NamedFeature",
    "PlaceLookup",
    "WaterFeatureLookup",
]
