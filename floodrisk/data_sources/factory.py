"""Factory helpers for wiring data sources from configuration."""

from __future__ import annotations

from functools import partial
from typing import List, Sequence

from floodrisk import config
from floodrisk.data_sources import google_client, mapbox_client, nominatim_client, nws_client
from floodrisk.data_sources import open_elevation_client, usgs_client
from floodrisk.data_sources.base import (
    CallableForecastProvider,
    CallablePlaceLookup,
    CallableWaterFeatureLookup,
    ElevationProviderDescriptor,
    ForecastProvider,
    PlaceLookup,
    WaterFeatureLookup,
)
from floodrisk.domain import Accuracy, ElevationSource
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")

ELEVATION_ORDER = ("usgs", "open_elevation", "google", "mapbox")
DEFAULT_ELEVATION_ORDER = ("usgs", "open_elevation")


def _descriptor(name: str, settings: config.Settings) -> ElevationProviderDescriptor:
    """Build the descriptor for one named elevation source."""
    if name == "usgs":
        return ElevationProviderDescriptor(
            source=ElevationSource.PRIMARY_SURVEY,
            fetch=usgs_client.fetch_elevation,
            accuracy=Accuracy.HIGH,
            name=name,
        )
    if name == "open_elevation":
        return ElevationProviderDescriptor(
            source=ElevationSource.COMMUNITY_DATASET,
            fetch=open_elevation_client.fetch_elevation,
            accuracy=Accuracy.MEDIUM,
            name=name,
        )
    if name == "google":
        return ElevationProviderDescriptor(
            source=ElevationSource.COMMERCIAL_A,
            fetch=partial(google_client.fetch_elevation, api_key=settings.google_maps_api_key),
            accuracy=Accuracy.HIGH,
            name=name,
        )
    if name == "mapbox":
        return ElevationProviderDescriptor(
            source=ElevationSource.COMMERCIAL_B,
            fetch=partial(mapbox_client.fetch_elevation, api_key=settings.mapbox_api_key),
            accuracy=Accuracy.MEDIUM,
            name=name,
        )
    raise ValueError(f"Unknown elevation source '{name}'")


def enabled_elevation_sources(settings: config.Settings) -> List[str]:
    """Names of the sources switched on in settings, in fallback order."""
    flags = {
        "usgs": settings.enable_usgs,
        "open_elevation": settings.enable_open_elevation,
        "google": settings.enable_google,
        "mapbox": settings.enable_mapbox,
    }
    return [name for name in ELEVATION_ORDER if flags[name]]


def build_elevation_providers(
    settings: config.Settings | None = None,
    order: Sequence[str] | None = None,
) -> List[ElevationProviderDescriptor]:
    """Instantiate the elevation fallback chain.

    ``order`` overrides the toggles. With nothing enabled the chain is USGS,
    then Open-Elevation.
    """
    settings = settings or config.settings
    names = list(order) if order is not None else enabled_elevation_sources(settings)
    if not names:
        logger.info("No elevation sources enabled; using default ordering", extra={"order": DEFAULT_ELEVATION_ORDER})
        names = list(DEFAULT_ELEVATION_ORDER)

    for name in names:
        if name == "google" and not settings.google_maps_api_key:
            logger.warning("Google elevation enabled without an API key; it will always fail over")
        if name == "mapbox" and not settings.mapbox_api_key:
            logger.warning("Mapbox elevation enabled without an access token; it will always fail over")

    providers = [_descriptor(name, settings) for name in names]
    logger.info("Elevation fallback chain", extra={"order": [p.name for p in providers]})
    return providers


def build_forecast_provider() -> ForecastProvider:
    """The NWS forecast client."""
    return CallableForecastProvider(periods=nws_client.fetch_forecast_periods)


def build_place_lookup() -> PlaceLookup:
    """Nominatim reverse/forward geocoding."""
    return CallablePlaceLookup(reverse=nominatim_client.reverse_geocode, forward=nominatim_client.search)


def build_water_lookup() -> WaterFeatureLookup:
    """Nominatim bounded feature search."""
    return CallableWaterFeatureLookup(features=nominatim_client.query_features)
