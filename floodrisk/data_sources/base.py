"""Interfaces and descriptors for the external data sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from floodrisk.data_sources.nominatim_client import NamedFeature
from floodrisk.data_sources.nws_client import ForecastPeriod
from floodrisk.domain import Accuracy, Coordinate, ElevationSource, Place


class ElevationFetcher(Protocol):
    """Callable returning meters for a point, or None when the source has no value."""

    def __call__(self, coord: Coordinate, timeout: float) -> Optional[float]:
        ...


class ForecastProvider(Protocol):
    """Anything that can list forecast periods for a point."""

    def fetch_periods(self, coord: Coordinate, timeout: float) -> List[ForecastPeriod]:
        """Return forecast periods in chronological order."""
        ...


class PlaceLookup(Protocol):
    """Reverse and forward geocoding."""

    def reverse_geocode(self, coord: Coordinate, timeout: float) -> Place:
        """Return the place name for a point (may be a "lat, lng" string)."""
        ...

    def search(self, query: str, timeout: float) -> Optional[Place]:
        """Return the best match for a free-text query, or None."""
        ...


class WaterFeatureLookup(Protocol):
    """Named-feature lookup around a point."""

    def query(self, coord: Coordinate, radius_deg: float, timeout: float, term: str) -> List[NamedFeature]:
        """Return named features matching ``term`` inside the radius."""
        ...


@dataclass
class ElevationProviderDescriptor:
    """One entry in the elevation fallback chain: a source tag plus how to call it."""

    source: ElevationSource
    fetch: ElevationFetcher
    accuracy: Accuracy = Accuracy.MEDIUM
    name: str = field(default="")

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.source.value


@dataclass
class CallableForecastProvider(ForecastProvider):
    """Wrap a periods callable so alternative backends can be swapped in."""

    periods: Callable[[Coordinate, float], List[ForecastPeriod]]

    def fetch_periods(self, coord: Coordinate, timeout: float) -> List[ForecastPeriod]:
        """Delegate to the configured callable."""
        return self.periods(coord, timeout)


@dataclass
class CallablePlaceLookup(PlaceLookup):
    """Wrap reverse/forward geocode callables."""

    reverse: Callable[[Coordinate, float], Place]
    forward: Callable[[str, float], Optional[Place]]

    def reverse_geocode(self, coord: Coordinate, timeout: float) -> Place:
        """Delegate to the configured reverse-geocode callable."""
        return self.reverse(coord, timeout)

    def search(self, query: str, timeout: float) -> Optional[Place]:
        """Delegate to the configured forward-geocode callable."""
        return self.forward(query, timeout)


@dataclass
class CallableWaterFeatureLookup(WaterFeatureLookup):
    """Wrap a feature-query callable."""

    features: Callable[[Coordinate, float, float, str], List[NamedFeature]]

    def query(self, coord: Coordinate, radius_deg: float, timeout: float, term: str) -> List[NamedFeature]:
        """Delegate to the configured feature-query callable."""
        return self.features(coord, radius_deg, timeout, term)
