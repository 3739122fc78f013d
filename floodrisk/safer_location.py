"""Search outward from a point for a named place with acceptable flood risk.

Probes run ring by ring (20, 40, ... 160 miles) and, within a ring, in the
fixed direction order N, S, E, W, NE, NW, SE, SW. The first probe that scores
low or medium and reverse-geocodes to a real place name wins; the traversal
order decides which candidate is returned, so probes run one at a time.
"""

from __future__ import annotations

import asyncio
import math
import re
from typing import Iterator, Optional, Sequence, Tuple

from floodrisk import config
from floodrisk.data_sources.base import PlaceLookup
from floodrisk.data_sources.factory import build_place_lookup
from floodrisk.domain import (
    ACCEPTABLE_LEVELS,
    DIRECTION_BEARINGS,
    Coordinate,
    Direction,
    SaferLocationResult,
)
from floodrisk.elevation_service import ElevationResolver
from floodrisk.events import EventEmitter
from floodrisk.rainfall_service import RainfallService
from floodrisk.risk_engine import RiskEngine
from floodrisk.water_service import WaterProximityChecker
from utils.logging_utils import EventHook, get_tagged_logger

logger = get_tagged_logger(__name__, tag="safer_location")

EARTH_RADIUS_MILES = 3959.0
SEARCH_RINGS_MILES: Tuple[int, ...] = tuple(range(20, 161, 20))

_COORDINATE_NAME = re.compile(r"^\s*-?\d+(?:\.\d+)?\s*,\s*-?\d+(?:\.\d+)?\s*$")


def _normalize_longitude(lng: float) -> float:
    lng = (lng + 180.0) % 360.0 - 180.0
    return 180.0 if lng == -180.0 else lng


def destination_point(origin: Coordinate, distance_miles: float, bearing_deg: float) -> Coordinate:
    """Point ``distance_miles`` from ``origin`` along an initial great-circle bearing.

    Valid everywhere, including near the poles; longitude wraps into [-180, 180].
    """
    angular = distance_miles / EARTH_RADIUS_MILES
    bearing = math.radians(bearing_deg)
    lat1 = math.radians(origin.latitude)
    lng1 = math.radians(origin.longitude)

    sin_lat2 = math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return Coordinate(
        latitude=max(-90.0, min(90.0, math.degrees(lat2))),
        longitude=_normalize_longitude(math.degrees(lng2)),
    )


def haversine_miles(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in miles."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(h)))


def is_coordinate_name(name: str | None) -> bool:
    """True when a reverse-geocoded name is blank or just "lat, lng"."""
    return not name or not name.strip() or bool(_COORDINATE_NAME.match(name))


def probe_points(
    origin: Coordinate,
    rings: Sequence[float] = SEARCH_RINGS_MILES,
) -> Iterator[Tuple[float, Direction, Coordinate]]:
    """Yield (distance, direction, point) in traversal order: ring-major, then direction."""
    for distance in rings:
        for direction, bearing in DIRECTION_BEARINGS.items():
            yield distance, direction, destination_point(origin, distance, bearing)


class SaferLocationSearch:
    """Bounded radial search for the nearest acceptable named location."""

    def __init__(
        self,
        elevation: ElevationResolver,
        rainfall: RainfallService,
        *,
        engine: RiskEngine | None = None,
        places: PlaceLookup | None = None,
        water: WaterProximityChecker | None = None,
        settings: config.Settings | None = None,
        rings: Sequence[float] = SEARCH_RINGS_MILES,
        on_event: EventHook | None = None,
    ) -> None:
        self.settings = settings or config.settings
        self.elevation = elevation
        self.rainfall = rainfall
        self.engine = engine or RiskEngine()
        self.places = places or build_place_lookup()
        # water proximity is only consulted for probes when explicitly enabled
        self.water = water if self.settings.safer_search_check_water else None
        self.rings = tuple(rings)
        self.geocode_timeout = float(self.settings.geocode_timeout_seconds)
        self._emit = EventEmitter(logger, on_event)

    async def find_safer(self, origin: Coordinate) -> Optional[SaferLocationResult]:
        """Return the first acceptable candidate in traversal order, or None when the grid is exhausted."""
        probes = 0
        for distance, direction, point in probe_points(origin, self.rings):
            probes += 1
            try:
                result = await self._probe(point, distance, direction)
            except Exception as exc:
                self._emit(
                    "search.probe_failed",
                    distance_miles=distance,
                    direction=direction.value,
                    error=repr(exc),
                )
                continue
            if result is not None:
                self._emit(
                    "search.accepted",
                    name=result.name,
                    distance_miles=distance,
                    direction=direction.value,
                    level=result.level.value,
                    probes=probes,
                )
                return result

        self._emit("search.exhausted", origin=origin.as_text(), probes=probes)
        return None

    async def _probe(self, point: Coordinate, distance: float, direction: Direction) -> Optional[SaferLocationResult]:
        reading, rainfall_mm = await asyncio.gather(
            self.elevation.resolve(point),
            self.rainfall.fetch_rainfall(point),
        )
        near_water = await self.water.is_near_water(point) if self.water is not None else False
        assessment = self.engine.assess(reading.elevation_m, rainfall_mm, near_water, reading=reading)
        self._emit(
            "search.probe",
            distance_miles=distance,
            direction=direction.value,
            level=assessment.level.value,
            score=assessment.score,
        )
        if assessment.level not in ACCEPTABLE_LEVELS:
            return None

        place = await asyncio.wait_for(
            asyncio.to_thread(self.places.reverse_geocode, point, self.geocode_timeout),
            timeout=self.geocode_timeout,
        )
        if place is None or is_coordinate_name(place.name):
            self._emit("search.unnamed", distance_miles=distance, direction=direction.value)
            return None

        return SaferLocationResult(
            name=place.name,
            coordinate=point,
            distance_miles=float(distance),
            direction=direction,
            level=assessment.level,
            assessment=assessment,
        )
