"""Orchestration of a full flood-risk evaluation for one point.

``FloodRiskService`` wires the resolver, rainfall, water-proximity and scoring
components together, runs the independent lookups concurrently and, when the
result is high or very-high, runs the safer-location search.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from floodrisk import config
from floodrisk.data_sources.base import PlaceLookup
from floodrisk.data_sources.factory import build_place_lookup
from floodrisk.domain import (
    ACCEPTABLE_LEVELS,
    Coordinate,
    LocationReport,
    Place,
    RiskAssessment,
    SaferLocationResult,
)
from floodrisk.elevation_service import ElevationResolver
from floodrisk.errors import TransientProviderFailure
from floodrisk.events import EventEmitter
from floodrisk.rainfall_service import RainfallService
from floodrisk.risk_engine import RiskEngine
from floodrisk.safer_location import SaferLocationSearch
from floodrisk.water_service import WaterProximityChecker
from utils.logging_utils import EventHook, get_tagged_logger

logger = get_tagged_logger(__name__, tag="assessment_service")


class FloodRiskService:
    """Entry point used by the API layer.

    Every collaborator is injectable; anything omitted is built from
    ``settings`` with the default provider clients.
    """

    def __init__(
        self,
        *,
        settings: config.Settings | None = None,
        elevation: ElevationResolver | None = None,
        rainfall: RainfallService | None = None,
        water: WaterProximityChecker | None = None,
        engine: RiskEngine | None = None,
        places: PlaceLookup | None = None,
        search: SaferLocationSearch | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        self.settings = settings or config.settings
        self.elevation = elevation or ElevationResolver(settings=self.settings, on_event=on_event)
        self.rainfall = rainfall or RainfallService(settings=self.settings, on_event=on_event)
        self.water = water or WaterProximityChecker(settings=self.settings, on_event=on_event)
        self.engine = engine or RiskEngine()
        self.places = places or build_place_lookup()
        self.search = search or SaferLocationSearch(
            self.elevation,
            self.rainfall,
            engine=self.engine,
            places=self.places,
            water=self.water,
            settings=self.settings,
            on_event=on_event,
        )
        self._emit = EventEmitter(logger, on_event)
        self._generation = 0

    async def assess(self, coord: Coordinate) -> RiskAssessment:
        """Score one point; elevation, rainfall and water lookups run concurrently."""
        reading, rainfall_mm, near_water = await asyncio.gather(
            self.elevation.resolve(coord),
            self.rainfall.fetch_rainfall(coord),
            self.water.is_near_water(coord),
        )
        assessment = self.engine.assess(reading.elevation_m, rainfall_mm, near_water, reading=reading)
        self._emit(
            "assessment.completed",
            coordinate=coord.as_text(),
            level=assessment.level.value,
            score=assessment.score,
            source=reading.source.value,
        )
        return assessment

    async def find_safer(self, coord: Coordinate) -> Optional[SaferLocationResult]:
        return await self.search.find_safer(coord)

    async def evaluate(self, coord: Coordinate, *, search_when_unsafe: bool = True) -> LocationReport:
        """Assess a point and, if it is high or very-high risk, look for a safer place nearby."""
        assessment = await self.assess(coord)
        safer = None
        searched = False
        if search_when_unsafe and assessment.level not in ACCEPTABLE_LEVELS:
            searched = True
            safer = await self.search.find_safer(coord)
        return LocationReport(
            coordinate=coord,
            assessment=assessment,
            description=assessment.description,
            safer_location=safer,
            safer_search_performed=searched,
        )

    async def evaluate_latest(self, coord: Coordinate, *, search_when_unsafe: bool = True) -> Optional[LocationReport]:
        """Like ``evaluate`` but returns None when a newer request started before this one finished."""
        self._generation += 1
        generation = self._generation
        report = await self.evaluate(coord, search_when_unsafe=search_when_unsafe)
        if generation != self._generation:
            self._emit("assessment.superseded", coordinate=coord.as_text())
            return None
        return report

    async def search_location(self, query: str) -> Optional[Place]:
        """Forward geocode a free-text query. Provider failures and timeouts propagate as ``ProviderFailure``."""
        timeout = float(self.settings.geocode_timeout_seconds)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.places.search, query, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise TransientProviderFailure(f"search timed out after {timeout:g}s", source="geocode") from exc
