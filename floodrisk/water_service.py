"""Is a point near a named ocean, sea or lake?"""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from floodrisk import config
from floodrisk.data_sources.base import WaterFeatureLookup
from floodrisk.data_sources.factory import build_water_lookup
from floodrisk.data_sources.nominatim_client import NamedFeature
from floodrisk.domain import Coordinate
from floodrisk.events import EventEmitter
from utils.logging_utils import EventHook, get_tagged_logger

logger = get_tagged_logger(__name__, tag="water_service")

WATER_TAGS = frozenset({"ocean", "sea", "lake", "water"})

# Nominatim reads "water" as natural=water only; oceans and seas need their own query.
WATER_QUERY_TERMS = ("ocean", "sea", "lake", "water")


def is_water_feature(feature: NamedFeature) -> bool:
    """True when the feature's type, class or address tags name a water body."""
    if feature.type.lower() in WATER_TAGS or feature.category.lower() == "water":
        return True
    return any(str(key).lower() in WATER_TAGS for key in (feature.address or {}))


class WaterProximityChecker:
    """
    Answers ``is_near_water``; any lookup failure counts as "not near water".

    Each term in ``WATER_QUERY_TERMS`` is queried in order until one returns a
    water feature. All queries for a point share one timeout budget.
    """

    def __init__(
        self,
        lookup: WaterFeatureLookup | None = None,
        *,
        settings: config.Settings | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        self.settings = settings or config.settings
        self.lookup = lookup or build_water_lookup()
        self.radius_deg = float(self.settings.water_search_radius_deg)
        self.timeout = float(self.settings.geocode_timeout_seconds)
        self._emit = EventEmitter(logger, on_event)

    def _first_match(self, coord: Coordinate) -> Tuple[Optional[NamedFeature], int]:
        seen = 0
        for term in WATER_QUERY_TERMS:
            features = self.lookup.query(coord, self.radius_deg, self.timeout, term) or []
            seen += len(features)
            match = next((f for f in features if is_water_feature(f)), None)
            if match is not None:
                return match, seen
        return None, seen

    async def is_near_water(self, coord: Coordinate) -> bool:
        try:
            match, seen = await asyncio.wait_for(
                asyncio.to_thread(self._first_match, coord),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            self._emit("water.lookup_failed", coordinate=coord.as_text(), error="timeout")
            return False
        except Exception as exc:
            self._emit("water.lookup_failed", coordinate=coord.as_text(), error=str(exc))
            return False

        self._emit(
            "water.checked",
            coordinate=coord.as_text(),
            features=seen,
            match=match.name if match else None,
        )
        return match is not None
