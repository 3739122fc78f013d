"""OpenStreetMap Nominatim lookups: reverse geocode, search, and nearby named features.

Nominatim's usage policy asks for an identifying User-Agent, at most one
request per second and client-side caching; the session and ``_paced_call``
take care of all three.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

from floodrisk.config import settings
from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate, Place
from floodrisk.errors import PermanentProviderFailure
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="nominatim_client")

SOURCE = "nominatim"
LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality", "suburb", "county")

session = build_session(
    cache_name="nominatim",
    expire_after=settings.geocode_cache_seconds,
    user_agent=settings.user_agent,
)

T = TypeVar("T")

_lock = threading.Lock()
_last_call = 0.0


@dataclass
class NamedFeature:
    """A named OSM feature returned by a bounded search."""
    name: str
    category: str
    type: str
    address: Dict[str, Any] = field(default_factory=dict)


def _paced_call(fn: Callable[[], T]) -> T:
    """Run ``fn`` no sooner than the configured interval after the previous call."""
    global _last_call
    with _lock:
        wait = settings.geocode_min_interval_seconds - (time.monotonic() - _last_call)
        if wait > 0:
            time.sleep(wait)
        try:
            return fn()
        finally:
            _last_call = time.monotonic()


def _get(path: str, params: Dict[str, Any], timeout: float) -> Any:
    url = f"{settings.nominatim_base_url}/{path}"
    return _paced_call(lambda: get_json(session, url, params=params, timeout=timeout, source=SOURCE))


def place_name_from_address(address: Dict[str, Any]) -> Optional[str]:
    """Build "Locality, State" from Nominatim address tags, or None without a locality."""
    locality = next((address[k] for k in LOCALITY_KEYS if address.get(k)), None)
    if not locality:
        return None
    state = address.get("state")
    return f"{locality}, {state}" if state else str(locality)


def reverse_geocode(coord: Coordinate, timeout: float = 10) -> Place:
    """Return a place for the point; the name falls back to "lat, lng" when nothing is named there."""
    params = {
        "format": "jsonv2",
        "lat": coord.latitude,
        "lon": coord.longitude,
        "zoom": 10,
        "addressdetails": 1,
    }
    data = _get("reverse", params, timeout)
    if not isinstance(data, dict):
        raise PermanentProviderFailure("unexpected reverse payload", source=SOURCE)
    if data.get("error"):
        logger.debug("Nominatim could not name point", extra={"error": data.get("error")})
        return Place(name=coord.as_text(), coordinate=coord)

    name = place_name_from_address(data.get("address") or {})
    return Place(name=name or coord.as_text(), coordinate=coord)


def search(query: str, timeout: float = 10, *, country_codes: str = "us") -> Optional[Place]:
    """Forward geocode a free-text query; None when nothing matches."""
    params = {"format": "jsonv2", "q": query, "limit": 1, "countrycodes": country_codes}
    data = _get("search", params, timeout)
    if not data:
        return None
    try:
        first = data[0]
        lat = coerce_float(first["lat"])
        lon = coerce_float(first["lon"])
    except (KeyError, IndexError, TypeError) as exc:
        raise PermanentProviderFailure("unexpected search payload", source=SOURCE) from exc
    if lat is None or lon is None:
        return None
    return Place(name=first.get("display_name") or query, coordinate=Coordinate(latitude=lat, longitude=lon))


def query_features(coord: Coordinate, radius_deg: float, timeout: float = 10, term: str = "water") -> List[NamedFeature]:
    """Return named features matching the free-text ``term`` inside a square viewbox around the point."""
    west = max(-180.0, coord.longitude - radius_deg)
    east = min(180.0, coord.longitude + radius_deg)
    north = min(90.0, coord.latitude + radius_deg)
    south = max(-90.0, coord.latitude - radius_deg)
    params = {
        "format": "jsonv2",
        "q": term,
        "viewbox": f"{west},{north},{east},{south}",
        "bounded": 1,
        "addressdetails": 1,
        "limit": 20,
    }
    data = _get("search", params, timeout)
    if not isinstance(data, list):
        raise PermanentProviderFailure("unexpected feature search payload", source=SOURCE)
    return [
        NamedFeature(
            name=str(item.get("name") or item.get("display_name") or ""),
            category=str(item.get("category") or item.get("class") or ""),
            type=str(item.get("type") or ""),
            address=item.get("address") or {},
        )
        for item in data
        if isinstance(item, dict)
    ]
