"""Mapbox terrain tilequery client (needs an access token).

The terrain tileset exposes contour polygons with an ``ele`` property; the
highest contour containing the point is the best available estimate.
"""
from __future__ import annotations

from typing import Optional

from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate
from floodrisk.errors import PermanentProviderFailure

MAPBOX_TILEQUERY_URL = "https://api.mapbox.com/v4/mapbox.mapbox-terrain-v2/tilequery/{lng},{lat}.json"
SOURCE = "mapbox"

session = build_session()


def fetch_elevation(coord: Coordinate, timeout: float = 10, *, api_key: str | None = None) -> Optional[float]:
    """Return the highest contour elevation (meters) at the point, or None."""
    if not api_key:
        raise PermanentProviderFailure("missing Mapbox access token", source=SOURCE)

    url = MAPBOX_TILEQUERY_URL.format(lng=coord.longitude, lat=coord.latitude)
    params = {"layers": "contour", "limit": 50, "access_token": api_key}
    data = get_json(session, url, params=params, timeout=timeout, source=SOURCE)
    if not isinstance(data, dict) or "features" not in data:
        raise PermanentProviderFailure("missing features in tilequery payload", source=SOURCE)

    elevations = []
    for feature in data.get("features") or []:
        ele = coerce_float((feature.get("properties") or {}).get("ele"))
        if ele is not None:
            elevations.append(ele)
    return max(elevations) if elevations else None
