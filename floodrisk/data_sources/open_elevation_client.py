"""Open-Elevation community dataset lookup."""
from __future__ import annotations

from typing import Optional

from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate
from floodrisk.errors import PermanentProviderFailure

OPEN_ELEVATION_URL = "https://api.open-elevation.com/api/v1/lookup"
SOURCE = "open_elevation"

session = build_session()


def fetch_elevation(coord: Coordinate, timeout: float = 10) -> Optional[float]:
    """Return the SRTM-derived elevation in meters, or None if absent."""
    params = {"locations": f"{coord.latitude},{coord.longitude}"}
    data = get_json(session, OPEN_ELEVATION_URL, params=params, timeout=timeout, source=SOURCE)
    try:
        results = data["results"]
    except (KeyError, TypeError) as exc:
        raise PermanentProviderFailure("missing results in lookup payload", source=SOURCE) from exc
    if not results:
        return None
    return coerce_float(results[0].get("elevation"))
