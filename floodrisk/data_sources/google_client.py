"""Google Maps Elevation API client (needs an API key)."""
from __future__ import annotations

from typing import Optional

from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate
from floodrisk.errors import PermanentProviderFailure, TransientProviderFailure
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="google_client")

GOOGLE_ELEVATION_URL = "https://maps.googleapis.com/maps/api/elevation/json"
SOURCE = "google"

PERMANENT_STATUSES = {"REQUEST_DENIED", "INVALID_REQUEST"}
TRANSIENT_STATUSES = {"OVER_QUERY_LIMIT", "OVER_DAILY_LIMIT", "UNKNOWN_ERROR"}

session = build_session()


def fetch_elevation(coord: Coordinate, timeout: float = 10, *, api_key: str | None = None) -> Optional[float]:
    """Return the Google elevation in meters; a missing key is a permanent failure."""
    if not api_key:
        raise PermanentProviderFailure("missing Google Maps API key", source=SOURCE)

    params = {"locations": f"{coord.latitude},{coord.longitude}", "key": api_key}
    data = get_json(session, GOOGLE_ELEVATION_URL, params=params, timeout=timeout, source=SOURCE)
    if not isinstance(data, dict):
        raise PermanentProviderFailure("unexpected elevation payload", source=SOURCE)

    status = data.get("status")
    if status in PERMANENT_STATUSES:
        raise PermanentProviderFailure(f"status {status}: {data.get('error_message', '')}", source=SOURCE)
    if status in TRANSIENT_STATUSES:
        raise TransientProviderFailure(f"status {status}", source=SOURCE)
    if status not in ("OK", "ZERO_RESULTS"):
        logger.warning("Unexpected Google elevation status", extra={"status": status})

    results = data.get("results") or []
    if not results:
        return None
    return coerce_float(results[0].get("elevation"))
