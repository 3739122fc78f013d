"""USGS 3D Elevation Program (3DEP) point lookup via the ImageServer identify endpoint."""
from __future__ import annotations

from typing import Optional

from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate
from floodrisk.errors import PermanentProviderFailure
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="usgs_client")

USGS_IDENTIFY_URL = (
    "https://elevation.nationalmap.gov/arcgis/rest/services/3DEPElevation/ImageServer/identify"
)
SOURCE = "usgs"

# The resolver owns caching and retries, so this session is plain.
session = build_session()


def fetch_elevation(coord: Coordinate, timeout: float = 10) -> Optional[float]:
    """Return the 3DEP elevation in meters, or None when the service has no value here."""
    params = {
        "f": "json",
        "geometry": f"{coord.longitude},{coord.latitude}",
        "geometryType": "esriGeometryPoint",
        "returnGeometry": "false",
        "imageDisplay": "500,500,96",
        "sr": 4326,
    }
    data = get_json(session, USGS_IDENTIFY_URL, params=params, timeout=timeout, source=SOURCE)
    if not isinstance(data, dict):
        raise PermanentProviderFailure("unexpected identify payload", source=SOURCE)

    results = data.get("results") or []
    if results:
        value = (results[0].get("attributes") or {}).get("VALUE")
    else:
        value = data.get("value")

    elevation = coerce_float(value)
    logger.debug("USGS elevation", extra={"latitude": coord.latitude, "longitude": coord.longitude, "value": value})
    return elevation
