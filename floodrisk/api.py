"""HTTP API for the flood-risk planner."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from .assessment_service import FloodRiskService
from .config import settings
from .domain import Coordinate, LocationReport, Place, SaferLocationResult
from .errors import ProviderFailure
from .reference_data import REFERENCE_LOCATIONS, ReferenceLocation, SafeArea, nearest_safe_areas
from utils.logging_utils import get_tagged_logger, logging_event_hook

logger = get_tagged_logger(__name__, tag="floodrisk/api")

router = APIRouter()

# Built on first use so importing the app does not wire provider clients.
SERVICE: FloodRiskService | None = None


def get_service() -> FloodRiskService:
    """Return the process-wide service, creating it on first call."""
    global SERVICE
    if SERVICE is None:
        SERVICE = FloodRiskService(settings=settings, on_event=logging_event_hook(logger))
    return SERVICE


class SearchResponse(BaseModel):
    """A geocoded query and the evaluation of the point it resolved to."""
    place: Place
    report: LocationReport


class SaferLocationResponse(BaseModel):
    """Safer-location search outcome; ``result`` is null when nothing qualified."""
    result: Optional[SaferLocationResult] = None


class SafeAreaDistance(BaseModel):
    """A known safe area with its distance from the requested point."""
    area: SafeArea
    distance_miles: float


@router.post("/assess", response_model=LocationReport)
async def assess_location(coord: Coordinate):
    """Assess flood risk at a point and suggest a safer place when the risk is high."""
    logger.info("Assessing location", extra={"coordinate": coord.as_text()})
    report = await get_service().evaluate(coord)
    logger.debug(
        "Assessment result",
        extra={"level": report.assessment.level.value, "score": report.assessment.score},
    )
    return report


@router.get("/search", response_model=SearchResponse)
async def search_location(q: str = Query(default="")):
    """Geocode a free-text location and assess it."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query must not be empty.")

    service = get_service()
    try:
        place = await service.search_location(query)
    except ProviderFailure as exc:
        logger.warning("Location search failed", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Error searching for location.")
    if place is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found.")

    report = await service.evaluate(place.coordinate)
    return SearchResponse(place=place, report=report)


@router.post("/safer-location", response_model=SaferLocationResponse)
async def find_safer_location(coord: Coordinate):
    """Run the safer-location search from a point regardless of its own risk."""
    result = await get_service().find_safer(coord)
    if result is None:
        logger.info("No safer location found", extra={"coordinate": coord.as_text()})
    return SaferLocationResponse(result=result)


@router.get("/safe-areas", response_model=List[SafeAreaDistance])
def list_safe_areas(
    latitude: float = Query(ge=-90.0, le=90.0),
    longitude: float = Query(ge=-180.0, le=180.0),
    limit: int = Query(default=3, ge=1, le=10),
):
    """Known safe areas nearest to a point."""
    origin = Coordinate(latitude=latitude, longitude=longitude)
    return [SafeAreaDistance(area=area, distance_miles=round(distance, 1))
            for area, distance in nearest_safe_areas(origin, limit=limit)]


@router.get("/reference-locations", response_model=List[ReferenceLocation])
def list_reference_locations():
    """Sample locations with representative elevation and rainfall."""
    return list(REFERENCE_LOCATIONS)
