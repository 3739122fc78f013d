"""Demonstration reference locations and known safe areas (continental US)."""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict

from floodrisk.domain import Coordinate, RiskLevel
from floodrisk.safer_location import haversine_miles


class ReferenceLocation(BaseModel):
    """A sample city with representative elevation and rainfall figures."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    coordinate: Coordinate
    risk: RiskLevel
    elevation_m: float
    rainfall_mm: float


class SafeArea(BaseModel):
    """A known low-risk destination."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    coordinate: Coordinate
    elevation_m: float
    risk: RiskLevel = RiskLevel.LOW


def _ref(name: str, lat: float, lng: float, risk: RiskLevel, elevation: float, rainfall: float) -> ReferenceLocation:
    return ReferenceLocation(
        name=name,
        coordinate=Coordinate(latitude=lat, longitude=lng),
        risk=risk,
        elevation_m=elevation,
        rainfall_mm=rainfall,
    )


def _safe(name: str, lat: float, lng: float, elevation: float) -> SafeArea:
    return SafeArea(name=name, coordinate=Coordinate(latitude=lat, longitude=lng), elevation_m=elevation)


REFERENCE_LOCATIONS: Tuple[ReferenceLocation, ...] = (
    # coastal and low-lying
    _ref("Houston, TX", 29.7604, -95.3698, RiskLevel.HIGH, 25, 45),
    _ref("Miami, FL", 25.7617, -80.1918, RiskLevel.HIGH, 2, 38),
    _ref("Austin, TX", 30.2672, -97.7431, RiskLevel.HIGH, 149, 42),
    _ref("New York, NY", 40.7128, -74.0060, RiskLevel.HIGH, 10, 35),
    _ref("New Orleans, LA", 29.9511, -90.0715, RiskLevel.HIGH, -2, 48),
    _ref("Atlanta, GA", 33.7490, -84.3880, RiskLevel.HIGH, 320, 52),
    _ref("Philadelphia, PA", 39.9526, -75.1652, RiskLevel.MEDIUM, 12, 28),
    _ref("Chicago, IL", 41.8781, -87.6298, RiskLevel.MEDIUM, 179, 32),
    _ref("Los Angeles, CA", 34.0522, -118.2437, RiskLevel.MEDIUM, 89, 15),
    _ref("Seattle, WA", 47.6062, -122.3321, RiskLevel.MEDIUM, 56, 25),
    _ref("Denver, CO", 39.7392, -104.9903, RiskLevel.MEDIUM, 1609, 18),
    # high elevation, low rainfall
    _ref("Kansas City, KS", 39.8283, -98.5795, RiskLevel.LOW, 265, 12),
    _ref("Minneapolis, MN", 44.9778, -93.2650, RiskLevel.LOW, 264, 8),
    _ref("Salt Lake City, UT", 40.7608, -111.8910, RiskLevel.LOW, 1288, 5),
    _ref("Oklahoma City, OK", 35.4676, -97.5164, RiskLevel.LOW, 366, 15),
    _ref("Brainerd, MN", 46.7296, -94.6859, RiskLevel.LOW, 371, 6),
)

SAFE_AREAS: Tuple[SafeArea, ...] = (
    _safe("Boulder, CO", 40.0150, -105.2705, 1655),
    _safe("Denver, CO", 39.7392, -104.9903, 1609),
    _safe("Salt Lake City, UT", 40.7608, -111.8910, 1288),
    _safe("Minneapolis, MN", 44.9778, -93.2650, 264),
    _safe("Oklahoma City, OK", 35.4676, -97.5164, 366),
)


def nearest_safe_areas(origin: Coordinate, limit: int = 3) -> List[Tuple[SafeArea, float]]:
    """Known safe areas closest to ``origin`` with their distance in miles, nearest first."""
    if limit <= 0:
        return []
    ranked = sorted(((area, haversine_miles(origin, area.coordinate)) for area in SAFE_AREAS), key=lambda pair: pair[1])
    return ranked[:limit]
