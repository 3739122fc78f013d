"""Domain vocabulary and schemas for flood-risk assessments.

Enums, value types and Pydantic models shared by the data sources, the
scoring engine, the safer-location search and the HTTP layer. No scoring or
fetching logic lives here.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class _FrozenModel(BaseModel):
    """Immutable, hashable model (value semantics)."""

    model_config = ConfigDict(extra="forbid", frozen=True)


CACHE_KEY_PRECISION = 4  # decimal degrees, ~11 m


class Coordinate(_FrozenModel):
    """A WGS84 point. Equality and hashing are by value."""
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    def rounded(self, precision: int = CACHE_KEY_PRECISION) -> "Coordinate":
        """Return the point rounded to ``precision`` decimal degrees."""
        return Coordinate(
            latitude=round(self.latitude, precision),
            longitude=round(self.longitude, precision),
        )

    def as_text(self) -> str:
        """Render as the "lat, lng" string used when no place name exists."""
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


class ElevationSource(str, Enum):
    """Where an elevation reading came from."""
    PRIMARY_SURVEY = "PrimarySurvey"  # USGS 3DEP
    COMMUNITY_DATASET = "CommunityDataset"  # Open-Elevation
    COMMERCIAL_A = "CommercialA"  # Google Maps Elevation
    COMMERCIAL_B = "CommercialB"  # Mapbox terrain
    SIMULATED = "Simulated"


class Accuracy(str, Enum):
    """Confidence attached to an elevation reading."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(str, Enum):
    """Discrete flood-risk bucket."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


ACCEPTABLE_LEVELS = frozenset({RiskLevel.LOW, RiskLevel.MEDIUM})

RISK_DESCRIPTIONS: Dict[RiskLevel, str] = {
    RiskLevel.LOW: "No immediate threat detected",
    RiskLevel.MEDIUM: "Moderate flood risk - monitor conditions",
    RiskLevel.HIGH: "High flood risk - consider evacuation",
    RiskLevel.VERY_HIGH: "Severe flood risk - evacuate if advised",
}


class Direction(str, Enum):
    """Compass directions probed by the safer-location search."""
    N = "N"
    S = "S"
    E = "E"
    W = "W"
    NE = "NE"
    NW = "NW"
    SE = "SE"
    SW = "SW"


# Probe order within a ring, with bearings in degrees clockwise from north.
DIRECTION_BEARINGS: Dict[Direction, float] = {
    Direction.N: 0.0,
    Direction.S: 180.0,
    Direction.E: 90.0,
    Direction.W: 270.0,
    Direction.NE: 45.0,
    Direction.NW: 315.0,
    Direction.SE: 135.0,
    Direction.SW: 225.0,
}


class ElevationReading(_FrozenModel):
    """Elevation for a point, tagged with its source and accuracy."""
    elevation_m: float
    source: ElevationSource
    accuracy: Accuracy


class RiskAssessment(_StrictBaseModel):
    """Scored risk for one point. Replaced, never updated, on the next request."""
    score: float = Field(ge=0.0)
    level: RiskLevel
    elevation_m: float
    rainfall_mm: float
    near_water: bool
    elevation_score: float = Field(ge=0.0)
    rainfall_score: float = Field(ge=0.0)
    elevation: ElevationReading | None = None

    @property
    def description(self) -> str:
        """Human-readable summary of the risk level."""
        return RISK_DESCRIPTIONS[self.level]


class SaferLocationResult(_StrictBaseModel):
    """A named nearby point whose risk level is low or medium."""
    name: str
    coordinate: Coordinate
    distance_miles: float
    direction: Direction
    level: RiskLevel
    assessment: RiskAssessment | None = None

    @field_validator("level")
    @classmethod
    def level_is_acceptable(cls, v: RiskLevel) -> RiskLevel:
        """Only low and medium risk locations count as safer."""
        if v not in ACCEPTABLE_LEVELS:
            raise ValueError(f"safer location must be low or medium risk, got {v.value}")
        return v


class LocationReport(_StrictBaseModel):
    """Everything the presentation layer needs for one assessed point."""
    coordinate: Coordinate
    assessment: RiskAssessment
    description: str
    safer_location: SaferLocationResult | None = None
    safer_search_performed: bool = False


class Place(_FrozenModel):
    """Result of a reverse or forward geocode."""
    name: str
    coordinate: Coordinate
