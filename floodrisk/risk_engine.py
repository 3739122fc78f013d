"""Deterministic flood-risk scoring.

Elevation and rainfall are each mapped onto a 0-15 severity ladder. Scores are
that severity times a base unit of 20/3, so every bucket and threshold is an
exact multiple of the unit. Weighting (40% elevation, 60% rainfall), the
near-water doubling and classification all run on integer "tenths of a unit"
to keep the breakpoints exact; conversion to float happens once, at the end.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from floodrisk.domain import ElevationReading, RiskAssessment, RiskLevel

SCORE_UNIT = 20 / 3

# (upper bound in meters, exclusive) -> severity
ELEVATION_LADDER: Sequence[Tuple[float, int]] = (
    (3, 15),
    (10, 10),
    (20, 8),
    (50, 4),
    (100, 2),
    (200, 1),
)
# (lower bound in millimeters, exclusive) -> severity
RAINFALL_LADDER: Sequence[Tuple[float, int]] = (
    (200, 15),
    (100, 10),
    (50, 8),
    (25, 4),
    (10, 2),
)

ELEVATION_WEIGHT_TENTHS = 4
RAINFALL_WEIGHT_TENTHS = 6
NEAR_WATER_MULTIPLIER = 2

# minimum weighted severity (in units) for each level, checked top-down
LEVEL_THRESHOLDS: Sequence[Tuple[int, RiskLevel]] = (
    (10, RiskLevel.VERY_HIGH),
    (8, RiskLevel.HIGH),
    (6, RiskLevel.MEDIUM),
)


def elevation_severity(elevation_m: float) -> int:
    """Severity 0-15 for an elevation; lower ground is more severe."""
    if math.isnan(elevation_m):
        return 0
    for bound, severity in ELEVATION_LADDER:
        if elevation_m < bound:
            return severity
    return 0


def rainfall_severity(rainfall_mm: float) -> int:
    """Severity 0-15 for expected rainfall; more rain is more severe."""
    if math.isnan(rainfall_mm):
        return 0
    for bound, severity in RAINFALL_LADDER:
        if rainfall_mm > bound:
            return severity
    return 0


def weighted_tenths(elevation_sev: int, rainfall_sev: int, near_water: bool) -> int:
    """Weighted severity in tenths of a unit, doubled near water."""
    tenths = ELEVATION_WEIGHT_TENTHS * elevation_sev + RAINFALL_WEIGHT_TENTHS * rainfall_sev
    if near_water:
        tenths *= NEAR_WATER_MULTIPLIER
    return tenths


def classify(tenths: int) -> RiskLevel:
    """Map a weighted severity (tenths of a unit) onto a risk level."""
    for units, level in LEVEL_THRESHOLDS:
        if tenths >= units * 10:
            return level
    return RiskLevel.LOW


def severity_to_score(severity: int) -> float:
    return severity * SCORE_UNIT


def tenths_to_score(tenths: int) -> float:
    return tenths * SCORE_UNIT / 10


class RiskEngine:
    """Combine elevation, rainfall and water proximity into a RiskAssessment.

    Stateless; the same inputs always produce the same score and level.
    """

    def assess(
        self,
        elevation_m: float,
        rainfall_mm: float,
        near_water: bool,
        *,
        reading: ElevationReading | None = None,
    ) -> RiskAssessment:
        e_sev = elevation_severity(elevation_m)
        r_sev = rainfall_severity(rainfall_mm)
        tenths = weighted_tenths(e_sev, r_sev, near_water)
        return RiskAssessment(
            score=tenths_to_score(tenths),
            level=classify(tenths),
            elevation_m=elevation_m,
            rainfall_mm=rainfall_mm,
            near_water=bool(near_water),
            elevation_score=severity_to_score(e_sev),
            rainfall_score=severity_to_score(r_sev),
            elevation=reading,
        )

    def assess_reading(self, reading: ElevationReading, rainfall_mm: float, near_water: bool) -> RiskAssessment:
        """Convenience wrapper taking a resolved ElevationReading."""
        return self.assess(reading.elevation_m, rainfall_mm, near_water, reading=reading)


def assess_risk(elevation_m: float, rainfall_mm: float, near_water: bool) -> RiskAssessment:
    """Module-level shortcut for ``RiskEngine().assess``."""
    return RiskEngine().assess(elevation_m, rainfall_mm, near_water)
