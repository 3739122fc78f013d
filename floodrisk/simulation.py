"""Simulated elevation and rainfall, used when every real source has failed.

Values are shaped by region (named mountain ranges, coasts, wet and dry
zones) with bounded jitter, so a fallback reading is plausible for the
continental US rather than uniformly random.
"""

from __future__ import annotations

import math
import random
import time
from typing import Callable, Optional

from floodrisk.domain import Coordinate

SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

BASE_ELEVATION_M = 100.0
ELEVATION_JITTER_M = 200.0  # total span, centred on zero
RAINFALL_JITTER_MM = 20.0
SEASONAL_AMPLITUDE = 0.3


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def regional_elevation_base(coord: Coordinate) -> float:
    """Deterministic part of the simulated elevation (meters)."""
    lat, lng = coord.latitude, coord.longitude
    base = BASE_ELEVATION_M

    if lat > 40 and lng < -100:
        base += 1500  # Rocky Mountains
    if 35 < lat < 45 and -85 < lng < -75:
        base += 800  # Appalachians
    if 30 < lat < 40 and -120 < lng < -110:
        base += 1200  # Sierra Nevada

    if abs(lng) > 75 and lat < 35:
        base -= 50  # East/Gulf coast
    if lng < -120 and lat < 40:
        base -= 30  # West coast
    return base


def simulated_elevation(coord: Coordinate, rng: Optional[random.Random] = None) -> float:
    """Regional base plus up to +/-100 m of jitter, clamped at sea level and rounded."""
    jitter = (_rng(rng).random() - 0.5) * ELEVATION_JITTER_M
    return float(max(0, round(regional_elevation_base(coord) + jitter)))


def regional_rainfall_base(coord: Coordinate) -> float:
    """Deterministic part of the simulated rainfall (millimeters)."""
    lat, lng = coord.latitude, coord.longitude
    base = 0.0

    if 25 < lat < 35 and -90 < lng < -80:
        base += 30  # Southeast
    if 40 < lat < 50 and -125 < lng < -120:
        base += 25  # Pacific Northwest
    if 20 < lat < 30 and -85 < lng < -75:
        base += 35  # Florida

    if 35 < lat < 45 and -120 < lng < -100:
        base -= 10  # Southwest
    if 40 < lat < 50 and -110 < lng < -95:
        base -= 5  # Great Plains
    return base


def seasonal_factor(now: float) -> float:
    """Sinusoidal multiplier in [0.7, 1.3] over a calendar year (epoch seconds)."""
    return 1 + math.sin(now / SECONDS_PER_YEAR * 2 * math.pi) * SEASONAL_AMPLITUDE


def simulated_rainfall(
    coord: Coordinate,
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], float]] = None,
) -> float:
    """Regional base scaled by season plus up to 20 mm of jitter, floored at zero, in mm."""
    now = (clock or time.time)()
    rainfall = regional_rainfall_base(coord) * seasonal_factor(now)
    rainfall += _rng(rng).random() * RAINFALL_JITTER_MM
    return max(0.0, round(rainfall * 10) / 10)
