"""Rainfall estimate for a point from the NWS text forecast.

The forecast has no quantitative precipitation amount per period, so each of
the first few periods is classified by keyword and mapped onto a millimeter
bucket; the buckets are summed. Any failure to obtain a forecast falls back to
the simulated regional rainfall, so ``fetch_rainfall`` never raises.
"""

from __future__ import annotations

import asyncio
import random
import re
from enum import Enum
from typing import Iterable, Optional

from floodrisk import config
from floodrisk.cache import Clock
from floodrisk.data_sources.base import ForecastProvider
from floodrisk.data_sources.factory import build_forecast_provider
from floodrisk.data_sources.nws_client import ForecastPeriod
from floodrisk.domain import Coordinate
from floodrisk.errors import ProviderFailure
from floodrisk.events import EventEmitter
from floodrisk.simulation import simulated_rainfall
from utils.logging_utils import EventHook, get_tagged_logger

logger = get_tagged_logger(__name__, tag="rainfall_service")

MAX_PERIODS = 4

PRECIPITATION_PATTERN = re.compile(
    r"\b(rain|shower|storm|thunderstorm|precipitation|drizzle|sprinkle)", re.IGNORECASE
)
HEAVY_PATTERN = re.compile(r"\b(heavy|torrential|severe|intense|flood)", re.IGNORECASE)
MODERATE_PATTERN = re.compile(r"\b(moderate|steady|periods of|widespread)", re.IGNORECASE)


class Intensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"


INTENSITY_MM = {
    Intensity.HEAVY: 60.0,
    Intensity.MODERATE: 25.0,
    Intensity.LIGHT: 8.0,
}


def classify_description(description: str) -> Optional[Intensity]:
    """Return the precipitation intensity named in a forecast text, or None when it mentions none."""
    if not description or not PRECIPITATION_PATTERN.search(description):
        return None
    if HEAVY_PATTERN.search(description):
        return Intensity.HEAVY
    if MODERATE_PATTERN.search(description):
        return Intensity.MODERATE
    return Intensity.LIGHT


def estimate_period_mm(period: ForecastPeriod) -> float:
    intensity = classify_description(period.description)
    return INTENSITY_MM[intensity] if intensity else 0.0


def estimate_rainfall(periods: Iterable[ForecastPeriod], max_periods: int = MAX_PERIODS) -> float:
    """Sum the bucketed estimates of the first ``max_periods`` periods (mm)."""
    total = 0.0
    for index, period in enumerate(periods):
        if index >= max_periods:
            break
        total += estimate_period_mm(period)
    return total


class RainfallService:
    """Forecast-derived rainfall with a simulated floor."""

    def __init__(
        self,
        forecast: ForecastProvider | None = None,
        *,
        settings: config.Settings | None = None,
        rng: random.Random | None = None,
        clock: Clock | None = None,
        on_event: EventHook | None = None,
        max_periods: int = MAX_PERIODS,
    ) -> None:
        self.settings = settings or config.settings
        self.forecast = forecast or build_forecast_provider()
        self.timeout = float(self.settings.weather_timeout_seconds)
        self.max_periods = max_periods
        self._rng = rng or random.Random()
        self._clock = clock
        self._emit = EventEmitter(logger, on_event)

    async def fetch_rainfall(self, coord: Coordinate) -> float:
        """Expected rainfall in millimeters for the next few forecast periods."""
        try:
            periods = await asyncio.wait_for(
                asyncio.to_thread(self.forecast.fetch_periods, coord, self.timeout),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            return self._simulate(coord, reason=f"timed out after {self.timeout:g}s")
        except ProviderFailure as exc:
            return self._simulate(coord, reason=str(exc))
        except Exception as exc:
            return self._simulate(coord, reason=f"unexpected error: {exc!r}")

        if not periods:
            return self._simulate(coord, reason="forecast has no periods")

        rainfall = estimate_rainfall(periods, self.max_periods)
        self._emit("rainfall.forecast", periods=min(len(periods), self.max_periods), rainfall_mm=rainfall)
        return rainfall

    def _simulate(self, coord: Coordinate, *, reason: str) -> float:
        rainfall = simulated_rainfall(coord, self._rng, self._clock)
        self._emit("rainfall.simulated", coordinate=coord.as_text(), reason=reason, rainfall_mm=rainfall)
        return rainfall
