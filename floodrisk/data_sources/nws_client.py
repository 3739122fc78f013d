"""National Weather Service (api.weather.gov) forecast lookup.

Two hops: ``/points/{lat},{lng}`` yields a forecast URL for the grid cell,
which then returns a list of named forecast periods ("Tonight", "Tuesday").
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from floodrisk.config import settings
from floodrisk.data_sources.http import build_session, coerce_float, get_json
from floodrisk.domain import Coordinate
from floodrisk.errors import PermanentProviderFailure
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="nws_client")

SOURCE = "nws"

session = build_session(
    cache_name="nws",
    expire_after=settings.forecast_cache_seconds,
    retries=settings.weather_max_retries,
    user_agent=settings.user_agent,
)


@dataclass
class ForecastPeriod:
    """One NWS forecast period."""
    number: int
    name: str
    short_forecast: str
    detailed_forecast: str
    precipitation_probability: Optional[float] = None

    @property
    def description(self) -> str:
        """Free text used for precipitation classification."""
        return " ".join(part for part in (self.short_forecast, self.detailed_forecast) if part)


def _period_from_json(raw: dict, index: int) -> ForecastPeriod:
    """Normalize a raw period object."""
    pop = raw.get("probabilityOfPrecipitation")
    pop_value = coerce_float(pop.get("value")) if isinstance(pop, dict) else None
    return ForecastPeriod(
        number=int(raw.get("number") or index + 1),
        name=str(raw.get("name") or ""),
        short_forecast=str(raw.get("shortForecast") or ""),
        detailed_forecast=str(raw.get("detailedForecast") or ""),
        precipitation_probability=pop_value,
    )


def fetch_forecast_url(coord: Coordinate, timeout: float = 10, *, base_url: str | None = None) -> str:
    """Resolve the gridpoint forecast URL for a point."""
    base = (base_url or settings.nws_base_url).rstrip("/")
    url = f"{base}/points/{coord.latitude:.4f},{coord.longitude:.4f}"
    data = get_json(session, url, timeout=timeout, source=SOURCE, headers={"Accept": "application/geo+json"})
    forecast_url = ((data or {}).get("properties") or {}).get("forecast") if isinstance(data, dict) else None
    if not forecast_url:
        raise PermanentProviderFailure("points lookup returned no forecast reference", source=SOURCE)
    return forecast_url


def fetch_forecast_periods(coord: Coordinate, timeout: float = 10, *, base_url: str | None = None) -> List[ForecastPeriod]:
    """Return the forecast periods for a point, nearest first."""
    forecast_url = fetch_forecast_url(coord, timeout, base_url=base_url)
    data = get_json(session, forecast_url, timeout=timeout, source=SOURCE, headers={"Accept": "application/geo+json"})
    try:
        raw_periods = data["properties"]["periods"]
    except (KeyError, TypeError) as exc:
        raise PermanentProviderFailure("forecast payload has no periods", source=SOURCE) from exc

    periods = [_period_from_json(raw, i) for i, raw in enumerate(raw_periods or []) if isinstance(raw, dict)]
    logger.debug("Fetched NWS forecast periods", extra={"count": len(periods)})
    return periods
