"""Elevation resolution with an ordered provider fallback chain and a TTL cache.

``ElevationResolver.resolve`` never raises: providers are tried strictly in
order, the first non-null value wins and is cached, and when every provider
fails a simulated reading (``source=Simulated``, ``accuracy=low``) is cached
and returned instead.
"""
from __future__ import annotations

import asyncio
import random
from typing import Iterable, List, Optional

from floodrisk import config
from floodrisk.cache import Clock, TTLCache
from floodrisk.data_sources.base import ElevationProviderDescriptor
from floodrisk.data_sources.factory import DEFAULT_ELEVATION_ORDER, build_elevation_providers
from floodrisk.domain import Accuracy, Coordinate, ElevationReading, ElevationSource
from floodrisk.errors import PermanentProviderFailure, ProviderFailure, TransientProviderFailure
from floodrisk.events import EventEmitter
from floodrisk.simulation import simulated_elevation
from utils.logging_utils import EventHook, get_tagged_logger

logger = get_tagged_logger(__name__, tag="elevation_service")


class ElevationResolver:
    """Resolve elevation for a point through the configured providers."""

    def __init__(
        self,
        providers: Optional[Iterable[ElevationProviderDescriptor]] = None,
        *,
        settings: config.Settings | None = None,
        cache: TTLCache[ElevationReading] | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        on_event: EventHook | None = None,
    ) -> None:
        self.settings = settings or config.settings
        chain = list(providers) if providers is not None else build_elevation_providers(self.settings)
        if not chain:
            chain = build_elevation_providers(self.settings, order=DEFAULT_ELEVATION_ORDER)
        self.providers: List[ElevationProviderDescriptor] = chain
        if cache is None:
            cache = TTLCache(ttl_seconds=self.settings.elevation_cache_ttl_seconds, clock=clock)
        self.cache: TTLCache[ElevationReading] = cache
        self.timeout = float(self.settings.elevation_timeout_seconds)
        self.max_retries = max(0, int(self.settings.elevation_max_retries))
        self.retry_backoff = float(self.settings.retry_backoff_seconds)
        self._rng = rng or random.Random()
        self._emit = EventEmitter(logger, on_event)

    async def resolve(self, coord: Coordinate) -> ElevationReading:
        """Return a reading for ``coord``; falls back to simulated data, never raises."""
        key = coord.rounded()
        cached = self.cache.get(key)
        if cached is not None:
            self._emit("elevation.cache_hit", coordinate=key.as_text(), source=cached.source.value)
            return cached

        for provider in self.providers:
            try:
                elevation = await self._call_with_retries(provider, coord)
            except ProviderFailure as exc:
                self._emit(
                    "elevation.provider_failed",
                    provider=provider.name,
                    retryable=exc.retryable,
                    error=str(exc),
                )
                continue
            if elevation is None:
                self._emit("elevation.provider_empty", provider=provider.name)
                continue

            reading = ElevationReading(elevation_m=elevation, source=provider.source, accuracy=provider.accuracy)
            self.cache.set(key, reading)
            self._emit("elevation.resolved", provider=provider.name, elevation_m=elevation)
            return reading

        reading = ElevationReading(
            elevation_m=simulated_elevation(key, self._rng),
            source=ElevationSource.SIMULATED,
            accuracy=Accuracy.LOW,
        )
        self.cache.set(key, reading)
        self._emit("elevation.simulated", coordinate=key.as_text(), elevation_m=reading.elevation_m)
        return reading

    async def _call_with_retries(self, provider: ElevationProviderDescriptor, coord: Coordinate) -> Optional[float]:
        """Call one provider with a time bound, retrying transient failures up to ``max_retries``."""
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(provider.fetch, coord, self.timeout),
                    timeout=self.timeout,
                )
            except asyncio.TimeoutError:
                failure: ProviderFailure = TransientProviderFailure(
                    f"timed out after {self.timeout:g}s", source=provider.name
                )
            except ProviderFailure as exc:
                failure = exc
            except Exception as exc:
                failure = PermanentProviderFailure(f"unexpected error: {exc!r}", source=provider.name)

            if not failure.retryable or attempt >= attempts:
                raise failure
            self._emit("elevation.retry", provider=provider.name, attempt=attempt, error=str(failure))
            if self.retry_backoff > 0:
                await asyncio.sleep(self.retry_backoff * attempt)
        return None
