from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from time import perf_counter

import httpx

from geo_engine.models import GeoPoint

from facility_search.cache import InMemoryKeyValueStore, KeyValueStore, SearchCache, cache_key
from facility_search.config import SearchSettings
from facility_search.core.exceptions import CacheReadError, ProviderNormalizationError, SyntheticGenerationError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import MedicalFacility
from facility_search.core.postprocess import rank_facilities
from facility_search.providers.base import FacilityProvider
from facility_search.providers.factory import build_default_providers, provider_set_version
from facility_search.synthetic import SyntheticFacilityGenerator, static_fallback_facilities

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderAttempt:
    provider: str
    facilities: list[MedicalFacility] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class EarlyExitRule:
    """Stopping and skipping rules for the provider fold.

    ``min_results`` stops the fold once one provider alone delivered enough.
    ``skip_at_collected`` skips a named provider when the results collected
    so far already reach its threshold.
    """

    min_results: int = 5
    skip_at_collected: Mapping[str, int] = field(default_factory=dict)

    def should_stop(self, attempt: ProviderAttempt) -> bool:
        return not attempt.failed and len(attempt.facilities) >= self.min_results

    def should_skip(self, provider: str, collected: int) -> bool:
        threshold = self.skip_at_collected.get(provider)
        return threshold is not None and collected >= threshold


class FacilitySearchAggregator:
    def __init__(
        self,
        providers: Sequence[FacilityProvider],
        cache: SearchCache,
        settings: SearchSettings | None = None,
        synthetic_generator: SyntheticFacilityGenerator | None = None,
        metrics: InMemorySearchMetricsCollector | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        early_exit: EarlyExitRule | None = None,
    ) -> None:
        self._settings = settings or SearchSettings()
        self._providers = list(providers)
        self._cache = cache
        self._rng = rng or random.Random()
        self._synthetic_generator = synthetic_generator or SyntheticFacilityGenerator(self._rng)
        self._metrics = metrics
        self._clock = clock
        self._early_exit = early_exit or EarlyExitRule(
            min_results=self._settings.EARLY_EXIT_MIN_RESULTS,
            skip_at_collected={
                "osm_overpass": self._settings.OVERPASS_SKIP_MIN_COLLECTED,
                "nominatim": self._settings.NOMINATIM_SKIP_MIN_COLLECTED,
            },
        )

    async def search(self, latitude: float, longitude: float, radius_km: float = 5.0) -> list[MedicalFacility]:
        """Ranked facilities around a point; degrades instead of raising.

        Only invalid arguments (``ValueError``) and cancellation of the
        calling task escape this method.
        """
        point = GeoPoint(lat=latitude, lng=longitude)
        if not point.is_valid():
            raise ValueError("latitude must be within [-90, 90] and longitude within [-180, 180]")
        if radius_km <= 0:
            raise ValueError("radius_km must be > 0")

        started = perf_counter()
        key = cache_key(point)
        cached = await self._read_cache(key)
        if cached is not None:
            logger.info("facility_search_cache_hit", extra={"cache_key": key, "facility_count": len(cached)})
            self._observe("cache_hit", started)
            return cached

        try:
            facilities, outcome = await self._search_network(point, radius_km)
        except Exception:
            logger.exception("facility_search_failed", extra={"cache_key": key})
            self._increment_fallback("static")
            self._observe("static", started)
            return static_fallback_facilities(point)
        if outcome == "static":
            self._observe(outcome, started)
            return facilities

        await self._write_cache(key, facilities)
        logger.info(
            "facility_search_completed",
            extra={"cache_key": key, "facility_count": len(facilities), "outcome": outcome},
        )
        self._observe(outcome, started)
        return facilities

    async def collect(self, point: GeoPoint, radius_km: float) -> list[ProviderAttempt]:
        attempts: list[ProviderAttempt] = []
        collected = 0
        for provider in self._providers:
            if self._early_exit.should_skip(provider.provider_name, collected):
                logger.info(
                    "provider_search_skipped",
                    extra={"provider": provider.provider_name, "facility_count": collected},
                )
                continue
            attempt = await self._attempt(provider, point, radius_km)
            attempts.append(attempt)
            collected += len(attempt.facilities)
            if self._early_exit.should_stop(attempt):
                logger.info(
                    "facility_search_early_exit",
                    extra={"provider": attempt.provider, "facility_count": len(attempt.facilities)},
                )
                break
        return attempts

    async def _search_network(self, point: GeoPoint, radius_km: float) -> tuple[list[MedicalFacility], str]:
        attempts = await self.collect(point, radius_km)
        real = [facility for attempt in attempts for facility in attempt.facilities]
        all_failed = all(attempt.failed for attempt in attempts)
        outcome = "network"

        candidates = real
        if len(real) < self._settings.FALLBACK_MIN_RESULTS or all_failed:
            logger.warning(
                "facility_search_providers_exhausted",
                extra={
                    "facility_count": len(real),
                    "attempted": [attempt.provider for attempt in attempts],
                    "failed": [attempt.provider for attempt in attempts if attempt.failed],
                },
            )
            try:
                synthetic = self._generate_synthetic(point, radius_km)
            except SyntheticGenerationError:
                logger.exception("facility_search_synthetic_failed")
                self._increment_fallback("static")
                return static_fallback_facilities(point), "static"
            self._increment_fallback("synthetic")
            candidates = real + synthetic
            outcome = "synthetic"

        ranked = rank_facilities(candidates, max_results=self._settings.MAX_RESULTS, rng=self._rng)
        return ranked, outcome

    async def _attempt(self, provider: FacilityProvider, point: GeoPoint, radius_km: float) -> ProviderAttempt:
        name = provider.provider_name
        timeout = self._settings.PROVIDER_TIMEOUT_SECONDS
        try:
            if timeout:
                result = await asyncio.wait_for(provider.search(point, radius_km), timeout=timeout)
            else:
                result = await provider.search(point, radius_km)
            facilities = list(result)
            if not all(isinstance(item, MedicalFacility) for item in facilities):
                raise ProviderNormalizationError(name, "provider returned non-facility records")
        except Exception as exc:
            logger.warning(
                "provider_search_failed",
                extra={"provider": name, "error_type": exc.__class__.__name__, "error": str(exc)},
            )
            if self._metrics:
                self._metrics.increment_provider_error(name)
            return ProviderAttempt(provider=name, error=str(exc) or exc.__class__.__name__)

        if self._metrics:
            self._metrics.add_provider_results(name, len(facilities))
        logger.info("provider_search_succeeded", extra={"provider": name, "facility_count": len(facilities)})
        return ProviderAttempt(provider=name, facilities=facilities)

    def _generate_synthetic(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]:
        try:
            return self._synthetic_generator.generate(point, radius_km)
        except Exception as exc:
            raise SyntheticGenerationError(str(exc)) from exc

    async def _read_cache(self, key: str) -> list[MedicalFacility] | None:
        try:
            cached = await self._cache.get(key, now_ms=self._now_ms())
        except CacheReadError as exc:
            logger.warning("facility_search_cache_corrupt", extra={"cache_key": key, "error": str(exc)})
            self._increment_cache_error()
            cached = None
        except Exception as exc:
            logger.warning("facility_search_cache_read_failed", extra={"cache_key": key, "error": str(exc)})
            self._increment_cache_error()
            cached = None
        if self._metrics:
            if cached is None:
                self._metrics.increment_cache_miss()
            else:
                self._metrics.increment_cache_hit()
        return cached

    async def _write_cache(self, key: str, facilities: list[MedicalFacility]) -> None:
        try:
            await self._cache.set(key, facilities, now_ms=self._now_ms())
        except Exception as exc:
            logger.warning("facility_search_cache_write_failed", extra={"cache_key": key, "error": str(exc)})
            self._increment_cache_error()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _increment_cache_error(self) -> None:
        if self._metrics:
            self._metrics.increment_cache_error()

    def _increment_fallback(self, kind: str) -> None:
        if self._metrics:
            self._metrics.increment_fallback(kind)

    def _observe(self, outcome: str, started: float) -> None:
        if self._metrics:
            self._metrics.observe_search_duration(outcome, (perf_counter() - started) * 1000.0)


def build_aggregator(
    settings: SearchSettings,
    store: KeyValueStore | None = None,
    metrics: InMemorySearchMetricsCollector | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> FacilitySearchAggregator:
    providers = build_default_providers(settings, client_factory=client_factory)
    cache = SearchCache(
        store=store or InMemoryKeyValueStore(),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        version=provider_set_version(settings, providers),
    )
    return FacilitySearchAggregator(providers=providers, cache=cache, settings=settings, metrics=metrics)
