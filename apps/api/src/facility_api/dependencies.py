from __future__ import annotations

import logging
import os

from facility_search.aggregator import FacilitySearchAggregator, build_aggregator
from facility_search.cache import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from facility_search.config import SearchSettings, load_settings
from facility_search.core.metrics import InMemorySearchMetricsCollector

logger = logging.getLogger(__name__)


def _build_store(settings: SearchSettings) -> KeyValueStore:
    if not settings.REDIS_URL:
        return InMemoryKeyValueStore()
    try:
        import redis.asyncio as redis

        client = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    except Exception as exc:
        logger.warning("facility_api_redis_unavailable", extra={"error": str(exc)})
        return InMemoryKeyValueStore()
    return RedisKeyValueStore(client, expire_seconds=settings.CACHE_TTL_SECONDS)


_settings = load_settings()
_search_metrics = InMemorySearchMetricsCollector()
_aggregator = build_aggregator(_settings, store=_build_store(_settings), metrics=_search_metrics)
_search_timeout_seconds = float(os.getenv("API_SEARCH_TIMEOUT_SECONDS", "30"))


def get_settings() -> SearchSettings:
    return _settings


def get_aggregator() -> FacilitySearchAggregator:
    return _aggregator


def get_search_metrics() -> InMemorySearchMetricsCollector:
    return _search_metrics


def get_search_timeout_seconds() -> float:
    return _search_timeout_seconds
