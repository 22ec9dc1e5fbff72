from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol

from geo_engine.models import GeoPoint, format_coordinate

from facility_search.core.exceptions import CacheReadError
from facility_search.core.models import MedicalFacility

logger = logging.getLogger(__name__)

CACHE_GRID_PLACES = 3


class KeyValueStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class RedisLikeClient(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ex: int | None = None) -> Any: ...


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._items.get(key)

    async def set(self, key: str, value: str) -> None:
        self._items[key] = value


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, client: RedisLikeClient, expire_seconds: int | None = None) -> None:
        self._client = client
        self._expire_seconds = expire_seconds

    async def get(self, key: str) -> str | None:
        raw = await self._client.get(key)
        if raw is None:
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value, ex=self._expire_seconds or None)


def cache_key(point: GeoPoint) -> str:
    lat = format_coordinate(point.lat, CACHE_GRID_PLACES)
    lng = format_coordinate(point.lng, CACHE_GRID_PLACES)
    return f"medical_{lat}_{lng}"


@dataclass(frozen=True)
class SearchCacheEntry:
    facilities: list[MedicalFacility]
    timestamp_ms: int
    version: str

    def is_fresh(self, now_ms: int, ttl_seconds: int, version: str) -> bool:
        if self.version != version:
            return False
        return now_ms - self.timestamp_ms < ttl_seconds * 1000

    def to_json(self) -> str:
        payload = {
            "facilities": [facility.to_dict() for facility in self.facilities],
            "timestamp": self.timestamp_ms,
            "version": self.version,
        }
        return json.dumps(payload, ensure_ascii=True)

    @classmethod
    def from_json(cls, raw: str) -> SearchCacheEntry:
        try:
            payload = json.loads(raw)
            return cls(
                facilities=[MedicalFacility.from_dict(item) for item in payload["facilities"]],
                timestamp_ms=int(payload["timestamp"]),
                version=str(payload.get("version", "")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CacheReadError(f"malformed search cache entry: {exc}") from exc


class SearchCache:
    """Facility lists per ~111 m grid cell, expiring by capture age."""

    def __init__(self, store: KeyValueStore, ttl_seconds: int = 1800, version: str = "v1") -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds
        self.version = version

    async def get(self, key: str, now_ms: int) -> list[MedicalFacility] | None:
        raw = await self._store.get(key)
        if not raw:
            return None
        entry = SearchCacheEntry.from_json(raw)
        if not entry.is_fresh(now_ms, self._ttl_seconds, self.version):
            logger.info("facility_search_cache_stale", extra={"cache_key": key, "cached_version": entry.version})
            return None
        return entry.facilities

    async def set(self, key: str, facilities: list[MedicalFacility], now_ms: int) -> None:
        entry = SearchCacheEntry(facilities=facilities, timestamp_ms=now_ms, version=self.version)
        await self._store.set(key, entry.to_json())
