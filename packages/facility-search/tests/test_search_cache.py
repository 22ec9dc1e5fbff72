import json

import pytest

from geo_engine.models import GeoPoint

from facility_search.cache import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    SearchCache,
    SearchCacheEntry,
    cache_key,
)
from facility_search.core.exceptions import CacheReadError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility


class FakeRedisClient:
    def __init__(self) -> None:
        self.values: dict[str, bytes] = {}
        self.expirations: dict[str, int | None] = {}

    async def get(self, key: str) -> bytes | None:
        return self.values.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.values[key] = value.encode("utf-8")
        self.expirations[key] = ex
        return True


def _facility() -> MedicalFacility:
    return MedicalFacility(
        id="osm_node7",
        name="Duane Reade",
        facility_type=FacilityType.PHARMACY,
        location=GeoPoint(lat=40.7135, lng=-74.0071),
        distance_km=0.12,
        estimated_travel_minutes=0,
        source=FacilitySource.OSM,
        phone="+1-212-227-0400",
    )


def test_cache_key_rounds_to_three_places() -> None:
    assert cache_key(GeoPoint(lat=40.71284, lng=-74.00601)) == "medical_40.713_-74.006"
    assert cache_key(GeoPoint(lat=40.7128, lng=-74.0064)) == cache_key(GeoPoint(lat=40.71251, lng=-74.00551))


def test_cache_key_folds_negative_zero_coordinates() -> None:
    assert cache_key(GeoPoint(lat=-0.0001, lng=0.0)) == "medical_0.000_0.000"
    assert cache_key(GeoPoint(lat=0.0001, lng=-0.0004)) == "medical_0.000_0.000"


@pytest.mark.asyncio
async def test_search_cache_returns_fresh_entry() -> None:
    cache = SearchCache(store=InMemoryKeyValueStore(), ttl_seconds=1800, version="v1:osm_overpass")
    await cache.set("medical_40.713_-74.006", [_facility()], now_ms=1_000_000)

    cached = await cache.get("medical_40.713_-74.006", now_ms=1_000_000 + 1_799_999)

    assert cached == [_facility()]


@pytest.mark.asyncio
async def test_search_cache_treats_expired_entry_as_miss() -> None:
    cache = SearchCache(store=InMemoryKeyValueStore(), ttl_seconds=1800)
    await cache.set("key", [_facility()], now_ms=0)

    assert await cache.get("key", now_ms=1_800_000) is None


@pytest.mark.asyncio
async def test_search_cache_treats_version_mismatch_as_miss() -> None:
    store = InMemoryKeyValueStore()
    await SearchCache(store=store, version="v1:osm_overpass").set("key", [_facility()], now_ms=0)

    cached = await SearchCache(store=store, version="v1:google_places+osm_overpass").get("key", now_ms=1)

    assert cached is None


@pytest.mark.asyncio
async def test_search_cache_raises_cache_read_error_for_malformed_entry() -> None:
    store = InMemoryKeyValueStore()
    await store.set("key", "{not json")
    cache = SearchCache(store=store)

    with pytest.raises(CacheReadError):
        await cache.get("key", now_ms=0)


def test_search_cache_entry_serializes_documented_fields() -> None:
    entry = SearchCacheEntry(facilities=[_facility()], timestamp_ms=42, version="v1")
    payload = json.loads(entry.to_json())

    assert set(payload) == {"facilities", "timestamp", "version"}
    assert payload["timestamp"] == 42
    assert SearchCacheEntry.from_json(entry.to_json()) == entry


def test_search_cache_entry_rejects_missing_timestamp() -> None:
    with pytest.raises(CacheReadError):
        SearchCacheEntry.from_json(json.dumps({"facilities": [], "version": "v1"}))


@pytest.mark.asyncio
async def test_redis_store_round_trip_through_fake_client() -> None:
    client = FakeRedisClient()
    cache = SearchCache(store=RedisKeyValueStore(client, expire_seconds=1800), version="v1")

    await cache.set("medical_40.713_-74.006", [_facility()], now_ms=5)
    cached = await cache.get("medical_40.713_-74.006", now_ms=6)

    assert cached == [_facility()]
    assert client.expirations["medical_40.713_-74.006"] == 1800


@pytest.mark.asyncio
async def test_redis_store_skips_expiry_when_not_configured() -> None:
    client = FakeRedisClient()
    store = RedisKeyValueStore(client)

    await store.set("key", "value")

    assert await store.get("key") == "value"
    assert await store.get("missing") is None
    assert client.expirations["key"] is None
