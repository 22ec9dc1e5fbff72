from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any, Protocol

import httpx

from geo_engine.distance import haversine_distance_km
from geo_engine.models import GeoPoint
from geo_engine.travel import estimate_travel_minutes

from facility_search.core.exceptions import ProviderUnavailableError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility
from facility_search.providers.http import ProviderHttpClient

logger = logging.getLogger(__name__)


class FacilityProvider(Protocol):
    provider_name: str

    async def search(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]: ...


def pick(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in item and item[key] not in (None, ""):
            return item[key]
    return None


def to_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def join_present(parts: Sequence[str | None], separator: str = ", ") -> str | None:
    present = [part.strip() for part in parts if part and part.strip()]
    return separator.join(present) or None


def first_component(display_name: str | None) -> str | None:
    if not display_name:
        return None
    return to_text(display_name.split(",")[0])


class BaseProviderAdapter(ABC):
    provider_name: str
    source: FacilitySource
    id_prefix: str
    minutes_per_km: float = 3.0

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    @abstractmethod
    async def search(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]:
        raise NotImplementedError

    @asynccontextmanager
    async def open_client(self) -> AsyncIterator[ProviderHttpClient]:
        factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
        async with factory() as client:
            yield ProviderHttpClient(self.provider_name, client)

    def build_facility(
        self,
        origin: GeoPoint,
        native_id: Any,
        name: str | None,
        facility_type: FacilityType,
        lat: Any,
        lng: Any,
        phone: str | None = None,
        address: str | None = None,
        website: str | None = None,
        is_open: bool | None = None,
        rating: float | None = None,
    ) -> MedicalFacility | None:
        latitude = to_float(lat)
        longitude = to_float(lng)
        clean_name = to_text(name)
        if clean_name is None or latitude is None or longitude is None or native_id in (None, ""):
            return None
        location = GeoPoint(lat=latitude, lng=longitude)
        if not location.is_valid():
            return None
        distance_km = haversine_distance_km(origin, location)
        return MedicalFacility(
            id=f"{self.id_prefix}_{native_id}",
            name=clean_name,
            facility_type=facility_type,
            location=location,
            distance_km=distance_km,
            estimated_travel_minutes=estimate_travel_minutes(distance_km, self.minutes_per_km),
            source=self.source,
            phone=to_text(phone),
            address=to_text(address),
            website=to_text(website),
            is_open=is_open,
            rating=rating,
        )


class CategorySearchAdapter(BaseProviderAdapter):
    """Adapter that issues one upstream request per facility category.

    Categories run sequentially with ``delay_seconds`` between requests. A
    failed category is skipped; the adapter only fails when every category
    failed.
    """

    categories: tuple[str, ...] = ()

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        delay_seconds: float = 1.0,
        sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, client_factory=client_factory)
        self._delay_seconds = delay_seconds
        self._sleep_fn = sleep_fn

    async def search(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]:
        facilities: dict[str, MedicalFacility] = {}
        failures: list[ProviderUnavailableError] = []
        async with self.open_client() as http:
            for index, category in enumerate(self.categories):
                if index > 0 and self._delay_seconds > 0:
                    await self._sleep_fn(self._delay_seconds)
                try:
                    batch = await self.search_category(http, point, radius_km, category, set(facilities))
                except ProviderUnavailableError as exc:
                    failures.append(exc)
                    logger.warning(
                        "provider_category_failed",
                        extra={"provider": self.provider_name, "category": category, "error": str(exc)},
                    )
                    continue
                for facility in batch:
                    facilities.setdefault(facility.id, facility)

        if self.categories and len(failures) == len(self.categories):
            raise ProviderUnavailableError(self.provider_name, "all category requests failed") from failures[-1]
        logger.info(
            "provider_search_completed",
            extra={"provider": self.provider_name, "facility_count": len(facilities)},
        )
        return list(facilities.values())

    @abstractmethod
    async def search_category(
        self,
        http: ProviderHttpClient,
        point: GeoPoint,
        radius_km: float,
        category: str,
        known_ids: set[str],
    ) -> list[MedicalFacility]:
        raise NotImplementedError
