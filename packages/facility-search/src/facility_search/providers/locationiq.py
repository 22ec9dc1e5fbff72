from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from geo_engine.models import GeoPoint

from facility_search.core.exceptions import ProviderNormalizationError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility
from facility_search.providers.base import CategorySearchAdapter, first_component, pick
from facility_search.providers.http import ProviderHttpClient

_SEARCH_TYPE_MAP: dict[str, FacilityType] = {
    "hospital": FacilityType.HOSPITAL,
    "pharmacy": FacilityType.PHARMACY,
    "dentist": FacilityType.DENTIST,
    "doctors": FacilityType.DOCTOR,
}

_NAME_KEYWORDS: tuple[tuple[tuple[str, ...], FacilityType], ...] = (
    (("hospital", "medical center"), FacilityType.HOSPITAL),
    (("pharmacy", "drugstore"), FacilityType.PHARMACY),
    (("dental", "dentist"), FacilityType.DENTIST),
    (("doctor", "physician", "dr."), FacilityType.DOCTOR),
    (("emergency", "urgent"), FacilityType.EMERGENCY),
)


def classify_locationiq(search_type: str, display_name: str) -> FacilityType:
    mapped = _SEARCH_TYPE_MAP.get(search_type)
    if mapped is not None:
        return mapped
    name = display_name.lower()
    for keywords, facility_type in _NAME_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return facility_type
    return FacilityType.CLINIC


class LocationIQAdapter(CategorySearchAdapter):
    provider_name = "locationiq"
    source = FacilitySource.LOCATIONIQ
    id_prefix = "liq"
    categories = ("hospital", "pharmacy", "clinic", "doctors", "dentist", "health")
    result_limit = 20

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://us1.locationiq.com/v1",
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        delay_seconds: float = 0.5,
        sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(
            timeout_seconds=timeout_seconds,
            client_factory=client_factory,
            delay_seconds=delay_seconds,
            sleep_fn=sleep_fn,
        )
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def search_category(
        self,
        http: ProviderHttpClient,
        point: GeoPoint,
        radius_km: float,
        category: str,
        known_ids: set[str],
    ) -> list[MedicalFacility]:
        # LocationIQ answers 404 {"error": "No results found"} for an empty area.
        payload = await http.get_json(
            f"{self._base_url}/nearby",
            params={
                "key": self._api_key,
                "lat": point.lat,
                "lon": point.lng,
                "tag": f"amenity:{category}",
                "radius": int(radius_km * 1000),
                "format": "json",
                "limit": self.result_limit,
            },
            empty_statuses=frozenset({404}),
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ProviderNormalizationError(self.provider_name, "nearby payload is not a json array")

        facilities: list[MedicalFacility] = []
        for place in payload:
            if not isinstance(place, dict):
                continue
            display_name = str(place.get("display_name") or "")
            facility = self.build_facility(
                point,
                native_id=pick(place, "place_id", "osm_id"),
                name=pick(place, "name") or first_component(display_name),
                facility_type=classify_locationiq(category, display_name),
                lat=place.get("lat"),
                lng=place.get("lon"),
                phone=pick(place, "phone"),
                address=display_name or None,
            )
            if facility is not None:
                facilities.append(facility)
        return facilities
