from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from geo_engine.geofence import bounding_box, is_point_inside_radius
from geo_engine.models import GeoPoint

from facility_search.core.exceptions import ProviderNormalizationError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility
from facility_search.providers.base import CategorySearchAdapter, first_component, pick, to_float
from facility_search.providers.http import ProviderHttpClient

_KEYWORDS: tuple[tuple[tuple[str, ...], FacilityType], ...] = (
    (("hospital",), FacilityType.HOSPITAL),
    (("pharmacy", "chemist"), FacilityType.PHARMACY),
    (("dental", "dentist"), FacilityType.DENTIST),
    (("doctor", "physician"), FacilityType.DOCTOR),
    (("emergency", "urgent"), FacilityType.EMERGENCY),
)


def classify_nominatim(result: dict[str, Any]) -> FacilityType:
    text = " ".join(
        str(result.get(key) or "") for key in ("display_name", "type", "category", "class")
    ).lower()
    for keywords, facility_type in _KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return facility_type
    return FacilityType.CLINIC


class NominatimAdapter(CategorySearchAdapter):
    provider_name = "nominatim"
    source = FacilitySource.NOMINATIM
    id_prefix = "nom"
    categories = ("hospital", "pharmacy", "clinic", "medical center", "urgent care")
    result_limit = 10

    def __init__(
        self,
        user_agent: str,
        base_url: str = "https://nominatim.openstreetmap.org",
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        delay_seconds: float = 1.0,
        sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not user_agent.strip():
            raise ValueError("nominatim requires a descriptive user agent")
        super().__init__(
            timeout_seconds=timeout_seconds,
            client_factory=client_factory,
            delay_seconds=delay_seconds,
            sleep_fn=sleep_fn,
        )
        self._user_agent = user_agent
        self._base_url = base_url.rstrip("/")

    async def search_category(
        self,
        http: ProviderHttpClient,
        point: GeoPoint,
        radius_km: float,
        category: str,
        known_ids: set[str],
    ) -> list[MedicalFacility]:
        payload = await http.get_json(
            f"{self._base_url}/search",
            params={
                "q": category,
                "format": "json",
                "addressdetails": 1,
                "limit": self.result_limit,
                "bounded": 1,
                "viewbox": bounding_box(point, radius_km).as_viewbox(),
            },
            headers={"User-Agent": self._user_agent},
        )
        if not isinstance(payload, list):
            raise ProviderNormalizationError(self.provider_name, "search payload is not a json array")

        facilities: list[MedicalFacility] = []
        for result in payload:
            if not isinstance(result, dict):
                continue
            lat = to_float(result.get("lat"))
            lng = to_float(result.get("lon"))
            if lat is None or lng is None:
                continue
            if not is_point_inside_radius(point, GeoPoint(lat=lat, lng=lng), radius_km):
                continue
            display_name = str(result.get("display_name") or "")
            facility = self.build_facility(
                point,
                native_id=result.get("place_id"),
                name=pick(result, "name") or first_component(display_name),
                facility_type=classify_nominatim(result),
                lat=lat,
                lng=lng,
                address=display_name or None,
            )
            if facility is not None:
                facilities.append(facility)
        return facilities
