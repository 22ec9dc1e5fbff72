from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from geo_engine.models import GeoPoint

from facility_search.core.exceptions import ProviderNormalizationError, ProviderUnavailableError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility
from facility_search.providers.base import CategorySearchAdapter, pick, to_float
from facility_search.providers.http import ProviderHttpClient

logger = logging.getLogger(__name__)

MAX_RADIUS_METERS = 50_000
DETAIL_FIELDS = (
    "place_id,name,formatted_phone_number,international_phone_number,website,rating,"
    "opening_hours,geometry,formatted_address,vicinity,types"
)

_TYPE_MAP: dict[str, FacilityType] = {
    "hospital": FacilityType.HOSPITAL,
    "pharmacy": FacilityType.PHARMACY,
    "doctor": FacilityType.DOCTOR,
    "dentist": FacilityType.DENTIST,
    "health": FacilityType.CLINIC,
    "medical_center": FacilityType.CLINIC,
    "physiotherapist": FacilityType.CLINIC,
}


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def classify_google_types(types: list[str]) -> FacilityType:
    for place_type in types:
        mapped = _TYPE_MAP.get(place_type)
        if mapped is not None:
            return mapped
    joined = " ".join(types).lower()
    if "hospital" in joined:
        return FacilityType.HOSPITAL
    if "pharmacy" in joined:
        return FacilityType.PHARMACY
    if "dentist" in joined or "dental" in joined:
        return FacilityType.DENTIST
    if "doctor" in joined or "physician" in joined:
        return FacilityType.DOCTOR
    return FacilityType.CLINIC


class GooglePlacesAdapter(CategorySearchAdapter):
    provider_name = "google_places"
    source = FacilitySource.GOOGLE
    id_prefix = "google"
    categories = ("hospital", "pharmacy", "doctor", "dentist", "health")

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api/place",
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        delay_seconds: float = 1.0,
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
        payload = await http.get_json(
            f"{self._base_url}/nearbysearch/json",
            params={
                "location": point.as_text(),
                "radius": int(min(radius_km * 1000, MAX_RADIUS_METERS)),
                "type": category,
                "key": self._api_key,
            },
        )
        if not isinstance(payload, dict):
            raise ProviderNormalizationError(self.provider_name, "nearby payload is not a json object")
        status = payload.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise ProviderUnavailableError(self.provider_name, f"nearby search status={status}")
        results = payload.get("results")
        if not isinstance(results, list):
            raise ProviderNormalizationError(self.provider_name, "nearby payload missing list field 'results'")

        facilities: list[MedicalFacility] = []
        for place in results:
            if not isinstance(place, dict):
                continue
            place_id = place.get("place_id")
            facility_id = f"{self.id_prefix}_{place_id}"
            if not place_id or facility_id in known_ids:
                continue
            known_ids.add(facility_id)
            details = await self._fetch_details(http, place_id)
            facility = self._to_facility(point, {**place, **(details or {})})
            if facility is not None:
                facilities.append(facility)
        return facilities

    async def _fetch_details(self, http: ProviderHttpClient, place_id: str) -> dict[str, Any] | None:
        try:
            payload = await http.get_json(
                f"{self._base_url}/details/json",
                params={"place_id": place_id, "fields": DETAIL_FIELDS, "key": self._api_key},
            )
        except ProviderUnavailableError as exc:
            logger.info(
                "google_place_details_failed",
                extra={"provider": self.provider_name, "place_id": place_id, "error": str(exc)},
            )
            return None
        if not isinstance(payload, dict) or payload.get("status") != "OK":
            return None
        result = payload.get("result")
        return result if isinstance(result, dict) else None

    def _to_facility(self, origin: GeoPoint, place: dict[str, Any]) -> MedicalFacility | None:
        geometry = _as_dict(place.get("geometry"))
        location = _as_dict(geometry.get("location"))
        open_now = _as_dict(place.get("opening_hours")).get("open_now")
        types = place.get("types")
        if not isinstance(types, list):
            types = []
        return self.build_facility(
            origin,
            native_id=place.get("place_id"),
            name=place.get("name"),
            facility_type=classify_google_types([str(item) for item in types]),
            lat=location.get("lat"),
            lng=location.get("lng"),
            phone=pick(place, "formatted_phone_number", "international_phone_number"),
            address=pick(place, "formatted_address", "vicinity"),
            website=place.get("website"),
            is_open=open_now if isinstance(open_now, bool) else None,
            rating=to_float(place.get("rating")),
        )
