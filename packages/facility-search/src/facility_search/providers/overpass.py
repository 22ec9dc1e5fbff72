from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from geo_engine.models import GeoPoint

from facility_search.core.exceptions import ProviderNormalizationError
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility
from facility_search.providers.base import BaseProviderAdapter, join_present, pick

logger = logging.getLogger(__name__)

_AMENITY_VALUES = ("hospital", "pharmacy", "clinic", "doctors", "dentist")


def build_overpass_query(point: GeoPoint, radius_km: float, timeout_seconds: int = 30) -> str:
    around = f"(around:{int(radius_km * 1000)},{point.lat},{point.lng})"
    statements = [f'nwr["amenity"="{value}"]{around};' for value in _AMENITY_VALUES]
    statements.append(f'nwr["healthcare"]{around};')
    statements.append(f'nwr["emergency"="yes"]{around};')
    statements.append(f'nwr["medical"]{around};')
    body = "".join(statements)
    return f"[out:json][timeout:{timeout_seconds}];({body});out center;"


def classify_osm_tags(tags: dict[str, Any]) -> FacilityType:
    amenity = tags.get("amenity")
    healthcare = tags.get("healthcare")
    if "hospital" in (amenity, healthcare):
        return FacilityType.HOSPITAL
    if "pharmacy" in (amenity, healthcare):
        return FacilityType.PHARMACY
    if "dentist" in (amenity, healthcare):
        return FacilityType.DENTIST
    if amenity == "doctors" or healthcare == "doctor":
        return FacilityType.DOCTOR
    if tags.get("emergency") == "yes":
        return FacilityType.EMERGENCY
    return FacilityType.CLINIC


def format_osm_address(tags: dict[str, Any]) -> str | None:
    street_line = join_present([tags.get("addr:housenumber"), tags.get("addr:street")], separator=" ")
    return join_present([street_line, tags.get("addr:city"), tags.get("addr:postcode")])


def parse_opening_hours(opening_hours: Any) -> bool | None:
    if not isinstance(opening_hours, str) or not opening_hours.strip():
        return None
    value = opening_hours.strip().lower()
    if "24/7" in value:
        return True
    if value in {"off", "closed"}:
        return False
    return None


class OverpassAdapter(BaseProviderAdapter):
    provider_name = "osm_overpass"
    source = FacilitySource.OSM
    id_prefix = "osm"

    def __init__(
        self,
        url: str = "https://overpass-api.de/api/interpreter",
        timeout_seconds: float = 30.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds, client_factory=client_factory)
        self._url = url

    async def search(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]:
        query = build_overpass_query(point, radius_km)
        async with self.open_client() as http:
            payload = await http.post_form_json(self._url, data={"data": query})
        if not isinstance(payload, dict):
            raise ProviderNormalizationError(self.provider_name, "overpass payload is not a json object")
        elements = payload.get("elements") or []
        if not isinstance(elements, list):
            raise ProviderNormalizationError(self.provider_name, "overpass payload missing list field 'elements'")

        facilities: dict[str, MedicalFacility] = {}
        for element in elements:
            facility = self._to_facility(point, element)
            if facility is not None:
                facilities.setdefault(facility.id, facility)
        logger.info(
            "provider_search_completed",
            extra={"provider": self.provider_name, "facility_count": len(facilities)},
        )
        return list(facilities.values())

    def _to_facility(self, origin: GeoPoint, element: Any) -> MedicalFacility | None:
        if not isinstance(element, dict):
            return None
        tags = element.get("tags")
        if not isinstance(tags, dict):
            return None
        lat = element.get("lat")
        lng = element.get("lon")
        center = element.get("center")
        if (lat is None or lng is None) and isinstance(center, dict):
            lat = center.get("lat")
            lng = center.get("lon")
        element_id = element.get("id")
        native_id = f"{element.get('type', '')}{element_id}" if element_id is not None else None
        return self.build_facility(
            origin,
            native_id=native_id,
            name=tags.get("name"),
            facility_type=classify_osm_tags(tags),
            lat=lat,
            lng=lng,
            phone=pick(tags, "phone", "contact:phone"),
            address=format_osm_address(tags),
            website=pick(tags, "website", "contact:website"),
            is_open=parse_opening_hours(tags.get("opening_hours")),
        )
