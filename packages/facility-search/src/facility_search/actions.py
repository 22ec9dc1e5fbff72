from __future__ import annotations

from urllib.parse import quote

from geo_engine.models import GeoPoint

from facility_search.core.enhance import is_placeholder_phone
from facility_search.core.models import MedicalFacility

DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir"


def is_callable(facility: MedicalFacility) -> bool:
    return bool(facility.phone) and not is_placeholder_phone(facility.phone)


def dial_url(facility: MedicalFacility) -> str | None:
    if not is_callable(facility):
        return None
    return f"tel:{facility.phone}"


def directions_url(origin: GeoPoint, facility: MedicalFacility) -> str:
    location = facility.location
    if location.is_valid() and (location.lat, location.lng) != (0.0, 0.0):
        destination = location.as_text()
    else:
        destination = quote(f"{facility.name} {facility.address or ''}".strip(), safe="")
    return f"{DIRECTIONS_BASE_URL}/{origin.as_text()}/{destination}"
