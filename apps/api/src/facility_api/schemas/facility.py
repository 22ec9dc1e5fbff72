from __future__ import annotations

from pydantic import BaseModel

from geo_engine.models import GeoPoint

from facility_search.actions import dial_url, directions_url, is_callable
from facility_search.core.models import MedicalFacility


class NearbyFacilityItem(BaseModel):
    id: str
    name: str
    facility_type: str
    lat: float
    lng: float
    distance_km: float
    estimated_travel_minutes: int
    source: str
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    is_open: bool | None = None
    rating: float | None = None
    callable: bool
    dial_url: str | None = None
    directions_url: str

    @classmethod
    def from_facility(cls, origin: GeoPoint, facility: MedicalFacility) -> NearbyFacilityItem:
        return cls(
            id=facility.id,
            name=facility.name,
            facility_type=facility.facility_type.value,
            lat=facility.location.lat,
            lng=facility.location.lng,
            distance_km=round(facility.distance_km, 3),
            estimated_travel_minutes=facility.estimated_travel_minutes,
            source=facility.source.value,
            phone=facility.phone,
            address=facility.address,
            website=facility.website,
            is_open=facility.is_open,
            rating=facility.rating,
            callable=is_callable(facility),
            dial_url=dial_url(facility),
            directions_url=directions_url(origin, facility),
        )


class NearbyFacilitiesMeta(BaseModel):
    count: int
    lat: float
    lng: float
    radius_km: float
