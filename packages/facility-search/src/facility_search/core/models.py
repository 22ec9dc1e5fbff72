from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from geo_engine.models import GeoPoint


class FacilityType(str, Enum):
    HOSPITAL = "Hospital"
    PHARMACY = "Pharmacy"
    CLINIC = "Clinic"
    DOCTOR = "Doctor"
    DENTIST = "Dentist"
    EMERGENCY = "Emergency"


class FacilitySource(str, Enum):
    GOOGLE = "Google"
    LOCATIONIQ = "LocationIQ"
    OSM = "OSM"
    NOMINATIM = "Nominatim"
    SYNTHETIC = "Synthetic"
    STATIC = "Static"


@dataclass(frozen=True)
class MedicalFacility:
    id: str
    name: str
    facility_type: FacilityType
    location: GeoPoint
    distance_km: float
    estimated_travel_minutes: int
    source: FacilitySource
    phone: str | None = None
    address: str | None = None
    website: str | None = None
    is_open: bool | None = None
    rating: float | None = None

    def __post_init__(self) -> None:
        if self.distance_km < 0:
            raise ValueError("distance_km must be >= 0")

    def with_updates(self, **changes: Any) -> MedicalFacility:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["facility_type"] = self.facility_type.value
        payload["source"] = self.source.value
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> MedicalFacility:
        location = payload["location"]
        rating = payload.get("rating")
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            facility_type=FacilityType(payload["facility_type"]),
            location=GeoPoint(lat=float(location["lat"]), lng=float(location["lng"])),
            distance_km=float(payload["distance_km"]),
            estimated_travel_minutes=int(payload["estimated_travel_minutes"]),
            source=FacilitySource(payload["source"]),
            phone=payload.get("phone"),
            address=payload.get("address"),
            website=payload.get("website"),
            is_open=payload.get("is_open"),
            rating=float(rating) if rating is not None else None,
        )
