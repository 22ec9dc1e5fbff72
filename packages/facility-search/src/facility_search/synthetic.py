from __future__ import annotations

import random
from dataclasses import dataclass

from geo_engine.distance import destination_point, haversine_distance_km
from geo_engine.models import GeoPoint
from geo_engine.travel import estimate_travel_minutes

from facility_search.core.enhance import placeholder_phone
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility

HOSPITAL_NAMES = (
    "General Hospital",
    "Medical Center",
    "Regional Hospital",
    "City Hospital",
    "Community Hospital",
    "Memorial Hospital",
    "University Hospital",
)
PHARMACY_NAMES = (
    "CVS Pharmacy",
    "Walgreens",
    "Rite Aid",
    "Local Pharmacy",
    "HealthCare Pharmacy",
    "Community Pharmacy",
    "Express Pharmacy",
)
CLINIC_NAMES = (
    "Family Medical Clinic",
    "Urgent Care Center",
    "Walk-in Clinic",
    "Primary Care Clinic",
    "Medical Group",
    "Health Center",
)
STREET_NAMES = (
    "Main St",
    "Oak Ave",
    "Pine St",
    "First Ave",
    "Second St",
    "Elm St",
    "Maple Ave",
    "Cedar St",
    "Park Ave",
    "Washington St",
)


@dataclass(frozen=True)
class _SyntheticGroup:
    key: str
    names: tuple[str, ...]
    count: int
    min_km: float
    spread_km: float
    minutes_per_km: float


_GROUPS = (
    _SyntheticGroup("hospital", HOSPITAL_NAMES, 3, 0.5, 3.0, 3.0),
    _SyntheticGroup("pharmacy", PHARMACY_NAMES, 4, 0.1, 1.5, 2.0),
    _SyntheticGroup("clinic", CLINIC_NAMES, 3, 0.3, 2.0, 2.5),
)


class SyntheticFacilityGenerator:
    """Plausible but fabricated facilities for when no provider delivered enough data.

    Every record carries a ``+1-555-XXXX`` placeholder phone, which the
    calling gate treats as "not callable".
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def generate(self, point: GeoPoint, radius_km: float) -> list[MedicalFacility]:
        if radius_km <= 0:
            raise ValueError("radius_km must be > 0")
        facilities: list[MedicalFacility] = []
        for group in _GROUPS:
            for index, name in enumerate(group.names[: group.count]):
                facilities.append(self._build(point, radius_km, group, index, name))
        return sorted(facilities, key=lambda item: item.distance_km)

    def _build(
        self,
        point: GeoPoint,
        radius_km: float,
        group: _SyntheticGroup,
        index: int,
        name: str,
    ) -> MedicalFacility:
        max_km = min(group.min_km + group.spread_km, radius_km)
        min_km = min(group.min_km, max_km)
        target_km = self._rng.uniform(min_km, max_km)
        location = destination_point(point, self._rng.uniform(0, 360), target_km)
        distance_km = haversine_distance_km(point, location)
        facility_type = self._facility_type(group)
        return MedicalFacility(
            id=f"synthetic_{group.key}_{index}",
            name=name,
            facility_type=facility_type,
            location=location,
            distance_km=distance_km,
            estimated_travel_minutes=estimate_travel_minutes(distance_km, group.minutes_per_km),
            source=FacilitySource.SYNTHETIC,
            phone=placeholder_phone(self._rng),
            address=self._street_address(),
        )

    def _facility_type(self, group: _SyntheticGroup) -> FacilityType:
        if group.key == "hospital":
            return FacilityType.HOSPITAL
        if group.key == "pharmacy":
            return FacilityType.PHARMACY
        return FacilityType.DOCTOR if self._rng.random() > 0.5 else FacilityType.CLINIC

    def _street_address(self) -> str:
        return f"{self._rng.randint(1, 9999)} {self._rng.choice(STREET_NAMES)}"


_STATIC_FALLBACK = (
    ("static_1", "City General Hospital", FacilityType.HOSPITAL, 0.8, 0.0, "+1-555-0123", True),
    ("static_2", "HealthCare Pharmacy", FacilityType.PHARMACY, 1.0, 90.0, "+1-555-0456", True),
    ("static_3", "Family Medical Center", FacilityType.CLINIC, 1.2, 180.0, "+1-555-0789", False),
)


def static_fallback_facilities(point: GeoPoint) -> list[MedicalFacility]:
    facilities: list[MedicalFacility] = []
    for facility_id, name, facility_type, distance_km, bearing, phone, is_open in _STATIC_FALLBACK:
        facilities.append(
            MedicalFacility(
                id=facility_id,
                name=name,
                facility_type=facility_type,
                location=destination_point(point, bearing, distance_km),
                distance_km=distance_km,
                estimated_travel_minutes=estimate_travel_minutes(distance_km, 4.0),
                source=FacilitySource.STATIC,
                phone=phone,
                is_open=is_open,
            )
        )
    return facilities
