import pytest

from geo_engine.models import GeoPoint

from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility


def _facility(**overrides) -> MedicalFacility:
    values = {
        "id": "osm_node1",
        "name": "Bellevue Hospital",
        "facility_type": FacilityType.HOSPITAL,
        "location": GeoPoint(lat=40.7392, lng=-73.9754),
        "distance_km": 3.1,
        "estimated_travel_minutes": 9,
        "source": FacilitySource.OSM,
    }
    values.update(overrides)
    return MedicalFacility(**values)


def test_medical_facility_rejects_negative_distance() -> None:
    with pytest.raises(ValueError):
        _facility(distance_km=-0.1)


def test_medical_facility_with_updates_returns_new_record() -> None:
    facility = _facility()
    updated = facility.with_updates(phone="+1-212-562-4141")

    assert updated.phone == "+1-212-562-4141"
    assert facility.phone is None
    assert updated.id == facility.id


def test_medical_facility_dict_round_trip_keeps_enums_and_location() -> None:
    facility = _facility(phone="+1-212-562-4141", is_open=True, rating=4.2, website="https://example.org")
    payload = facility.to_dict()

    assert payload["facility_type"] == "Hospital"
    assert payload["source"] == "OSM"
    assert payload["location"] == {"lat": 40.7392, "lng": -73.9754}
    assert MedicalFacility.from_dict(payload) == facility


def test_medical_facility_from_dict_rejects_unknown_type() -> None:
    payload = _facility().to_dict()
    payload["facility_type"] = "Veterinary"

    with pytest.raises(ValueError):
        MedicalFacility.from_dict(payload)
