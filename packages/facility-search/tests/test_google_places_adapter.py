import httpx
import pytest

from geo_engine.models import GeoPoint

from facility_search.core.exceptions import ProviderUnavailableError
from facility_search.core.models import FacilitySource, FacilityType
from facility_search.providers.google_places import GooglePlacesAdapter, classify_google_types

ORIGIN = GeoPoint(lat=40.7128, lng=-74.0060)


def _place(place_id: str, name: str, lat: float, lng: float, types: list[str]) -> dict:
    return {
        "place_id": place_id,
        "name": name,
        "geometry": {"location": {"lat": lat, "lng": lng}},
        "vicinity": f"{name} vicinity",
        "types": types,
    }


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _adapter(handler, sleep_fn: RecordingSleep) -> GooglePlacesAdapter:
    return GooglePlacesAdapter(
        api_key="test-key",
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        sleep_fn=sleep_fn,
    )


@pytest.mark.asyncio
async def test_google_adapter_merges_nearby_and_details_across_categories() -> None:
    details_calls: list[str] = []
    nearby = {
        "hospital": [
            _place("p1", "NYU Langone", 40.7421, -73.9739, ["hospital", "health"]),
            _place("p2", "Lower Manhattan Hospital", 40.7105, -74.0050, ["hospital"]),
        ],
        "pharmacy": [
            _place("p1", "NYU Langone", 40.7421, -73.9739, ["hospital", "health"]),
            _place("p3", "Duane Reade", 40.7135, -74.0071, ["pharmacy", "store"]),
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        assert params["key"] == "test-key"
        if request.url.path.endswith("/nearbysearch/json"):
            assert params["location"] == "40.7128,-74.006"
            assert params["radius"] == "5000"
            results = nearby.get(params["type"], [])
            return httpx.Response(200, json={"status": "OK" if results else "ZERO_RESULTS", "results": results})
        place_id = params["place_id"]
        details_calls.append(place_id)
        if place_id == "p1":
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "result": {
                        "formatted_phone_number": "(212) 263-7300",
                        "formatted_address": "550 1st Ave, New York, NY 10016",
                        "website": "https://nyulangone.org",
                        "rating": 4.1,
                        "opening_hours": {"open_now": True},
                    },
                },
            )
        if place_id == "p2":
            return httpx.Response(200, json={"status": "NOT_FOUND"})
        return httpx.Response(500)

    sleep_fn = RecordingSleep()
    facilities = await _adapter(handler, sleep_fn).search(ORIGIN, 5.0)
    by_id = {item.id: item for item in facilities}

    assert set(by_id) == {"google_p1", "google_p2", "google_p3"}
    assert details_calls == ["p1", "p2", "p3"]
    assert sleep_fn.delays == [1.0, 1.0, 1.0, 1.0]

    langone = by_id["google_p1"]
    assert langone.facility_type == FacilityType.HOSPITAL
    assert langone.source == FacilitySource.GOOGLE
    assert langone.phone == "(212) 263-7300"
    assert langone.address == "550 1st Ave, New York, NY 10016"
    assert langone.is_open is True
    assert langone.rating == 4.1
    assert langone.distance_km > 0

    fallback = by_id["google_p2"]
    assert fallback.address == "Lower Manhattan Hospital vicinity"
    assert fallback.phone is None
    assert fallback.is_open is None
    assert by_id["google_p3"].facility_type == FacilityType.PHARMACY


@pytest.mark.asyncio
async def test_google_adapter_caps_radius_at_fifty_kilometers() -> None:
    radii: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        radii.append(request.url.params["radius"])
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    facilities = await _adapter(handler, RecordingSleep()).search(ORIGIN, 80.0)

    assert facilities == []
    assert set(radii) == {"50000"}


@pytest.mark.asyncio
async def test_google_adapter_skips_failed_category() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/details/json"):
            return httpx.Response(200, json={"status": "OK", "result": {}})
        if request.url.params["type"] == "hospital":
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.params["type"] == "dentist":
            return httpx.Response(
                200,
                json={"status": "OK", "results": [_place("d1", "Smile Dental", 40.7140, -74.0080, ["dentist"])]},
            )
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    facilities = await _adapter(handler, RecordingSleep()).search(ORIGIN, 5.0)

    assert [item.id for item in facilities] == ["google_d1"]
    assert facilities[0].facility_type == FacilityType.DENTIST


@pytest.mark.asyncio
async def test_google_adapter_raises_when_every_category_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "REQUEST_DENIED", "results": []})

    with pytest.raises(ProviderUnavailableError):
        await _adapter(handler, RecordingSleep()).search(ORIGIN, 5.0)


def test_classify_google_types_uses_mapped_type_then_keywords() -> None:
    assert classify_google_types(["point_of_interest", "pharmacy"]) == FacilityType.PHARMACY
    assert classify_google_types(["veterinary_hospital"]) == FacilityType.HOSPITAL
    assert classify_google_types(["physician_office"]) == FacilityType.DOCTOR
    assert classify_google_types(["establishment"]) == FacilityType.CLINIC


@pytest.mark.asyncio
async def test_google_adapter_drops_place_with_malformed_geometry() -> None:
    nearby = {
        "hospital": [_place("h1", "Bellevue Hospital", 40.7390, -73.9754, ["hospital"])],
        "pharmacy": [
            {**_place("x1", "Broken Pharmacy", 0.0, 0.0, ["pharmacy"]), "geometry": "oops"},
            _place("r1", "Duane Reade", 40.7135, -74.0071, ["pharmacy"]),
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/details/json"):
            return httpx.Response(200, json={"status": "OK", "result": {}})
        results = nearby.get(request.url.params["type"], [])
        return httpx.Response(200, json={"status": "OK" if results else "ZERO_RESULTS", "results": results})

    facilities = await _adapter(handler, RecordingSleep()).search(ORIGIN, 5.0)

    assert {item.id for item in facilities} == {"google_h1", "google_r1"}
