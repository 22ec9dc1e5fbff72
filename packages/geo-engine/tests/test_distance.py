import pytest

from geo_engine.distance import destination_point, haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint


def test_haversine_distance_is_zero_for_same_point() -> None:
    point = GeoPoint(lat=40.7128, lng=-74.0060)
    distance = haversine_distance_km(point, point)
    assert distance == 0.0


def test_haversine_one_degree_of_longitude_on_equator() -> None:
    distance = haversine_distance_km(GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=1))
    assert distance == pytest.approx(111.19, abs=0.01)


def test_haversine_distance_is_symmetric() -> None:
    city_hall = GeoPoint(lat=40.7128, lng=-74.0060)
    midtown = GeoPoint(lat=40.7549, lng=-73.9840)
    assert haversine_distance_km(city_hall, midtown) == pytest.approx(haversine_distance_km(midtown, city_hall))
    assert 0 < haversine_distance_km(city_hall, midtown) < 10


def test_haversine_meters_matches_kilometers() -> None:
    start = GeoPoint(lat=0, lng=0)
    end = GeoPoint(lat=0, lng=1)
    assert haversine_distance_meters(start, end) == pytest.approx(haversine_distance_km(start, end) * 1000)


@pytest.mark.parametrize("bearing", [0, 90, 180, 270, 33.3])
def test_destination_point_lands_at_requested_distance(bearing: float) -> None:
    origin = GeoPoint(lat=40.7128, lng=-74.0060)
    target = destination_point(origin, bearing_degrees=bearing, distance_km=2.5)
    assert haversine_distance_km(origin, target) == pytest.approx(2.5, abs=1e-6)


def test_destination_point_north_increases_latitude() -> None:
    origin = GeoPoint(lat=10.0, lng=20.0)
    target = destination_point(origin, bearing_degrees=0, distance_km=1.0)
    assert target.lat > origin.lat
    assert target.lng == pytest.approx(origin.lng)


def test_destination_point_rejects_negative_distance() -> None:
    with pytest.raises(ValueError):
        destination_point(GeoPoint(lat=0, lng=0), bearing_degrees=0, distance_km=-1)
