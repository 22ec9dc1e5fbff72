import math

from geo_engine.models import GeoPoint

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_METERS = EARTH_RADIUS_KM * 1000


def haversine_distance_km(start: GeoPoint, end: GeoPoint) -> float:
    start_lat = math.radians(start.lat)
    end_lat = math.radians(end.lat)
    delta_lat = math.radians(end.lat - start.lat)
    delta_lng = math.radians(end.lng - start.lng)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_distance_meters(start: GeoPoint, end: GeoPoint) -> float:
    return haversine_distance_km(start, end) * 1000


def destination_point(origin: GeoPoint, bearing_degrees: float, distance_km: float) -> GeoPoint:
    """Point reached by travelling ``distance_km`` from ``origin`` on a great circle."""
    if distance_km < 0:
        raise ValueError("distance_km must be >= 0")
    angular = distance_km / EARTH_RADIUS_KM
    bearing = math.radians(bearing_degrees)
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    normalized_lng = (math.degrees(lng2) + 540) % 360 - 180
    return GeoPoint(lat=math.degrees(lat2), lng=normalized_lng)
