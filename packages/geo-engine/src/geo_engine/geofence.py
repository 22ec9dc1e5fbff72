import math

from geo_engine.distance import haversine_distance_km
from geo_engine.models import BoundingBox, GeoPoint

KM_PER_DEGREE_LAT = 111.32


def is_point_inside_radius(center: GeoPoint, point: GeoPoint, radius_km: float) -> bool:
    if radius_km < 0:
        raise ValueError("radius_km must be >= 0")
    return haversine_distance_km(center, point) <= radius_km


def bounding_box(center: GeoPoint, radius_km: float) -> BoundingBox:
    if radius_km < 0:
        raise ValueError("radius_km must be >= 0")
    delta_lat = radius_km / KM_PER_DEGREE_LAT
    # Longitude degrees shrink toward the poles; clamp to avoid dividing by zero.
    cos_lat = max(math.cos(math.radians(center.lat)), 0.01)
    delta_lng = radius_km / (KM_PER_DEGREE_LAT * cos_lat)
    return BoundingBox(
        left=max(center.lng - delta_lng, -180.0),
        top=min(center.lat + delta_lat, 90.0),
        right=min(center.lng + delta_lng, 180.0),
        bottom=max(center.lat - delta_lat, -90.0),
    )
