"""Geo engine core package."""

from geo_engine.distance import (
    EARTH_RADIUS_KM,
    destination_point,
    haversine_distance_km,
    haversine_distance_meters,
)
from geo_engine.geofence import bounding_box, is_point_inside_radius
from geo_engine.models import BoundingBox, GeoPoint, format_coordinate
from geo_engine.travel import estimate_travel_minutes

__all__ = [
    "EARTH_RADIUS_KM",
    "BoundingBox",
    "GeoPoint",
    "bounding_box",
    "destination_point",
    "estimate_travel_minutes",
    "format_coordinate",
    "haversine_distance_km",
    "haversine_distance_meters",
    "is_point_inside_radius",
]
