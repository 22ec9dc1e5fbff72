def estimate_travel_minutes(distance_km: float, minutes_per_km: float) -> int:
    if distance_km < 0:
        raise ValueError("distance_km must be >= 0")
    if minutes_per_km <= 0:
        raise ValueError("minutes_per_km must be > 0")
    return round(distance_km * minutes_per_km)
