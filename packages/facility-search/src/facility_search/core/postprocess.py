from __future__ import annotations

import random
from collections.abc import Iterable

from geo_engine.models import format_coordinate

from facility_search.core.enhance import enhance_facility
from facility_search.core.models import MedicalFacility


DEDUP_PLACES = 4


def dedup_key(facility: MedicalFacility) -> tuple[str, str, str]:
    return (
        facility.name,
        format_coordinate(facility.location.lat, DEDUP_PLACES),
        format_coordinate(facility.location.lng, DEDUP_PLACES),
    )


def deduplicate(facilities: Iterable[MedicalFacility]) -> list[MedicalFacility]:
    seen: set[tuple[str, str, str]] = set()
    unique: list[MedicalFacility] = []
    for facility in facilities:
        key = dedup_key(facility)
        if key in seen:
            continue
        seen.add(key)
        unique.append(facility)
    return unique


def rank_facilities(
    facilities: Iterable[MedicalFacility],
    max_results: int,
    rng: random.Random,
) -> list[MedicalFacility]:
    """Enhance, deduplicate, sort by distance and truncate one search result set.

    Dedup runs after name cleaning so provider spelling variants collapse;
    the first record in provider-priority order is kept.
    """
    if max_results <= 0:
        raise ValueError("max_results must be > 0")
    enhanced = [enhance_facility(facility, rng) for facility in facilities]
    unique = deduplicate(enhanced)
    return sorted(unique, key=lambda item: item.distance_km)[:max_results]
