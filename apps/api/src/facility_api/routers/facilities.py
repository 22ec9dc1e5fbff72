from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Query

from geo_engine.models import GeoPoint

from facility_search.aggregator import FacilitySearchAggregator

from facility_api.dependencies import get_aggregator, get_search_timeout_seconds
from facility_api.errors import ApiError
from facility_api.response import success_response
from facility_api.schemas.facility import NearbyFacilitiesMeta, NearbyFacilityItem

router = APIRouter(prefix="/v1/facilities", tags=["facilities"])


@router.get("/nearby")
async def nearby_facilities(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(default=5.0, gt=0, le=50),
    aggregator: FacilitySearchAggregator = Depends(get_aggregator),
    timeout_seconds: float = Depends(get_search_timeout_seconds),
) -> dict:
    try:
        facilities = await asyncio.wait_for(aggregator.search(lat, lng, radius_km), timeout=timeout_seconds)
    except ValueError as exc:
        raise ApiError.validation(str(exc)) from exc
    except TimeoutError as exc:
        raise ApiError("UPSTREAM_TIMEOUT", "Facility search timed out", 504) from exc

    origin = GeoPoint(lat=lat, lng=lng)
    items = [NearbyFacilityItem.from_facility(origin, facility).model_dump() for facility in facilities]
    meta = NearbyFacilitiesMeta(count=len(items), lat=lat, lng=lng, radius_km=radius_km)
    return success_response(items, meta=meta.model_dump())
