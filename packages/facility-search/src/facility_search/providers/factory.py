from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from facility_search.config import SearchSettings
from facility_search.providers.base import FacilityProvider
from facility_search.providers.google_places import GooglePlacesAdapter
from facility_search.providers.locationiq import LocationIQAdapter
from facility_search.providers.nominatim import NominatimAdapter
from facility_search.providers.overpass import OverpassAdapter

PROVIDER_PRIORITY: tuple[str, ...] = ("google_places", "locationiq", "osm_overpass", "nominatim")


def build_default_providers(
    settings: SearchSettings,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
    sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[FacilityProvider]:
    """Providers in priority order; keyed providers are skipped when unconfigured."""
    timeout = settings.HTTP_TIMEOUT_SECONDS
    providers: list[FacilityProvider] = []
    if settings.GOOGLE_PLACES_API_KEY:
        providers.append(
            GooglePlacesAdapter(
                api_key=settings.GOOGLE_PLACES_API_KEY,
                base_url=settings.GOOGLE_PLACES_BASE_URL,
                timeout_seconds=timeout,
                client_factory=client_factory,
                delay_seconds=settings.GOOGLE_CATEGORY_DELAY_SECONDS,
                sleep_fn=sleep_fn,
            )
        )
    if settings.LOCATIONIQ_API_KEY:
        providers.append(
            LocationIQAdapter(
                api_key=settings.LOCATIONIQ_API_KEY,
                base_url=settings.LOCATIONIQ_BASE_URL,
                timeout_seconds=timeout,
                client_factory=client_factory,
                delay_seconds=settings.LOCATIONIQ_CATEGORY_DELAY_SECONDS,
                sleep_fn=sleep_fn,
            )
        )
    providers.append(
        OverpassAdapter(
            url=settings.OVERPASS_URL,
            timeout_seconds=max(timeout, 30.0),
            client_factory=client_factory,
        )
    )
    providers.append(
        NominatimAdapter(
            user_agent=settings.NOMINATIM_USER_AGENT,
            base_url=settings.NOMINATIM_BASE_URL,
            timeout_seconds=timeout,
            client_factory=client_factory,
            delay_seconds=settings.NOMINATIM_CATEGORY_DELAY_SECONDS,
            sleep_fn=sleep_fn,
        )
    )
    return providers


def provider_set_version(settings: SearchSettings, providers: list[FacilityProvider]) -> str:
    names = "+".join(provider.provider_name for provider in providers)
    return f"{settings.CACHE_VERSION}:{names}"
