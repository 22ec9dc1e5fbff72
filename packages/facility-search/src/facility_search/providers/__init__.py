"""Provider adapters."""

from facility_search.providers.base import BaseProviderAdapter, CategorySearchAdapter, FacilityProvider
from facility_search.providers.factory import PROVIDER_PRIORITY, build_default_providers, provider_set_version
from facility_search.providers.google_places import GooglePlacesAdapter
from facility_search.providers.locationiq import LocationIQAdapter
from facility_search.providers.nominatim import NominatimAdapter
from facility_search.providers.overpass import OverpassAdapter

__all__ = [
    "BaseProviderAdapter",
    "CategorySearchAdapter",
    "FacilityProvider",
    "GooglePlacesAdapter",
    "LocationIQAdapter",
    "NominatimAdapter",
    "OverpassAdapter",
    "PROVIDER_PRIORITY",
    "build_default_providers",
    "provider_set_version",
]
