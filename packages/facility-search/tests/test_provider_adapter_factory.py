from facility_search.config import SearchSettings
from facility_search.providers import (
    PROVIDER_PRIORITY,
    GooglePlacesAdapter,
    LocationIQAdapter,
    NominatimAdapter,
    OverpassAdapter,
    build_default_providers,
    provider_set_version,
)


def test_build_default_providers_skips_unconfigured_keyed_providers() -> None:
    settings = SearchSettings(GOOGLE_PLACES_API_KEY=None, LOCATIONIQ_API_KEY=None)
    providers = build_default_providers(settings)

    assert [type(item) for item in providers] == [OverpassAdapter, NominatimAdapter]
    assert provider_set_version(settings, providers) == "v1:osm_overpass+nominatim"


def test_build_default_providers_orders_by_priority() -> None:
    settings = SearchSettings(GOOGLE_PLACES_API_KEY="g-key", LOCATIONIQ_API_KEY="l-key", CACHE_VERSION="v2")
    providers = build_default_providers(settings)

    assert [type(item) for item in providers] == [
        GooglePlacesAdapter,
        LocationIQAdapter,
        OverpassAdapter,
        NominatimAdapter,
    ]
    assert tuple(item.provider_name for item in providers) == PROVIDER_PRIORITY
    assert provider_set_version(settings, providers) == "v2:google_places+locationiq+osm_overpass+nominatim"
