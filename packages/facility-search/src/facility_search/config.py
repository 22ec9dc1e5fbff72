from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    GOOGLE_PLACES_API_KEY: str | None = None
    LOCATIONIQ_API_KEY: str | None = None
    NOMINATIM_USER_AGENT: str = "MedicalApp/1.0 (medical facility search)"
    GOOGLE_PLACES_BASE_URL: str = "https://maps.googleapis.com/maps/api/place"
    LOCATIONIQ_BASE_URL: str = "https://us1.locationiq.com/v1"
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"

    EARLY_EXIT_MIN_RESULTS: int = Field(default=5, ge=1)
    FALLBACK_MIN_RESULTS: int = Field(default=5, ge=0)
    OVERPASS_SKIP_MIN_COLLECTED: int = Field(default=8, ge=1)
    NOMINATIM_SKIP_MIN_COLLECTED: int = Field(default=5, ge=1)
    MAX_RESULTS: int = Field(default=20, ge=1)
    CACHE_TTL_SECONDS: int = Field(default=1800, ge=0)
    CACHE_VERSION: str = "v1"

    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    PROVIDER_TIMEOUT_SECONDS: float | None = Field(default=None, gt=0)
    GOOGLE_CATEGORY_DELAY_SECONDS: float = Field(default=1.0, ge=0)
    LOCATIONIQ_CATEGORY_DELAY_SECONDS: float = Field(default=0.5, ge=0)
    NOMINATIM_CATEGORY_DELAY_SECONDS: float = Field(default=1.0, ge=0)

    REDIS_URL: str | None = None


def load_settings() -> SearchSettings:
    return SearchSettings()
