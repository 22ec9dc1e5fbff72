"""Medical facility search core package."""

from facility_search.aggregator import EarlyExitRule, FacilitySearchAggregator, build_aggregator
from facility_search.config import SearchSettings, load_settings
from facility_search.core.models import FacilitySource, FacilityType, MedicalFacility

__all__ = [
    "EarlyExitRule",
    "FacilitySearchAggregator",
    "FacilitySource",
    "FacilityType",
    "MedicalFacility",
    "SearchSettings",
    "build_aggregator",
    "load_settings",
]
