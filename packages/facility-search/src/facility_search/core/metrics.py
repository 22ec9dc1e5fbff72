from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchDuration:
    outcome: str
    duration_ms: float


class InMemorySearchMetricsCollector:
    def __init__(self) -> None:
        self.search_durations: list[SearchDuration] = []
        self.cache_hit_total = 0
        self.cache_miss_total = 0
        self.cache_error_total = 0
        self.provider_results_total: dict[str, int] = defaultdict(int)
        self.provider_errors_total: dict[str, int] = defaultdict(int)
        self.provider_calls_total: dict[str, int] = defaultdict(int)
        self.fallback_total: dict[str, int] = defaultdict(int)

    def observe_search_duration(self, outcome: str, duration_ms: float) -> None:
        self.search_durations.append(SearchDuration(outcome=outcome, duration_ms=duration_ms))

    def increment_cache_hit(self) -> None:
        self.cache_hit_total += 1

    def increment_cache_miss(self) -> None:
        self.cache_miss_total += 1

    def increment_cache_error(self) -> None:
        self.cache_error_total += 1

    def add_provider_results(self, provider: str, count: int) -> None:
        self.provider_calls_total[provider] += 1
        if count > 0:
            self.provider_results_total[provider] += count

    def increment_provider_error(self, provider: str) -> None:
        self.provider_calls_total[provider] += 1
        self.provider_errors_total[provider] += 1

    def increment_fallback(self, kind: str) -> None:
        self.fallback_total[kind] += 1
