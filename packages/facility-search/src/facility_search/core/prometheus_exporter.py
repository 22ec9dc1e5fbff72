from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from facility_search.core.metrics import InMemorySearchMetricsCollector


class SearchPrometheusExporter:
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._search_duration = Gauge(
            "facility_search_duration_ms",
            "Latest facility search duration in milliseconds",
            labelnames=("outcome",),
            registry=self._registry,
        )
        self._cache_requests = Gauge(
            "facility_search_cache_requests_total",
            "Facility search cache lookups grouped by result",
            labelnames=("result",),
            registry=self._registry,
        )
        self._provider_calls = Gauge(
            "facility_search_provider_calls_total",
            "Provider attempts grouped by provider",
            labelnames=("provider",),
            registry=self._registry,
        )
        self._provider_results = Gauge(
            "facility_search_provider_results_total",
            "Facilities returned grouped by provider",
            labelnames=("provider",),
            registry=self._registry,
        )
        self._provider_errors = Gauge(
            "facility_search_provider_errors_total",
            "Failed provider attempts grouped by provider",
            labelnames=("provider",),
            registry=self._registry,
        )
        self._fallbacks = Gauge(
            "facility_search_fallback_total",
            "Fallback activations grouped by kind",
            labelnames=("kind",),
            registry=self._registry,
        )

    def render(self, metrics: InMemorySearchMetricsCollector) -> str:
        latest_by_outcome: dict[str, float] = {}
        for item in metrics.search_durations:
            latest_by_outcome[item.outcome] = item.duration_ms
        for outcome, duration in latest_by_outcome.items():
            self._search_duration.labels(outcome=outcome).set(duration)
        self._cache_requests.labels(result="hit").set(metrics.cache_hit_total)
        self._cache_requests.labels(result="miss").set(metrics.cache_miss_total)
        self._cache_requests.labels(result="error").set(metrics.cache_error_total)
        for provider, count in metrics.provider_calls_total.items():
            self._provider_calls.labels(provider=provider).set(count)
        for provider, count in metrics.provider_results_total.items():
            self._provider_results.labels(provider=provider).set(count)
        for provider, count in metrics.provider_errors_total.items():
            self._provider_errors.labels(provider=provider).set(count)
        for kind, count in metrics.fallback_total.items():
            self._fallbacks.labels(kind=kind).set(count)
        return generate_latest(self._registry).decode("utf-8")
