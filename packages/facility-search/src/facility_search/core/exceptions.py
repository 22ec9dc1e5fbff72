from __future__ import annotations


class SearchError(Exception):
    """Base facility search exception."""


class ProviderUnavailableError(SearchError):
    """Raised when a provider call failed or returned an unusable response."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class ProviderNormalizationError(ProviderUnavailableError):
    """Raised when provider payload schema cannot be normalized."""


class SyntheticGenerationError(SearchError):
    """Raised when synthetic fallback facilities could not be generated."""


class CacheReadError(SearchError):
    """Raised when a cached search entry cannot be decoded."""
