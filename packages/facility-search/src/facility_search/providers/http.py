from __future__ import annotations

from typing import Any

import httpx

from facility_search.core.exceptions import ProviderNormalizationError, ProviderUnavailableError


class ProviderHttpClient:
    """Maps httpx failures of one provider onto ``ProviderUnavailableError``."""

    def __init__(self, provider: str, client: httpx.AsyncClient) -> None:
        self._provider = provider
        self._client = client

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        empty_statuses: frozenset[int] = frozenset(),
    ) -> Any:
        return await self._send("GET", url, params=params, headers=headers, empty_statuses=empty_statuses)

    async def post_form_json(
        self,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._send("POST", url, data=data, headers=headers)

    async def _send(
        self,
        method: str,
        url: str,
        empty_statuses: frozenset[int] = frozenset(),
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise ProviderUnavailableError(self._provider, "provider timeout") from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(self._provider, f"provider request error: {exc.__class__.__name__}") from exc

        if response.status_code in empty_statuses:
            return None
        if response.status_code >= 400:
            raise ProviderUnavailableError(
                self._provider,
                f"provider rejected request: status={response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderNormalizationError(self._provider, "provider payload is not json") from exc
