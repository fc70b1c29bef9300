"""HubSpot CRM search client.

Sends a validated `SearchRequest` to `POST /crm/v3/objects/{collection}/search`. Transport errors and
non-2xx responses are surfaced as a single `DownstreamFailure`; status codes are not interpreted and
nothing is retried.
"""

from __future__ import annotations

import httpx

from src.query.collections import require_supported
from src.query.schema import SearchRequest, SearchResult

DEFAULT_API_BASE = "https://api.hubapi.com"
DEFAULT_TIMEOUT_S = 10.0


class DownstreamFailure(RuntimeError):
    """Raised when the search API call fails for any reason."""


class HubSpotSearchClient:
    """Minimal async client for the CRM search endpoint."""

    def __init__(
            self,
            token: str,
            *,
            api_base: str = DEFAULT_API_BASE,
            timeout_s: float = DEFAULT_TIMEOUT_S,
            http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)

    def _search_url(self, collection: str) -> str:
        # Only allowlisted identifiers reach the URL.
        return f"{self._api_base}/crm/v3/objects/{require_supported(collection)}/search"

    async def search(self, collection: str, request: SearchRequest) -> SearchResult:
        """Run one search and return the parsed response."""

        try:
            response = await self._client.post(
                self._search_url(collection),
                json=request.to_body(),
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DownstreamFailure(
                f"Request failed with status code {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DownstreamFailure(str(exc) or exc.__class__.__name__) from exc

        try:
            return SearchResult.model_validate(response.json())
        except ValueError as exc:
            raise DownstreamFailure("Unexpected search response format") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
