"""HubSpot client construction and credential checks.

The search client authenticates with a private app token taken from `Settings`. A missing token is
not a startup error: `require_search_client` raises `CredentialMissing` on every request (HTTP 503)
until one is configured.
"""

from __future__ import annotations

from src.hubspot.client import DEFAULT_API_BASE, DEFAULT_TIMEOUT_S, HubSpotSearchClient
from src.query.translator import SearchClient

NOT_CONFIGURED_MESSAGE = "HubSpot not configured"


class CredentialMissing(RuntimeError):
    """Raised when no HubSpot token is configured."""


def require_search_client(client: SearchClient | None) -> SearchClient:
    """Return the configured search client or raise `CredentialMissing`."""

    if client is None:
        raise CredentialMissing(NOT_CONFIGURED_MESSAGE)
    return client


def create_search_client(
        token: str,
        *,
        api_base: str = DEFAULT_API_BASE,
        timeout_s: float = DEFAULT_TIMEOUT_S,
) -> HubSpotSearchClient:
    """Create a search client authenticated with `token`."""

    return HubSpotSearchClient(token, api_base=api_base, timeout_s=timeout_s)
