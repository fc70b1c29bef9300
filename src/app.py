"""Application composition root.

This module wires together configuration, logging and the HubSpot search client for the request
handlers.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.logging import configure_logging
from src.config.settings import Settings
from src.hubspot.connection import create_search_client
from src.query.translator import SearchClient


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers.

    `search_client` is `None` when no HubSpot token is configured.
    """

    settings: Settings
    search_client: SearchClient | None

    async def aclose(self) -> None:
        close = getattr(self.search_client, "aclose", None)
        if close is not None:
            await close()


def create_app(settings: Settings) -> App:
    """Create the application container and configure logging."""

    configure_logging(settings.log_level)

    client = None
    if settings.hubspot_token is not None:
        client = create_search_client(
            settings.hubspot_token,
            api_base=settings.hubspot_api_base,
            timeout_s=settings.hubspot_timeout_s,
        )
    return App(settings=settings, search_client=client)
