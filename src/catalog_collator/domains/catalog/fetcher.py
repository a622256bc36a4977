"""Retrieval of catalog entities through plugin discovery."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from catalog_collator.domains.catalog.client import CatalogClient
from catalog_collator.domains.catalog.filters import normalize_filter
from catalog_collator.utils.errors import CollatorError, DiscoveryError

if TYPE_CHECKING:
    from catalog_collator.discovery import PluginEndpointDiscovery
    from catalog_collator.domains.catalog.filters import FilterSpec

logger = logging.getLogger(__name__)

# Plugin id of the catalog backend
CATALOG_PLUGIN_ID = "catalog"


class EntityFetcher:
    """Fetches the full entity list from the catalog service.

    Each call to ``fetch_entities`` resolves the catalog URL and performs
    exactly one request. Nothing is cached or retried here; retries are
    left to the discovery and HTTP layers.
    """

    def __init__(
        self,
        discovery: PluginEndpointDiscovery,
        filter_spec: FilterSpec | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._discovery = discovery
        self._filter = normalize_filter(filter_spec)
        self._timeout = timeout
        self._transport = transport

    @property
    def discovery(self) -> PluginEndpointDiscovery:
        return self._discovery

    @property
    def filter(self) -> dict[str, list[str]] | None:
        return self._filter

    async def resolve_base_url(self) -> str:
        """Resolve the catalog base URL.

        Raises:
            DiscoveryError: If discovery fails for any reason.
        """
        try:
            base_url = await self._discovery.get_base_url(CATALOG_PLUGIN_ID)
        except DiscoveryError:
            raise
        except CollatorError as e:
            raise DiscoveryError(CATALOG_PLUGIN_ID, str(e)) from e
        except Exception as e:
            raise DiscoveryError(CATALOG_PLUGIN_ID, f"{type(e).__name__}: {e}") from e

        if not base_url:
            raise DiscoveryError(CATALOG_PLUGIN_ID, "discovery returned an empty URL")
        return base_url

    async def fetch_entities(self) -> list[dict[str, Any]]:
        """Fetch all entities visible to the catalog, honoring the filter.

        Returns:
            Raw entity records in server order.

        Raises:
            DiscoveryError: If the catalog cannot be located.
            RetrievalError: If the listing request fails.
        """
        base_url = await self.resolve_base_url()
        async with CatalogClient(
            base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            return await client.get_entities(self._filter)
