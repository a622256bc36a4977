"""Collator producing search documents for the software catalog."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

import httpx

from catalog_collator.discovery import HostDiscovery
from catalog_collator.domains.catalog.fetcher import EntityFetcher
from catalog_collator.domains.catalog.mapper import DocumentMapper
from catalog_collator.domains.catalog.options import CollatorOptions, merge_options

if TYPE_CHECKING:
    from catalog_collator.config import CollatorConfig
    from catalog_collator.discovery import PluginEndpointDiscovery
    from catalog_collator.domains.catalog.filters import FilterSpec
    from catalog_collator.domains.catalog.models import CatalogEntityDocument

logger = logging.getLogger(__name__)


class DefaultCatalogCollator:
    """Turns every entity in the catalog into a ``CatalogEntityDocument``.

    ``execute`` is an async generator: the catalog is fetched in one
    request when the consumer first pulls, then each entity is mapped
    only when the next document is requested.

    Usage:
        collator = DefaultCatalogCollator(discovery, filter_spec={"kind": ["Component"]})
        async for document in collator.execute():
            index(document.to_dict())
    """

    type = "software-catalog"

    def __init__(
        self,
        discovery: PluginEndpointDiscovery,
        filter_spec: FilterSpec | None = None,
        location_template: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._fetcher = EntityFetcher(
            discovery,
            filter_spec=filter_spec,
            timeout=timeout,
            transport=transport,
        )
        self._mapper = DocumentMapper(location_template)

    @classmethod
    def from_config(
        cls,
        config: CollatorConfig,
        discovery: PluginEndpointDiscovery | None = None,
        filter_spec: FilterSpec | None = None,
        location_template: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DefaultCatalogCollator:
        """Create a collator from configuration.

        Explicitly passed options take precedence over configured ones.
        Without an explicit ``discovery``, a ``HostDiscovery`` is built
        from the same configuration.
        """
        options = merge_options(
            CollatorOptions(filter=filter_spec, location_template=location_template),
            CollatorOptions(filter=config.filter, location_template=config.location_template),
        )
        return cls(
            discovery or HostDiscovery.from_config(config),
            filter_spec=options.filter,
            location_template=options.location_template,
            timeout=config.request_timeout,
            transport=transport,
        )

    @property
    def fetcher(self) -> EntityFetcher:
        return self._fetcher

    @property
    def mapper(self) -> DocumentMapper:
        return self._mapper

    async def fetch_entities(self) -> list[dict[str, Any]]:
        return await self._fetcher.fetch_entities()

    async def execute(self) -> AsyncIterator[CatalogEntityDocument]:
        """Yield one document per catalog entity, in catalog order.

        Raises:
            DiscoveryError: Before any document, if the catalog cannot be located.
            RetrievalError: Before any document, if the entity request fails.
            MappingError: At the first malformed entity; the sequence stops there.
        """
        entities = await self.fetch_entities()
        logger.info(f"Collating {len(entities)} catalog entities")

        for entity in entities:
            yield self._mapper.to_document(entity)
