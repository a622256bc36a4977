"""Catalog domain - entity retrieval and search document mapping.

Exports:
    Models:
        - Entity: Catalog entity as returned by the catalog service
        - EntityMetadata: Entity metadata block
        - CatalogEntityDocument: Flat search document for one entity

    Components:
        - CatalogClient: Async HTTP client for the entities API
        - EntityFetcher: Resolves the catalog and fetches entities
        - DocumentMapper: Maps entities to search documents
        - DefaultCatalogCollator: Fetcher and mapper composed as a lazy stream

    Helpers:
        - encode_filter: Serializes a filter spec for the ``filter`` parameter
        - build_location: Substitutes entity coordinates into a location template
        - merge_options: Merges explicit and configured collator options
"""

from catalog_collator.domains.catalog.client import CatalogClient
from catalog_collator.domains.catalog.collator import DefaultCatalogCollator
from catalog_collator.domains.catalog.fetcher import CATALOG_PLUGIN_ID, EntityFetcher
from catalog_collator.domains.catalog.filters import FilterSpec, encode_filter, normalize_filter
from catalog_collator.domains.catalog.mapper import (
    DEFAULT_LOCATION_TEMPLATE,
    DocumentMapper,
    build_location,
    resolve_namespace,
    resolve_text,
    resolve_title,
)
from catalog_collator.domains.catalog.models import (
    DEFAULT_NAMESPACE,
    CatalogEntityDocument,
    Entity,
    EntityMetadata,
)
from catalog_collator.domains.catalog.options import CollatorOptions, merge_options

__all__ = [
    # Models
    "CatalogEntityDocument",
    "Entity",
    "EntityMetadata",
    "DEFAULT_NAMESPACE",
    # Components
    "CatalogClient",
    "DefaultCatalogCollator",
    "DocumentMapper",
    "EntityFetcher",
    "CATALOG_PLUGIN_ID",
    # Helpers
    "DEFAULT_LOCATION_TEMPLATE",
    "FilterSpec",
    "build_location",
    "encode_filter",
    "normalize_filter",
    "resolve_namespace",
    "resolve_text",
    "resolve_title",
    "CollatorOptions",
    "merge_options",
]
