"""Conversion of catalog entities into search documents."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from catalog_collator.domains.catalog.models import (
    DEFAULT_NAMESPACE,
    CatalogEntityDocument,
    Entity,
)
from catalog_collator.utils.errors import ConfigurationError, MappingError

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_TEMPLATE = "/catalog/:namespace/:kind/:name"

# Matches :namespace, :kind and :name, but not longer tokens such as :names
_TEMPLATE_TOKEN = re.compile(r":(namespace|kind|name)(?![A-Za-z0-9_])")


def resolve_namespace(entity: Entity) -> str:
    """Entity namespace, or the default namespace when unset."""
    return entity.metadata.namespace or DEFAULT_NAMESPACE


def resolve_title(entity: Entity) -> str:
    """Entity title, or its name when the title is missing or empty."""
    return entity.metadata.title or entity.metadata.name


def resolve_text(entity: Entity) -> str:
    return entity.metadata.description or ""


def resolve_spec_field(entity: Entity, field: str) -> str | None:
    """Read a string field from the entity spec, None when absent."""
    if not entity.spec:
        return None
    value = entity.spec.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        logger.debug(f"Ignoring non-string spec.{field} on {entity.ref}")
        return None
    return value


def build_location(template: str, namespace: str, kind: str, name: str) -> str:
    """Substitute entity coordinates into a location template.

    ``:namespace``, ``:kind`` and ``:name`` are replaced in a single pass,
    so substituted values are never re-scanned. The kind is lower-cased.
    Any other ``:token`` is left as is.
    """
    values = {"namespace": namespace, "kind": kind.lower(), "name": name}
    return _TEMPLATE_TOKEN.sub(lambda match: values[match.group(1)], template)


def _describe_raw(raw: Mapping[str, Any]) -> str | None:
    """Best-effort reference for an entity that failed validation."""
    metadata = raw.get("metadata")
    name = metadata.get("name") if isinstance(metadata, Mapping) else None
    kind = raw.get("kind")
    if name and kind:
        return f"{str(kind).lower()}:{name}"
    if name:
        return str(name)
    return None


class DocumentMapper:
    """Maps catalog entities to ``CatalogEntityDocument`` records."""

    def __init__(self, location_template: str | None = None) -> None:
        if location_template is not None and not location_template.strip():
            raise ConfigurationError("location_template must not be blank")
        self._location_template = location_template or DEFAULT_LOCATION_TEMPLATE

    @property
    def location_template(self) -> str:
        return self._location_template

    def to_entity(self, raw: Entity | Mapping[str, Any]) -> Entity:
        """Validate a raw entity record.

        Raises:
            MappingError: If the record lacks required fields such as
                ``metadata.name`` or ``kind``.
        """
        if isinstance(raw, Entity):
            return raw
        if not isinstance(raw, Mapping):
            raise MappingError(f"expected an entity object, got {type(raw).__name__}")
        try:
            return Entity.model_validate(raw)
        except ValidationError as e:
            raise MappingError(
                f"invalid entity: {e.error_count()} validation error(s): {e}",
                entity_ref=_describe_raw(raw),
            ) from e

    def to_document(self, raw: Entity | Mapping[str, Any]) -> CatalogEntityDocument:
        """Convert one entity into a search document.

        Raises:
            MappingError: If the entity is malformed.
        """
        entity = self.to_entity(raw)
        namespace = resolve_namespace(entity)

        document = CatalogEntityDocument(
            title=resolve_title(entity),
            location=build_location(
                self._location_template,
                namespace=namespace,
                kind=entity.kind,
                name=entity.metadata.name,
            ),
            text=resolve_text(entity),
            namespace=namespace,
            component_type=resolve_spec_field(entity, "type"),
            lifecycle=resolve_spec_field(entity, "lifecycle"),
            owner=resolve_spec_field(entity, "owner"),
        )
        logger.debug(f"Mapped {entity.ref} to {document.location}")
        return document
