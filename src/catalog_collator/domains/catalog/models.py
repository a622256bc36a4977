"""Pydantic models for catalog entities and the search documents built from them."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Namespace assumed for entities that do not declare one
DEFAULT_NAMESPACE = "default"


class EntityMetadata(BaseModel):
    """Metadata block of a catalog entity."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Entity name, unique within namespace+kind")
    namespace: str | None = Field(None, description="Entity namespace")
    title: str | None = Field(None, description="Human-readable display title")
    description: str | None = Field(None, description="Free-text description")


class Entity(BaseModel):
    """A catalog entity as returned by the catalog service.

    Only the fields the collator reads are modelled; everything else is
    kept as extra data so entities round-trip unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(..., alias="apiVersion", description="Entity API version")
    kind: str = Field(..., min_length=1, description="Entity kind (e.g., 'Component', 'API')")
    metadata: EntityMetadata = Field(..., description="Entity metadata")
    spec: dict[str, Any] | None = Field(None, description="Kind-specific fields")

    @property
    def ref(self) -> str:
        """Entity reference in ``kind:namespace/name`` form."""
        namespace = self.metadata.namespace or DEFAULT_NAMESPACE
        return f"{self.kind.lower()}:{namespace}/{self.metadata.name}"


class CatalogEntityDocument(BaseModel):
    """Flat search document produced for one catalog entity.

    Optional fields stay None when the entity does not carry them, so
    indexers can tell an absent value from an empty one.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(..., description="Entity title, or its name when untitled")
    location: str = Field(..., description="Display path of the entity")
    text: str = Field("", description="Entity description")
    namespace: str = Field(DEFAULT_NAMESPACE, description="Entity namespace")
    component_type: str | None = Field(None, alias="componentType", description="spec.type")
    lifecycle: str | None = Field(None, description="spec.lifecycle")
    owner: str | None = Field(None, description="spec.owner")

    def to_dict(self) -> dict[str, str]:
        """Return the indexable record, omitting absent optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
