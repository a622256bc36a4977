"""Tests for DefaultCatalogCollator."""

from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from catalog_collator.config import CollatorConfig
from catalog_collator.discovery import HostDiscovery
from catalog_collator.domains.catalog.collator import DefaultCatalogCollator
from catalog_collator.domains.catalog.models import CatalogEntityDocument
from catalog_collator.utils.errors import (
    ConfigurationError,
    DiscoveryError,
    MappingError,
    RetrievalError,
)


async def _collect(stream: AsyncIterator[CatalogEntityDocument]) -> list[CatalogEntityDocument]:
    return [document async for document in stream]


class TestExecute:
    """Test DefaultCatalogCollator.execute."""

    @pytest.fixture
    def collator(
        self, mock_discovery: MagicMock, catalog_transport: httpx.MockTransport
    ) -> DefaultCatalogCollator:
        return DefaultCatalogCollator(mock_discovery, transport=catalog_transport)

    async def test_fetches_from_catalog_service(
        self,
        collator: DefaultCatalogCollator,
        mock_discovery: MagicMock,
        expected_entities: list[dict[str, Any]],
    ) -> None:
        """Test one document is produced per entity."""
        documents = await _collect(collator.execute())

        mock_discovery.get_base_url.assert_awaited_with("catalog")
        assert len(documents) == len(expected_entities)

    async def test_maps_entities_to_documents(self, collator: DefaultCatalogCollator) -> None:
        """Test the documents produced for the sample entities, in order."""
        documents = await _collect(collator.execute())

        assert documents[0].to_dict() == {
            "title": "test-entity",
            "location": "/catalog/default/component/test-entity",
            "text": "The expected description",
            "namespace": "default",
            "componentType": "some-type",
            "lifecycle": "experimental",
            "owner": "someone",
        }
        assert documents[1].to_dict() == {
            "title": "Test Entity",
            "location": "/catalog/default/component/test-entity-2",
            "text": "The expected description 2",
            "namespace": "default",
            "componentType": "some-type",
            "lifecycle": "experimental",
            "owner": "someone",
        }

    async def test_custom_location_template(
        self, mock_discovery: MagicMock, catalog_transport: httpx.MockTransport
    ) -> None:
        collator = DefaultCatalogCollator(
            mock_discovery,
            location_template="/software/:name",
            transport=catalog_transport,
        )

        documents = await _collect(collator.execute())

        assert documents[0].location == "/software/test-entity"
        assert documents[1].location == "/software/test-entity-2"

    async def test_filter_with_no_matches(
        self, mock_discovery: MagicMock, catalog_transport: httpx.MockTransport
    ) -> None:
        """Test a filter matching nothing yields an empty stream, not an error."""
        collator = DefaultCatalogCollator.from_config(
            CollatorConfig(),
            discovery=mock_discovery,
            filter_spec={"kind": ["Foo", "Bar"]},
            transport=catalog_transport,
        )

        documents = await _collect(collator.execute())

        assert documents == []

    async def test_each_execute_fetches_again(
        self,
        collator: DefaultCatalogCollator,
        requests_seen: list[httpx.Request],
    ) -> None:
        """Test repeated runs are independent and identical."""
        first = await _collect(collator.execute())
        second = await _collect(collator.execute())

        assert len(requests_seen) == 2
        assert first == second
        assert first[0] is not second[0]

    async def test_no_fetch_until_first_pull(
        self,
        collator: DefaultCatalogCollator,
        requests_seen: list[httpx.Request],
    ) -> None:
        """Test creating the stream does not touch the network."""
        stream = collator.execute()
        assert requests_seen == []

        first = await stream.__anext__()

        assert first.title == "test-entity"
        assert len(requests_seen) == 1
        await stream.aclose()

    async def test_documents_are_mapped_lazily(
        self,
        collator: DefaultCatalogCollator,
        expected_entities: list[dict[str, Any]],
    ) -> None:
        """Test each document is mapped only when requested."""
        mapped: list[Any] = []
        original = collator.mapper.to_document

        def spy(entity: Any) -> CatalogEntityDocument:
            mapped.append(entity)
            return original(entity)

        collator.mapper.to_document = spy  # type: ignore[method-assign]
        stream = collator.execute()

        await stream.__anext__()
        assert len(mapped) == 1

        await stream.__anext__()
        assert len(mapped) == 2

        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    async def test_discovery_failure_aborts_before_documents(
        self, mock_discovery: MagicMock, catalog_transport: httpx.MockTransport
    ) -> None:
        mock_discovery.get_base_url = AsyncMock(
            side_effect=DiscoveryError("catalog", "not registered")
        )
        collator = DefaultCatalogCollator(mock_discovery, transport=catalog_transport)
        stream = collator.execute()

        with pytest.raises(DiscoveryError):
            await stream.__anext__()

    async def test_retrieval_failure_aborts_before_documents(
        self, mock_discovery: MagicMock, make_transport: Any
    ) -> None:
        collator = DefaultCatalogCollator(mock_discovery, transport=make_transport(500))

        with pytest.raises(RetrievalError):
            await _collect(collator.execute())

    async def test_malformed_entity_aborts_stream(
        self, mock_discovery: MagicMock, expected_entities: list[dict[str, Any]]
    ) -> None:
        """Test mapping stops at the first malformed entity."""
        broken = {"apiVersion": "v1", "kind": "Component", "metadata": {"title": "No name"}}
        entities = [expected_entities[0], broken, expected_entities[1]]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=entities)

        collator = DefaultCatalogCollator(
            mock_discovery, transport=httpx.MockTransport(handler)
        )
        stream = collator.execute()

        first = await stream.__anext__()
        assert first.title == "test-entity"

        with pytest.raises(MappingError):
            await stream.__anext__()


class TestFromConfig:
    """Test DefaultCatalogCollator.from_config."""

    def test_uses_configured_options(self, mock_discovery: MagicMock) -> None:
        config = CollatorConfig(
            filter={"kind": ["Component"]},
            location_template="/docs/:kind/:name",
        )

        collator = DefaultCatalogCollator.from_config(config, discovery=mock_discovery)

        assert collator.fetcher.filter == {"kind": ["Component"]}
        assert collator.mapper.location_template == "/docs/:kind/:name"

    def test_explicit_options_win(self, mock_discovery: MagicMock) -> None:
        config = CollatorConfig(
            filter={"kind": ["Component"]},
            location_template="/docs/:kind/:name",
        )

        collator = DefaultCatalogCollator.from_config(
            config,
            discovery=mock_discovery,
            filter_spec={"kind": ["API"]},
        )

        assert collator.fetcher.filter == {"kind": ["API"]}
        assert collator.mapper.location_template == "/docs/:kind/:name"

    def test_blank_explicit_template_keeps_configured(self, mock_discovery: MagicMock) -> None:
        config = CollatorConfig(location_template="/docs/:name")

        collator = DefaultCatalogCollator.from_config(
            config, discovery=mock_discovery, location_template=""
        )

        assert collator.mapper.location_template == "/docs/:name"

    def test_blank_template_rejected(self, mock_discovery: MagicMock) -> None:
        with pytest.raises(ConfigurationError):
            DefaultCatalogCollator(mock_discovery, location_template=" ")

    def test_defaults_without_config(self, mock_discovery: MagicMock) -> None:
        collator = DefaultCatalogCollator.from_config(CollatorConfig(), discovery=mock_discovery)

        assert collator.fetcher.filter is None
        assert collator.mapper.location_template == "/catalog/:namespace/:kind/:name"

    async def test_builds_host_discovery(
        self, catalog_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
    ) -> None:
        """Test discovery is derived from config when not passed in."""
        config = CollatorConfig(endpoints={"catalog": "http://localhost:7000"})

        collator = DefaultCatalogCollator.from_config(config, transport=catalog_transport)
        documents = await _collect(collator.execute())

        assert isinstance(collator.fetcher.discovery, HostDiscovery)
        assert len(documents) == 2
        assert str(requests_seen[0].url) == "http://localhost:7000/entities"

    def test_collator_type(self) -> None:
        assert DefaultCatalogCollator.type == "software-catalog"
