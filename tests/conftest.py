"""Shared pytest fixtures for catalog collator tests."""

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from catalog_collator.config import get_config

CATALOG_BASE_URL = "http://localhost:7000"


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Keep the process-wide config from leaking between tests."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def expected_entities() -> list[dict[str, Any]]:
    """Sample entities as served by the catalog."""
    return [
        {
            "apiVersion": "backstage.io/v1alpha1",
            "kind": "Component",
            "metadata": {
                "name": "test-entity",
                "description": "The expected description",
            },
            "spec": {
                "type": "some-type",
                "lifecycle": "experimental",
                "owner": "someone",
            },
        },
        {
            "apiVersion": "backstage.io/v1alpha1",
            "kind": "Component",
            "metadata": {
                "title": "Test Entity",
                "name": "test-entity-2",
                "description": "The expected description 2",
            },
            "spec": {
                "type": "some-type",
                "lifecycle": "experimental",
                "owner": "someone",
            },
        },
    ]


@pytest.fixture
def minimal_entity() -> dict[str, Any]:
    """Entity with only the required fields."""
    return {
        "apiVersion": "backstage.io/v1alpha1",
        "kind": "API",
        "metadata": {"name": "petstore"},
    }


@pytest.fixture
def mock_discovery() -> MagicMock:
    """Create a mock discovery resolving every plugin to the local catalog."""
    discovery = MagicMock()
    discovery.get_base_url = AsyncMock(return_value=CATALOG_BASE_URL)
    discovery.get_external_base_url = AsyncMock(return_value=CATALOG_BASE_URL)
    return discovery


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    """Requests received by the fake catalog service."""
    return []


@pytest.fixture
def catalog_transport(
    expected_entities: list[dict[str, Any]], requests_seen: list[httpx.Request]
) -> httpx.MockTransport:
    """Fake catalog service.

    Serves ``expected_entities`` unfiltered, an empty list for the
    ``kind=Foo,kind=Bar`` filter, and 400 for any other filter.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        if request.url.path != "/entities":
            return httpx.Response(404, json={"error": "not found"})
        if "filter" in request.url.params:
            if request.url.params["filter"] == "kind=Foo,kind=Bar":
                return httpx.Response(200, json=[])
            return httpx.Response(400, json={"error": "unexpected filter"})
        return httpx.Response(200, json=expected_entities)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Build a transport that answers every request with a fixed response."""

    def _make(status_code: int = 200, **kwargs: Any) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, **kwargs)

        return httpx.MockTransport(handler)

    return _make
