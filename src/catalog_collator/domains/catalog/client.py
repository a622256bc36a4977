"""Async HTTP client for the catalog entities API."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from catalog_collator.domains.catalog.filters import FilterSpec, filter_params
from catalog_collator.utils.errors import RetrievalError

logger = logging.getLogger(__name__)

ENTITIES_PATH = "/entities"


class CatalogClient:
    """Client for the catalog service REST API.

    Usage:
        async with CatalogClient("http://backend:7007/api/catalog") as client:
            entities = await client.get_entities({"kind": ["Component"]})
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> CatalogClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("CatalogClient must be used as an async context manager")
        return self._client

    async def get_entities(self, filter_spec: FilterSpec | None = None) -> list[dict[str, Any]]:
        """List entities, optionally filtered server-side.

        Args:
            filter_spec: Mapping of attribute to accepted values, sent as a
                single ``filter`` query parameter.

        Returns:
            Entity records in the order the service returned them.

        Raises:
            RetrievalError: If the request fails, returns a non-success
                status, or the body is not a JSON array.
        """
        client = self._get_client()
        params = filter_params(filter_spec)
        url = f"{self._base_url}{ENTITIES_PATH}"

        logger.debug(f"Fetching entities from {url} with params {params}")
        try:
            response = await client.get(ENTITIES_PATH, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise RetrievalError(url, f"request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Catalog returned HTTP {response.status_code} for {url}")
            raise RetrievalError(
                url,
                response.reason_phrase or "non-success response",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RetrievalError(url, f"response is not valid JSON: {e}") from e

        if not isinstance(body, list):
            raise RetrievalError(url, f"expected a JSON array, got {type(body).__name__}")

        logger.info(f"Retrieved {len(body)} entities from {url}")
        return body
