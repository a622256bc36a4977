"""Backend plugin endpoint discovery.

The collator never hard-codes where the catalog lives. It asks a
discovery collaborator for the base URL of the ``catalog`` plugin and
builds request URLs from that.

``HostDiscovery`` covers the common single-host deployment: every plugin
is mounted under ``{base_url}/api/{plugin_id}``, with optional per-plugin
overrides for plugins that run elsewhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from catalog_collator.utils.errors import DiscoveryError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from catalog_collator.config import CollatorConfig

logger = logging.getLogger(__name__)

# Placeholder accepted in endpoint override targets
PLUGIN_ID_PLACEHOLDERS = ("{{pluginId}}", "{{ pluginId }}")


@runtime_checkable
class PluginEndpointDiscovery(Protocol):
    """Resolves backend plugin ids to base URLs."""

    async def get_base_url(self, plugin_id: str) -> str:
        """Return the internal base URL for a plugin."""
        ...

    async def get_external_base_url(self, plugin_id: str) -> str:
        """Return the externally reachable base URL for a plugin."""
        ...


@dataclass
class DiscoveredEndpoint:
    """Result of resolving a plugin endpoint."""

    url: str
    plugin_id: str
    source: str  # "endpoint" or "host"

    def __str__(self) -> str:
        return f"{self.url} (discovered via {self.source})"


class HostDiscovery:
    """Discovery for plugins served from a single backend host.

    Resolution strategy:
    1. Use an explicit endpoint override for the plugin, if configured
    2. Fall back to ``{base_url}/api/{plugin_id}``
    """

    def __init__(
        self,
        base_url: str,
        external_base_url: str | None = None,
        endpoints: Mapping[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._external_base_url = (external_base_url or base_url).rstrip("/")
        self._endpoints = dict(endpoints or {})

    @classmethod
    def from_config(cls, config: CollatorConfig) -> HostDiscovery:
        """Create a discovery instance from collator configuration."""
        return cls(
            base_url=config.base_url,
            external_base_url=config.external_base_url,
            endpoints=config.endpoints,
        )

    def resolve(self, plugin_id: str, external: bool = False) -> DiscoveredEndpoint:
        """Resolve a plugin id to its endpoint.

        Args:
            plugin_id: Id of the backend plugin, e.g. "catalog".
            external: Resolve the externally reachable URL instead.

        Raises:
            DiscoveryError: If the plugin id is blank or no base URL is configured.
        """
        if not plugin_id or not plugin_id.strip():
            raise DiscoveryError(plugin_id, "plugin id must not be empty")

        target = self._endpoints.get(plugin_id)
        if target:
            for placeholder in PLUGIN_ID_PLACEHOLDERS:
                target = target.replace(placeholder, plugin_id)
            return DiscoveredEndpoint(
                url=target.rstrip("/"),
                plugin_id=plugin_id,
                source="endpoint",
            )

        base_url = self._external_base_url if external else self._base_url
        if not base_url:
            raise DiscoveryError(plugin_id, "no backend base URL configured")

        return DiscoveredEndpoint(
            url=f"{base_url}/api/{plugin_id}",
            plugin_id=plugin_id,
            source="host",
        )

    async def get_base_url(self, plugin_id: str) -> str:
        endpoint = self.resolve(plugin_id)
        logger.debug(f"Resolved plugin '{plugin_id}' to {endpoint}")
        return endpoint.url

    async def get_external_base_url(self, plugin_id: str) -> str:
        endpoint = self.resolve(plugin_id, external=True)
        logger.debug(f"Resolved external URL for plugin '{plugin_id}' to {endpoint}")
        return endpoint.url
