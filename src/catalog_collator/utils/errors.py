"""Exception hierarchy for the catalog collator."""


class CollatorError(Exception):
    """Base exception for all collator failures."""

    pass


class ConfigurationError(CollatorError):
    """Invalid collator configuration (filter, template, or config file)."""

    pass


class DiscoveryError(CollatorError):
    """The base URL of a backend plugin could not be resolved."""

    def __init__(self, plugin_id: str, reason: str) -> None:
        self.plugin_id = plugin_id
        self.reason = reason
        super().__init__(f"Failed to resolve base URL for '{plugin_id}': {reason}")


class RetrievalError(CollatorError):
    """The entity listing request failed or returned a non-success status."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to retrieve entities from {url} (HTTP {status_code}): {reason}"
        else:
            message = f"Failed to retrieve entities from {url}: {reason}"
        super().__init__(message)


class MappingError(CollatorError):
    """An entity could not be converted into a search document."""

    def __init__(self, reason: str, entity_ref: str | None = None) -> None:
        self.reason = reason
        self.entity_ref = entity_ref
        if entity_ref:
            message = f"Failed to map entity '{entity_ref}': {reason}"
        else:
            message = f"Failed to map entity: {reason}"
        super().__init__(message)
