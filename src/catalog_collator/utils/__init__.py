"""Utility functions and helpers for the catalog collator."""

from catalog_collator.utils.errors import (
    CollatorError,
    ConfigurationError,
    DiscoveryError,
    MappingError,
    RetrievalError,
)

__all__ = [
    # Errors
    "CollatorError",
    "ConfigurationError",
    "DiscoveryError",
    "MappingError",
    "RetrievalError",
]
