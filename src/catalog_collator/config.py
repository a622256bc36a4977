"""Configuration for the catalog collator.

Settings are read from environment variables with the CATALOG_COLLATOR_
prefix (or a .env file) and can be layered with a YAML config file via
``CollatorConfig.from_yaml``.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_collator.domains.catalog.filters import normalize_filter
from catalog_collator.utils.errors import ConfigurationError


class LogLevel(str, Enum):
    """Logging verbosity."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CollatorConfig(BaseSettings):
    """Configuration for catalog collation runs."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_COLLATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Discovery settings
    base_url: str = Field(
        default="http://localhost:7007",
        description="Internal base URL of the backend hosting the plugins",
    )
    external_base_url: str | None = Field(
        default=None,
        description="Externally reachable base URL (defaults to base_url)",
    )
    endpoints: dict[str, str] = Field(
        default_factory=dict,
        description="Per-plugin target URL overrides; targets may contain {{pluginId}}",
    )

    # Collator settings
    location_template: str | None = Field(
        default=None,
        description="Template for document locations, e.g. /catalog/:namespace/:kind/:name",
    )
    filter: dict[str, list[str]] | None = Field(
        default=None,
        description="Entity filter sent to the catalog, e.g. {kind: [Component, API]}",
    )

    # HTTP settings
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for catalog requests",
    )

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )

    @field_validator("filter", mode="before")
    @classmethod
    def _validate_filter(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ValueError("filter must be a mapping of attribute to values")
        try:
            return normalize_filter(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e

    @field_validator("location_template")
    @classmethod
    def _validate_location_template(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("location_template must not be blank")
        return value

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> CollatorConfig:
        """Load configuration from a YAML file.

        Values from the file take precedence over environment variables,
        and ``overrides`` take precedence over the file.

        Raises:
            ConfigurationError: If the file cannot be read, parsed or validated.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


@lru_cache
def get_config() -> CollatorConfig:
    """Get the process-wide configuration built from the environment."""
    return CollatorConfig()
