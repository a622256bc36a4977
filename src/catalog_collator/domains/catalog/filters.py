"""Encoding of entity filters into the catalog ``filter`` query parameter.

The catalog service accepts a single ``filter`` parameter holding a
comma-separated list of ``attribute=value`` pairs. Values given for the
same attribute are alternatives, so ``{"kind": ["API", "Component"]}``
is sent as ``filter=kind=API,kind=Component``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from catalog_collator.utils.errors import ConfigurationError

FILTER_PARAM = "filter"

# Separators of the encoded filter, not allowed inside attributes or values
_RESERVED_CHARS = frozenset(",=")

FilterSpec = Mapping[str, str | Sequence[str]]


def normalize_filter(filter_spec: FilterSpec | None) -> dict[str, list[str]] | None:
    """Validate a filter spec and convert it to plain lists.

    A bare string value is treated as a single accepted value.

    Args:
        filter_spec: Mapping of attribute name to accepted values.

    Returns:
        A new dict preserving attribute and value order, or None when
        there is nothing to filter on.

    Raises:
        ConfigurationError: If an attribute name is blank, has no values, or a
            name or value contains a separator (',' or '=').
    """
    if not filter_spec:
        return None

    normalized: dict[str, list[str]] = {}
    for attribute, values in filter_spec.items():
        if (
            not isinstance(attribute, str)
            or not attribute.strip()
            or _RESERVED_CHARS & set(attribute)
        ):
            raise ConfigurationError(f"Invalid filter attribute: {attribute!r}")

        if isinstance(values, str):
            values = [values]
        elif not isinstance(values, Sequence):
            raise ConfigurationError(
                f"Filter on '{attribute}' must be a string or list of strings"
            )

        accepted = list(values)
        if not accepted:
            raise ConfigurationError(f"Filter on '{attribute}' must list at least one value")
        for value in accepted:
            if not isinstance(value, str) or not value or _RESERVED_CHARS & set(value):
                raise ConfigurationError(
                    f"Filter on '{attribute}' contains an invalid value: {value!r}"
                )

        normalized[attribute] = accepted

    return normalized


def encode_filter(filter_spec: FilterSpec | None) -> str | None:
    """Serialize a filter spec into the value of the ``filter`` parameter.

    Returns:
        ``"kind=Foo,kind=Bar"`` for ``{"kind": ["Foo", "Bar"]}``, or None
        when no filter parameter should be sent.
    """
    normalized = normalize_filter(filter_spec)
    if normalized is None:
        return None

    return ",".join(
        f"{attribute}={value}" for attribute, values in normalized.items() for value in values
    )


def filter_params(filter_spec: FilterSpec | None) -> dict[str, str]:
    """Build the query parameters for the entity listing request."""
    encoded = encode_filter(filter_spec)
    if encoded is None:
        return {}
    return {FILTER_PARAM: encoded}
