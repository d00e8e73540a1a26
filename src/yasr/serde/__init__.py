"""Payload codecs, selected by configuration name.

- `StringSerde` ("string"): UTF-8 text.
- `IntSerde` ("int"): integers as decimal text.
- `JsonSerde` ("json"): JSON documents.
- `AvroSerde` ("avro"): Avro binary for a given schema (requires fastavro).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import ConfigError
from .base import Serde
from .primitives import IntSerde, JsonSerde, StringSerde

if TYPE_CHECKING:
    from .avro_serde import AvroSerde


def __getattr__(name: str):
    if name == "AvroSerde":
        from . import avro_serde

        return avro_serde.AvroSerde
    raise AttributeError(name)


__all__ = [
    "Serde",
    "StringSerde",
    "IntSerde",
    "JsonSerde",
    "AvroSerde",
    "SERDE_NAMES",
    "get_serde",
]

SERDE_NAMES = ("avro", "json", "string", "int")


def get_serde(name: str, schema: Any = None) -> Serde:
    """Build the serde registered under `name`.

    Args:
        name: One of "avro", "json", "string" or "int" (case-insensitive).
        schema: Writer schema. Required for "avro", ignored otherwise.

    Returns:
        A new `Serde` instance.

    Raises:
        ConfigError: If `name` is unknown, or "avro" is requested without a
            schema.

    Example:
        >>> get_serde("int").encode(42)
        b'42'
    """
    key = name.lower()
    if key == "string":
        return StringSerde()
    if key == "int":
        return IntSerde()
    if key == "json":
        return JsonSerde()
    if key == "avro":
        if schema is None:
            raise ConfigError("The 'avro' serde requires a schema")
        from .avro_serde import AvroSerde

        return AvroSerde(schema)
    raise ConfigError(
        f"Unknown serde '{name}'",
        suggestions=[f"Use one of: {', '.join(SERDE_NAMES)}"],
    )
