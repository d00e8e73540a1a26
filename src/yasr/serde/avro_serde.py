"""Avro codec backed by fastavro.

Requires the optional ``avro`` extra: ``pip install yasr[avro]``.

Example:
    >>> serde = AvroSerde('{"type": "record", "name": "Order", '
    ...                   '"fields": [{"name": "id", "type": "long"}]}')
    >>> serde.decode(serde.encode({"id": 7}))
    {'id': 7}
"""

from __future__ import annotations

import io
import json
from typing import Any

from .._dependencies import requires_dependency
from ..exceptions import DecodeError, SerdeError
from .base import Serde


class AvroSerde(Serde):
    """Schemaless Avro binary encoding for a single writer schema.

    Args:
        schema: Avro schema as JSON text (as stored in the registry) or as an
            already decoded JSON value.

    Raises:
        DecodeError: If the schema text is not JSON or not a valid Avro schema.
        MissingDependencyError: If fastavro is not installed.
    """

    name = "avro"

    @requires_dependency("fastavro", "1.7", import_name="fastavro")
    def __init__(self, schema: str | dict[str, Any] | list[Any]) -> None:
        from fastavro import parse_schema
        from fastavro.schema import SchemaParseException

        if isinstance(schema, str):
            try:
                schema = json.loads(schema)
            except ValueError as e:
                raise DecodeError(f"Avro schema is not valid JSON: {e}") from e
        try:
            self._parsed = parse_schema(schema)
        except (SchemaParseException, KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid Avro schema: {e}") from e

    @property
    def parsed_schema(self) -> Any:
        return self._parsed

    def encode(self, value: Any) -> bytes:
        from fastavro import schemaless_writer

        buffer = io.BytesIO()
        try:
            schemaless_writer(buffer, self._parsed, value)
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            raise SerdeError(f"Value does not match the Avro schema: {e}") from e
        return buffer.getvalue()

    def decode(self, data: bytes) -> Any:
        from fastavro import schemaless_reader

        try:
            return schemaless_reader(io.BytesIO(data), self._parsed)
        except (EOFError, ValueError, IndexError, UnicodeDecodeError) as e:
            raise SerdeError(f"Data is not valid for the Avro schema: {e}") from e

    def __repr__(self) -> str:
        name = self._parsed.get("name") if isinstance(self._parsed, dict) else None
        return f"AvroSerde({name!r})" if name else "AvroSerde()"
