"""Schemaless codecs for strings, integers and JSON documents."""

from __future__ import annotations

import json
import re
from typing import Any

from ..exceptions import SerdeError
from .base import Serde

_DECIMAL = re.compile(rb"-?[0-9]+")


class StringSerde(Serde):
    """UTF-8 text."""

    name = "string"

    def encode(self, value: Any) -> bytes:
        if not isinstance(value, str):
            raise SerdeError(f"StringSerde cannot encode {type(value).__name__}")
        return value.encode("utf-8")

    def decode(self, data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerdeError(f"Data is not valid UTF-8: {e}") from e


class IntSerde(Serde):
    """Integers as ASCII decimal text, e.g. ``b"42"``."""

    name = "int"

    def encode(self, value: Any) -> bytes:
        # bool is an int subclass but "True" is not a valid decimal.
        if isinstance(value, bool) or not isinstance(value, int):
            raise SerdeError(f"IntSerde cannot encode {type(value).__name__}")
        return str(value).encode("ascii")

    def decode(self, data: bytes) -> int:
        if not isinstance(data, (bytes, bytearray)) or not _DECIMAL.fullmatch(data):
            raise SerdeError(f"Cannot decode {data!r} as an integer")
        return int(data)


class JsonSerde(Serde):
    """JSON documents encoded as UTF-8."""

    name = "json"

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerdeError(f"Value is not JSON serializable: {e}") from e

    def decode(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except ValueError as e:
            raise SerdeError(f"Data is not a valid JSON document: {e}") from e
