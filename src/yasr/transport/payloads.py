"""Typed views over registry response bodies.

Registry responses are validated with Pydantic models before they reach the
cache. Any shape mismatch surfaces as `DecodeError`, never as a partially
populated record.
"""

from __future__ import annotations

from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..exceptions import DecodeError
from ..record import SchemaRecord, SchemaReference, SchemaType, SubjectVersion

T = TypeVar("T")

# Ids and versions are positive JSON integers; "3", true and 0 are rejected.
RegistryInt = Annotated[int, Field(strict=True, gt=0)]


class ReferencePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    subject: str
    version: RegistryInt


class SchemaPayload(BaseModel):
    """Body of the subject/version and latest-version endpoints."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: RegistryInt
    subject: str
    version: RegistryInt
    schema_text: str = Field(alias="schema")
    schema_type: SchemaType | None = Field(default=None, alias="schemaType")
    references: list[ReferencePayload] = Field(default_factory=list)

    def to_record(self) -> SchemaRecord:
        return SchemaRecord(
            id=self.id,
            subject=self.subject,
            version=self.version,
            schema=self.schema_text,
            schema_type=self.schema_type,
            references=tuple(
                SchemaReference(name=ref.name, subject=ref.subject, version=ref.version)
                for ref in self.references
            ),
        )


class SchemaByIdPayload(BaseModel):
    """Body of ``GET /schemas/ids/{id}``, which carries no subject or version."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    schema_text: str = Field(alias="schema")
    schema_type: SchemaType | None = Field(default=None, alias="schemaType")
    references: list[ReferencePayload] = Field(default_factory=list)


class SubjectVersionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    subject: str
    version: RegistryInt

    def to_location(self) -> SubjectVersion:
        return SubjectVersion(self.subject, self.version)


class ErrorPayload(BaseModel):
    """Structured error body returned with non-2xx responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    error_code: int
    message: str = ""


_ADAPTERS: dict[Any, TypeAdapter[Any]] = {}


def _adapter(model: Any) -> TypeAdapter[Any]:
    adapter = _ADAPTERS.get(model)
    if adapter is None:
        adapter = _ADAPTERS[model] = TypeAdapter(model)
    return adapter


def decode(model: type[T] | Any, payload: Any, *, what: str) -> T:
    """Validate a decoded JSON document against `model`.

    Args:
        model: A Pydantic model class or a typing construct such as
            ``list[int]``.
        payload: The decoded JSON document.
        what: Human readable description of the payload for error messages.

    Raises:
        DecodeError: If the payload does not match the expected shape.
    """
    try:
        return _adapter(model).validate_python(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise DecodeError(f"Malformed {what} response: {problems}") from e
