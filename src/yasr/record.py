"""Core data structures for yasr.

This module defines the immutable records the cache stores and the small
value types that describe where a record lives in the registry.

Example:
    >>> record = SchemaRecord(
    ...     id=42,
    ...     subject="orders",
    ...     version=3,
    ...     schema='{"type": "string"}',
    ...     schema_type=SchemaType.AVRO,
    ... )
    >>> record.location
    SubjectVersion(subject='orders', version=3)
    >>> print(record)
    orders/3 (id=42, type=AVRO)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Literal, Union

if TYPE_CHECKING:
    from .serde import Serde

LATEST = "latest"

VersionSelector = Union[int, Literal["latest"]]


class SchemaType(str, Enum):
    """Schema formats understood by the registry.

    A missing `schemaType` in a registry response means the legacy default,
    which is represented as `None` on `SchemaRecord` rather than coerced to
    `AVRO`.
    """

    AVRO = "AVRO"
    PROTOBUF = "PROTOBUF"
    JSONSCHEMA = "JSONSCHEMA"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubjectVersion:
    """A location in the registry: one version of one subject."""

    subject: str
    version: int

    def __str__(self) -> str:
        return f"{self.subject}/{self.version}"


@dataclass(frozen=True)
class SchemaReference:
    """A named dependency of a schema on another registered schema.

    Example:
        >>> ref = SchemaReference(name="Address", subject="address", version=1)
        >>> str(ref)
        'Address -> address/1'
    """

    name: str
    subject: str
    version: int

    def __str__(self) -> str:
        return f"{self.name} -> {self.subject}/{self.version}"


@dataclass(frozen=True)
class SchemaRecord:
    """A schema as registered under one subject and version.

    Records are created only from successful registry responses and are never
    mutated afterwards; the cache replaces records, it does not update them.
    Two records are equal when their registry content is equal. The optional
    `codec` is derived data and takes no part in equality or hashing.

    Args:
        id: Registry-assigned id, unique per schema content.
        subject: Subject the schema is registered under.
        version: Version of the schema within its subject.
        schema: Raw schema text. Never parsed by the cache.
        schema_type: Declared schema format, or None for the legacy default.
        references: Ordered references to other registered schemas.
        codec: Serde built from this schema when codec creation is enabled.
    """

    id: int
    subject: str
    version: int
    schema: str
    schema_type: SchemaType | None = None
    references: tuple[SchemaReference, ...] = ()
    codec: Serde | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Accept any iterable of references but always store a tuple.
        if not isinstance(self.references, tuple):
            object.__setattr__(self, "references", tuple(self.references))

    @property
    def location(self) -> SubjectVersion:
        """The (subject, version) pair this record is indexed under."""
        return SubjectVersion(self.subject, self.version)

    @property
    def has_references(self) -> bool:
        return bool(self.references)

    @property
    def is_avro(self) -> bool:
        """True for AVRO schemas, including the untyped legacy default."""
        return self.schema_type in (None, SchemaType.AVRO)

    def with_codec(self, codec: Serde) -> SchemaRecord:
        """Return a copy of this record carrying `codec`."""
        return replace(self, codec=codec)

    def __str__(self) -> str:
        details = [f"id={self.id}"]
        if self.schema_type is not None:
            details.append(f"type={self.schema_type}")
        if self.references:
            details.append(f"references={len(self.references)}")
        return f"{self.subject}/{self.version} ({', '.join(details)})"

