"""Abstract transport interface for talking to a schema registry.

A transport performs one request per registry endpoint and returns the
decoded JSON document. Connection pooling, timeouts and content negotiation
belong to the transport; the cache and resolution layers only see the typed
endpoint helpers defined here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

from ..record import SchemaRecord, SubjectVersion, VersionSelector
from .payloads import SchemaByIdPayload, SchemaPayload, SubjectVersionPayload, decode

CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"

SCHEMA_BY_ID = "/schemas/ids/{id}"
SCHEMA_ID_VERSIONS = "/schemas/ids/{id}/versions"
SCHEMA_TYPES = "/schemas/types"
ALL_SUBJECTS = "/subjects"
SUBJECT_VERSIONS = "/subjects/{subject}/versions"
SCHEMA_BY_SUBJECT_VERSION = "/subjects/{subject}/versions/{version}"
REFERENCED_BY = "/subjects/{subject}/versions/{version}/referencedby"
DELETE_SUBJECT = "/subjects/{subject}?permanent={permanent}"


def _quote(subject: str) -> str:
    return quote(subject, safe="")


class BaseTransport(ABC):
    """Abstract base class for registry transports.

    Subclasses implement `request`; every endpoint helper is built on it and
    validates the response shape, so a subclass only decides how bytes move.

    `request` must raise:

    - `NotFoundError` when the registry reports a missing id/subject/version;
    - `RegistryError` for any other structured registry error;
    - `TransportError` when no usable response was received;
    - `DecodeError` when a success response is not valid JSON.
    """

    @abstractmethod
    def request(self, method: str, path: str, body: Any | None = None) -> Any:
        """Perform one registry request and return the decoded JSON document.

        Args:
            method: HTTP method, e.g. "GET".
            path: Request path relative to the registry base URL, starting
                with "/".
            body: Optional JSON-serializable request body.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the transport."""

    def __enter__(self) -> BaseTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Schemas

    def fetch_schema_by_id(self, schema_id: int) -> SchemaByIdPayload:
        payload = self.request("GET", SCHEMA_BY_ID.format(id=schema_id))
        return decode(SchemaByIdPayload, payload, what="schema by id")

    def fetch_subject_versions_by_id(self, schema_id: int) -> list[SubjectVersion]:
        """Locations the schema with `schema_id` is registered under, in
        registry order."""
        payload = self.request("GET", SCHEMA_ID_VERSIONS.format(id=schema_id))
        items = decode(
            list[SubjectVersionPayload], payload, what="subject versions by id"
        )
        return [item.to_location() for item in items]

    def list_schema_types(self) -> list[str]:
        payload = self.request("GET", SCHEMA_TYPES)
        return decode(list[str], payload, what="schema types")

    # Subjects

    def list_subjects(self) -> list[str]:
        payload = self.request("GET", ALL_SUBJECTS)
        return decode(list[str], payload, what="subjects")

    def list_versions(self, subject: str) -> list[int]:
        payload = self.request("GET", SUBJECT_VERSIONS.format(subject=_quote(subject)))
        return decode(list[int], payload, what="subject versions")

    def fetch_schema_by_subject_version(
        self, subject: str, version: VersionSelector
    ) -> SchemaRecord:
        path = SCHEMA_BY_SUBJECT_VERSION.format(subject=_quote(subject), version=version)
        payload = self.request("GET", path)
        return decode(SchemaPayload, payload, what="schema").to_record()

    def fetch_latest_schema(self, subject: str) -> SchemaRecord:
        return self.fetch_schema_by_subject_version(subject, "latest")

    def fetch_referenced_by(self, subject: str, version: VersionSelector) -> list[int]:
        path = REFERENCED_BY.format(subject=_quote(subject), version=version)
        payload = self.request("GET", path)
        return decode(list[int], payload, what="referenced by")

    def delete_subject(self, subject: str, permanent: bool = False) -> list[int]:
        path = DELETE_SUBJECT.format(
            subject=_quote(subject), permanent=str(permanent).lower()
        )
        payload = self.request("DELETE", path)
        return decode(list[int], payload, what="deleted versions")
