"""Caching schema registry client.

`RegistryClient` is the public entry point. It combines a registry transport,
the dual-index cache and the resolution engine into one thread-safe lookup
API.

Example:
    >>> from yasr import RegistryClient
    >>>
    >>> with RegistryClient.from_url("http://localhost:8081") as client:
    ...     record = client.get_by_id(42)
    ...     same = client.get_by_subject_version(record.subject, record.version)
    ...     assert same is record  # served from the cache
    ...
    ...     latest = client.get_latest("orders")  # always asks the registry
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator

from .cache import DualIndexCache
from .config import RegistryClientConfig
from .exceptions import InvalidLookupKeyError, YasrError
from .record import LATEST, SchemaRecord, SubjectVersion, VersionSelector
from .resolution import ResolutionEngine
from .transport import BaseTransport, HttpTransport


def _check_subject(subject: str) -> None:
    if not isinstance(subject, str) or not subject:
        raise InvalidLookupKeyError(f"Subject must be a non-empty string, got {subject!r}")


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidLookupKeyError(f"{name} must be a positive integer, got {value!r}")


class RegistryClient:
    """Thread-safe schema registry client with a dual-index cache.

    Lookups by schema id and by (subject, version) are served from the cache
    once fetched. `get_latest` always asks the registry, because the highest
    cached version may be stale. Listings are never cached.

    Every `YasrError` raised by a lookup keeps its type and carries the
    operation name and key in its `operation` and `key` attributes.

    Args:
        transport: Registry transport. The client closes it on `close()`.
        cache_enabled: Serve repeated lookups from the cache. Defaults to True.
        create_codecs: Attach an `AvroSerde` to AVRO records. Defaults to False.
        coalesce_requests: Share in-flight fetches between concurrent lookups
            of the same key. Defaults to True.
        cache: Optional cache instance, e.g. to share one cache between
            clients of the same registry.
        logger: Optional logger, also handed to the resolution engine and to
            the cache the client creates. If None, each component uses its
            own "yasr.*" logger.
    """

    def __init__(
        self,
        transport: BaseTransport,
        *,
        cache_enabled: bool = True,
        create_codecs: bool = False,
        coalesce_requests: bool = True,
        cache: DualIndexCache | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("yasr.client")
        self.transport = transport
        self.cache = cache if cache is not None else DualIndexCache(logger=logger)
        self.engine = ResolutionEngine(
            transport,
            self.cache,
            cache_enabled=cache_enabled,
            create_codecs=create_codecs,
            coalesce_requests=coalesce_requests,
            logger=logger,
        )

    @classmethod
    def from_config(
        cls, config: RegistryClientConfig, *, logger: logging.Logger | None = None
    ) -> RegistryClient:
        """Build a client backed by `HttpTransport` from `config`."""
        transport = HttpTransport(
            config.url, timeout=config.timeout, headers=config.headers
        )
        return cls(
            transport,
            cache_enabled=config.cache_enabled,
            create_codecs=config.create_codecs,
            coalesce_requests=config.coalesce_requests,
            logger=logger,
        )

    @classmethod
    def from_url(cls, url: str, **options: Any) -> RegistryClient:
        """Build a client for `url`; `options` are `RegistryClientConfig` fields."""
        return cls.from_config(RegistryClientConfig(url=url, **options))

    @property
    def cache_enabled(self) -> bool:
        return self.engine.cache_enabled

    # Cached lookups

    def get_by_id(self, schema_id: int) -> SchemaRecord:
        """Return the schema registered with `schema_id`.

        Raises:
            NotFoundError: If the registry does not know the id.
            ResolutionError: If the id has no location, or its first location
                resolves to another id.
        """
        with self._lookup("get_by_id", schema_id):
            _check_positive("Schema id", schema_id)
            return self.engine.resolve_by_id(schema_id)

    def get_by_subject_version(self, subject: str, version: int) -> SchemaRecord:
        """Return version `version` of `subject`.

        Raises:
            NotFoundError: If the subject or version does not exist.
        """
        with self._lookup("get_by_subject_version", (subject, version)):
            _check_subject(subject)
            _check_positive("Version", version)
            return self.engine.resolve_subject_version(subject, version)

    def get_latest(self, subject: str) -> SchemaRecord:
        """Fetch the registry's latest version of `subject` and cache it."""
        with self._lookup("get_latest", subject):
            _check_subject(subject)
            return self.engine.resolve_latest(subject)

    def prefetch(self, subject: str, version: int) -> SchemaRecord:
        """Warm the cache with one version of `subject`.

        Equivalent to `get_by_subject_version`, named for start-up code that
        loads known schemas before serving traffic.
        """
        with self._lookup("prefetch", (subject, version)):
            _check_subject(subject)
            _check_positive("Version", version)
            record = self.engine.resolve_subject_version(subject, version)
        self.logger.debug(f"Prefetched {record}")
        return record

    # Uncached pass-through

    def list_subjects(self) -> list[str]:
        with self._lookup("list_subjects", None):
            return self.transport.list_subjects()

    def list_versions(self, subject: str) -> list[int]:
        with self._lookup("list_versions", subject):
            _check_subject(subject)
            return self.transport.list_versions(subject)

    def get_referenced_by(
        self, subject: str, version: VersionSelector = LATEST
    ) -> list[int]:
        """Ids of schemas that reference `subject` at `version` (or "latest")."""
        with self._lookup("get_referenced_by", (subject, version)):
            _check_subject(subject)
            if version != LATEST:
                _check_positive("Version", version)  # type: ignore[arg-type]
            return self.transport.fetch_referenced_by(subject, version)

    def get_latest_referenced_by(self, subject: str) -> list[int]:
        return self.get_referenced_by(subject, LATEST)

    def get_subject_versions_by_id(self, schema_id: int) -> list[SubjectVersion]:
        """Every (subject, version) the schema id is registered under."""
        with self._lookup("get_subject_versions_by_id", schema_id):
            _check_positive("Schema id", schema_id)
            return self.transport.fetch_subject_versions_by_id(schema_id)

    def get_schema_types(self) -> list[str]:
        with self._lookup("get_schema_types", None):
            return self.transport.list_schema_types()

    # Mutations

    def delete_subject(self, subject: str, permanent: bool = False) -> list[int]:
        """Delete `subject` in the registry and evict it from the cache.

        The cache is only touched after the registry confirmed the deletion.

        Returns:
            The deleted version numbers, as reported by the registry.
        """
        with self._lookup("delete_subject", subject):
            _check_subject(subject)
            versions = self.transport.delete_subject(subject, permanent=permanent)
        evicted = self.cache.evict_subject(subject)
        self.logger.info(
            f"Deleted subject '{subject}' (permanent={permanent}), "
            f"evicted {len(evicted)} cached record(s)"
        )
        return versions

    # Cache management

    def cached_record_count(self) -> int:
        return len(self.cache)

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> RegistryClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @contextmanager
    def _lookup(self, operation: str, key: Any) -> Generator[None, None, None]:
        """Annotate errors escaping a lookup with its operation and key."""
        try:
            yield
        except YasrError as e:
            # Coalesced callers share one error object; annotate a copy.
            annotated = e.with_context(operation, key)
            self.logger.debug(f"{operation}({key!r}) failed: {annotated}")
            if annotated is e:
                raise
            raise annotated.with_traceback(e.__traceback__) from e.__cause__
