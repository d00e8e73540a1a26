"""Lookup resolution on top of the dual-index cache.

The engine decides, for each lookup key, whether the cache can answer and
which remote fetches are needed when it cannot. Looking up a schema by id is
the one case that needs two remote steps: the id is first mapped to the
subject/version locations it is registered under, then the first location is
resolved like any subject/version lookup, which fills both indices.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable, Hashable, TypeVar

from .exceptions import ResolutionError
from .serde.avro_serde import AvroSerde

if TYPE_CHECKING:
    from .cache import DualIndexCache
    from .record import SchemaRecord
    from .transport import BaseTransport

T = TypeVar("T")


class SingleFlight:
    """Collapse concurrent calls for the same key into one execution.

    The first caller for a key runs the function; callers arriving while it
    runs wait for and share its outcome, result or exception. The key is
    released as soon as the call finishes, so later calls run again.

    Example:
        >>> flights = SingleFlight()
        >>> flights.do(("id", 42), lambda: "fetched")
        'fetched'
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[Hashable, Future] = {}

    def do(self, key: Hashable, fn: Callable[[], T]) -> T:
        with self._lock:
            future = self._calls.get(key)
            leader = future is None
            if leader:
                future = self._calls[key] = Future()

        if not leader:
            return future.result()

        try:
            result = fn()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                del self._calls[key]

    def in_flight(self) -> int:
        with self._lock:
            return len(self._calls)


class ResolutionEngine:
    """Resolve schema lookups against a cache and a registry transport.

    Args:
        transport: Registry transport used on cache misses.
        cache: Cache to consult and fill. Ignored when `cache_enabled` is
            False.
        cache_enabled: When False, every lookup is fetched and nothing is
            cached.
        create_codecs: Attach an `AvroSerde` to AVRO records before they are
            cached.
        coalesce_requests: Share in-flight fetches between concurrent lookups
            of the same key.
        logger: Optional logger. If None, uses the "yasr.resolution" logger.
    """

    def __init__(
        self,
        transport: BaseTransport,
        cache: DualIndexCache,
        *,
        cache_enabled: bool = True,
        create_codecs: bool = False,
        coalesce_requests: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.cache = cache
        self.cache_enabled = cache_enabled
        self.create_codecs = create_codecs
        self.coalesce_requests = coalesce_requests
        self.logger = logger or logging.getLogger("yasr.resolution")
        self._flights = SingleFlight()

    def resolve_by_id(self, schema_id: int) -> SchemaRecord:
        """Resolve a schema id to the record it is registered as.

        Raises:
            ResolutionError: If the registry lists no location for the id, or
                the first location resolves to a record with another id.
        """
        if self.cache_enabled:
            cached = self.cache.lookup_by_id(schema_id)
            if cached is not None:
                self.logger.debug(f"Cache hit for schema id {schema_id}")
                return cached

        return self._coalesce(("id", schema_id), lambda: self._fetch_by_id(schema_id))

    def resolve_subject_version(self, subject: str, version: int) -> SchemaRecord:
        if self.cache_enabled:
            cached = self.cache.lookup_by_subject_version(subject, version)
            if cached is not None:
                self.logger.debug(f"Cache hit for {subject}/{version}")
                return cached

        return self._coalesce(
            ("subject_version", subject, version),
            lambda: self._fetch_subject_version(subject, version),
        )

    def resolve_latest(self, subject: str) -> SchemaRecord:
        """Fetch the registry's latest version of `subject`.

        Never answered from the cache: the highest cached version may be older
        than the registry's latest. The fetched record replaces whatever this
        client cached for that location.
        """
        record = self.transport.fetch_latest_schema(subject)
        return self._store(record)

    def _coalesce(self, key: tuple, fn: Callable[[], SchemaRecord]) -> SchemaRecord:
        if not self.coalesce_requests:
            return fn()
        return self._flights.do(key, fn)

    def _fetch_by_id(self, schema_id: int) -> SchemaRecord:
        if self.cache_enabled:
            # A flight for this key may have finished since the first lookup.
            cached = self.cache.lookup_by_id(schema_id)
            if cached is not None:
                return cached
        self.logger.debug(f"Cache miss for schema id {schema_id}")
        locations = self.transport.fetch_subject_versions_by_id(schema_id)
        if not locations:
            raise ResolutionError(
                f"Schema id {schema_id} is not registered under any subject/version"
            )
        if len(locations) > 1:
            self.logger.warning(
                f"Schema id {schema_id} has {len(locations)} locations, "
                f"resolving the first: {locations[0]}"
            )
        location = locations[0]
        record = self.resolve_subject_version(location.subject, location.version)

        if record.id != schema_id:
            self.logger.warning(
                f"Resolving schema id {schema_id} via {location} "
                f"produced schema id {record.id}"
            )
            raise ResolutionError(
                f"Location {location} of schema id {schema_id} resolved to "
                f"schema id {record.id}"
            )
        if not self.cache_enabled:
            return record

        cached = self.cache.lookup_by_id(schema_id)
        if cached is None:
            raise ResolutionError(
                f"Schema id {schema_id} missing from cache after resolving {location}"
            )
        return cached

    def _fetch_subject_version(self, subject: str, version: int) -> SchemaRecord:
        if self.cache_enabled:
            cached = self.cache.lookup_by_subject_version(subject, version)
            if cached is not None:
                return cached
        self.logger.debug(f"Cache miss for {subject}/{version}")
        record = self.transport.fetch_schema_by_subject_version(subject, version)
        return self._store(record)

    def _store(self, record: SchemaRecord) -> SchemaRecord:
        """Finish a fetched record and publish it to the cache."""
        if self.create_codecs and record.is_avro:
            record = record.with_codec(AvroSerde(record.schema))
        if not self.cache_enabled:
            return record
        cached = self.cache.insert(record)
        self.logger.info(f"Cached schema {cached}")
        return cached
