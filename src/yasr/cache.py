"""Thread-safe dual-index cache of schema records.

The cache keeps two indices over the same `SchemaRecord` objects:

- ``by_id``: schema id -> record
- ``by_subject_version``: subject -> version -> record

Both indices are guarded by a single lock, so an insert is visible in both
indices or in neither. The cache never performs I/O and never holds its lock
for longer than a dictionary update.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator

from .record import SchemaRecord


class DualIndexCache:
    """Cache of `SchemaRecord` instances addressable by id and by location.

    Coherency:
        Whenever a record is reachable by its id and by its (subject, version)
        it is the same object in both indices. Inserting a record that
        supersedes another (same id at a different location, or a different
        id at the same location) removes the superseded record from both
        indices in the same critical section.

    Idempotency:
        Inserting a record equal in content to the one already cached keeps
        the cached object. `insert` returns the object that ends up cached,
        so racing resolutions of the same key all hand out one instance.

    Args:
        logger: Optional logger. If None, uses the "yasr.cache" logger.

    Example:
        >>> cache = DualIndexCache()
        >>> record = SchemaRecord(id=1, subject="orders", version=1, schema="{}")
        >>> cache.insert(record) is record
        True
        >>> cache.lookup_by_subject_version("orders", 1) is cache.lookup_by_id(1)
        True
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("yasr.cache")
        self._lock = threading.Lock()
        self._by_id: dict[int, SchemaRecord] = {}
        self._by_subject_version: dict[str, dict[int, SchemaRecord]] = {}

    # Lookups

    def lookup_by_id(self, schema_id: int) -> SchemaRecord | None:
        with self._lock:
            return self._by_id.get(schema_id)

    def lookup_by_subject_version(
        self, subject: str, version: int
    ) -> SchemaRecord | None:
        with self._lock:
            versions = self._by_subject_version.get(subject)
            if versions is None:
                return None
            return versions.get(version)

    def lookup_latest(self, subject: str) -> SchemaRecord | None:
        """Return the highest cached version of `subject`.

        This is the latest version this client has observed, which may be
        older than the registry's latest version.
        """
        with self._lock:
            versions = self._by_subject_version.get(subject)
            if not versions:
                return None
            return versions[max(versions)]

    def subjects(self) -> list[str]:
        """Sorted subjects with at least one cached record."""
        with self._lock:
            return sorted(self._by_subject_version)

    def versions(self, subject: str) -> list[int]:
        """Sorted cached versions of `subject`."""
        with self._lock:
            return sorted(self._by_subject_version.get(subject, ()))

    def records(self) -> list[SchemaRecord]:
        """Snapshot of all cached records, ordered by id."""
        with self._lock:
            return [self._by_id[schema_id] for schema_id in sorted(self._by_id)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def __contains__(self, schema_id: object) -> bool:
        with self._lock:
            return schema_id in self._by_id

    def __iter__(self) -> Iterator[SchemaRecord]:
        return iter(self.records())

    # Mutations

    def insert(self, record: SchemaRecord) -> SchemaRecord:
        """Insert `record` into both indices and return the cached record.

        Args:
            record: The record built from a registry response.

        Returns:
            The record now cached under ``record.id``. This is the previously
            cached object when it is equal in content to `record`.
        """
        with self._lock:
            cached = self._by_id.get(record.id)
            if cached is not None and cached == record:
                by_version = self._by_subject_version.get(record.subject, {})
                if by_version.get(record.version) is cached:
                    return cached

            if cached is not None:
                self._unlink_location(cached)
            displaced = self._by_subject_version.get(record.subject, {}).get(
                record.version
            )
            if displaced is not None:
                self._unlink_id(displaced)

            self._by_id[record.id] = record
            self._by_subject_version.setdefault(record.subject, {})[
                record.version
            ] = record

        if cached is not None and cached.location != record.location:
            self.logger.debug(
                f"Schema id {record.id} moved from {cached.location} "
                f"to {record.location}"
            )
        if displaced is not None and displaced.id != record.id:
            self.logger.warning(
                f"Location {record.location} changed id from {displaced.id} "
                f"to {record.id}"
            )
        return record

    def evict_subject(self, subject: str) -> list[SchemaRecord]:
        """Remove every record of `subject` from both indices.

        Returns:
            The evicted records, ordered by version.
        """
        with self._lock:
            versions = self._by_subject_version.pop(subject, {})
            evicted = [versions[v] for v in sorted(versions)]
            for record in evicted:
                if self._by_id.get(record.id) is record:
                    del self._by_id[record.id]

        if evicted:
            self.logger.debug(
                f"Evicted {len(evicted)} cached version(s) of subject '{subject}'"
            )
        return evicted

    def clear(self) -> None:
        with self._lock:
            self._by_id.clear()
            self._by_subject_version.clear()

    # Private helpers. Callers must hold self._lock.

    def _unlink_location(self, record: SchemaRecord) -> None:
        versions = self._by_subject_version.get(record.subject)
        if versions is None or versions.get(record.version) is not record:
            return
        del versions[record.version]
        if not versions:
            del self._by_subject_version[record.subject]

    def _unlink_id(self, record: SchemaRecord) -> None:
        if self._by_id.get(record.id) is record:
            del self._by_id[record.id]
