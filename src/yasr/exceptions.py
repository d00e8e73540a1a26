"""Custom yasr exceptions."""

from __future__ import annotations

import copy
from typing import Any


class YasrError(Exception):
    """Base exception for all yasr-related errors.

    This is the root exception that all other yasr exceptions inherit from.
    It provides enhanced error reporting with suggestions for resolution and
    carries the lookup context (operation and key) once the error has crossed
    the `RegistryClient` facade.

    Attributes:
        suggestions: List of suggested fixes or actions.
        operation: Name of the client operation that failed, if known.
        key: The lookup key the operation was attempted with, if known.

    Example:
        >>> raise YasrError(
        ...     "Subject 'orders' could not be resolved",
        ...     suggestions=["Check the subject name", "Verify the registry URL"]
        ... )
    """

    def __init__(
        self,
        message: str,
        suggestions: list[str] | None = None,
    ):
        """Initialize a YasrError.

        Args:
            message: The error message.
            suggestions: Optional list of suggestions to fix the error.
        """
        super().__init__(message)
        self.suggestions = suggestions or []
        self.operation: str | None = None
        self.key: Any = None

    def add_context(self, operation: str, key: Any) -> None:
        """Record the failing operation and key unless already recorded.

        The first recorded context wins; later calls leave it unchanged.
        """
        if self.operation is None:
            self.operation = operation
            self.key = key

    def with_context(self, operation: str, key: Any) -> YasrError:
        """Return a copy of this error carrying `operation` and `key`.

        The error itself is left untouched, so one error shared between
        several callers (e.g. through a coalesced fetch) can be annotated
        differently by each of them. An error that already carries a context
        is returned as is.
        """
        if self.operation is not None:
            return self
        annotated = copy.copy(self)
        annotated.add_context(operation, key)
        return annotated

    def __copy__(self) -> YasrError:
        # Subclasses take extra constructor arguments, so skip __init__.
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.args = self.args
        clone.suggestions = list(self.suggestions)
        return clone

    def __str__(self) -> str:
        result = super().__str__()

        if self.operation is not None:
            result = f"[{self.operation} key={self.key!r}] {result}"

        if self.suggestions:
            suggestions_text = "; ".join(self.suggestions)
            result += f" | {suggestions_text}"

        return result


# Configuration Exceptions
class ConfigError(YasrError):
    """Invalid client, transport or serde configuration."""


class InvalidLookupKeyError(YasrError):
    """Lookup key rejected before any I/O.

    Raised for empty subjects and non-positive ids or versions.
    """


# Remote Exceptions
class TransportError(YasrError):
    """The request never produced a usable registry response.

    Raised on connection failures, timeouts, and non-2xx responses whose body
    is not a registry error document.

    Attributes:
        status_code: HTTP status code, or None when no response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        suggestions: list[str] | None = None,
    ):
        super().__init__(message, suggestions)
        self.status_code = status_code


class RegistryError(YasrError):
    """The registry answered with a structured error.

    Attributes:
        status_code: HTTP status code of the response.
        error_code: Registry-specific error code (e.g. 40401), -1 if absent.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: int = -1,
        suggestions: list[str] | None = None,
    ):
        super().__init__(message, suggestions)
        self.status_code = status_code
        self.error_code = error_code


class NotFoundError(RegistryError):
    """The registry has no such schema id, subject or version."""


class DecodeError(YasrError):
    """A successful response body could not be decoded.

    Also raised when codec creation is enabled and the returned schema text
    cannot be parsed.
    """


class ResolutionError(YasrError):
    """Registry content is inconsistent with the requested key.

    Raised when a schema id maps to no subject/version locations, or when
    resolving a location produced a record with a different id.
    """


class SerdeError(YasrError):
    """A value could not be encoded or decoded by a `Serde`."""


# Dependency Exceptions
class DependencyError(YasrError):
    """Base for optional dependency errors."""


class MissingDependencyError(DependencyError):
    """An optional dependency required by the called feature is not installed."""


class DependencyVersionError(DependencyError):
    """An optional dependency is installed but older than required."""
