"""HTTP transport for a Confluent-compatible schema registry, built on httpx.

Example:
    >>> from yasr.transport import HttpTransport
    >>>
    >>> with HttpTransport("http://localhost:8081", timeout=2.0) as transport:
    ...     subjects = transport.list_subjects()
    >>>
    >>> # Bring your own client (proxies, auth, mounts, ...)
    >>> import httpx
    >>> transport = HttpTransport(
    ...     "http://localhost:8081",
    ...     client=httpx.Client(auth=("user", "secret")),
    ... )
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from ..exceptions import (
    ConfigError,
    DecodeError,
    NotFoundError,
    RegistryError,
    TransportError,
)
from .base import CONTENT_TYPE, BaseTransport
from .payloads import ErrorPayload, decode

# Registry error codes that mean "no such subject / version / schema".
NOT_FOUND_ERROR_CODES = frozenset({40401, 40402, 40403})


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


class HttpTransport(BaseTransport):
    """Registry transport that speaks the registry REST API over HTTP.

    The transport performs exactly one HTTP request per call; it does not
    retry. Every request is sent with the registry media type in both the
    ``Accept`` and ``Content-Type`` headers.

    Args:
        base_url: Registry base URL, e.g. "http://localhost:8081". A trailing
            slash is ignored.
        timeout: Per-request timeout in seconds. Ignored when `client` is
            given; configure the client's own timeout instead.
        headers: Extra headers sent with every request.
        client: Optional pre-configured `httpx.Client`. The transport does not
            close a client it did not create.
        logger: Optional logger. If None, uses the "yasr.transport.http"
            logger.

    Raises:
        ConfigError: If `base_url` is not an http(s) URL.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        headers: Mapping[str, str] | None = None,
        client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not base_url or not base_url.startswith(("http://", "https://")):
            raise ConfigError(
                f"Invalid registry URL '{base_url}'",
                suggestions=["Use an absolute http:// or https:// URL"],
            )
        self.base_url = base_url.rstrip("/")
        self.logger = logger or logging.getLogger("yasr.transport.http")
        self._headers = {"Accept": CONTENT_TYPE, "Content-Type": CONTENT_TYPE}
        self._headers.update(headers or {})
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def request(self, method: str, path: str, body: Any | None = None) -> Any:
        url = f"{self.base_url}{path}"
        content = json.dumps(body) if body is not None else None
        self.logger.debug(f"{method} {url}")

        try:
            response = self._client.request(
                method, url, headers=self._headers, content=content
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if not is_success(response.status_code):
            raise self._error_from_response(method, path, response)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"{method} {path} returned a body that is not JSON: {e}"
            ) from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _error_from_response(
        self, method: str, path: str, response: httpx.Response
    ) -> TransportError | RegistryError:
        status = response.status_code
        try:
            error = decode(ErrorPayload, response.json(), what="error")
        except (ValueError, DecodeError):
            return TransportError(
                f"{method} {path} returned HTTP {status}: {response.text[:200]!r}",
                status_code=status,
            )

        message = error.message or f"registry error: {status}"
        if status == 404 or error.error_code in NOT_FOUND_ERROR_CODES:
            return NotFoundError(message, status_code=status, error_code=error.error_code)
        return RegistryError(message, status_code=status, error_code=error.error_code)
