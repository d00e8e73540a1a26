"""Client configuration.

Example:
    >>> config = RegistryClientConfig(url="http://localhost:8081", timeout=2.0)
    >>> config.cache_enabled
    True

Configuration can also be kept in YAML on any filesystem fsspec supports:

    # registry.yaml
    url: http://schema-registry:8081
    timeout: 2.5
    create_codecs: true
    headers:
      X-Team: payments

    >>> config = load_config("s3://configs/registry.yaml", profile="prod")
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

import fsspec  # type: ignore[import]
import yaml

from .exceptions import ConfigError


@dataclass(frozen=True)
class RegistryClientConfig:
    """Configuration for `RegistryClient`.

    Args:
        url: Registry base URL. Must be http or https; a trailing slash is
            stripped.
        timeout: Per-request timeout in seconds. Defaults to 5.0.
        cache_enabled: Serve repeated id and subject/version lookups from the
            local cache. When False every lookup goes to the registry and
            nothing is cached. Defaults to True.
        create_codecs: Attach an `AvroSerde` to every AVRO record fetched.
            Requires fastavro. Defaults to False.
        coalesce_requests: Let concurrent lookups of the same key share one
            in-flight fetch. Defaults to True.
        headers: Extra HTTP headers sent with every request.
    """

    url: str
    timeout: float = 5.0
    cache_enabled: bool = True
    create_codecs: bool = False
    coalesce_requests: bool = True
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url.startswith(
            ("http://", "https://")
        ):
            raise ConfigError(
                f"url must be an http:// or https:// URL, got {self.url!r}."
            )
        object.__setattr__(self, "url", self.url.rstrip("/"))

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigError("timeout must be a number of seconds.")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}.")

        for name in ("cache_enabled", "create_codecs", "coalesce_requests"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a boolean.")

        if not isinstance(self.headers, Mapping):
            raise ConfigError("headers must be a mapping of header names to values.")
        headers = {str(k): str(v) for k, v in self.headers.items()}
        # Detach from the caller's mapping and freeze.
        object.__setattr__(self, "headers", MappingProxyType(headers))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RegistryClientConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}",
                suggestions=[f"Valid keys: {', '.join(sorted(known))}"],
            )
        if "url" not in data:
            raise ConfigError("Missing required configuration key 'url'.")
        return cls(**data)


def load_config(path: str, **storage_options: Any) -> RegistryClientConfig:
    """Load a `RegistryClientConfig` from a YAML document.

    Args:
        path: Local path or fsspec URL ("s3://...", "gs://...", ...).
        **storage_options: Passed to fsspec for authentication and
            filesystem configuration.

    Raises:
        ConfigError: If the file cannot be read, is not a YAML mapping, or
            contains invalid settings.
    """
    try:
        fs, resolved = fsspec.core.url_to_fs(path, **storage_options)
        with fs.open(resolved, "r") as f:
            content = f.read()
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to read configuration from '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Configuration at '{path}' is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration at '{path}' did not parse to a mapping.")
    return RegistryClientConfig.from_dict(data)
