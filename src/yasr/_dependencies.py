"""Cached checks for optional dependencies such as `fastavro`."""

from __future__ import annotations

from functools import lru_cache, wraps
import importlib
import importlib.metadata as md
from typing import Callable, ParamSpec, TypeVar

from .exceptions import (
    MissingDependencyError,
    DependencyVersionError,
)


P = ParamSpec("P")
R = TypeVar("R")

# Extras declared in pyproject.toml, keyed by distribution name.
_EXTRAS = {"fastavro": "avro"}


@lru_cache(maxsize=None)
def _get_installed_version(package_name: str) -> str | None:
    """Return installed version for `package_name` or `None` if missing."""

    try:
        return md.version(package_name)
    except md.PackageNotFoundError:
        return None


def _version_tuple(version: str) -> tuple[int, ...]:
    """Leading numeric components of a dotted version, e.g. "1.9.4rc1" -> (1, 9)."""

    parts: list[int] = []
    for token in version.split("."):
        if not token.isdigit():
            break
        parts.append(int(token))
    return tuple(parts)


def _meets_min_version(installed: str, minimum: str) -> bool:
    inst = _version_tuple(installed)
    minv = _version_tuple(minimum)
    if not (inst and minv):
        return installed >= minimum
    length = max(len(inst), len(minv))
    return inst + (0,) * (length - len(inst)) >= minv + (0,) * (length - len(minv))


def _format_install_hint(package_name: str, min_version: str | None) -> str:
    extra = _EXTRAS.get(package_name)
    if extra is not None:
        return f"Install with: 'pip install yasr[{extra}]'."
    constraint = f">={min_version}" if min_version else ""
    return f"Install with: 'pip install {package_name}{constraint}'."


def ensure_dependency(package_name: str, min_version: str | None = None) -> None:
    """Ensure `package_name` is available and meets `min_version` if given.

    Raises:
        MissingDependencyError: When the required dependency is not available.
        DependencyVersionError: When the installed version is below the minimum.
    """

    installed = _get_installed_version(package_name)
    if installed is None:
        needed = f" (>= {min_version})" if min_version else ""
        raise MissingDependencyError(
            f"Dependency '{package_name}'{needed} is required but not installed.",
            suggestions=[_format_install_hint(package_name, min_version)],
        )

    if min_version and not _meets_min_version(installed, min_version):
        raise DependencyVersionError(
            f"Dependency '{package_name}' must be >= {min_version}, "
            f"found {installed}.",
            suggestions=[_format_install_hint(package_name, min_version)],
        )


def requires_dependency(
    package_name: str,
    min_version: str | None = None,
    *,
    import_name: str | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to enforce an optional dependency at call time.

    Args:
        package_name: The name used to resolve the installed package version.
        min_version: Optional minimum version required.
        import_name: Optional module path to import lazily just before
            executing the wrapped function.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            ensure_dependency(package_name, min_version)
            if import_name is not None:
                importlib.import_module(import_name)
            return func(*args, **kwargs)

        return wrapper

    return decorator
