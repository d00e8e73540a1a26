"""Base interface for payload codecs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Serde(ABC):
    """Abstract base class for payload codecs.

    A serde turns application values into message bytes and back. Each wire
    format has exactly one implementation; which one is used is a matter of
    configuration (see `yasr.serde.get_serde`).
    """

    name: str

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Encode `value` into bytes.

        Raises:
            SerdeError: If `value` cannot be represented in this format.
        """
        ...

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Decode bytes produced by `encode`.

        Raises:
            SerdeError: If `data` is not valid for this format.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
