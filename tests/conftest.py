from __future__ import annotations

import threading
import time
from collections import Counter
from typing import Any, Callable

import pytest

from yasr.exceptions import NotFoundError
from yasr.transport import BaseTransport


class StubTransport(BaseTransport):
    """In-memory transport answering from a route table.

    Routes map ``(method, path)`` to a JSON document, an exception instance to
    raise, or a list of either to answer successive calls in order (the last
    entry is repeated).
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None, delay: float = 0.0):
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.counts: Counter[tuple[str, str]] = Counter()
        self.closed = False
        self._lock = threading.Lock()

    def request(self, method: str, path: str, body: Any | None = None) -> Any:
        key = (method, path)
        with self._lock:
            self.calls.append(key)
            self.counts[key] += 1
            call_number = self.counts[key]
        if self.delay:
            time.sleep(self.delay)

        if key not in self.routes:
            raise NotFoundError(f"No route for {method} {path}", status_code=404, error_code=40403)
        answer = self.routes[key]
        if isinstance(answer, list) and answer and _is_sequence_of_answers(answer):
            answer = answer[min(call_number, len(answer)) - 1].value
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def count(self, method: str, path: str) -> int:
        with self._lock:
            return self.counts[(method, path)]

    def close(self) -> None:
        self.closed = True


class Seq:
    """Marks one answer in a sequence of answers for successive calls."""

    def __init__(self, value: Any) -> None:
        self.value = value


def _is_sequence_of_answers(answer: list[Any]) -> bool:
    return all(isinstance(item, Seq) for item in answer)


def schema_doc(
    schema_id: int,
    subject: str,
    version: int,
    schema: str = '{"type": "string"}',
    **extra: Any,
) -> dict[str, Any]:
    doc = {"id": schema_id, "subject": subject, "version": version, "schema": schema}
    doc.update(extra)
    return doc


ORDER_SCHEMA = (
    '{"type": "record", "name": "Order", "fields": '
    '[{"name": "id", "type": "long"}, {"name": "item", "type": "string"}]}'
)


@pytest.fixture
def orders_routes() -> dict[tuple[str, str], Any]:
    """Registry where id 42 is orders/3."""
    return {
        ("GET", "/schemas/ids/42/versions"): [{"subject": "orders", "version": 3}],
        ("GET", "/subjects/orders/versions/3"): schema_doc(42, "orders", 3, ORDER_SCHEMA),
    }


@pytest.fixture
def transport(orders_routes: dict[tuple[str, str], Any]) -> StubTransport:
    return StubTransport(orders_routes)


@pytest.fixture
def make_transport() -> Callable[..., StubTransport]:
    return StubTransport
