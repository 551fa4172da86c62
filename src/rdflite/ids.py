"""
Identifier generators for nodes, triples and graphs.

Every node, triple and graph carries a process-unique ``id``. Instead of
hidden module-level counters, callers inject a generator explicitly
(usually through an RDFEnvironment). Without one, a stateless UUID is
used.
"""

import itertools
import threading
import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def new_id() -> str:
    """Return a fresh UUID-based identifier."""
    return uuid.uuid4().hex


class CounterIdGenerator:
    """
    Deterministic generator yielding ``<prefix>0``, ``<prefix>1``, ...

    Example:
        gen = CounterIdGenerator("t")
        gen()  # 't0'
        gen()  # 't1'
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{self.prefix}{n}"

    def __repr__(self) -> str:
        return f"CounterIdGenerator(prefix={self.prefix!r})"


class UUIDIdGenerator:
    """Generator yielding ``<prefix><uuid4 hex>`` identifiers."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def __call__(self) -> str:
        return f"{self.prefix}{new_id()}"

    def __repr__(self) -> str:
        return f"UUIDIdGenerator(prefix={self.prefix!r})"


def make_id_generator(strategy: str, prefix: str = "") -> IdGenerator:
    """
    Build an id generator from a configuration strategy name.

    Args:
        strategy: "uuid" or "counter"
        prefix: Prefix prepended to every generated id

    Returns:
        A callable returning fresh ids
    """
    if strategy == "counter":
        return CounterIdGenerator(prefix)
    if strategy == "uuid":
        return UUIDIdGenerator(prefix)
    raise ValueError(f"Unknown id strategy: {strategy}")
