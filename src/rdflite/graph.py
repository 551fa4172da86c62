"""
In-memory RDF graph with three synchronized triple indices.

Triples are indexed by the primitive form of their terms (see
``RDFNode.to_primitive``):

- ``slpo``: subject, is-literal-object flag, predicate, object (primary)
- ``pos``:  predicate, object, subject
- ``osp``:  object, subject, predicate

Primitive keys are deliberately lossy: a blank node ``_:x``, a named
node ``<x>`` and the literal ``"x"`` all share the key ``"x"``, and
``"1"^^xsd:integer`` shares the key ``1`` with ``"01"^^xsd:integer``.
Index leaves are therefore buckets, and every lookup is post-filtered by
true term equivalence. In exchange, patterns may be given as plain
Python values (``graph.match(object=1)``).

The graph holds at most one triple per equivalence class: adding a
triple that is structurally equal to a stored one is a no-op.

A Graph is not thread-safe. Mutating it while iterating over it (or over
any generator returned by ``find``/``subjects``/...) invalidates the
iterator.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from itertools import chain
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from rdflite.errors import InvalidArgument
from rdflite.ids import new_id
from rdflite.terms import NATIVE_TYPES, Literal, RDFNode
from rdflite.triple import Triple

logger = logging.getLogger(__name__)


PatternValue = Optional[Union[RDFNode, str, int, float, Decimal, date]]


class _NaNKey:
    """Single index key shared by every NaN primitive."""

    def __repr__(self) -> str:
        return "NaN"


_NAN_KEY = _NaNKey()


def index_key(value: Any) -> Any:
    """
    Map a primitive to its index key.

    NaN never equals itself, so dict lookups could not find a stored NaN
    key; all NaNs share one key instead.
    """
    if isinstance(value, float) and math.isnan(value):
        return _NAN_KEY
    if isinstance(value, Decimal) and value.is_nan():
        return _NAN_KEY
    return value



# =============================================================================
# Events
# =============================================================================

class EventKind(str, Enum):
    """Kinds of graph mutation events."""
    ADD = "add"
    REMOVE = "remove"
    CLEAR = "clear"


@dataclass(frozen=True)
class GraphEvent:
    """
    A mutation notification.

    ``data`` is the added triple, the removed (stored) triple, or the
    list of triples that were in the graph before a clear.
    """
    source: "Graph"
    kind: EventKind
    data: Any


class Subscription:
    """Handle returned by ``Graph.subscribe``; call ``unsubscribe`` to stop listening."""

    def __init__(
        self,
        graph: "Graph",
        kind: Optional[EventKind],
        handler: Callable[[GraphEvent], None],
    ):
        self.graph = graph
        self.kind = kind
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        self.graph.unsubscribe(self)

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else "*"
        return f"Subscription(kind={kind}, active={self.active})"


# =============================================================================
# Patterns
# =============================================================================

@dataclass(frozen=True)
class TriplePattern:
    """
    A partial triple; ``None`` fields are wildcards.

    Bound fields are either terms (matched by equivalence) or native
    values (matched against each term's primitive form).
    """
    subject: PatternValue = None
    predicate: PatternValue = None
    object: PatternValue = None

    def __post_init__(self):
        for position in ("subject", "predicate", "object"):
            value = getattr(self, position)
            if value is not None and not isinstance(value, (RDFNode,) + NATIVE_TYPES):
                raise InvalidArgument(
                    f"Pattern {position} must be an RDFNode or a native value, "
                    f"got {type(value).__name__}"
                )

    @staticmethod
    def key(value: PatternValue) -> Any:
        if isinstance(value, RDFNode):
            return index_key(value.to_primitive())
        return index_key(value)

    def literal_flags(self) -> tuple[bool, ...]:
        """Values of the primary index's is-literal flag the object may have."""
        if isinstance(self.object, RDFNode):
            return (isinstance(self.object, Literal),)
        return (False, True)

    def matches(self, triple: Triple) -> bool:
        return (
            (self.subject is None or triple.subject.equals(self.subject))
            and (self.predicate is None or triple.predicate.equals(self.predicate))
            and (self.object is None or triple.object.equals(self.object))
        )


# =============================================================================
# Index
# =============================================================================

class TripleIndex:
    """
    Nested-dict index mapping a fixed-length key tuple to triple buckets.

    Example:
        idx = TripleIndex("pos", depth=3)
        idx.add((p, o, s), triple)
        list(idx.lookup(p))        # all triples with predicate key p
        list(idx.lookup(p, o, s))  # the exact bucket
    """

    def __init__(self, name: str, depth: int):
        self.name = name
        self.depth = depth
        self._root: dict = {}
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def add(self, keys: tuple, triple: Triple) -> None:
        level = self._root
        for key in keys[:-1]:
            level = level.setdefault(key, {})
        level.setdefault(keys[-1], []).append(triple)
        self._size += 1

    def remove(self, keys: tuple, triple: Triple) -> bool:
        """Remove this exact triple instance; prune emptied levels."""
        path = []
        level = self._root
        for key in keys[:-1]:
            child = level.get(key)
            if child is None:
                return False
            path.append((level, key))
            level = child

        bucket = level.get(keys[-1])
        if bucket is None:
            return False
        for i, stored in enumerate(bucket):
            if stored is triple:
                del bucket[i]
                break
        else:
            return False

        if not bucket:
            del level[keys[-1]]
        while path and not level:
            parent, key = path.pop()
            del parent[key]
            level = parent

        self._size -= 1
        return True

    def lookup(self, *prefix) -> Iterator[Triple]:
        """Yield every triple whose key starts with ``prefix``."""
        level = self._root
        for key in prefix:
            level = level.get(key)
            if level is None:
                return
        remaining = self.depth - len(prefix)
        if remaining == 0:
            yield from level
        else:
            yield from self._walk(level, remaining)

    def _walk(self, level: dict, remaining: int) -> Iterator[Triple]:
        if remaining == 1:
            for bucket in level.values():
                yield from bucket
        else:
            for child in level.values():
                yield from self._walk(child, remaining - 1)

    def clear(self) -> None:
        self._root.clear()
        self._size = 0


@dataclass
class _NodeRef:
    count: int
    node: RDFNode


def _distinct(nodes: Iterable[RDFNode]) -> Iterator[RDFNode]:
    seen = set()
    for node in nodes:
        if node not in seen:
            seen.add(node)
            yield node


# =============================================================================
# Graph
# =============================================================================

class Graph:
    """
    A deduplicated set of triples with pattern matching.

    Example:
        g = Graph([Triple(BlankNode("b1"), NamedNode("n1"), Literal("l1"))])
        g.add(Triple(BlankNode("b1"), NamedNode("n1"), Literal("l1")))
        len(g)                                   # 1
        g.match(subject=BlankNode("b1"))         # new Graph
        list(g.objects(BlankNode("b1"), NamedNode("n1")))
    """

    def __init__(self, triples: Iterable[Triple] = (), *, id: Optional[str] = None):
        self.id = id or new_id()

        self._slpo = TripleIndex("slpo", 4)
        self._pos = TripleIndex("pos", 3)
        self._osp = TripleIndex("osp", 3)

        # node id -> reference count and node; lookup only
        self._nodes: dict[str, _NodeRef] = {}
        self._triples: dict[str, Triple] = {}

        self._subscriptions: list[Subscription] = []

        for triple in triples:
            self.add(triple)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, triple: Triple) -> "Graph":
        """
        Add a triple unless an equivalent one is already stored.

        Returns:
            This graph
        """
        if not isinstance(triple, Triple):
            raise InvalidArgument(f"Expected a Triple, got {type(triple).__name__}")

        s, p, o, is_literal = self._keys(triple)
        for candidate in self._pos.lookup(p, o, s):
            if candidate == triple:
                return self

        self._slpo.add((s, is_literal, p, o), triple)
        self._pos.add((p, o, s), triple)
        self._osp.add((o, s, p), triple)
        for node in triple:
            self._ref_node(node)
        self._triples[triple.id] = triple

        self._emit(EventKind.ADD, triple)
        return self

    def add_all(self, triples: Iterable[Triple]) -> "Graph":
        """Add every triple of another graph (or any iterable of triples)."""
        for triple in list(triples):
            self.add(triple)
        return self

    def remove(self, triple: Triple) -> "Graph":
        """Remove the stored triple equivalent to ``triple``, if any."""
        removed = list(self.equivalent_triples(triple))
        for stored in removed:
            self._discard(stored)
        if removed:
            self._emit(EventKind.REMOVE, removed[0])
        return self

    def remove_matches(
        self,
        subject: PatternValue = None,
        predicate: PatternValue = None,
        object: PatternValue = None,
    ) -> "Graph":
        """Remove every triple matching the pattern."""
        for triple in list(self.find(subject, predicate, object)):
            self.remove(triple)
        return self

    def clear(self) -> "Graph":
        """Remove all triples; emits a single clear event if anything was stored."""
        removed = self.to_list()

        self._slpo.clear()
        self._pos.clear()
        self._osp.clear()
        self._nodes.clear()
        self._triples.clear()

        logger.debug(f"Cleared graph {self.id} ({len(removed)} triples)")
        if removed:
            self._emit(EventKind.CLEAR, removed)
        return self

    def _keys(self, triple: Triple) -> tuple:
        return (
            index_key(triple.subject.to_primitive()),
            index_key(triple.predicate.to_primitive()),
            index_key(triple.object.to_primitive()),
            isinstance(triple.object, Literal),
        )

    def _discard(self, stored: Triple) -> None:
        s, p, o, is_literal = self._keys(stored)
        self._slpo.remove((s, is_literal, p, o), stored)
        self._pos.remove((p, o, s), stored)
        self._osp.remove((o, s, p), stored)
        for node in stored:
            self._unref_node(node)
        if self._triples.get(stored.id) is stored:
            del self._triples[stored.id]

    def _ref_node(self, node: RDFNode) -> None:
        ref = self._nodes.get(node.id)
        if ref is None:
            self._nodes[node.id] = _NodeRef(1, node)
        else:
            ref.count += 1

    def _unref_node(self, node: RDFNode) -> None:
        ref = self._nodes.get(node.id)
        if ref is None:
            return
        ref.count -= 1
        if ref.count <= 0:
            del self._nodes[node.id]

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has_triple(self, triple: Triple) -> bool:
        """True if an equivalent triple is stored."""
        return next(self.equivalent_triples(triple), None) is not None

    def has_node(self, node: RDFNode) -> bool:
        """True if an equivalent node occurs in any position of any triple."""
        return next(self.equivalent_nodes(node), None) is not None

    def equivalent_triples(self, triple: Triple) -> Iterator[Triple]:
        """Yield stored triples equivalent to ``triple``."""
        if not isinstance(triple, Triple):
            raise InvalidArgument(f"Expected a Triple, got {type(triple).__name__}")
        s, p, o, _ = self._keys(triple)
        for candidate in self._pos.lookup(p, o, s):
            if candidate == triple:
                yield candidate

    def equivalent_nodes(self, node: RDFNode) -> Iterator[RDFNode]:
        """Yield each distinct stored node instance equivalent to ``node``."""
        if not isinstance(node, RDFNode):
            raise InvalidArgument(f"Expected an RDFNode, got {type(node).__name__}")
        key = index_key(node.to_primitive())
        seen = set()
        candidates = chain(
            (t.subject for t in self._slpo.lookup(key)),
            (t.predicate for t in self._pos.lookup(key)),
            (t.object for t in self._osp.lookup(key)),
        )
        for candidate in candidates:
            if candidate.id not in seen and candidate == node:
                seen.add(candidate.id)
                yield candidate

    def get_node_by_id(self, node_id: str) -> Optional[RDFNode]:
        ref = self._nodes.get(node_id)
        return ref.node if ref else None

    def get_triple_by_id(self, triple_id: str) -> Optional[Triple]:
        return self._triples.get(triple_id)

    # -------------------------------------------------------------------------
    # Pattern queries
    # -------------------------------------------------------------------------

    def find(
        self,
        subject: PatternValue = None,
        predicate: PatternValue = None,
        object: PatternValue = None,
        limit: int = 0,
    ) -> Iterator[Triple]:
        """
        Yield stored triples matching a pattern.

        Args:
            subject: Term or native value, None for any
            predicate: Term or native value, None for any
            object: Term or native value, None for any
            limit: Maximum number of triples to yield (0 = unbounded)

        Raises:
            InvalidArgument: If a pattern field or the limit has the wrong type
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidArgument(f"limit must be a non-negative integer, got {limit!r}")
        pattern = TriplePattern(subject, predicate, object)
        return self._find(pattern, limit)

    def _find(self, pattern: TriplePattern, limit: int) -> Iterator[Triple]:
        count = 0
        for triple in self._candidates(pattern):
            if pattern.matches(triple):
                yield triple
                count += 1
                if limit and count >= limit:
                    return

    def _candidates(self, pattern: TriplePattern) -> Iterator[Triple]:
        """Narrow the search with the index covering most bound fields."""
        key = TriplePattern.key
        s, p, o = key(pattern.subject), key(pattern.predicate), key(pattern.object)
        has_s = pattern.subject is not None
        has_p = pattern.predicate is not None
        has_o = pattern.object is not None

        if has_s and has_p and has_o:
            for is_literal in pattern.literal_flags():
                yield from self._slpo.lookup(s, is_literal, p, o)
        elif has_s and has_p:
            for is_literal in (False, True):
                yield from self._slpo.lookup(s, is_literal, p)
        elif has_p and has_o:
            yield from self._pos.lookup(p, o)
        elif has_o and has_s:
            yield from self._osp.lookup(o, s)
        elif has_s:
            yield from self._slpo.lookup(s)
        elif has_p:
            yield from self._pos.lookup(p)
        elif has_o:
            yield from self._osp.lookup(o)
        else:
            yield from self._slpo.lookup()

    def match(
        self,
        subject: PatternValue = None,
        predicate: PatternValue = None,
        object: PatternValue = None,
        limit: int = 0,
    ) -> "Graph":
        """Return a new graph holding (at most ``limit``) matching triples."""
        return Graph(self.find(subject, predicate, object, limit))

    def subjects(self) -> Iterator[RDFNode]:
        """Distinct subjects, in first-seen order."""
        return _distinct(t.subject for t in self)

    def predicates(self, subject: PatternValue = None) -> Iterator[RDFNode]:
        """Distinct predicates of triples with the given subject."""
        return _distinct(t.predicate for t in self.find(subject))

    def objects(
        self,
        subject: PatternValue = None,
        predicate: PatternValue = None,
    ) -> Iterator[RDFNode]:
        """Distinct objects of triples with the given subject and predicate."""
        return _distinct(t.object for t in self.find(subject, predicate))

    def literals(
        self,
        subject: PatternValue = None,
        predicate: PatternValue = None,
    ) -> Iterator[Literal]:
        """Distinct literal objects of triples with the given subject and predicate."""
        pattern = TriplePattern(subject, predicate)
        if pattern.subject is not None:
            prefix = [TriplePattern.key(subject), True]
            if pattern.predicate is not None:
                prefix.append(TriplePattern.key(predicate))
            candidates = self._slpo.lookup(*prefix)
        else:
            candidates = self._candidates(pattern)
        return _distinct(
            t.object for t in candidates
            if isinstance(t.object, Literal) and pattern.matches(t)
        )

    def subject_has_literals(self, subject: PatternValue) -> bool:
        return next(self.literals(subject), None) is not None

    def predicate_has_literals(self, subject: PatternValue, predicate: PatternValue) -> bool:
        return next(self.literals(subject, predicate), None) is not None

    # -------------------------------------------------------------------------
    # Set operations and traversal
    # -------------------------------------------------------------------------

    def merge(self, other: Iterable[Triple]) -> "Graph":
        """Return a new graph with the triples of both graphs."""
        return Graph().add_all(self).add_all(other)

    def filter(self, predicate: Callable[[Triple], bool]) -> "Graph":
        """Return a new graph with the triples for which ``predicate`` holds."""
        return Graph(t for t in self if predicate(t))

    def some(self, predicate: Callable[[Triple], bool]) -> bool:
        return any(predicate(t) for t in self)

    def every(self, predicate: Callable[[Triple], bool]) -> bool:
        return all(predicate(t) for t in self)

    def for_each(self, callback: Callable[[Triple], Any]) -> None:
        for triple in self:
            callback(triple)

    def to_list(self) -> list[Triple]:
        return list(self)

    def to_nt(self) -> str:
        """N-Triples document, one ``s p o .`` line per triple."""
        return "".join(f"{t.to_nt()} .\n" for t in self)

    def __iter__(self) -> Iterator[Triple]:
        return self._slpo.lookup()

    def __len__(self) -> int:
        return len(self._slpo)

    def __contains__(self, triple: object) -> bool:
        return isinstance(triple, Triple) and self.has_triple(triple)

    def __or__(self, other: "Graph") -> "Graph":
        if not isinstance(other, Graph):
            return NotImplemented
        return self.merge(other)

    def __ior__(self, other: "Graph") -> "Graph":
        if not isinstance(other, Graph):
            return NotImplemented
        return self.add_all(other)

    def __str__(self) -> str:
        return self.to_nt()

    def __repr__(self) -> str:
        return f"<Graph id={self.id} triples={len(self)}>"

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(
        self,
        kind: Optional[Union[EventKind, str]],
        handler: Callable[[GraphEvent], None],
    ) -> Subscription:
        """
        Register a handler for one event kind (or every kind when None).

        Handlers run synchronously, in registration order, after the
        mutation is complete.
        """
        if kind is not None:
            kind = EventKind(kind)
        if not callable(handler):
            raise InvalidArgument("Event handler must be callable")
        subscription = Subscription(self, kind, handler)
        self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to {kind.value if kind else 'all'} events on graph {self.id}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
        subscription.active = False

    def _emit(self, kind: EventKind, data: Any) -> None:
        if not self._subscriptions:
            return
        event = GraphEvent(self, kind, data)
        for subscription in list(self._subscriptions):
            if subscription.kind is not None and subscription.kind != kind:
                continue
            try:
                subscription.handler(event)
            except Exception as e:
                logger.warning(f"Error in {kind.value} handler on graph {self.id}: {e}", exc_info=True)
