"""
RDF triple: an ordered (subject, predicate, object) statement.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator

from rdflite.errors import InvalidArgument
from rdflite.ids import new_id
from rdflite.terms import RDFNode


@dataclass(frozen=True)
class Triple:
    """
    A single RDF statement.

    Equality and hashing are structural: two triples are equal when all
    three components are equivalent, regardless of their ids.

    Attributes:
        subject: Subject term
        predicate: Predicate term
        object: Object term
        id: Unique identifier, excluded from equality
    """
    subject: RDFNode
    predicate: RDFNode
    object: RDFNode
    id: str = field(default_factory=new_id, compare=False, repr=False, kw_only=True)

    def __post_init__(self):
        for position in ("subject", "predicate", "object"):
            value = getattr(self, position)
            if not isinstance(value, RDFNode):
                raise InvalidArgument(
                    f"Triple {position} must be an RDFNode, got {type(value).__name__}"
                )

    def equals(self, other: Any) -> bool:
        """Test whether another triple is equivalent to this one."""
        return isinstance(other, Triple) and self == other

    def to_nt(self) -> str:
        """N-Triples form without the terminating dot."""
        return f"{self.subject.to_nt()} {self.predicate.to_nt()} {self.object.to_nt()}"

    def __iter__(self) -> Iterator[RDFNode]:
        yield self.subject
        yield self.predicate
        yield self.object

    def __str__(self) -> str:
        return self.to_nt()
