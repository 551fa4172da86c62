"""
RDF term model: named nodes, blank nodes and literals.

Terms are immutable values. Two terms are *equivalent* when they have
the same kind and the same payload (literals additionally compare
language tag and datatype); the ``id`` assigned at construction never
takes part in equivalence. Equivalence is what the Graph uses to
deduplicate triples built from distinct-but-identical node instances.

Besides structural equivalence, every term can be compared against a
native Python value (``str``, ``int``, ``float``, ``Decimal``, ``bool``,
``date``, ``datetime``) through its primitive form, see ``to_primitive``.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Any, Callable, ClassVar, Optional, Union

from rdflite.errors import InvalidArgument, ParseError
from rdflite.ids import new_id


# =============================================================================
# Vocabulary
# =============================================================================

class XSD:
    """XML Schema datatype IRIs."""
    NS = "http://www.w3.org/2001/XMLSchema#"

    string = NS + "string"
    boolean = NS + "boolean"
    dateTime = NS + "dateTime"
    date = NS + "date"
    time = NS + "time"
    double = NS + "double"
    float = NS + "float"
    decimal = NS + "decimal"
    positiveInteger = NS + "positiveInteger"
    nonNegativeInteger = NS + "nonNegativeInteger"
    integer = NS + "integer"
    nonPositiveInteger = NS + "nonPositiveInteger"
    negativeInteger = NS + "negativeInteger"
    long = NS + "long"
    int = NS + "int"
    short = NS + "short"
    byte = NS + "byte"
    unsignedLong = NS + "unsignedLong"
    unsignedInt = NS + "unsignedInt"
    unsignedShort = NS + "unsignedShort"
    unsignedByte = NS + "unsignedByte"


class RDF:
    """RDF vocabulary IRIs used by the model and the Turtle collaborators."""
    NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

    type = NS + "type"
    first = NS + "first"
    rest = NS + "rest"
    nil = NS + "nil"
    langString = NS + "langString"


# =============================================================================
# Term kinds and primitive decoding
# =============================================================================

class TermKind(IntEnum):
    """Closed set of RDF term variants."""
    NAMED_NODE = 0
    BLANK_NODE = 1
    LITERAL = 2


# Native values a term may be compared against
NATIVE_TYPES = (str, int, float, Decimal, date)

LANGUAGE_TAG = re.compile(r"^[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*$")


def _parse_boolean(lex: str) -> bool:
    if lex in ("true", "1"):
        return True
    if lex in ("false", "0"):
        return False
    raise ValueError(lex)


def _parse_datetime(lex: str) -> datetime:
    if lex.endswith("Z"):
        lex = lex[:-1] + "+00:00"
    return datetime.fromisoformat(lex)


def _parse_date(lex: str) -> date:
    # xsd:date may carry a timezone suffix which datetime.date cannot hold
    return date.fromisoformat(lex[:10])


_INTEGER_LEXICAL = re.compile(r"^[+-]?[0-9]+$")
_DECIMAL_LEXICAL = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")
_DOUBLE_LEXICAL = re.compile(r"^(?:[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?INF|NaN)$")


def _parse_integer(lex: str) -> int:
    if not _INTEGER_LEXICAL.match(lex):
        raise ValueError(lex)
    return int(lex)


def _parse_double(lex: str) -> float:
    # Python's float() also takes "inf", "nan" and "1_0"
    if not _DOUBLE_LEXICAL.match(lex):
        raise ValueError(lex)
    return float(lex.replace("INF", "inf"))


def _parse_decimal(lex: str) -> Decimal:
    if not _DECIMAL_LEXICAL.match(lex):
        raise ValueError(lex)
    try:
        return Decimal(lex)
    except InvalidOperation:
        raise ValueError(lex)


_INTEGER_TYPES = (
    XSD.integer, XSD.positiveInteger, XSD.nonNegativeInteger,
    XSD.nonPositiveInteger, XSD.negativeInteger, XSD.long, XSD.int,
    XSD.short, XSD.byte, XSD.unsignedLong, XSD.unsignedInt,
    XSD.unsignedShort, XSD.unsignedByte,
)

CONVERTERS: dict[str, Callable[[str], Any]] = {
    XSD.string: str,
    XSD.boolean: _parse_boolean,
    XSD.dateTime: _parse_datetime,
    XSD.date: _parse_date,
    XSD.double: _parse_double,
    XSD.float: _parse_double,
    XSD.decimal: _parse_decimal,
    **{dt: _parse_integer for dt in _INTEGER_TYPES},
}


# =============================================================================
# String escaping (N-Triples / Turtle ECHAR and UCHAR)
# =============================================================================

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}

_UNESCAPES = {
    "t": "\t", "b": "\b", "n": "\n", "r": "\r", "f": "\f",
    '"': '"', "'": "'", "\\": "\\",
}

_ESCAPE_SEQUENCE = re.compile(r"\\(u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|.)", re.DOTALL)


def escape_string(value: str) -> str:
    """Escape a lexical form for use inside a double-quoted literal."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def unescape_string(value: str) -> str:
    """
    Resolve ECHAR and UCHAR escape sequences.

    Raises:
        ParseError: On an unknown escape sequence
    """
    def replace(match: "re.Match[str]") -> str:
        seq = match.group(1)
        if seq[0] in "uU" and len(seq) > 1:
            return chr(int(seq[1:], 16))
        if seq in _UNESCAPES:
            return _UNESCAPES[seq]
        raise ParseError(f"Invalid escape sequence: \\{seq}")

    return _ESCAPE_SEQUENCE.sub(replace, value)


# =============================================================================
# Terms
# =============================================================================

@dataclass(frozen=True)
class RDFNode:
    """
    Common shape of every RDF term.

    Attributes:
        nominal_value: IRI, blank node label or literal lexical form
        id: Process-unique identifier, excluded from equality

    Only the NamedNode, BlankNode and Literal variants may be instantiated.
    """
    nominal_value: str
    id: str = field(default_factory=new_id, compare=False, repr=False, kw_only=True)

    kind: ClassVar[TermKind]

    def __post_init__(self):
        if type(self) is RDFNode:
            raise InvalidArgument("RDFNode is abstract; use NamedNode, BlankNode or Literal")
        if not isinstance(self.nominal_value, str):
            raise InvalidArgument(
                f"{type(self).__name__} value must be a string, "
                f"got {type(self.nominal_value).__name__}"
            )
        if not isinstance(self.id, str):
            raise InvalidArgument(f"Node id must be a string, got {type(self.id).__name__}")

    @property
    def interface_name(self) -> str:
        return type(self).__name__

    def to_primitive(self) -> Any:
        """Return the native value used for index keys and raw comparisons."""
        return self.nominal_value

    def equals(self, other: Any) -> bool:
        """
        Test equivalence with another term or with a native value.

        Terms are compared structurally. Native values are compared with
        this term's primitive form; booleans never equal numbers.
        """
        if isinstance(other, RDFNode):
            return self == other
        if not isinstance(other, NATIVE_TYPES):
            return False
        value = self.to_primitive()
        if isinstance(value, bool) != isinstance(other, bool):
            return False
        return value == other

    def to_nt(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.nominal_value


@dataclass(frozen=True)
class NamedNode(RDFNode):
    """A node identified by an IRI."""
    kind: ClassVar[TermKind] = TermKind.NAMED_NODE

    @property
    def iri(self) -> str:
        return self.nominal_value

    def to_nt(self) -> str:
        return f"<{self.nominal_value}>"


@dataclass(frozen=True)
class BlankNode(RDFNode):
    """A node with graph-local identity only."""
    kind: ClassVar[TermKind] = TermKind.BLANK_NODE

    @property
    def label(self) -> str:
        return self.nominal_value

    def to_nt(self) -> str:
        return f"_:{self.nominal_value}"

    def __str__(self) -> str:
        return self.to_nt()


@dataclass(frozen=True)
class Literal(RDFNode):
    """
    A data value with a lexical form and a datatype or language tag.

    The datatype defaults to xsd:string and is forced to rdf:langString
    when a language tag is given, so two language-tagged literals are
    equivalent whenever value and (lowercased) tag agree.

    Example:
        Literal("chat", language="fr")
        Literal("42", datatype=XSD.integer)
        Literal.from_value(42)
    """
    language: Optional[str] = field(default=None, kw_only=True)
    datatype: Optional[Union[str, NamedNode]] = field(default=None, kw_only=True)

    kind: ClassVar[TermKind] = TermKind.LITERAL

    def __post_init__(self):
        super().__post_init__()

        datatype = self.datatype
        if isinstance(datatype, NamedNode):
            datatype = datatype.iri
        elif datatype is not None and not isinstance(datatype, str):
            raise InvalidArgument(
                f"Literal datatype must be an IRI string or NamedNode, "
                f"got {type(datatype).__name__}"
            )

        language = self.language
        if language is not None:
            if not isinstance(language, str) or not LANGUAGE_TAG.match(language):
                raise InvalidArgument(f"Invalid language tag: {language!r}")
            if datatype not in (None, XSD.string, RDF.langString):
                raise InvalidArgument(
                    f"A literal cannot have both a language tag and datatype {datatype}"
                )
            language = language.lower()
            datatype = RDF.langString
        elif datatype is None or datatype == RDF.langString:
            datatype = XSD.string

        object.__setattr__(self, "language", language)
        object.__setattr__(self, "datatype", datatype)

    @classmethod
    def from_value(cls, value: Any, **kwargs) -> "Literal":
        """
        Create a typed literal from a native Python value.

        Args:
            value: bool, int, float, Decimal, date, datetime or str
            **kwargs: Forwarded to the constructor (e.g. ``id``, ``language``)

        Raises:
            InvalidArgument: If the value type has no XSD mapping
        """
        if isinstance(value, bool):
            return cls("true" if value else "false", datatype=XSD.boolean, **kwargs)
        if isinstance(value, int):
            return cls(str(value), datatype=XSD.integer, **kwargs)
        if isinstance(value, float):
            if math.isnan(value):
                lexical = "NaN"
            elif math.isinf(value):
                lexical = "INF" if value > 0 else "-INF"
            else:
                lexical = repr(value)
            return cls(lexical, datatype=XSD.double, **kwargs)
        if isinstance(value, Decimal):
            if not value.is_finite():
                raise InvalidArgument(f"xsd:decimal cannot hold {value}")
            return cls(format(value, "f"), datatype=XSD.decimal, **kwargs)
        if isinstance(value, datetime):
            return cls(value.isoformat(), datatype=XSD.dateTime, **kwargs)
        if isinstance(value, date):
            return cls(value.isoformat(), datatype=XSD.date, **kwargs)
        if isinstance(value, str):
            return cls(value, **kwargs)
        raise InvalidArgument(f"Cannot build a literal from {type(value).__name__}")

    @property
    def value(self) -> str:
        return self.nominal_value

    def to_primitive(self) -> Any:
        if self.language is not None:
            return self.nominal_value
        converter = CONVERTERS.get(self.datatype)
        if converter is None:
            return self.nominal_value
        try:
            return converter(self.nominal_value)
        except ValueError:
            # Ill-typed lexical forms keep their string value
            return self.nominal_value

    def to_nt(self) -> str:
        quoted = f'"{escape_string(self.nominal_value)}"'
        if self.language is not None:
            return f"{quoted}@{self.language}"
        if self.datatype == XSD.string:
            return quoted
        return f"{quoted}^^<{self.datatype}>"


# =============================================================================
# N-Triples term parsing
# =============================================================================

_NT_NAMED = re.compile(r"^<([^<>\"{}|^`\\\s]*)>$")
_NT_BLANK = re.compile(r"^_:(\S+)$")
_NT_LITERAL = re.compile(
    r'^"((?:[^"\\]|\\.)*)"'
    r"(?:@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*)|\^\^<([^<>\"{}|^`\\\s]*)>)?$",
    re.DOTALL,
)


def node_from_nt(nt: str, **kwargs) -> RDFNode:
    """
    Create a term from its N-Triples representation.

    Args:
        nt: A single N-Triples term, e.g. ``<http://ex/a>``, ``_:b1``,
            ``"chat"@fr`` or ``"1"^^<http://www.w3.org/2001/XMLSchema#integer>``
        **kwargs: Forwarded to the term constructor (e.g. ``id``)

    Raises:
        ParseError: If the string is not a valid N-Triples term
    """
    if not isinstance(nt, str):
        raise InvalidArgument(f"Expected an N-Triples string, got {type(nt).__name__}")
    text = nt.strip()

    match = _NT_NAMED.match(text)
    if match:
        return NamedNode(match.group(1), **kwargs)

    match = _NT_BLANK.match(text)
    if match:
        return BlankNode(match.group(1), **kwargs)

    match = _NT_LITERAL.match(text)
    if match:
        lexical, language, datatype = match.groups()
        return Literal(unescape_string(lexical), language=language, datatype=datatype, **kwargs)

    raise ParseError(f"Could not parse {nt!r} as an N-Triples term", source=nt)
