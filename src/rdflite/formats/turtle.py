"""
Turtle Parser, Reader and Writer.

Grammar (subset of https://www.w3.org/TR/turtle/ without RDF-star):
  turtleDoc  ::= statement*
  statement  ::= directive | triples '.'
  directive  ::= '@prefix' PNAME_NS IRIREF '.' | '@base' IRIREF '.'
               | 'PREFIX' PNAME_NS IRIREF | 'BASE' IRIREF
  triples    ::= subject predicateObjectList
               | blankNodePropertyList predicateObjectList?
  predicateObjectList ::= verb objectList (';' (verb objectList)?)*
  objectList ::= object (',' object)*
  object     ::= iri | BlankNode | collection | blankNodePropertyList | literal

The TurtleReader feeds parsed triples into a Graph and declared prefixes
into a Profile; the TurtleWriter renders a Graph back to Turtle, using a
Profile's PrefixMap to shrink IRIs.
"""

import logging
import re
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional
from urllib.parse import urljoin

from rdflite.config import ReaderConfig, WriterConfig
from rdflite.errors import InvalidArgument, ParseError
from rdflite.graph import Graph
from rdflite.ids import IdGenerator, new_id
from rdflite.namespaces import PrefixMap, Profile
from rdflite.terms import (
    LANGUAGE_TAG,
    RDF,
    XSD,
    BlankNode,
    Literal,
    NamedNode,
    RDFNode,
    escape_string,
    unescape_string,
)
from rdflite.triple import Triple

logger = logging.getLogger(__name__)


# =============================================================================
# Lexical patterns
# =============================================================================

_PN_CHARS_BASE = "A-Za-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF\uFDF0-\uFFFD"
_PN_CHARS_U = _PN_CHARS_BASE + "_"
_PN_CHARS = _PN_CHARS_U + "\\-0-9\u00B7\u0300-\u036F\u203F-\u2040"
_PLX = r"%[0-9A-Fa-f]{2}|\\[-_~.!$&'()*+,;=/?#@%]"

PN_PREFIX = rf"[{_PN_CHARS_BASE}](?:[{_PN_CHARS}.]*[{_PN_CHARS}])?"
PN_LOCAL = (
    rf"(?:[{_PN_CHARS_U}:0-9]|{_PLX})"
    rf"(?:(?:[{_PN_CHARS}.:]|{_PLX})*(?:[{_PN_CHARS}:]|{_PLX}))?"
)
BLANK_NODE_LABEL = rf"[{_PN_CHARS_U}0-9](?:[{_PN_CHARS}.]*[{_PN_CHARS}])?"

_WS = re.compile(r"(?:\s+|#[^\n\r]*)+")
_IRIREF = re.compile(r"<((?:[^<>\"{}|^`\\\x00-\x20]|\\u[0-9A-Fa-f]{4}|\\U[0-9A-Fa-f]{8})*)>")
_PNAME = re.compile(rf"((?:{PN_PREFIX})?):({PN_LOCAL})?")
_BNODE = re.compile(rf"_:({BLANK_NODE_LABEL})")
_AT_WORD = re.compile(r"@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*)")
_STRING_LONG_DOUBLE = re.compile(r'"""((?:[^"\\]|\\.|"(?!""))*)"""', re.DOTALL)
_STRING_LONG_SINGLE = re.compile(r"'''((?:[^'\\]|\\.|'(?!''))*)'''", re.DOTALL)
_STRING_DOUBLE = re.compile(r'"((?:[^"\\\n\r]|\\.)*)"')
_STRING_SINGLE = re.compile(r"'((?:[^'\\\n\r]|\\.)*)'")
_DOUBLE = re.compile(r"[+-]?(?:\d+\.\d*[eE][+-]?\d+|\.\d+[eE][+-]?\d+|\d+[eE][+-]?\d+)")
_DECIMAL = re.compile(r"[+-]?\d*\.\d+")
_INTEGER = re.compile(r"[+-]?\d+")
_WORD = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_PUNCT = set(".;,[]()")
_LOCAL_ESCAPE = re.compile(r"\\([-_~.!$&'()*+,;=/?#@%])")
_ABSOLUTE_IRI = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

_LOCAL_NAME = re.compile(rf"^(?:{PN_LOCAL})?$")
_PREFIX_NAME = re.compile(rf"^(?:{PN_PREFIX})?$")
_BLANK_LABEL = re.compile(rf"^{BLANK_NODE_LABEL}$")


class Token(NamedTuple):
    """A lexical token; ``pos`` is the offset into the source text."""
    kind: str
    value: object
    pos: int


def _line_column(text: str, pos: int) -> tuple:
    line = text.count("\n", 0, pos) + 1
    column = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return line, column


def tokenize(text: str) -> Iterator[Token]:
    """
    Split Turtle text into tokens.

    Token kinds: IRI, PNAME, BNODE, STRING, AT_WORD, DATATYPE, INTEGER,
    DECIMAL, DOUBLE, WORD, PUNCT and a final EOF.

    Raises:
        ParseError: On characters that start no valid token
    """
    pos = 0
    length = len(text)
    while True:
        ws = _WS.match(text, pos)
        if ws:
            pos = ws.end()
        if pos >= length:
            yield Token("EOF", None, pos)
            return

        ch = text[pos]
        start = pos

        if ch in _PUNCT:
            # A dot directly followed by digits is a decimal, not a terminator
            if ch == "." and _DECIMAL.match(text, pos) and pos + 1 < length and text[pos + 1].isdigit():
                pass
            else:
                yield Token("PUNCT", ch, start)
                pos += 1
                continue

        if ch == "<":
            match = _IRIREF.match(text, pos)
            if not match:
                raise _error("Malformed IRI", text, pos)
            yield Token("IRI", unescape_string(match.group(1)), start)
            pos = match.end()
            continue

        if ch in "\"'":
            for pattern in (_STRING_LONG_DOUBLE, _STRING_LONG_SINGLE, _STRING_DOUBLE, _STRING_SINGLE):
                match = pattern.match(text, pos)
                if match:
                    try:
                        value = unescape_string(match.group(1))
                    except ParseError as e:
                        raise _error(e.message, text, pos)
                    yield Token("STRING", value, start)
                    pos = match.end()
                    break
            else:
                raise _error("Unterminated string literal", text, pos)
            continue

        if text.startswith("^^", pos):
            yield Token("DATATYPE", "^^", start)
            pos += 2
            continue

        if ch == "@":
            match = _AT_WORD.match(text, pos)
            if not match:
                raise _error("Expected a directive or language tag after '@'", text, pos)
            yield Token("AT_WORD", match.group(1), start)
            pos = match.end()
            continue

        if text.startswith("_:", pos):
            match = _BNODE.match(text, pos)
            if not match:
                raise _error("Malformed blank node label", text, pos)
            yield Token("BNODE", match.group(1), start)
            pos = match.end()
            continue

        if ch.isdigit() or ch in "+-.":
            for kind, pattern in (("DOUBLE", _DOUBLE), ("DECIMAL", _DECIMAL), ("INTEGER", _INTEGER)):
                match = pattern.match(text, pos)
                if match:
                    yield Token(kind, match.group(0), start)
                    pos = match.end()
                    break
            else:
                raise _error(f"Unexpected character {ch!r}", text, pos)
            continue

        match = _PNAME.match(text, pos)
        if match:
            prefix, local = match.group(1), match.group(2) or ""
            yield Token("PNAME", (prefix, _LOCAL_ESCAPE.sub(r"\1", local)), start)
            pos = match.end()
            continue

        match = _WORD.match(text, pos)
        if match:
            yield Token("WORD", match.group(0), start)
            pos = match.end()
            continue

        raise _error(f"Unexpected character {ch!r}", text, pos)


def _error(message: str, text: str, pos: int) -> ParseError:
    line, column = _line_column(text, pos)
    return ParseError(message, source=text, line=line, column=column)


# =============================================================================
# Parser
# =============================================================================

@dataclass
class ParsedDocument:
    """Result of parsing a Turtle document."""
    triples: List[Triple] = field(default_factory=list)
    prefixes: Dict[str, str] = field(default_factory=dict)
    base: Optional[str] = None


class TurtleParser:
    """
    Recursive-descent Turtle parser producing rdflite triples.

    Blank node labels from the document are kept; anonymous blank nodes
    (``[]``, property lists, collections) get ``<blank_node_prefix><n>``
    labels.

    Example:
        doc = TurtleParser().parse('@prefix ex: <http://ex/> . ex:a ex:b "c" .')
        doc.triples[0].object   # Literal('c')
    """

    # N-Triples turns these off
    ALLOW_ABBREVIATIONS = True
    FORMAT_NAME = "Turtle"

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        blank_node_prefix: str = "genid",
    ):
        self.id_generator = id_generator or new_id
        self.blank_node_prefix = blank_node_prefix

    def parse(self, text: str, base: str = "") -> ParsedDocument:
        """
        Parse a complete document.

        Args:
            text: Turtle source
            base: Initial base IRI for relative references

        Returns:
            ParsedDocument with triples, declared prefixes and declared base

        Raises:
            ParseError: On any syntax error
        """
        if not isinstance(text, str):
            raise ParseError(f"Expected {self.FORMAT_NAME} text, got {type(text).__name__}")

        self._text = text
        self._tokens = tokenize(text)
        self._current = next(self._tokens)
        self._base = base
        self._declared_base: Optional[str] = None
        self._prefixes: Dict[str, str] = {}
        self._triples: List[Triple] = []
        self._anon_counter = 0
        # Generated labels must not collide with labels written anywhere in the document
        self._document_labels = {token.value for token in tokenize(text) if token.kind == "BNODE"}

        while self._current.kind != "EOF":
            self._statement()

        return ParsedDocument(
            triples=self._triples,
            prefixes=dict(self._prefixes),
            base=self._declared_base,
        )

    # -- token helpers --------------------------------------------------------

    def _advance(self) -> Token:
        token = self._current
        self._current = next(self._tokens)
        return token

    def _error(self, message: str, token: Optional[Token] = None) -> ParseError:
        token = token or self._current
        return _error(message, self._text, token.pos)

    def _expect_punct(self, value: str) -> None:
        token = self._current
        if token.kind != "PUNCT" or token.value != value:
            found = "end of input" if token.kind == "EOF" else repr(token.value)
            raise self._error(f"Expected '{value}', found {found}")
        self._advance()

    def _at_punct(self, value: str) -> bool:
        return self._current.kind == "PUNCT" and self._current.value == value

    def _require_abbreviations(self, what: str) -> None:
        if not self.ALLOW_ABBREVIATIONS:
            raise self._error(f"{what} is not allowed in {self.FORMAT_NAME}")

    # -- grammar --------------------------------------------------------------

    def _statement(self) -> None:
        token = self._current

        if token.kind == "AT_WORD":
            self._require_abbreviations("A directive")
            if token.value == "prefix":
                self._advance()
                self._prefix_declaration()
                self._expect_punct(".")
                return
            if token.value == "base":
                self._advance()
                self._base_declaration()
                self._expect_punct(".")
                return
            raise self._error(f"Unknown directive @{token.value}")

        if token.kind == "WORD" and token.value.upper() in ("PREFIX", "BASE"):
            self._require_abbreviations("A directive")
            self._advance()
            if token.value.upper() == "PREFIX":
                self._prefix_declaration()
            else:
                self._base_declaration()
            return

        self._triples_statement()
        self._expect_punct(".")

    def _prefix_declaration(self) -> None:
        token = self._current
        if token.kind != "PNAME" or token.value[1]:
            raise self._error("Expected a prefix name such as 'ex:'")
        self._advance()
        iri = self._iri_ref()
        self._prefixes[token.value[0]] = iri

    def _base_declaration(self) -> None:
        iri = self._iri_ref()
        self._base = iri
        self._declared_base = iri

    def _iri_ref(self) -> str:
        token = self._current
        if token.kind != "IRI":
            raise self._error("Expected an IRI")
        self._advance()
        return self._resolve_relative(token.value)

    def _resolve_relative(self, iri: str) -> str:
        if not self._base or _ABSOLUTE_IRI.match(iri):
            return iri
        return urljoin(self._base, iri)

    def _triples_statement(self) -> None:
        if self._at_punct("["):
            subject = self._blank_node_property_list()
            if not self._at_punct("."):
                self._predicate_object_list(subject)
            return

        subject = self._subject()
        self._predicate_object_list(subject)

    def _subject(self) -> RDFNode:
        token = self._current
        if token.kind in ("IRI", "PNAME"):
            return self._iri()
        if token.kind == "BNODE":
            self._advance()
            return BlankNode(token.value, id=self.id_generator())
        if self._at_punct("("):
            return self._collection()
        if self._at_punct("["):
            return self._blank_node_property_list()
        raise self._error("Expected a subject")

    def _predicate_object_list(self, subject: RDFNode) -> None:
        self._require_verb()
        while True:
            predicate = self._verb()
            self._object_list(subject, predicate)
            if not self._at_punct(";"):
                return
            self._require_abbreviations("A predicate list (';')")
            while self._at_punct(";"):
                self._advance()
            # A trailing ';' may end the list
            if self._current.kind == "EOF" or (
                self._current.kind == "PUNCT" and self._current.value in ".]"
            ):
                return

    def _require_verb(self) -> None:
        token = self._current
        if token.kind in ("IRI", "PNAME") or (token.kind == "WORD" and token.value == "a"):
            return
        raise self._error("Expected a predicate")

    def _verb(self) -> RDFNode:
        token = self._current
        if token.kind == "WORD" and token.value == "a":
            self._require_abbreviations("The 'a' keyword")
            self._advance()
            return NamedNode(RDF.type, id=self.id_generator())
        if token.kind in ("IRI", "PNAME"):
            return self._iri()
        raise self._error("Expected a predicate")

    def _object_list(self, subject: RDFNode, predicate: RDFNode) -> None:
        while True:
            obj = self._object()
            self._emit(subject, predicate, obj)
            if not self._at_punct(","):
                return
            self._require_abbreviations("An object list (',')")
            self._advance()

    def _object(self) -> RDFNode:
        token = self._current
        kind = token.kind

        if kind in ("IRI", "PNAME"):
            return self._iri()
        if kind == "BNODE":
            self._advance()
            return BlankNode(token.value, id=self.id_generator())
        if self._at_punct("("):
            return self._collection()
        if self._at_punct("["):
            return self._blank_node_property_list()
        if kind == "STRING":
            return self._rdf_literal()
        if kind in ("INTEGER", "DECIMAL", "DOUBLE"):
            self._require_abbreviations("A numeric literal")
            self._advance()
            datatype = {"INTEGER": XSD.integer, "DECIMAL": XSD.decimal, "DOUBLE": XSD.double}[kind]
            return Literal(token.value, datatype=datatype, id=self.id_generator())
        if kind == "WORD" and token.value in ("true", "false"):
            self._require_abbreviations("A boolean literal")
            self._advance()
            return Literal(token.value, datatype=XSD.boolean, id=self.id_generator())
        raise self._error("Expected an object")

    def _rdf_literal(self) -> Literal:
        lexical = self._advance().value
        if self._current.kind == "AT_WORD":
            token = self._advance()
            if not LANGUAGE_TAG.match(token.value):
                raise self._error(f"Invalid language tag: {token.value}", token)
            return Literal(lexical, language=token.value, id=self.id_generator())
        if self._current.kind == "DATATYPE":
            self._advance()
            if self._current.kind not in ("IRI", "PNAME"):
                raise self._error("Expected a datatype IRI after '^^'")
            datatype = self._iri()
            return Literal(lexical, datatype=datatype.iri, id=self.id_generator())
        return Literal(lexical, id=self.id_generator())

    def _iri(self) -> NamedNode:
        token = self._advance()
        if token.kind == "IRI":
            return NamedNode(self._resolve_relative(token.value), id=self.id_generator())

        self._require_abbreviations("A prefixed name")
        prefix, local = token.value
        namespace = self._prefixes.get(prefix)
        if namespace is None:
            raise self._error(f"Undeclared prefix '{prefix}:'", token)
        return NamedNode(namespace + local, id=self.id_generator())

    def _blank_node_property_list(self) -> BlankNode:
        self._require_abbreviations("A blank node property list")
        self._expect_punct("[")
        node = self._fresh_blank_node()
        if not self._at_punct("]"):
            self._predicate_object_list(node)
        self._expect_punct("]")
        return node

    def _collection(self) -> RDFNode:
        self._require_abbreviations("A collection")
        self._expect_punct("(")
        items = []
        while not self._at_punct(")"):
            if self._current.kind == "EOF":
                raise self._error("Unterminated collection")
            items.append(self._object())
        self._advance()

        if not items:
            return NamedNode(RDF.nil, id=self.id_generator())

        head = self._fresh_blank_node()
        node = head
        for i, item in enumerate(items):
            self._emit(node, NamedNode(RDF.first, id=self.id_generator()), item)
            if i + 1 < len(items):
                rest = self._fresh_blank_node()
            else:
                rest = NamedNode(RDF.nil, id=self.id_generator())
            self._emit(node, NamedNode(RDF.rest, id=self.id_generator()), rest)
            node = rest
        return head

    def _fresh_blank_node(self) -> BlankNode:
        while True:
            self._anon_counter += 1
            label = f"{self.blank_node_prefix}{self._anon_counter}"
            if label not in self._document_labels:
                return BlankNode(label, id=self.id_generator())

    def _emit(self, subject: RDFNode, predicate: RDFNode, obj: RDFNode) -> None:
        self._triples.append(Triple(subject, predicate, obj, id=self.id_generator()))


# =============================================================================
# Reader
# =============================================================================

@dataclass
class ParseResult:
    """A populated graph together with the profile of declared prefixes."""
    graph: Graph
    profile: Profile

    def __iter__(self):
        yield self.graph
        yield self.profile


class TurtleReader:
    """
    Reads Turtle into a Graph and a Profile.

    The whole input is parsed before any triple is added, so a failed
    parse leaves the target graph untouched. ``parse_async`` runs the same
    work on a thread pool; callers must not mutate the target graph from
    other threads until the returned future completes.

    Example:
        with TurtleReader() as reader:
            graph, profile = reader.parse(text)
            future = reader.parse_async(other_text)
            result = future.result()
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self.config = config or ReaderConfig()
        self.id_generator = id_generator
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    def _parser(self) -> TurtleParser:
        return TurtleParser(
            id_generator=self.id_generator,
            blank_node_prefix=self.config.blank_node_prefix,
        )

    def parse(
        self,
        text: str,
        base: Optional[str] = None,
        filter: Optional[Callable[[Triple], bool]] = None,
        graph: Optional[Graph] = None,
        profile: Optional[Profile] = None,
    ) -> ParseResult:
        """
        Parse Turtle text.

        Args:
            text: Turtle source
            base: Base IRI (defaults to the configured base_iri)
            filter: Only triples for which this returns True are added
            graph: Target graph (a new one by default)
            profile: Target profile (a new one by default)

        Returns:
            ParseResult with the populated graph and profile

        Raises:
            ParseError: If the text is not valid Turtle
        """
        document = self._parser().parse(text, base if base is not None else self.config.base_iri)

        graph = graph if graph is not None else Graph()
        profile = profile if profile is not None else Profile()

        if document.base is not None:
            profile.set_default_prefix(document.base)
        for prefix, namespace in document.prefixes.items():
            profile.set_prefix(prefix, namespace)

        added = 0
        for triple in document.triples:
            if filter is None or filter(triple):
                graph.add(triple)
                added += 1

        logger.debug(
            f"Parsed {len(document.triples)} triples ({added} accepted) "
            f"and {len(document.prefixes)} prefixes"
        )
        return ParseResult(graph=graph, profile=profile)

    def parse_async(
        self,
        text: str,
        base: Optional[str] = None,
        filter: Optional[Callable[[Triple], bool]] = None,
        graph: Optional[Graph] = None,
        profile: Optional[Profile] = None,
    ) -> "Future[ParseResult]":
        """
        Parse on the reader's thread pool.

        Returns:
            A future resolving to a ParseResult, or failing with ParseError
        """
        return self._get_executor().submit(
            self.parse, text, base=base, filter=filter, graph=graph, profile=profile
        )

    def iter_triples(self, text: str, base: Optional[str] = None) -> Iterator[Triple]:
        """Yield the triples of a document without touching any graph."""
        document = self._parser().parse(text, base if base is not None else self.config.base_iri)
        return iter(document.triples)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers,
                    thread_name_prefix="rdflite-reader",
                )
            return self._executor

    def close(self) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> "TurtleReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


# =============================================================================
# Writer
# =============================================================================

_INTEGER_LEXICAL = re.compile(r"^[+-]?\d+$")
_DECIMAL_LEXICAL = re.compile(r"^[+-]?\d*\.\d+$")
_DOUBLE_LEXICAL = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)[eE][+-]?\d+$")

_SHORTHAND = {
    XSD.integer: _INTEGER_LEXICAL,
    XSD.decimal: _DECIMAL_LEXICAL,
    XSD.double: _DOUBLE_LEXICAL,
}


class TurtleWriter:
    """
    Serializes a Graph to Turtle.

    Triples are grouped by subject and predicate; rdf:type is written
    first as ``a``. IRIs are shrunk with the profile's prefixes when the
    resulting local name is valid Turtle. Blank node labels that are not
    valid Turtle labels are renamed consistently within one document.
    """

    def __init__(self, config: Optional[WriterConfig] = None):
        self.config = config or WriterConfig()

    def serialize(self, graph: Graph, profile: Optional[Profile] = None) -> str:
        """
        Turn a graph into a Turtle string.

        Args:
            graph: The graph to serialize
            profile: Supplies prefixes for shrinking IRIs

        Returns:
            Turtle text

        Raises:
            InvalidArgument: For triples Turtle cannot express (a literal
                subject, or a predicate that is not a named node)
        """
        prefixes = profile.prefixes if profile is not None and self.config.use_prefixes else PrefixMap()
        state = _WriterState(prefixes, self.config, graph)

        blocks = [self._subject_block(state, subject, graph) for subject in graph.subjects()]

        header = []
        for prefix, namespace in prefixes.entries():
            if not _PREFIX_NAME.match(prefix):
                continue
            if self.config.only_used_prefixes and prefix not in state.used_prefixes:
                continue
            header.append(f"@prefix {prefix}: <{namespace}> .")

        parts = []
        if header:
            parts.append("\n".join(header))
        if blocks:
            parts.append("\n\n".join(blocks))
        return "\n\n".join(parts) + "\n" if parts else ""

    def _subject_block(self, state: "_WriterState", subject: RDFNode, graph: Graph) -> str:
        if isinstance(subject, Literal):
            raise InvalidArgument(f"Turtle cannot write a literal subject: {subject.to_nt()}")
        indent = " " * self.config.indent
        predicates = list(graph.predicates(subject))
        predicates.sort(key=lambda p: 0 if isinstance(p, NamedNode) and p.iri == RDF.type else 1)

        lines = []
        for predicate in predicates:
            if not isinstance(predicate, NamedNode):
                raise InvalidArgument(f"Turtle predicates must be named nodes, got {predicate.to_nt()}")
            objects = ", ".join(state.render(o) for o in graph.objects(subject, predicate))
            if predicate.iri == RDF.type:
                verb = "a"
            else:
                verb = state.render(predicate)
            lines.append(f"{verb} {objects}")

        head = state.render(subject)
        body = f" ;\n{indent}".join(lines)
        return f"{head} {body} ."


class _WriterState:
    """Per-document rendering state: used prefixes and blank node relabelling."""

    def __init__(self, prefixes: PrefixMap, config: WriterConfig, graph: Graph):
        self.prefixes = prefixes
        self.config = config
        self.used_prefixes: set = set()
        self._labels: Dict[str, str] = {}
        self._taken = {
            node.label
            for triple in graph
            for node in (triple.subject, triple.object)
            if isinstance(node, BlankNode) and _BLANK_LABEL.match(node.label)
        }
        self._counter = 0

    def render(self, node: RDFNode) -> str:
        if isinstance(node, NamedNode):
            return self.iri(node.iri)
        if isinstance(node, BlankNode):
            return f"_:{self.blank_label(node.label)}"
        return self.literal(node)

    def iri(self, iri: str) -> str:
        if len(self.prefixes):
            curie = self.prefixes.shrink(iri)
            if curie != iri:
                prefix, _, local = curie.partition(":")
                if _PREFIX_NAME.match(prefix) and _LOCAL_NAME.match(local):
                    self.used_prefixes.add(prefix)
                    return curie
        return f"<{iri}>"

    def blank_label(self, label: str) -> str:
        if _BLANK_LABEL.match(label):
            return label
        if label not in self._labels:
            while True:
                self._counter += 1
                candidate = f"b{self._counter}"
                if candidate not in self._taken:
                    break
            self._taken.add(candidate)
            self._labels[label] = candidate
        return self._labels[label]

    def literal(self, literal: Literal) -> str:
        lexical = literal.value
        if self.config.abbreviate_literals:
            pattern = _SHORTHAND.get(literal.datatype)
            if pattern is not None and pattern.match(lexical):
                return lexical
            if literal.datatype == XSD.boolean and lexical in ("true", "false"):
                return lexical

        quoted = f'"{escape_string(lexical)}"'
        if literal.language is not None:
            return f"{quoted}@{literal.language}"
        if literal.datatype == XSD.string:
            return quoted
        return f"{quoted}^^{self.iri(literal.datatype)}"


def parse_turtle(text: str, base: str = "") -> ParsedDocument:
    """
    Parse Turtle content.

    Args:
        text: Turtle source
        base: Base IRI for relative references

    Returns:
        ParsedDocument with triples and prefixes
    """
    return TurtleParser().parse(text, base)


def serialize_turtle(graph: Graph, profile: Optional[Profile] = None) -> str:
    """
    Serialize a graph to Turtle.

    Args:
        graph: Graph to serialize
        profile: Optional profile whose prefixes shrink IRIs

    Returns:
        Turtle formatted string
    """
    return TurtleWriter().serialize(graph, profile)
