"""
rdflite: an in-memory RDF triple store.

Immutable RDF terms, a multi-index Graph with pattern matching and
change events, bijective prefix/term maps for CURIE resolution, and
Turtle / N-Triples reading and writing.
"""

__version__ = "0.1.0"

from rdflite.errors import RDFLiteError, InvalidArgument, ParseError
from rdflite.terms import (
    RDF,
    XSD,
    TermKind,
    RDFNode,
    NamedNode,
    BlankNode,
    Literal,
    node_from_nt,
)
from rdflite.triple import Triple
from rdflite.graph import Graph, GraphEvent, EventKind, Subscription, TriplePattern
from rdflite.namespaces import COMMON_PREFIXES, PrefixMap, TermMap, Profile
from rdflite.config import (
    RDFLiteConfig,
    EnvironmentConfig,
    ReaderConfig,
    WriterConfig,
    ConfigValidator,
    ConfigValidationError,
    load_config,
    save_config,
)
from rdflite.ids import CounterIdGenerator, UUIDIdGenerator, make_id_generator, new_id
from rdflite.environment import RDFEnvironment, TripleAction
from rdflite.formats import (
    ParseResult,
    TurtleParser,
    TurtleReader,
    TurtleWriter,
    NTriplesParser,
    NTriplesSerializer,
    parse_ntriples,
    serialize_ntriples,
)
from rdflite.columnar import graph_to_dataframe, graph_from_dataframe, save_parquet, load_parquet

__all__ = [
    # Errors
    "RDFLiteError",
    "InvalidArgument",
    "ParseError",
    # Terms
    "RDF",
    "XSD",
    "TermKind",
    "RDFNode",
    "NamedNode",
    "BlankNode",
    "Literal",
    "node_from_nt",
    "Triple",
    # Graph
    "Graph",
    "GraphEvent",
    "EventKind",
    "Subscription",
    "TriplePattern",
    # Namespaces
    "COMMON_PREFIXES",
    "PrefixMap",
    "TermMap",
    "Profile",
    # Configuration
    "RDFLiteConfig",
    "EnvironmentConfig",
    "ReaderConfig",
    "WriterConfig",
    "ConfigValidator",
    "ConfigValidationError",
    "load_config",
    "save_config",
    # Ids
    "CounterIdGenerator",
    "UUIDIdGenerator",
    "make_id_generator",
    "new_id",
    # Environment
    "RDFEnvironment",
    "TripleAction",
    # Formats
    "ParseResult",
    "TurtleParser",
    "TurtleReader",
    "TurtleWriter",
    "NTriplesParser",
    "NTriplesSerializer",
    "parse_ntriples",
    "serialize_ntriples",
    # Columnar
    "graph_to_dataframe",
    "graph_from_dataframe",
    "save_parquet",
    "load_parquet",
]
