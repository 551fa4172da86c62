"""
RDF Format Parsers and Serializers.

Supports:
- Turtle (.ttl): TurtleParser, TurtleReader and TurtleWriter
- N-Triples (.nt): NTriplesParser and NTriplesSerializer
"""

from rdflite.formats.turtle import (
    ParsedDocument,
    ParseResult,
    TurtleParser,
    TurtleReader,
    TurtleWriter,
    parse_turtle,
    serialize_turtle,
    tokenize,
)
from rdflite.formats.ntriples import NTriplesParser, NTriplesSerializer, parse_ntriples, serialize_ntriples

__all__ = [
    # Core types
    "ParsedDocument",
    "ParseResult",
    # Turtle
    "TurtleParser",
    "TurtleReader",
    "TurtleWriter",
    "parse_turtle",
    "serialize_turtle",
    "tokenize",
    # N-Triples
    "NTriplesParser",
    "NTriplesSerializer",
    "parse_ntriples",
    "serialize_ntriples",
]
