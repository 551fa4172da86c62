"""
N-Triples Parser and Serializer.

N-Triples is the line-based subset of Turtle: absolute IRIs, blank node
labels and fully written literals, one ``subject predicate object .``
statement per line, no directives and no abbreviations.
"""

import logging
from io import StringIO
from pathlib import Path
from typing import Iterable, Optional, Union

from rdflite.errors import ParseError
from rdflite.formats.turtle import ParsedDocument, TurtleParser
from rdflite.graph import Graph
from rdflite.triple import Triple

logger = logging.getLogger(__name__)


class NTriplesParser(TurtleParser):
    """
    Strict N-Triples parser.

    Shares the Turtle tokenizer and grammar but rejects every Turtle-only
    construct (prefixes, ``a``, ``;`` and ``,`` lists, ``[]``, collections
    and numeric shorthand) as well as statements spanning several lines.
    """

    ALLOW_ABBREVIATIONS = False
    FORMAT_NAME = "N-Triples"

    def parse(self, source: Union[str, Path, StringIO], base: str = "") -> ParsedDocument:
        """
        Parse N-Triples content.

        Args:
            source: N-Triples content as string, file path, or StringIO
            base: Ignored; N-Triples IRIs are absolute

        Returns:
            ParsedDocument with triples
        """
        if isinstance(source, Path):
            text = source.read_text(encoding="utf-8")
        elif isinstance(source, StringIO):
            text = source.read()
        else:
            text = source

        document = super().parse(text, "")
        self._check_one_statement_per_line(text, document)
        return document

    def _check_one_statement_per_line(self, text: str, document: ParsedDocument) -> None:
        lines = [
            (number, line.strip())
            for number, line in enumerate(text.splitlines(), start=1)
            if line.strip() and not line.strip().startswith("#")
        ]
        if len(lines) != len(document.triples):
            for number, line in lines:
                if not line.endswith("."):
                    raise ParseError(
                        "Each N-Triples statement must be on a single line",
                        source=text,
                        line=number,
                    )


class NTriplesSerializer:
    """Serializer for N-Triples format."""

    def serialize(self, triples: Iterable[Triple]) -> str:
        """
        Serialize triples to N-Triples.

        Args:
            triples: A Graph or any iterable of triples

        Returns:
            One ``s p o .`` line per triple
        """
        return "".join(f"{triple.to_nt()} .\n" for triple in triples)


def parse_ntriples(
    source: Union[str, Path, StringIO],
    graph: Optional[Graph] = None,
) -> Graph:
    """
    Parse N-Triples content into a graph.

    Args:
        source: N-Triples content as string, file path, or StringIO
        graph: Target graph (a new one by default)

    Returns:
        The populated graph
    """
    document = NTriplesParser().parse(source)
    graph = graph if graph is not None else Graph()
    graph.add_all(document.triples)
    logger.debug(f"Parsed {len(document.triples)} N-Triples statements")
    return graph


def serialize_ntriples(graph: Iterable[Triple]) -> str:
    """
    Serialize a graph to N-Triples.

    Args:
        graph: Graph (or iterable of triples) to serialize

    Returns:
        N-Triples formatted string
    """
    return NTriplesSerializer().serialize(graph)
