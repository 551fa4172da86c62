"""
Columnar export and import of graphs with Polars.

One row per triple, each term split into value/kind/datatype/language
columns:

    id | subject | subject_kind | subject_datatype | subject_language |
    predicate | predicate_kind | predicate_datatype | predicate_language |
    object | object_kind | object_datatype | object_language

Kinds are TermKind names (NAMED_NODE, BLANK_NODE, LITERAL). The datatype
and language columns are null for non-literal terms. On import the id
and the subject/predicate datatype and language columns are optional.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import polars as pl

from rdflite.errors import InvalidArgument
from rdflite.graph import Graph
from rdflite.terms import BlankNode, Literal, NamedNode, RDFNode, TermKind
from rdflite.triple import Triple

logger = logging.getLogger(__name__)


POSITIONS = ("subject", "predicate", "object")

COLUMNS = ("id",) + tuple(
    f"{position}{suffix}"
    for position in POSITIONS
    for suffix in ("", "_kind", "_datatype", "_language")
)

REQUIRED_COLUMNS = (
    "subject",
    "subject_kind",
    "predicate",
    "predicate_kind",
    "object",
    "object_kind",
    "object_datatype",
    "object_language",
)


def graph_to_dataframe(graph: Graph) -> pl.DataFrame:
    """Build a DataFrame with one row per triple, in iteration order."""
    columns = {name: [] for name in COLUMNS}

    for triple in graph:
        columns["id"].append(triple.id)
        for position, node in zip(POSITIONS, triple):
            is_literal = isinstance(node, Literal)
            columns[position].append(node.nominal_value)
            columns[f"{position}_kind"].append(node.kind.name)
            columns[f"{position}_datatype"].append(node.datatype if is_literal else None)
            columns[f"{position}_language"].append(node.language if is_literal else None)

    return pl.DataFrame({
        name: pl.Series(values, dtype=pl.Utf8) for name, values in columns.items()
    })


def _node(row: Dict[str, Any], position: str) -> RDFNode:
    kind = row[f"{position}_kind"]
    try:
        term_kind = TermKind[kind]
    except KeyError:
        raise InvalidArgument(f"Unknown term kind: {kind!r}")

    value = row[position]
    if term_kind == TermKind.NAMED_NODE:
        return NamedNode(value)
    if term_kind == TermKind.BLANK_NODE:
        return BlankNode(value)
    return Literal(
        value,
        language=row.get(f"{position}_language"),
        datatype=row.get(f"{position}_datatype"),
    )


def graph_from_dataframe(df: pl.DataFrame, graph: Optional[Graph] = None) -> Graph:
    """
    Rebuild triples from a frame produced by ``graph_to_dataframe``.

    Rows are added to ``graph`` (a new Graph by default), so duplicate
    rows collapse into one triple.
    """
    missing = [name for name in REQUIRED_COLUMNS if name not in df.columns]
    if missing:
        raise InvalidArgument(f"DataFrame is missing columns: {', '.join(missing)}")

    graph = graph if graph is not None else Graph()

    for row in df.iter_rows(named=True):
        triple_kwargs = {"id": row["id"]} if row.get("id") else {}
        graph.add(Triple(
            _node(row, "subject"),
            _node(row, "predicate"),
            _node(row, "object"),
            **triple_kwargs,
        ))

    return graph


def save_parquet(graph: Graph, path: Union[str, Path]) -> None:
    """Write a graph to a Parquet file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = graph_to_dataframe(graph)
    df.write_parquet(path)
    logger.info(f"Saved {df.height} triples to {path}")


def load_parquet(path: Union[str, Path], graph: Optional[Graph] = None) -> Graph:
    """Read triples from a Parquet file written by ``save_parquet``."""
    df = pl.read_parquet(Path(path))
    logger.info(f"Loaded {df.height} rows from {path}")
    return graph_from_dataframe(df, graph)
