"""
Tests for columnar export and import.
"""

import polars as pl
import pytest

from rdflite.columnar import (
    COLUMNS,
    graph_from_dataframe,
    graph_to_dataframe,
    load_parquet,
    save_parquet,
)
from rdflite.errors import InvalidArgument
from rdflite.graph import Graph
from rdflite.terms import RDF, XSD, BlankNode, Literal, NamedNode
from rdflite.triple import Triple


@pytest.fixture
def graph():
    """A graph covering every term kind and literal form."""
    return Graph([
        Triple(BlankNode("b1"), NamedNode("n1"), Literal("l1"), id="t0"),
        Triple(NamedNode("b1"), NamedNode("n1"), Literal("1", datatype=XSD.integer), id="t1"),
        Triple(BlankNode("b1"), NamedNode("n2"), NamedNode("n1"), id="t2"),
        Triple(BlankNode("b1"), NamedNode("n3"), Literal("chat", language="fr"), id="t3"),
    ])


class TestGraphToDataFrame:
    def test_columns(self, graph):
        df = graph_to_dataframe(graph)
        assert df.columns == list(COLUMNS)
        assert df.height == 4

    def test_rows(self, graph):
        df = graph_to_dataframe(graph)
        rows = {row["id"]: row for row in df.iter_rows(named=True)}

        assert rows["t0"]["subject_kind"] == "BLANK_NODE"
        assert rows["t0"]["object_datatype"] == XSD.string
        assert rows["t1"]["subject_kind"] == "NAMED_NODE"
        assert rows["t1"]["object"] == "1"
        assert rows["t1"]["object_datatype"] == XSD.integer
        assert rows["t2"]["object_kind"] == "NAMED_NODE"
        assert rows["t2"]["object_datatype"] is None
        assert rows["t3"]["object_language"] == "fr"
        assert rows["t3"]["object_datatype"] == RDF.langString
        assert rows["t1"]["subject_datatype"] is None
        assert rows["t1"]["predicate_language"] is None

    def test_empty_graph(self):
        df = graph_to_dataframe(Graph())
        assert df.height == 0
        assert df.columns == list(COLUMNS)


class TestGraphFromDataFrame:
    def test_rebuild(self, graph):
        rebuilt = graph_from_dataframe(graph_to_dataframe(graph))
        assert set(rebuilt) == set(graph)
        assert rebuilt.get_triple_by_id("t1") == graph.get_triple_by_id("t1")

    def test_duplicates_collapse(self, graph):
        df = graph_to_dataframe(graph)
        rebuilt = graph_from_dataframe(pl.concat([df, df]))
        assert len(rebuilt) == 4

    def test_into_existing_graph(self, graph):
        target = Graph([Triple(NamedNode("x"), NamedNode("y"), NamedNode("z"))])
        result = graph_from_dataframe(graph_to_dataframe(graph), target)
        assert result is target
        assert len(target) == 5

    def test_without_id_column(self, graph):
        df = graph_to_dataframe(graph).drop("id")
        assert len(graph_from_dataframe(df)) == 4

    def test_without_subject_and_predicate_literal_columns(self, graph):
        df = graph_to_dataframe(graph).drop(
            "subject_datatype", "subject_language", "predicate_datatype", "predicate_language"
        )
        assert set(graph_from_dataframe(df)) == set(graph)

    def test_missing_columns(self, graph):
        df = graph_to_dataframe(graph).drop("object_kind")
        with pytest.raises(InvalidArgument):
            graph_from_dataframe(df)

    def test_unknown_kind(self, graph):
        df = graph_to_dataframe(graph).with_columns(pl.lit("QUOTED").alias("subject_kind"))
        with pytest.raises(InvalidArgument):
            graph_from_dataframe(df)


class TestParquet:
    def test_round_trip(self, graph, tmp_path):
        path = tmp_path / "out" / "graph.parquet"
        save_parquet(graph, path)
        assert path.exists()

        loaded = load_parquet(path)
        assert set(loaded) == set(graph)

    def test_literal_subject_and_predicate_keep_datatype(self, tmp_path):
        g = Graph([
            Triple(Literal("5", datatype=XSD.integer), Literal("chat", language="fr"), NamedNode("o")),
        ])
        path = tmp_path / "generalized.parquet"
        save_parquet(g, path)

        loaded = load_parquet(path)
        triple = next(iter(loaded))
        assert triple.subject == Literal("5", datatype=XSD.integer)
        assert triple.predicate == Literal("chat", language="fr")
        assert set(loaded) == set(g)
