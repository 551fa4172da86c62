"""Tests for RDFEnvironment and TripleAction."""
import pytest
from decimal import Decimal

from rdflite.config import EnvironmentConfig, RDFLiteConfig, ReaderConfig, WriterConfig, save_config
from rdflite.environment import RDFEnvironment, TripleAction
from rdflite.errors import InvalidArgument
from rdflite.formats.turtle import TurtleReader, TurtleWriter
from rdflite.graph import Graph
from rdflite.ids import CounterIdGenerator
from rdflite.namespaces import PrefixMap, Profile, TermMap
from rdflite.terms import RDF, XSD, BlankNode, Literal, NamedNode
from rdflite.triple import Triple


@pytest.fixture
def env():
    env = RDFEnvironment(id_generator=CounterIdGenerator("id"))
    env.set_prefix("ex", "http://example.org/")
    env.set_term("ex", "http://example.org/")
    return env


# ========== Construction ==========

class TestConstruction:
    def test_common_prefixes(self, env):
        assert env.prefixes.has_prefix("owl")
        assert env.prefixes.has_namespace("http://www.w3.org/ns/rdfa#")
        assert env.resolve("rdf:type") == RDF.type

    def test_without_common_prefixes(self):
        config = RDFLiteConfig(environment=EnvironmentConfig(include_common_prefixes=False))
        env = RDFEnvironment(config)
        assert len(env.prefixes) == 0

    def test_configured_prefixes_and_terms(self):
        config = RDFLiteConfig(environment=EnvironmentConfig(
            prefixes={"ex": "http://example.org/"},
            terms={"name": "http://xmlns.com/foaf/0.1/name"},
            default_prefix="http://default.org/",
            default_vocabulary="http://vocab.org/",
        ))
        env = RDFEnvironment(config)
        assert env.resolve("ex:a") == "http://example.org/a"
        assert env.resolve("name") == "http://xmlns.com/foaf/0.1/name"
        assert env.resolve(":a") == "http://default.org/a"
        assert env.resolve("other") == "http://vocab.org/other"

    def test_configured_prefix_overrides_common(self):
        config = RDFLiteConfig(environment=EnvironmentConfig(prefixes={"schema": "https://schema.org/"}))
        env = RDFEnvironment(config)
        assert env.resolve("schema:name") == "https://schema.org/name"

    def test_counter_strategy(self):
        config = RDFLiteConfig(environment=EnvironmentConfig(id_strategy="counter"))
        env = RDFEnvironment(config)
        assert env.create_named_node("http://example.org/").id == "0"
        assert env.create_named_node("http://example.org/").id == "1"

    def test_is_profile(self, env):
        assert isinstance(env, Profile)

    def test_from_config_file(self, tmp_path):
        path = tmp_path / "rdflite.yaml"
        save_config(RDFLiteConfig(environment=EnvironmentConfig(prefixes={"ex": "http://example.org/"})), path)
        env = RDFEnvironment.from_config_file(path)
        assert env.resolve("ex:a") == "http://example.org/a"


# ========== Node factories ==========

class TestNodeFactories:
    def test_named_node_iri(self, env):
        node = env.create_named_node("http://example.org/")
        assert isinstance(node, NamedNode)
        assert node.nominal_value == "http://example.org/"

    def test_named_node_curie(self, env):
        assert env.create_named_node("ex:foo").nominal_value == "http://example.org/foo"

    def test_named_node_term(self, env):
        assert env.create_named_node("ex").nominal_value == "http://example.org/"

    def test_named_node_rejects_non_string(self, env):
        with pytest.raises(InvalidArgument):
            env.create_named_node(42)

    def test_ids_come_from_generator(self, env):
        assert env.create_named_node("ex:a").id == "id0"
        assert env.create_blank_node().id == "id1"

    def test_blank_node(self, env):
        a = env.create_blank_node()
        b = env.create_blank_node()
        assert isinstance(a, BlankNode)
        assert a != b

    def test_blank_node_label(self, env):
        assert env.create_blank_node("b1").label == "b1"

    def test_literal(self, env):
        assert env.create_literal("chat", language="fr") == Literal("chat", language="fr")
        assert env.create_literal("1", datatype=XSD.integer) == Literal("1", datatype=XSD.integer)
        assert env.create_literal(42) == Literal("42", datatype=XSD.integer)
        assert env.create_literal(Decimal("1.5")) == Literal("1.5", datatype=XSD.decimal)
        assert env.create_literal(True).datatype == XSD.boolean

    def test_literal_with_datatype_node(self, env):
        lit = env.create_literal(5, datatype=NamedNode(XSD.int))
        assert lit.value == "5"
        assert lit.datatype == XSD.int

    def test_triple(self, env):
        t = env.create_triple(env.create_blank_node("b1"), env.create_named_node("ex:p"), env.create_literal("x"))
        assert isinstance(t, Triple)
        assert t.predicate.iri == "http://example.org/p"

    def test_graph(self, env):
        t = env.create_triple(env.create_blank_node("b1"), env.create_named_node("ex:p"), env.create_literal("x"))
        g = env.create_graph([t, t])
        assert isinstance(g, Graph)
        assert len(g) == 1
        assert len(env.create_graph()) == 0


# ========== Actions ==========

class TestTripleAction:
    def test_runs_when_test_passes(self, env):
        seen = []
        action = env.create_action(lambda t: t.object.equals("x"), seen.append)
        hit = Triple(BlankNode("b"), NamedNode("p"), Literal("x"))
        miss = Triple(BlankNode("b"), NamedNode("p"), Literal("y"))

        assert action(hit) is True
        assert action.run(miss) is False
        assert seen == [hit]

    def test_with_for_each(self):
        seen = []
        g = Graph([
            Triple(BlankNode("b"), NamedNode("p"), Literal("x")),
            Triple(BlankNode("b"), NamedNode("p"), Literal("y")),
        ])
        g.for_each(TripleAction(lambda t: t.object.equals("y"), seen.append))
        assert len(seen) == 1

    def test_requires_callables(self):
        with pytest.raises(InvalidArgument):
            TripleAction("test", print)


# ========== Profile factories ==========

class TestProfileFactories:
    def test_profile_copy(self, env):
        profile = env.create_profile()
        assert profile.resolve("ex:a") == "http://example.org/a"
        profile.set_prefix("ex", "http://changed.org/")
        assert env.resolve("ex:a") == "http://example.org/a"

    def test_profile_empty(self, env):
        profile = env.create_profile(empty=True)
        assert len(profile.prefixes) == 0
        assert len(profile.terms) == 0

    def test_prefix_map(self, env):
        pm = env.create_prefix_map()
        assert isinstance(pm, PrefixMap)
        assert pm.has_prefix("ex")
        assert pm is not env.prefixes
        assert len(env.create_prefix_map(empty=True)) == 0

    def test_term_map(self, env):
        tm = env.create_term_map()
        assert isinstance(tm, TermMap)
        assert tm.has_term("ex")
        assert len(env.create_term_map(empty=True)) == 0


# ========== Turtle collaborators ==========

class TestCollaborators:
    def test_reader_uses_config(self):
        config = RDFLiteConfig(reader=ReaderConfig(blank_node_prefix="anon"))
        env = RDFEnvironment(config, id_generator=CounterIdGenerator("n"))
        with env.create_reader() as reader:
            assert isinstance(reader, TurtleReader)
            graph, _ = reader.parse("[] <http://example.org/p> 1 .")
        triple = next(iter(graph))
        assert triple.subject == BlankNode("anon1")
        assert triple.id.startswith("n")

    def test_writer_uses_config(self):
        config = RDFLiteConfig(writer=WriterConfig(abbreviate_literals=False))
        env = RDFEnvironment(config)
        writer = env.create_writer()
        assert isinstance(writer, TurtleWriter)

        g = Graph([Triple(NamedNode("http://example.org/s"), NamedNode("http://example.org/p"), Literal.from_value(1))])
        assert '"1"^^xsd:integer' in writer.serialize(g, env)
