"""Tests for PrefixMap, TermMap and Profile."""
import pytest

from rdflite.namespaces import BijectiveMap, PrefixMap, Profile, TermMap
from rdflite.terms import BlankNode, Literal, NamedNode


ENTRIES = [
    ("ex", "http://example.org/"),
    ("foo", "http://foo.de/"),
    ("bar", "http://bar.com#"),
]


@pytest.fixture
def pm():
    return PrefixMap(ENTRIES)


@pytest.fixture
def tm():
    return TermMap(ENTRIES)


@pytest.fixture
def profile():
    return Profile(PrefixMap(ENTRIES), TermMap(ENTRIES))


# ========== BijectiveMap Tests ==========

class TestBijectiveMap:
    def test_evicts_both_sides(self):
        m = BijectiveMap([("a", "x"), ("b", "y")])
        m.set("a", "y")
        assert m.value_for("a") == "y"
        assert m.key_for("y") == "a"
        assert not m.has_key("b")
        assert not m.has_value("x")
        assert len(m) == 1

    def test_remove_key(self):
        m = BijectiveMap([("a", "x")])
        m.remove_key("a")
        m.remove_key("missing")
        assert len(m) == 0
        assert not m.has_value("x")


# ========== PrefixMap Tests ==========

class TestPrefixMap:
    def test_set(self, pm):
        assert pm.has_prefix("ex")
        assert pm.has_prefix("foo")
        assert pm.has_prefix("bar")
        assert pm.has_iri("http://example.org/")
        assert pm.has_namespace("http://bar.com#")
        assert pm.size == 3
        assert len(pm) == 3

    def test_set_overrides(self, pm):
        pm.set("foo", "https://foo.de/")
        assert not pm.has_iri("http://foo.de/")
        assert pm.has_iri("https://foo.de/")

        pm.set("emp", "http://example.org/")
        assert not pm.has_prefix("ex")
        assert pm.has_prefix("emp")

    def test_remove(self, pm):
        pm.remove("ex")
        assert not pm.has_prefix("ex")
        assert not pm.has_iri("http://example.org/")

    def test_resolve(self, pm):
        assert pm.resolve("foo:bar") == "http://foo.de/bar"
        assert pm.resolve("bar:foo") == "http://bar.com#foo"

    def test_resolve_unknown(self, pm):
        assert pm.resolve("baz:x") is None
        assert pm.resolve("noprefix") is None

    def test_resolve_default(self, pm):
        pm.set_default("http://codelottery.eu#")
        assert pm.resolve(":world") == "http://codelottery.eu#world"

    def test_shrink(self, pm):
        assert pm.shrink("http://foo.de/bar") == "foo:bar"
        assert pm.shrink("http://bar.com#foo") == "bar:foo"
        assert pm.shrink("http://other.org/x") == "http://other.org/x"

    def test_shrink_default(self, pm):
        pm.set_default("http://codelottery.eu#")
        assert pm.shrink("http://codelottery.eu#world") == ":world"

    def test_shrink_longest_namespace(self, pm):
        pm.set("deep", "http://example.org/deep/")
        assert pm.shrink("http://example.org/deep/x") == "deep:x"
        assert pm.shrink("http://example.org/x") == "ex:x"

    def test_add_all_keeps_existing(self, pm):
        pm.add_all([("foo", "https://foo.de/"), ("emp", "http://example.org/")])
        assert not pm.has_iri("https://foo.de/")
        assert not pm.has_prefix("emp")

    def test_add_all_override(self, pm):
        pm.add_all([("foo", "https://foo.de/"), ("emp", "http://example.org/")], override=True)
        assert pm.has_iri("https://foo.de/")
        assert pm.has_prefix("emp")

    def test_add_all_from_map(self, pm):
        other = PrefixMap([("new", "http://new.org/")])
        pm.add_all(other)
        assert pm.has_prefix("new")

    def test_prefixes(self, pm):
        assert sorted(pm.prefixes()) == ["bar", "ex", "foo"]

    def test_iris(self, pm):
        assert sorted(pm.iris()) == ["http://bar.com#", "http://example.org/", "http://foo.de/"]

    def test_entries(self, pm):
        assert sorted(pm.entries()) == sorted(ENTRIES)
        assert sorted(pm) == sorted(ENTRIES)

    def test_clone(self, pm):
        copy = pm.clone()
        assert copy is not pm
        assert copy.has_prefix("foo")
        assert copy.has_iri("http://example.org/")

        copy.set("foo", "https://foo.de/")
        assert pm.resolve("foo:x") == "http://foo.de/x"


# ========== TermMap Tests ==========

class TestTermMap:
    def test_set(self, tm):
        assert tm.has_term("ex")
        assert tm.has_term("foo")
        assert tm.has_iri("http://bar.com#")

    def test_set_overrides(self, tm):
        tm.set("foo", "https://foo.de/")
        assert not tm.has_iri("http://foo.de/")
        assert tm.has_iri("https://foo.de/")

        tm.set("emp", "http://example.org/")
        assert not tm.has_term("ex")
        assert tm.has_term("emp")

    def test_remove(self, tm):
        tm.remove("ex")
        assert not tm.has_term("ex")
        assert not tm.has_iri("http://example.org/")

    def test_resolve(self, tm):
        assert tm.resolve("foo") == "http://foo.de/"
        assert tm.resolve("bar") == "http://bar.com#"
        assert tm.resolve("unknown") is None

    def test_resolve_default(self, tm):
        tm.set_default("http://codelottery.eu#")
        assert tm.resolve("world") == "http://codelottery.eu#world"
        assert tm.resolve("foo") == "http://foo.de/"

    def test_shrink(self, tm):
        assert tm.shrink("http://foo.de/") == "foo"
        assert tm.shrink("http://bar.com#") == "bar"
        assert tm.shrink("http://foo.de/x") == "http://foo.de/x"

    def test_add_all(self, tm):
        tm.add_all([("foo", "https://foo.de/"), ("emp", "http://example.org/")])
        assert not tm.has_iri("https://foo.de/")
        assert not tm.has_term("emp")

        tm.add_all([("foo", "https://foo.de/"), ("emp", "http://example.org/")], override=True)
        assert tm.has_iri("https://foo.de/")
        assert tm.has_term("emp")

    def test_terms(self, tm):
        assert sorted(tm.terms()) == ["bar", "ex", "foo"]

    def test_clone_copies_default(self, tm):
        tm.set_default("http://codelottery.eu#")
        copy = tm.clone()
        assert copy.resolve("world") == "http://codelottery.eu#world"
        copy.set_default(None)
        assert tm.default == "http://codelottery.eu#"


# ========== Profile Tests ==========

class TestProfile:
    def test_resolve_curie(self, profile):
        assert profile.resolve("foo:bar") == "http://foo.de/bar"
        assert profile.resolve("bar:foo") == "http://bar.com#foo"

    def test_resolve_default_prefix(self, profile):
        profile.set_default_prefix("http://codelottery.eu#")
        assert profile.resolve(":world") == "http://codelottery.eu#world"

    def test_resolve_term(self, profile):
        assert profile.resolve("foo") == "http://foo.de/"
        assert profile.resolve("bar") == "http://bar.com#"

    def test_resolve_default_vocabulary(self, profile):
        profile.set_default_vocabulary("http://codelottery.eu#")
        assert profile.resolve("world") == "http://codelottery.eu#world"

    def test_set_prefix_and_term(self):
        profile = Profile()
        profile.set_prefix("ex", "http://example.org/")
        profile.set_term("name", "http://xmlns.com/foaf/0.1/name")
        assert profile.resolve("ex:a") == "http://example.org/a"
        assert profile.resolve("name") == "http://xmlns.com/foaf/0.1/name"

    def test_node_to_string_named_node(self, profile):
        assert profile.node_to_string(NamedNode("http://example.org/test")) == "ex:test"

    def test_node_to_string_literal(self, profile):
        assert profile.node_to_string(Literal("http://example.org/")) == "ex"

    def test_node_to_string_fallback(self, profile):
        node = BlankNode("http://example.org/test")
        assert profile.node_to_string(node) == "http://example.org/test"

    def test_import_profile(self, profile):
        other = Profile()
        other.set_prefix("foo", "https://foo.de/")
        other.set_prefix("new", "http://new.org/")
        other.set_default_vocabulary("http://vocab.org/")

        profile.import_profile(other)
        assert profile.resolve("foo:x") == "http://foo.de/x"
        assert profile.resolve("new:x") == "http://new.org/x"
        assert profile.resolve("thing") == "http://vocab.org/thing"

    def test_import_profile_override(self, profile):
        other = Profile()
        other.set_prefix("foo", "https://foo.de/")
        profile.import_profile(other, override=True)
        assert profile.resolve("foo:x") == "https://foo.de/x"

    def test_clone(self, profile):
        copy = profile.clone()
        copy.set_prefix("foo", "https://foo.de/")
        assert profile.resolve("foo:x") == "http://foo.de/x"
        assert copy.resolve("foo:x") == "https://foo.de/x"
