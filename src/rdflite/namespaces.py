"""
Prefix and term maps for CURIE and IRI resolution.

Both maps are bijective: every prefix (or term) is bound to at most one
IRI and every IRI to at most one prefix (or term). Binding an already
bound key or IRI evicts the previous binding on that side.
"""

from typing import Iterable, Iterator, Optional, Union

from rdflite.terms import Literal, NamedNode, RDFNode


# RDFa 1.1 initial context plus a few widely used vocabularies
COMMON_PREFIXES = {
    "owl": "http://www.w3.org/2002/07/owl#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfa": "http://www.w3.org/ns/rdfa#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xhv": "http://www.w3.org/1999/xhtml/vocab#",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "dc": "http://purl.org/dc/terms/",
    "dc11": "http://purl.org/dc/elements/1.1/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "schema": "http://schema.org/",
    "prov": "http://www.w3.org/ns/prov#",
    "void": "http://rdfs.org/ns/void#",
}


class BijectiveMap:
    """
    A 1-to-1 mapping between string keys and string values.

    Example:
        m = BijectiveMap()
        m.set("a", "x")
        m.set("b", "x")    # evicts a -> x
        m.has_key("a")     # False
    """

    def __init__(self, entries: Iterable[tuple[str, str]] = ()):
        self._forward: dict[str, str] = {}
        self._backward: dict[str, str] = {}
        for key, value in entries:
            self.set(key, value)

    def set(self, key: str, value: str) -> None:
        old_value = self._forward.pop(key, None)
        if old_value is not None:
            del self._backward[old_value]
        old_key = self._backward.pop(value, None)
        if old_key is not None:
            del self._forward[old_key]
        self._forward[key] = value
        self._backward[value] = key

    def has_key(self, key: str) -> bool:
        return key in self._forward

    def has_value(self, value: str) -> bool:
        return value in self._backward

    def has_either(self, key: str, value: str) -> bool:
        return key in self._forward or value in self._backward

    def value_for(self, key: str) -> Optional[str]:
        return self._forward.get(key)

    def key_for(self, value: str) -> Optional[str]:
        return self._backward.get(value)

    def remove_key(self, key: str) -> None:
        value = self._forward.pop(key, None)
        if value is not None:
            del self._backward[value]

    def keys(self) -> Iterator[str]:
        return iter(list(self._forward))

    def values(self) -> Iterator[str]:
        return iter(list(self._forward.values()))

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._forward.items()))

    def __len__(self) -> int:
        return len(self._forward)


class _IRIMap:
    """Shared behaviour of PrefixMap and TermMap."""

    def __init__(self, entries: Iterable[tuple[str, str]] = ()):
        self._map = BijectiveMap()
        for key, iri in entries:
            self.set(key, iri)

    def set(self, key: str, iri: str) -> "_IRIMap":
        """Bind ``key`` to ``iri``, evicting earlier bindings of either."""
        self._map.set(key, iri)
        return self

    def remove(self, key: str) -> None:
        self._map.remove_key(key)

    def has_iri(self, iri: str) -> bool:
        return self._map.has_value(iri)

    def add_all(
        self,
        entries: Union["_IRIMap", Iterable[tuple[str, str]]],
        override: bool = False,
    ) -> "_IRIMap":
        """
        Import entries from another map (or any iterable of pairs).

        Args:
            entries: Source of (key, iri) pairs
            override: Replace conflicting bindings instead of skipping them
        """
        for key, iri in list(entries):
            if override or not self._map.has_either(key, iri):
                self.set(key, iri)
        return self

    def iris(self) -> Iterator[str]:
        return self._map.values()

    def entries(self) -> Iterator[tuple[str, str]]:
        return self._map.items()

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return self.entries()

    def __len__(self) -> int:
        return len(self._map)

    @property
    def size(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._map.items())!r})"


class PrefixMap(_IRIMap):
    """Maps CURIE prefixes to namespace IRIs and back."""

    def has_prefix(self, prefix: str) -> bool:
        return self._map.has_key(prefix)

    def has_namespace(self, iri: str) -> bool:
        return self._map.has_value(iri)

    def prefixes(self) -> Iterator[str]:
        return self._map.keys()

    def set_default(self, iri: str) -> "PrefixMap":
        """Bind the empty prefix, used by CURIEs such as ``:name``."""
        return self.set("", iri)

    def resolve(self, curie: str) -> Optional[str]:
        """
        Expand a CURIE to an IRI.

        Returns:
            The IRI, or None if the token has no known prefix
        """
        prefix, sep, local = curie.partition(":")
        if not sep:
            return None
        namespace = self._map.value_for(prefix)
        if namespace is None:
            return None
        return namespace + local

    def shrink(self, iri: str) -> str:
        """
        Compact an IRI to a CURIE using the longest matching namespace.

        Returns:
            The CURIE, or the IRI itself if no namespace matches
        """
        best: Optional[tuple[str, str]] = None
        for prefix, namespace in self._map.items():
            if iri.startswith(namespace) and (best is None or len(namespace) > len(best[1])):
                best = (prefix, namespace)
        if best is None:
            return iri
        prefix, namespace = best
        return f"{prefix}:{iri[len(namespace):]}"

    def clone(self) -> "PrefixMap":
        return PrefixMap(self.entries())


class TermMap(_IRIMap):
    """Maps bare terms to IRIs and back, with an optional default vocabulary."""

    def __init__(self, entries: Iterable[tuple[str, str]] = ()):
        super().__init__(entries)
        self.default: Optional[str] = None

    def has_term(self, term: str) -> bool:
        return self._map.has_key(term)

    def terms(self) -> Iterator[str]:
        return self._map.keys()

    def set_default(self, iri: Optional[str]) -> "TermMap":
        """Vocabulary prefixed to terms that have no binding of their own."""
        self.default = iri
        return self

    def resolve(self, term: str) -> Optional[str]:
        iri = self._map.value_for(term)
        if iri is not None:
            return iri
        if self.default is not None:
            return self.default + term
        return None

    def shrink(self, iri: str) -> str:
        term = self._map.key_for(iri)
        return term if term is not None else iri

    def clone(self) -> "TermMap":
        copy = TermMap(self.entries())
        copy.default = self.default
        return copy


class Profile:
    """
    Resolves CURIEs and terms through a PrefixMap and a TermMap.

    Tokens containing ``:`` are treated as CURIEs, everything else as a
    bare term.
    """

    def __init__(
        self,
        prefixes: Optional[PrefixMap] = None,
        terms: Optional[TermMap] = None,
    ):
        self.prefixes = prefixes if prefixes is not None else PrefixMap()
        self.terms = terms if terms is not None else TermMap()

    def resolve(self, token: str) -> Optional[str]:
        if ":" in token:
            return self.prefixes.resolve(token)
        return self.terms.resolve(token)

    def set_default_vocabulary(self, iri: Optional[str]) -> None:
        self.terms.set_default(iri)

    def set_default_prefix(self, iri: str) -> None:
        self.prefixes.set_default(iri)

    def set_term(self, term: str, iri: str) -> None:
        self.terms.set(term, iri)

    def set_prefix(self, prefix: str, iri: str) -> None:
        self.prefixes.set(prefix, iri)

    def import_profile(self, profile: "Profile", override: bool = False) -> "Profile":
        """Merge another profile's prefixes, terms and default vocabulary."""
        self.prefixes.add_all(profile.prefixes, override)
        self.terms.add_all(profile.terms, override)
        if profile.terms.default is not None and (override or self.terms.default is None):
            self.terms.default = profile.terms.default
        return self

    def node_to_string(self, node: RDFNode) -> str:
        """Shortest textual form of a node this profile can produce."""
        if isinstance(node, NamedNode):
            return self.prefixes.shrink(node.iri)
        if isinstance(node, Literal):
            return self.terms.shrink(node.value)
        return node.nominal_value

    def clone(self) -> "Profile":
        return Profile(self.prefixes.clone(), self.terms.clone())
