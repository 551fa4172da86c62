"""
RDF environment: a Profile with factories for nodes, triples and graphs.

The environment owns the id generator used by everything it creates and
hands its reader/writer configuration to the Turtle collaborators.

Example:
    env = RDFEnvironment()
    env.set_prefix("ex", "http://example.org/")
    node = env.create_named_node("ex:foo")    # <http://example.org/foo>
    graph = env.create_graph([env.create_triple(node, env.create_named_node("rdf:type"), node)])
"""

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from rdflite.config import RDFLiteConfig, load_config
from rdflite.errors import InvalidArgument
from rdflite.formats.turtle import TurtleReader, TurtleWriter
from rdflite.graph import Graph
from rdflite.ids import IdGenerator, make_id_generator
from rdflite.namespaces import COMMON_PREFIXES, PrefixMap, Profile, TermMap
from rdflite.terms import BlankNode, Literal, NamedNode, RDFNode
from rdflite.triple import Triple

logger = logging.getLogger(__name__)


class TripleAction:
    """
    Runs ``action`` on a triple when ``test`` accepts it.

    Instances are callable, so they can be passed to ``Graph.for_each``.
    """

    def __init__(
        self,
        test: Callable[[Triple], bool],
        action: Callable[[Triple], Any],
    ):
        if not callable(test) or not callable(action):
            raise InvalidArgument("TripleAction test and action must be callable")
        self.test = test
        self.action = action

    def run(self, triple: Triple) -> bool:
        """Apply the action if the test passes; return whether it ran."""
        if self.test(triple):
            self.action(triple)
            return True
        return False

    def __call__(self, triple: Triple) -> bool:
        return self.run(triple)


class RDFEnvironment(Profile):
    """
    Factory and resolution context for RDF data.

    Args:
        config: Complete configuration; defaults apply when omitted
        id_generator: Overrides the generator chosen by ``id_strategy``
    """

    def __init__(
        self,
        config: Optional[RDFLiteConfig] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        super().__init__()
        self.config = config or RDFLiteConfig()
        env_config = self.config.environment

        self.id_generator = id_generator or make_id_generator(env_config.id_strategy)

        if env_config.include_common_prefixes:
            self.prefixes.add_all(COMMON_PREFIXES.items())
        self.prefixes.add_all(env_config.prefixes.items(), override=True)
        self.terms.add_all(env_config.terms.items(), override=True)
        if env_config.default_prefix is not None:
            self.set_default_prefix(env_config.default_prefix)
        if env_config.default_vocabulary is not None:
            self.set_default_vocabulary(env_config.default_vocabulary)

        logger.debug(
            f"Created environment with {len(self.prefixes)} prefixes "
            f"and {len(self.terms)} terms"
        )

    @classmethod
    def from_config_file(cls, path: Union[str, Path]) -> "RDFEnvironment":
        """Create an environment from a YAML or JSON configuration file."""
        return cls(load_config(path))

    # -------------------------------------------------------------------------
    # Node factories
    # -------------------------------------------------------------------------

    def create_named_node(self, value: str) -> NamedNode:
        """
        Create a NamedNode from an IRI, a CURIE or a term.

        CURIEs and terms known to this environment are expanded; anything
        else is taken as the IRI itself.
        """
        if not isinstance(value, str):
            raise InvalidArgument(f"Expected a string, got {type(value).__name__}")
        iri = self.resolve(value)
        return NamedNode(iri if iri is not None else value, id=self.id_generator())

    def create_blank_node(self, label: Optional[str] = None) -> BlankNode:
        """Create a BlankNode; a fresh label is generated when none is given."""
        node_id = self.id_generator()
        if label is None:
            label = f"b{node_id}"
        return BlankNode(label, id=node_id)

    def create_literal(
        self,
        value: Any,
        language: Optional[str] = None,
        datatype: Optional[Union[str, NamedNode]] = None,
    ) -> Literal:
        """
        Create a Literal.

        Native values (numbers, booleans, dates) get their XSD datatype
        unless one is given explicitly.
        """
        if isinstance(value, str) or datatype is not None:
            return Literal(str(value), language=language, datatype=datatype, id=self.id_generator())
        return Literal.from_value(value, language=language, id=self.id_generator())

    def create_triple(self, subject: RDFNode, predicate: RDFNode, object: RDFNode) -> Triple:
        return Triple(subject, predicate, object, id=self.id_generator())

    def create_graph(self, triples: Iterable[Triple] = ()) -> Graph:
        return Graph(triples, id=self.id_generator())

    def create_action(
        self,
        test: Callable[[Triple], bool],
        action: Callable[[Triple], Any],
    ) -> TripleAction:
        return TripleAction(test, action)

    # -------------------------------------------------------------------------
    # Profile factories
    # -------------------------------------------------------------------------

    def create_profile(self, empty: bool = False) -> Profile:
        """A fresh Profile, or a copy of this environment's prefixes and terms."""
        if empty:
            return Profile()
        return self.clone()

    def create_prefix_map(self, empty: bool = False) -> PrefixMap:
        if empty:
            return PrefixMap()
        return self.prefixes.clone()

    def create_term_map(self, empty: bool = False) -> TermMap:
        if empty:
            return TermMap()
        return self.terms.clone()

    # -------------------------------------------------------------------------
    # Turtle collaborators
    # -------------------------------------------------------------------------

    def create_reader(self) -> TurtleReader:
        """A TurtleReader sharing this environment's id generator."""
        return TurtleReader(self.config.reader, id_generator=self.id_generator)

    def create_writer(self) -> TurtleWriter:
        return TurtleWriter(self.config.writer)
