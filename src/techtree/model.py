"""
Graph model for tech tree diagrams.

The model is an ordered sequence of labeled nodes. Each node refers to the
nodes it follows through ``relations``, a list of *titles* (not ids). The
first relation is the primary one and drives placement in the layout.

Order matters: it decides where new nodes are inserted and the order in
which the layout engine scans already-placed nodes for collisions.

Classes:
    NodeType: Visual classification of a node.
    Node: A single immutable node.
    GraphModel: Immutable ordered sequence of nodes.
    ValidationReport: Structural problems found by GraphModel.validate().
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import networkx as nx

ID_SEPARATOR = "-"

_WHITESPACE = re.compile(r"\s")


class TechTreeError(Exception):
    """Base class for all techtree errors."""

    pass


class ValidationError(TechTreeError, ValueError):
    """Raised when a node or model fails validation."""

    pass


def derive_id(title: str) -> str:
    """
    Derive the lookup id of a node from its title.

    Every whitespace character is replaced by ``-`` and the result is
    lowercased, so ``"Gene Therapy"`` becomes ``"gene-therapy"``.
    """
    return _WHITESPACE.sub(ID_SEPARATOR, title).lower()


class NodeType(Enum):
    """Visual classification of a node. Has no effect on layout."""

    CORE_TECHNOLOGY = "core-technology"
    LONGEVITY_TECH = "longevity-tech"
    GENERAL_IMPROVEMENT = "general-improvement"

    @property
    def label(self) -> str:
        """Display label, e.g. ``"Core Technology"``."""
        return self.value.replace("-", " ").title()

    @classmethod
    def parse(cls, value: Union["NodeType", str]) -> "NodeType":
        """
        Parse a node type from an enum member, its value or a display label.

        Args:
            value: ``NodeType``, ``"longevity-tech"`` or ``"Longevity Tech"``.

        Returns:
            The matching NodeType.

        Raises:
            ValidationError: If the value names no known type.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValidationError(f"Node type must be a string, got {value!r}")
        normalized = _WHITESPACE.sub(ID_SEPARATOR, value.strip()).lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValidationError(f"Unknown node type: {value!r}")


@dataclass(frozen=True)
class Node:
    """
    A node of the tech tree.

    Attributes:
        title: Display text, also the key other nodes use to refer to it.
        type: Visual classification.
        relations: Titles of the nodes this one follows. The first entry is
            the primary relation.
    """

    title: str
    type: NodeType = NodeType.CORE_TECHNOLOGY
    relations: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable of titles; store immutably.
        object.__setattr__(self, "relations", tuple(self.relations))
        object.__setattr__(self, "type", NodeType.parse(self.type))

    @property
    def id(self) -> str:
        return derive_id(self.title)

    @property
    def primary_relation(self) -> Optional[str]:
        return self.relations[0] if self.relations else None

    @property
    def is_starter(self) -> bool:
        """True when the node has no backward relations."""
        return not self.relations

    @property
    def relations_text(self) -> str:
        """Relations as edited in a form field: ``"A, B"``."""
        return ", ".join(self.relations)

    def with_relations(self, relations: Iterable[str]) -> "Node":
        return replace(self, relations=tuple(relations))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation."""
        return {
            "title": self.title,
            "type": self.type.value,
            "relations": list(self.relations),
        }


@dataclass
class ValidationReport:
    """
    Structural problems found in a model.

    Dangling relations are reported as warnings: the layout tolerates them
    and simply draws no connector. Duplicate ids, self references and cycles
    are errors.

    Attributes:
        duplicate_ids: Ids shared by more than one node, in sequence order.
        self_references: Titles of nodes listing themselves as a relation.
        dangling: (title, missing relation) pairs.
        cycles: Each cycle as a list of node ids.
    """

    duplicate_ids: List[str] = field(default_factory=list)
    self_references: List[str] = field(default_factory=list)
    dangling: List[Tuple[str, str]] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.duplicate_ids or self.self_references or self.cycles)

    def errors(self) -> List[str]:
        messages = [f"Duplicate node id: {node_id}" for node_id in self.duplicate_ids]
        messages.extend(
            f"Node '{title}' lists itself as a relation"
            for title in self.self_references
        )
        messages.extend(f"Cycle: {' -> '.join(cycle)}" for cycle in self.cycles)
        return messages

    def warnings(self) -> List[str]:
        return [
            f"Node '{title}' refers to missing node '{relation}'"
            for title, relation in self.dangling
        ]

    def raise_for_errors(self) -> None:
        """Raise ValidationError listing every error, if there are any."""
        if self.has_errors:
            raise ValidationError("; ".join(self.errors()))


class GraphModel:
    """
    Immutable ordered sequence of nodes.

    Every "mutating" method returns a new GraphModel and leaves the original
    untouched, so an earlier model can always be kept as the previous state.

    Example:
        >>> model = GraphModel([Node("A"), Node("B", relations=("A",))])
        >>> model = model.insert(1, Node("C", relations=("A",)))
        >>> [node.title for node in model]
        ['A', 'C', 'B']
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        self._nodes: Tuple[Node, ...] = tuple(nodes)

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphModel):
            return NotImplemented
        return self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return f"GraphModel({[node.title for node in self._nodes]!r})"

    # Lookups: first match in sequence order wins

    def titles(self) -> List[str]:
        return [node.title for node in self._nodes]

    def index_of_title(self, title: str) -> Optional[int]:
        for index, node in enumerate(self._nodes):
            if node.title == title:
                return index
        return None

    def index_of_id(self, node_id: str) -> Optional[int]:
        for index, node in enumerate(self._nodes):
            if node.id == node_id:
                return index
        return None

    def find_by_title(self, title: str) -> Optional[Node]:
        index = self.index_of_title(title)
        return None if index is None else self._nodes[index]

    def find_by_id(self, node_id: str) -> Optional[Node]:
        index = self.index_of_id(node_id)
        return None if index is None else self._nodes[index]

    # Updates

    def insert(self, index: int, node: Node) -> "GraphModel":
        nodes = list(self._nodes)
        nodes.insert(index, node)
        return GraphModel(nodes)

    def replace_at(self, index: int, node: Node) -> "GraphModel":
        nodes = list(self._nodes)
        nodes[index] = node
        return GraphModel(nodes)

    def remove_at(self, index: int) -> "GraphModel":
        return GraphModel(n for i, n in enumerate(self._nodes) if i != index)

    def without_title(self, title: str) -> "GraphModel":
        """Drop every node with this exact title."""
        return GraphModel(node for node in self._nodes if node.title != title)

    def without_id(self, node_id: str) -> "GraphModel":
        """Drop every node whose derived id matches."""
        return GraphModel(node for node in self._nodes if node.id != node_id)

    def rename_relations(
        self, old_title: str, new_title: str, skip_index: Optional[int] = None
    ) -> "GraphModel":
        """
        Rewrite relation entries equal to ``old_title`` into ``new_title``.

        Entries keep their position in each relation list, so a renamed
        primary relation stays primary.

        Args:
            old_title: Title being replaced.
            new_title: Replacement title.
            skip_index: Index of a node to leave untouched.
        """
        nodes = []
        for index, node in enumerate(self._nodes):
            if index != skip_index and old_title in node.relations:
                node = node.with_relations(
                    new_title if relation == old_title else relation
                    for relation in node.relations
                )
            nodes.append(node)
        return GraphModel(nodes)

    # Export / analysis

    def to_records(self) -> List[Dict[str, Any]]:
        """Ordered, JSON-compatible list of node records."""
        return [node.to_dict() for node in self._nodes]

    def to_networkx(self) -> nx.DiGraph:
        """
        Build a directed graph with an edge relation -> node for each relation
        that resolves to a node. Nodes are keyed by derived id; the first node
        with a given id wins.
        """
        graph = nx.DiGraph()
        for node in self._nodes:
            if node.id not in graph:
                graph.add_node(node.id, title=node.title, type=node.type.value)
        for node in self._nodes:
            for relation in node.relations:
                relation_id = derive_id(relation)
                if relation_id in graph:
                    graph.add_edge(relation_id, node.id)
        return graph

    def validate(self) -> ValidationReport:
        """Check the model for duplicate ids, self references, dangling
        relations and cycles."""
        report = ValidationReport()

        seen = set()
        for node in self._nodes:
            if node.id in seen and node.id not in report.duplicate_ids:
                report.duplicate_ids.append(node.id)
            seen.add(node.id)

        for node in self._nodes:
            relation_ids = [derive_id(relation) for relation in node.relations]
            if node.id in relation_ids:
                report.self_references.append(node.title)
            for relation, relation_id in zip(node.relations, relation_ids):
                if relation_id not in seen:
                    report.dangling.append((node.title, relation))

        graph = self.to_networkx()
        graph.remove_edges_from(list(nx.selfloop_edges(graph)))
        if not nx.is_directed_acyclic_graph(graph):
            report.cycles = [sorted(cycle) for cycle in nx.simple_cycles(graph)]

        return report
