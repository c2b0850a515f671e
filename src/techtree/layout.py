"""
Layout module for tech tree diagrams.

A greedy single pass over the ordered node sequence:
- Starter nodes (no relations) open a new row at the left edge
- Other nodes sit to the right of their primary relation, on its row
- A node landing on an occupied row is pushed down one row at a time

The pass keeps its running state (starter count and placed locations) in a
local accumulator, so the engine can be called repeatedly and concurrently.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .model import GraphModel, Node, derive_id
from .tracer import ALIGNED, COLLISION, DEFAULT, STARTER, LayoutTrace

# Node footprint plus the desired gap between nodes
PIXEL_SPACING = 100
# Rendered width of one character of a node id label
FONT_WIDTH = 10
# Extra height per starter reserved below the diagram
SPACER_PADDING = 0.5


@dataclass(frozen=True)
class Position:
    """Layout-unit pixel position of a node's top-left corner."""

    top: float
    left: float


@dataclass(frozen=True)
class LocationRecord:
    """An already-placed node, as seen by later nodes in the same pass."""

    id: str
    top: float
    left: float


@dataclass(frozen=True)
class ConnectorSource:
    """Position of a node another node relates to; the start of a connector."""

    id: str
    top: float
    left: float


@dataclass(frozen=True)
class NodePlacement:
    """
    A node with its computed position and incoming connector sources.

    Attributes:
        node: The node.
        position: Computed position.
        sources: One entry per relation that matched an earlier node,
            in the order those nodes were placed.
    """

    node: Node
    position: Position
    sources: Tuple[ConnectorSource, ...] = ()

    @property
    def id(self) -> str:
        return self.node.id


@dataclass
class LayoutResult:
    """Result of the layout algorithm."""

    placements: List[NodePlacement] = field(default_factory=list)
    starter_count: int = 0
    spacer_height: float = 0

    def __len__(self) -> int:
        return len(self.placements)

    def __iter__(self):
        return iter(self.placements)

    @property
    def positions(self) -> Dict[str, Position]:
        """Position per node id. Earlier nodes win on duplicate ids."""
        positions: Dict[str, Position] = {}
        for placement in self.placements:
            positions.setdefault(placement.id, placement.position)
        return positions

    def position_of(self, node_id: str) -> Optional[Position]:
        for placement in self.placements:
            if placement.id == node_id:
                return placement.position
        return None

    def placement_of(self, node_id: str) -> Optional[NodePlacement]:
        for placement in self.placements:
            if placement.id == node_id:
                return placement
        return None

    @property
    def width(self) -> float:
        """Largest left coordinate used."""
        return max((p.position.left for p in self.placements), default=0)

    @property
    def height(self) -> float:
        """Largest top coordinate used."""
        return max((p.position.top for p in self.placements), default=0)


@dataclass(frozen=True)
class _LayoutState:
    """Accumulator threaded through the pass."""

    starter_count: int = 0
    records: Tuple[LocationRecord, ...] = ()


class TreeLayout:
    """
    Greedy row/column layout for a mostly tree-shaped tech tree.

    Example:
        >>> layout = TreeLayout()
        >>> result = layout.layout([Node("A"), Node("B", relations=("A",))])
        >>> result.position_of("b")
        Position(top=100, left=110)
    """

    def __init__(
        self,
        pixel_spacing: float = PIXEL_SPACING,
        font_width: float = FONT_WIDTH,
        spacer_padding: float = SPACER_PADDING,
    ):
        self.pixel_spacing = pixel_spacing
        self.font_width = font_width
        self.spacer_padding = spacer_padding

    def layout(
        self,
        nodes: Iterable[Node],
        trace: Optional[LayoutTrace] = None,
    ) -> LayoutResult:
        """
        Compute a position for every node.

        Args:
            nodes: A GraphModel or any ordered iterable of nodes
            trace: Optional trace collecting placement decisions

        Returns:
            LayoutResult with one placement per node, in input order
        """
        if isinstance(nodes, GraphModel):
            nodes = nodes.nodes

        state = _LayoutState()
        placements: List[NodePlacement] = []
        for node in nodes:
            placement, state = self._place(node, state, trace)
            placements.append(placement)

        return LayoutResult(
            placements=placements,
            starter_count=state.starter_count,
            spacer_height=state.starter_count
            * (self.pixel_spacing + self.spacer_padding),
        )

    def _place(
        self,
        node: Node,
        state: _LayoutState,
        trace: Optional[LayoutTrace],
    ) -> Tuple[NodePlacement, _LayoutState]:
        """Place one node and return it with the advanced state."""
        node_id = node.id
        starter_count = state.starter_count
        default = self.pixel_spacing * (starter_count + 1)
        top, left = default, default
        sources: List[ConnectorSource] = []

        if node.is_starter:
            left = 0
            starter_count += 1
            if trace is not None:
                trace.add_decision(node_id, STARTER, top, left, None, starter_count)
        else:
            primary_id = derive_id(node.relations[0])
            relation_ids = [derive_id(relation) for relation in node.relations]
            pushed = False
            moved = False

            for record in state.records:
                if record.id == primary_id:
                    top = record.top
                    left = record.left + (
                        len(record.id) * self.font_width + self.pixel_spacing
                    )
                    moved = True
                    if trace is not None:
                        trace.add_decision(
                            node_id, ALIGNED, top, left, record.id, starter_count
                        )
                elif record.top == top:
                    top += self.pixel_spacing
                    if record.left == left and not pushed:
                        starter_count += 1
                        pushed = True
                    moved = True
                    if trace is not None:
                        trace.add_decision(
                            node_id, COLLISION, top, left, record.id, starter_count
                        )

                # Every relation gets a connector, not just the primary one
                for relation_id in relation_ids:
                    if record.id == relation_id:
                        sources.append(
                            ConnectorSource(record.id, record.top, record.left)
                        )

            if not moved and trace is not None:
                trace.add_decision(node_id, DEFAULT, top, left, None, starter_count)

        placement = NodePlacement(node, Position(top, left), tuple(sources))
        new_state = _LayoutState(
            starter_count=starter_count,
            records=state.records + (LocationRecord(node_id, top, left),),
        )
        return placement, new_state


def compute_layout(nodes: Iterable[Node], **kwargs) -> LayoutResult:
    """
    Convenience function to lay out nodes with default spacing.

    Args:
        nodes: A GraphModel or ordered iterable of nodes
        **kwargs: Passed to TreeLayout

    Returns:
        LayoutResult
    """
    return TreeLayout(**kwargs).layout(nodes)
