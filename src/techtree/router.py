"""
Connector routing for tech tree diagrams.

Each relation edge becomes a three-segment elbow:
- horizontal out of the source node
- vertical along a line just left of the target
- horizontal into the target's left border

Incoming connectors are spread vertically so they are centered on the
target node, and long connectors are drawn fainter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from .layout import FONT_WIDTH, ConnectorSource, LayoutResult, NodePlacement

# Rendered height of a node
NODE_HEIGHT = 47
# Height of the inbound marker (caret) drawn on the target's left border
MARKER_HEIGHT = 12
# Distance between the vertical elbow line and the anchor offset
ELBOW_GAP = 35

# (largest distance the weight applies to, weight), checked in order
WEIGHT_STEPS: Tuple[Tuple[float, float], ...] = ((200, 1.0), (400, 0.75), (600, 0.5))
MIN_WEIGHT = 0.25


class SegmentKind(Enum):
    """Role of a segment within an elbow connector."""

    OUT = "out"
    ACROSS = "across"
    IN = "in"


# Staggered reveal per segment kind: (begin, duration) in seconds
REVEAL_TIMINGS: Dict[SegmentKind, Tuple[float, float]] = {
    SegmentKind.OUT: (0.0, 2.0),
    SegmentKind.ACROSS: (2.0, 1.0),
    SegmentKind.IN: (3.0, 0.5),
}


@dataclass(frozen=True)
class Segment:
    """A straight line from (x1, y1) to (x2, y2)."""

    kind: SegmentKind
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def begin(self) -> float:
        return REVEAL_TIMINGS[self.kind][0]

    @property
    def duration(self) -> float:
        return REVEAL_TIMINGS[self.kind][1]

    @property
    def is_horizontal(self) -> bool:
        return self.y1 == self.y2

    @property
    def is_vertical(self) -> bool:
        return self.x1 == self.x2


@dataclass(frozen=True)
class Connector:
    """
    A routed relation edge.

    Attributes:
        source_id: Id of the node the relation points back to.
        target_id: Id of the node declaring the relation.
        anchor_offset: Offset from the target's top where the connector and
            its caret meet the target's left border.
        weight: Opacity between 0.25 and 1.
        segments: Out, across and in segments, in drawing order.
    """

    source_id: str
    target_id: str
    anchor_offset: float
    weight: float
    segments: Tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def waypoints(self) -> List[Tuple[float, float]]:
        """Start point followed by the end point of each segment."""
        if not self.segments:
            return []
        first = self.segments[0]
        return [(first.x1, first.y1)] + [(s.x2, s.y2) for s in self.segments]


def connector_weight(distance: float) -> float:
    """
    Opacity for a connector spanning ``distance`` units vertically.

    Full weight up to 200, then 0.75 up to 400, 0.5 up to 600 and 0.25
    beyond.
    """
    distance = abs(distance)
    for limit, weight in WEIGHT_STEPS:
        if distance <= limit:
            return weight
    return MIN_WEIGHT


class ConnectorRouter:
    """
    Routes incoming connectors for laid-out nodes.

    The router holds configuration only; routing the same placement twice
    yields equal connectors.
    """

    def __init__(
        self,
        node_height: float = NODE_HEIGHT,
        marker_height: float = MARKER_HEIGHT,
        elbow_gap: float = ELBOW_GAP,
        font_width: float = FONT_WIDTH,
    ):
        self.node_height = node_height
        self.marker_height = marker_height
        self.elbow_gap = elbow_gap
        self.font_width = font_width

    def anchor_offsets(self, count: int) -> List[float]:
        """
        Vertical offsets of ``count`` incoming connectors, centered on the node.

        Args:
            count: Number of incoming connectors

        Returns:
            One offset per connector, top to bottom
        """
        if count <= 0:
            return []
        first = (self.node_height - count * self.marker_height) / 2
        return [first + i * self.marker_height for i in range(count)]

    def route(self, placement: NodePlacement) -> List[Connector]:
        """
        Route every incoming connector of one node.

        Args:
            placement: Target node with its position and connector sources

        Returns:
            Connectors in the same order as ``placement.sources``
        """
        offsets = self.anchor_offsets(len(placement.sources))
        return [
            self._route_edge(source, placement, offset)
            for source, offset in zip(placement.sources, offsets)
        ]

    def route_all(self, result: LayoutResult) -> Dict[str, List[Connector]]:
        """
        Route connectors for every node of a layout.

        Returns:
            Mapping of node id to its incoming connectors, in placement
            order. The first placement wins on duplicate ids.
        """
        routes: Dict[str, List[Connector]] = {}
        for placement in result.placements:
            if placement.id not in routes:
                routes[placement.id] = self.route(placement)
        return routes

    def _route_edge(
        self, source: ConnectorSource, placement: NodePlacement, offset: float
    ) -> Connector:
        target = placement.position
        source_y = source.top + offset
        target_y = target.top + offset
        start_x = source.left + len(source.id) * self.font_width
        elbow_x = target.left - (offset + self.elbow_gap)

        segments = (
            Segment(SegmentKind.OUT, start_x, source_y, elbow_x, source_y),
            Segment(SegmentKind.ACROSS, elbow_x, source_y, elbow_x, target_y),
            Segment(SegmentKind.IN, elbow_x, target_y, target.left, target_y),
        )
        return Connector(
            source_id=source.id,
            target_id=placement.id,
            anchor_offset=offset,
            weight=connector_weight(target.top - source.top),
            segments=segments,
        )
