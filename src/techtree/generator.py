"""
Main render-plan generator.

Combines layout and connector routing into the data a renderer draws:
every node with its position and incoming connectors, plus the height of
the spacer reserved below the diagram.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .layout import FONT_WIDTH, PIXEL_SPACING, SPACER_PADDING, Position, TreeLayout
from .model import GraphModel, Node
from .router import ELBOW_GAP, MARKER_HEIGHT, NODE_HEIGHT, Connector, ConnectorRouter
from .tracer import LayoutTrace


@dataclass(frozen=True)
class RenderItem:
    """A node to draw, where to draw it, and its incoming connectors."""

    node: Node
    position: Position
    connectors: List[Connector] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.node.id


@dataclass
class RenderPlan:
    """Everything a renderer needs for one render cycle."""

    items: List[RenderItem] = field(default_factory=list)
    spacer_height: float = 0
    starter_count: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[RenderItem]:
        return iter(self.items)

    def item_for(self, node_id: str) -> Optional[RenderItem]:
        for item in self.items:
            if item.id == node_id:
                return item
        return None


class TechTreeGenerator:
    """
    Generate render plans for tech tree models.

    Example:
        >>> generator = TechTreeGenerator()
        >>> plan = generator.generate(model)
        >>> for item in plan:
        ...     print(item.node.title, item.position)
    """

    def __init__(
        self,
        pixel_spacing: float = PIXEL_SPACING,
        font_width: float = FONT_WIDTH,
        node_height: float = NODE_HEIGHT,
        marker_height: float = MARKER_HEIGHT,
        elbow_gap: float = ELBOW_GAP,
        spacer_padding: float = SPACER_PADDING,
    ):
        """
        Initialize the generator.

        Args:
            pixel_spacing: Node footprint plus gap; one row/column step
            font_width: Rendered width of one id character
            node_height: Rendered height of a node
            marker_height: Height of the inbound caret
            elbow_gap: Distance of the vertical connector line from the anchor
            spacer_padding: Extra spacer height per starter node
        """
        for name, value in (
            ("pixel_spacing", pixel_spacing),
            ("font_width", font_width),
            ("node_height", node_height),
            ("marker_height", marker_height),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if elbow_gap < 0 or spacer_padding < 0:
            raise ValueError("elbow_gap and spacer_padding must not be negative")

        self.layout_engine = TreeLayout(
            pixel_spacing=pixel_spacing,
            font_width=font_width,
            spacer_padding=spacer_padding,
        )
        self.router = ConnectorRouter(
            node_height=node_height,
            marker_height=marker_height,
            elbow_gap=elbow_gap,
            font_width=font_width,
        )
        self._trace: Optional[LayoutTrace] = None

    def generate(self, model: GraphModel, debug: bool = False) -> RenderPlan:
        """
        Lay out a model and route its connectors.

        Args:
            model: The model to render
            debug: Capture a LayoutTrace, available from get_trace()

        Returns:
            RenderPlan with one item per node, in model order
        """
        trace = LayoutTrace() if debug else None
        self._trace = trace

        result = self.layout_engine.layout(model, trace=trace)
        if trace is not None:
            trace.add_stage(
                "layout",
                {
                    "nodes": len(result),
                    "starter_count": result.starter_count,
                    "spacer_height": result.spacer_height,
                },
            )

        items = [
            RenderItem(placement.node, placement.position, self.router.route(placement))
            for placement in result.placements
        ]
        if trace is not None:
            trace.add_stage(
                "routing",
                {"connectors": sum(len(item.connectors) for item in items)},
            )

        return RenderPlan(
            items=items,
            spacer_height=result.spacer_height,
            starter_count=result.starter_count,
        )

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last generate() call made with debug=True."""
        return self._trace
