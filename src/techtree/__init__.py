"""
techtree - Layout, connector routing and editing for tech tree diagrams.

Turns an ordered list of nodes with backward relations into node positions
and elbow connectors, and applies edits that keep relations consistent.

Example:
    >>> from techtree import TechTreeGenerator, TreeEditor, load_nodes
    >>> model = load_nodes([
    ...     {"title": "A", "type": "core-technology", "relations": []},
    ...     {"title": "B", "type": "longevity-tech", "relations": ["A"]},
    ... ])
    >>> plan = TechTreeGenerator().generate(model)
    >>> plan.item_for("b").position
    Position(top=100, left=110)

Debug Mode Example:
    >>> generator = TechTreeGenerator()
    >>> plan = generator.generate(model, debug=True)
    >>> print(generator.get_trace().summary())
"""

from .data import ParseError, load_file, load_nodes, loads
from .editor import (
    EditError,
    EditRecord,
    InternalInvariantError,
    NoActiveEditError,
    NodeNotFoundError,
    TreeEditor,
)
from .export import TreeExporter
from .generator import RenderItem, RenderPlan, TechTreeGenerator
from .layout import (
    ConnectorSource,
    LayoutResult,
    NodePlacement,
    Position,
    TreeLayout,
    compute_layout,
)
from .logging_config import setup_logging
from .model import (
    GraphModel,
    Node,
    NodeType,
    TechTreeError,
    ValidationError,
    ValidationReport,
    derive_id,
)
from .png_renderer import PNGRenderer
from .router import Connector, ConnectorRouter, Segment, SegmentKind, connector_weight
from .tracer import LayoutTrace, PlacementDecision

__version__ = "0.1.0"

__all__ = [
    # Main API
    "TechTreeGenerator",
    "RenderPlan",
    "RenderItem",
    # Model
    "GraphModel",
    "Node",
    "NodeType",
    "ValidationReport",
    "derive_id",
    # Data
    "load_nodes",
    "loads",
    "load_file",
    "TreeExporter",
    # Layout
    "TreeLayout",
    "LayoutResult",
    "NodePlacement",
    "ConnectorSource",
    "Position",
    "compute_layout",
    # Router
    "ConnectorRouter",
    "Connector",
    "Segment",
    "SegmentKind",
    "connector_weight",
    # Editing
    "TreeEditor",
    "EditRecord",
    # Errors
    "TechTreeError",
    "ValidationError",
    "ParseError",
    "EditError",
    "NodeNotFoundError",
    "NoActiveEditError",
    "InternalInvariantError",
    # Rendering / debug
    "PNGRenderer",
    "LayoutTrace",
    "PlacementDecision",
    "setup_logging",
]
