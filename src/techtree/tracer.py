"""
Debug tracing for the tech tree layout.

When debug mode is enabled the generator records why every node ended up
where it did. This is useful for:
1. Understanding surprising placements (why did this node move down?)
2. Writing targeted tests against individual layout decisions

Usage:
    >>> generator = TechTreeGenerator()
    >>> plan = generator.generate(model, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Placement reasons
STARTER = "starter"
ALIGNED = "aligned"
COLLISION = "collision"
DEFAULT = "default"


@dataclass
class PlacementDecision:
    """
    Record of a single step taken while placing a node.

    A node gets one decision per alignment or collision encountered during
    the scan, plus a final ``starter`` or ``default`` record when nothing
    else applied.

    Attributes:
        node_id: Derived id of the node being placed
        reason: One of ``starter``, ``aligned``, ``collision``, ``default``
        top: Candidate top after this step
        left: Candidate left after this step
        against: Id of the already-placed node that caused the step, if any
        starter_count: Running starter count after this step
    """

    node_id: str
    reason: str
    top: float
    left: float
    against: Optional[str] = None
    starter_count: int = 0

    def __str__(self) -> str:
        text = f"{self.node_id}: {self.reason} -> (top={self.top}, left={self.left})"
        if self.against:
            text += f" against {self.against}"
        return text


@dataclass
class PipelineStage:
    """
    Snapshot of data at a pipeline stage ("layout", "routing").

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of one layout and routing pass.

    Attributes:
        stages: Pipeline stages in the order they ran
        decisions: Every placement decision in the order it was taken
    """

    stages: List[PipelineStage] = field(default_factory=list)
    decisions: List[PlacementDecision] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        self.stages.append(PipelineStage(name, data.copy()))

    def add_decision(
        self,
        node_id: str,
        reason: str,
        top: float,
        left: float,
        against: Optional[str] = None,
        starter_count: int = 0,
    ) -> None:
        self.decisions.append(
            PlacementDecision(node_id, reason, top, left, against, starter_count)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def decisions_for(self, node_id: str) -> List[PlacementDecision]:
        return [d for d in self.decisions if d.node_id == node_id]

    def get_collisions(self) -> List[PlacementDecision]:
        """All decisions where a node was pushed down by an occupied row."""
        return [d for d in self.decisions if d.reason == COLLISION]

    def summary(self) -> str:
        """Human-readable overview of the pass."""
        node_ids = []
        for decision in self.decisions:
            if decision.node_id not in node_ids:
                node_ids.append(decision.node_id)

        lines = [
            "=== Layout Trace Summary ===",
            f"Stages: {', '.join(stage.name for stage in self.stages)}",
            f"Nodes placed: {len(node_ids)}",
            f"Collisions: {len(self.get_collisions())}",
            "",
        ]
        for decision in self.decisions:
            lines.append(f"  {decision}")
        return "\n".join(lines)

    def clear(self) -> None:
        self.stages.clear()
        self.decisions.clear()
