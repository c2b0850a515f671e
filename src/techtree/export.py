"""
File export functionality for tech tree models.

- JSON (.json) - The ordered node records, as handed to the submission
  workflow that persists the tree
- PNG images - A preview of the laid-out diagram
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .layout import LayoutResult
from .model import GraphModel
from .png_renderer import PNGRenderer
from .router import Connector

logger = logging.getLogger(__name__)


class TreeExporter:
    """
    Exports tech tree models and diagrams.

    Attributes:
        renderer: PNG renderer used by save_png.
    """

    def __init__(self, renderer: Optional[PNGRenderer] = None):
        self.renderer = renderer or PNGRenderer()

    def to_records(self, model: GraphModel) -> List[Dict[str, Any]]:
        """Ordered JSON-compatible node records."""
        return model.to_records()

    def to_json(self, model: GraphModel, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_records(model), indent=indent, ensure_ascii=False)

    def save_json(self, model: GraphModel, filename: str) -> None:
        """
        Save the model to a JSON file.

        Args:
            model: The model to save.
            filename: Output filename (should end in .json).
        """
        output_path = Path(filename)
        output_path.write_text(self.to_json(model) + "\n", encoding="utf-8")
        logger.info("Saved %d nodes to %s", len(model), output_path)

    def save_png(
        self,
        result: LayoutResult,
        connectors: Dict[str, List[Connector]],
        filename: str,
    ) -> None:
        """
        Save a laid-out diagram as a PNG image.

        Args:
            result: Layout with node positions.
            connectors: Incoming connectors per node id.
            filename: Output filename (should end in .png).
        """
        self.renderer.render(result, connectors, str(Path(filename)))
        logger.info("Saved diagram preview to %s", filename)
