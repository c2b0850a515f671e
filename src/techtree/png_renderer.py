"""
PNG preview renderer for tech tree diagrams.

Draws a laid-out tree with Pillow: one colored box per node at its computed
position and the routed elbow connectors, faded by their weight.
"""

import os
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .layout import FONT_WIDTH, LayoutResult
from .model import NodeType
from .router import NODE_HEIGHT, Connector

Color = Tuple[int, int, int]

TYPE_COLORS: Dict[NodeType, Color] = {
    NodeType.CORE_TECHNOLOGY: (52, 120, 246),
    NodeType.LONGEVITY_TECH: (142, 68, 173),
    NodeType.GENERAL_IMPROVEMENT: (241, 196, 15),
}


def blend(foreground: Color, background: Color, weight: float) -> Color:
    """Mix two colors, ``weight`` being the share of the foreground."""
    return tuple(
        round(f * weight + b * (1 - weight)) for f, b in zip(foreground, background)
    )


class PNGRenderer:
    """Renders a laid-out tech tree as a PNG image."""

    def __init__(
        self,
        node_height: float = NODE_HEIGHT,
        font_width: float = FONT_WIDTH,
        box_padding: int = 10,
        font_size: int = 12,
        font_path: Optional[str] = None,
        scale: int = 2,
        margin: int = 40,
    ):
        self.node_height = node_height
        self.font_width = font_width
        self.box_padding = box_padding
        self.font_size = font_size
        self.font_path = font_path
        self.scale = scale
        self.margin = margin

        self.bg_color: Color = (24, 26, 33)
        self.text_color: Color = (255, 255, 255)
        self.line_color: Color = (255, 255, 255)
        self.caret_color: Color = (255, 255, 255)

        self.font = None

    def _get_font(self):
        """Get a font for rendering node titles."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale
        font_options = []
        if self.font_path and os.path.exists(self.font_path):
            font_options.append(self.font_path)
        font_options.extend(
            [
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
                "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
                "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            ]
        )

        for path in font_options:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        self.font = ImageFont.load_default()
        return self.font

    def node_width(self, node_id: str) -> float:
        """Box width of a node, matching the width the layout reserves."""
        return len(node_id) * self.font_width + self.box_padding

    def _xy(self, x: float, y: float) -> Tuple[int, int]:
        return (
            round((x + self.margin) * self.scale),
            round((y + self.margin) * self.scale),
        )

    def canvas_size(self, result: LayoutResult) -> Tuple[int, int]:
        """Image size in pixels for a layout."""
        right = max(
            (p.position.left + self.node_width(p.id) for p in result.placements),
            default=0,
        )
        bottom = max(
            (p.position.top + self.node_height for p in result.placements),
            default=0,
        )
        bottom = max(bottom, result.spacer_height)
        return self._xy(right + self.margin, bottom + self.margin)

    def draw(
        self, result: LayoutResult, connectors: Dict[str, List[Connector]]
    ) -> Image.Image:
        """
        Draw the diagram.

        Args:
            result: Layout with node positions
            connectors: Incoming connectors per node id

        Returns:
            The rendered image
        """
        img = Image.new("RGB", self.canvas_size(result), self.bg_color)
        draw = ImageDraw.Draw(img)
        line_width = max(1, self.scale)

        # Connectors first so boxes sit on top of them
        for routes in connectors.values():
            for connector in routes:
                color = blend(self.line_color, self.bg_color, connector.weight)
                for segment in connector.segments:
                    draw.line(
                        [
                            self._xy(segment.x1, segment.y1),
                            self._xy(segment.x2, segment.y2),
                        ],
                        fill=color,
                        width=line_width,
                    )

        font = self._get_font()
        for placement in result.placements:
            top, left = placement.position.top, placement.position.left
            box = [
                self._xy(left, top),
                self._xy(left + self.node_width(placement.id), top + self.node_height),
            ]
            draw.rectangle(box, fill=TYPE_COLORS[placement.node.type])
            draw.text(
                self._xy(left + self.box_padding / 2, top + self.node_height / 3),
                placement.node.title,
                font=font,
                fill=self.text_color,
            )
            for connector in connectors.get(placement.id, []):
                self._draw_caret(draw, left, top + connector.anchor_offset)

        return img

    def _draw_caret(self, draw: ImageDraw.ImageDraw, x: float, y: float) -> None:
        """Small right-pointing triangle at a connector's anchor."""
        size = 5
        draw.polygon(
            [self._xy(x, y - size), self._xy(x + size, y), self._xy(x, y + size)],
            fill=self.caret_color,
        )

    def render(
        self,
        result: LayoutResult,
        connectors: Dict[str, List[Connector]],
        output_path: str = "tree.png",
    ) -> str:
        """
        Render the diagram and save it as a PNG file.

        Returns:
            Path to the saved PNG file
        """
        self.draw(result, connectors).save(output_path, "PNG")
        return output_path
