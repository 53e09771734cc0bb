"""
PNG preview of a routed diagram.

Draws node outlines, connector paths, arrowheads and labels with Pillow so a
layout pass can be inspected without the editor.
"""

import os
from typing import Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .geometry import arrowhead_points
from .models import Diagram, Point, Shape


class PreviewRenderer:
    """Renders a diagram and its routed connectors as a PNG image."""

    def __init__(
        self,
        scale: int = 2,
        margin: int = 40,
        font_size: int = 11,
        font_path: Optional[str] = None,
        draw_placeholders: bool = True,
    ):
        self.scale = scale
        self.margin = margin
        self.font_size = font_size
        self.font_path = font_path
        self.draw_placeholders = draw_placeholders

        # Colors
        self.bg_color = (255, 255, 255)
        self.node_fill = (255, 255, 255)
        self.node_outline = (0, 0, 0)
        self.placeholder_color = (160, 160, 160)
        self.back_edge_color = (180, 60, 60)
        self.text_color = (0, 0, 0)
        self.line_color = (0, 0, 0)

        self.font = None
        self._origin = Point(0.0, 0.0)

    def _get_font(self) -> ImageFont.ImageFont:
        """Get a font for rendering labels."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale
        candidates = [self.font_path] if self.font_path else []
        candidates += [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        ]
        for path in candidates:
            if path and os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        self.font = ImageFont.load_default()
        return self.font

    def _extent(self, diagram: Diagram, connectors) -> Tuple[Point, Point]:
        """Top-left and bottom-right corners of everything that is drawn."""
        xs: List[float] = []
        ys: List[float] = []
        for node in diagram.nodes.values():
            xs.extend((node.left, node.right))
            ys.extend((node.top, node.bottom))
        for connector in connectors:
            for segment in connector.segments:
                xs.extend((segment.start.x, segment.end.x))
                ys.extend((segment.start.y, segment.end.y))
            if connector.label_anchor is not None:
                xs.append(connector.label_anchor.x)
                ys.append(connector.label_anchor.y)
        if not xs:
            return Point(0.0, 0.0), Point(0.0, 0.0)
        return Point(min(xs), min(ys)), Point(max(xs), max(ys))

    def _to_image(self, point: Point) -> Tuple[float, float]:
        return (
            (point.x - self._origin.x + self.margin) * self.scale,
            (point.y - self._origin.y + self.margin) * self.scale,
        )

    def render(self, diagram: Diagram, result) -> Image.Image:
        """
        Draw the diagram.

        Args:
            diagram: Diagram with final node positions.
            result: RoutingResult from the same pass.

        Returns:
            The rendered image.
        """
        connectors = list(result.connectors)
        low, high = self._extent(diagram, connectors)
        self._origin = low

        width = int((high.x - low.x + 2 * self.margin) * self.scale) + 1
        height = int((high.y - low.y + 2 * self.margin) * self.scale) + 1
        img = Image.new("RGB", (width, height), self.bg_color)
        draw = ImageDraw.Draw(img)

        for node in diagram.nodes.values():
            if node.is_placeholder:
                if self.draw_placeholders:
                    self._draw_marker(draw, node.center)
                continue
            if node.is_zero_size:
                self._draw_marker(draw, node.center)
                continue
            self._draw_node(draw, node)

        for connector in connectors:
            if not connector.is_renderable:
                continue
            color = self.back_edge_color if connector.is_back_edge else self.line_color
            points = [s.start for s in connector.segments]
            points.append(connector.segments[-1].end)
            self._draw_path(draw, points, color)
            self._draw_arrowhead(draw, connector, color)
            if connector.edge.label and connector.label_anchor is not None:
                self._draw_label(draw, connector.label_anchor, connector.edge.label)

        return img

    def save(self, diagram: Diagram, result, output_path: str = "layout.png") -> str:
        """Render the diagram and write it to ``output_path``."""
        img = self.render(diagram, result)
        img.save(output_path, "PNG")
        return output_path

    def _draw_node(self, draw: ImageDraw.ImageDraw, node) -> None:
        line_width = max(1, self.scale)
        box = [
            *self._to_image(Point(node.left, node.top)),
            *self._to_image(Point(node.right, node.bottom)),
        ]
        if node.shape is Shape.ELLIPSE:
            draw.ellipse(
                box, fill=self.node_fill, outline=self.node_outline, width=line_width
            )
        else:
            draw.rectangle(
                box, fill=self.node_fill, outline=self.node_outline, width=line_width
            )

        font = self._get_font()
        bbox = draw.textbbox((0, 0), node.id, font=font)
        cx, cy = self._to_image(node.center)
        draw.text(
            (cx - (bbox[2] - bbox[0]) / 2, cy - (bbox[3] - bbox[1]) / 2),
            node.id,
            fill=self.text_color,
            font=font,
        )

    def _draw_marker(self, draw: ImageDraw.ImageDraw, center: Point) -> None:
        r = 3 * self.scale
        x, y = self._to_image(center)
        draw.ellipse([x - r, y - r, x + r, y + r], fill=self.placeholder_color)

    def _draw_path(
        self, draw: ImageDraw.ImageDraw, points: Iterable[Point], color
    ) -> None:
        coords = [self._to_image(p) for p in points]
        if len(coords) > 1:
            draw.line(coords, fill=color, width=max(1, self.scale), joint="curve")

    def _draw_arrowhead(self, draw: ImageDraw.ImageDraw, connector, color) -> None:
        if connector.arrow_tip is None:
            return
        points = arrowhead_points(connector.arrow_tip, connector.arrow_direction)
        draw.polygon([self._to_image(p) for p in points], fill=color)

    def _draw_label(self, draw: ImageDraw.ImageDraw, anchor: Point, text: str) -> None:
        font = self._get_font()
        bbox = draw.textbbox((0, 0), text, font=font)
        x, y = self._to_image(anchor)
        draw.text(
            (x - (bbox[2] - bbox[0]) / 2, y - (bbox[3] - bbox[1]) / 2),
            text,
            fill=self.text_color,
            font=font,
        )


def render_preview(
    diagram: Diagram, result, output_path: str = "layout.png", **kwargs
) -> str:
    """
    Convenience function to write a PNG preview.

    Args:
        diagram: Diagram with final node positions.
        result: RoutingResult from the same pass.
        output_path: Path to save the PNG file.
        **kwargs: Additional parameters for PreviewRenderer.

    Returns:
        Path to the saved PNG file.
    """
    return PreviewRenderer(**kwargs).save(diagram, result, output_path)
