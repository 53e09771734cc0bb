"""
Position calculation for layered diagrams.

This module turns the layer assignment into canvas coordinates:
- Layers are stacked along the vertical axis at a fixed spacing
- Siblings are laid out left-to-right and each layer is centred on a shared
  baseline, so layers of different widths stay aligned
- Junctions (zero-size routing hubs) are centred under their predecessors

The CoordinatePlanner is the only layout stage that writes node positions.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .config import BASE_OFFSET, BASELINE, LAYER_SPACING, SIBLING_SPACING
from .layout import Layer
from .models import Node, Point


@dataclass(frozen=True)
class CanvasBounds:
    """Bounding box of the visible nodes of a diagram."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2


class CoordinatePlanner:
    """
    Calculates node positions from layers.

    Attributes:
        base_offset: Y coordinate of the first layer.
        layer_spacing: Distance between consecutive layers.
        sibling_spacing: Gap between nodes of the same layer.
        baseline: X coordinate every layer is centred on.
    """

    def __init__(
        self,
        base_offset: float = BASE_OFFSET,
        layer_spacing: float = LAYER_SPACING,
        sibling_spacing: float = SIBLING_SPACING,
        baseline: float = BASELINE,
    ):
        self.base_offset = base_offset
        self.layer_spacing = layer_spacing
        self.sibling_spacing = sibling_spacing
        self.baseline = baseline

    def place(
        self,
        layers: List[Layer],
        nodes: Mapping[str, Node],
        edges: Iterable[Tuple[str, str]] = (),
    ) -> Dict[str, Point]:
        """
        Assign positions to every node that appears in ``layers``.

        Args:
            layers: Ordered layers of node ids.
            nodes: Node registry; positions and layer indices are written back.
            edges: Forward (source, target) pairs used to centre junctions.

        Returns:
            Dictionary mapping node ids to their new top-left position.
        """
        positions: Dict[str, Point] = {}

        for layer_idx, layer in enumerate(layers):
            y = self.base_offset + layer_idx * self.layer_spacing

            widths = [nodes[node_id].width for node_id in layer]
            if widths:
                total = sum(widths) + self.sibling_spacing * (len(widths) - 1)
            else:
                total = 0.0

            # Center this layer on the shared baseline
            current_x = self.baseline - total / 2
            for node_id, width in zip(layer, widths):
                node = nodes[node_id]
                node.x = current_x
                node.y = y
                node.layer = layer_idx
                positions[node_id] = Point(current_x, y)
                current_x += width + self.sibling_spacing

        self._center_junctions(layers, nodes, edges, positions)
        return positions

    def _center_junctions(
        self,
        layers: List[Layer],
        nodes: Mapping[str, Node],
        edges: Iterable[Tuple[str, str]],
        positions: Dict[str, Point],
    ) -> None:
        """
        Move each junction to the mean centre x of its direct predecessors.

        Junctions are visited in layer order, so a junction fed by another
        junction sees its predecessor already centred.
        """
        predecessors: Dict[str, List[str]] = {}
        for source, target in edges:
            if source != target:
                predecessors.setdefault(target, []).append(source)

        for layer in layers:
            for node_id in layer:
                node = nodes[node_id]
                if not node.is_junction:
                    continue
                sources = [s for s in predecessors.get(node_id, []) if s in positions]
                if not sources:
                    continue
                center = sum(nodes[s].center_x for s in sources) / len(sources)
                node.x = center
                positions[node_id] = Point(center, node.y)


def canvas_bounds(nodes: Iterable[Node]) -> Optional[CanvasBounds]:
    """
    Bounding box of the visible (non-zero-size) nodes.

    Returns:
        CanvasBounds, or None when no visible node exists.
    """
    visible = [node for node in nodes if not node.is_zero_size]
    if not visible:
        return None

    return CanvasBounds(
        left=min(node.left for node in visible),
        top=min(node.top for node in visible),
        right=max(node.right for node in visible),
        bottom=max(node.bottom for node in visible),
    )
