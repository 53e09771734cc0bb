"""
External anchor placeholders.

Diagram-boundary inputs and outputs reference ids such as ``external_left``
that are not part of the diagram. Before any routing happens, every such id is
materialised as a zero-size placeholder node positioned just outside the
diagram, so the router only ever reads a complete registry.
"""

import logging
from typing import List, Optional, Set

from .config import EXTERNAL_PREFIX, PLACEHOLDER_OFFSET
from .models import Diagram, Node, Point, Shape
from .positioning import CanvasBounds, canvas_bounds

logger = logging.getLogger(__name__)


class PlaceholderResolver:
    """
    Creates and positions placeholder nodes for external anchors.

    Attributes:
        prefix: Ids starting with this prefix (case-insensitive) are external.
        offset: Distance of placeholders from the diagram's bounding box.
    """

    def __init__(
        self, prefix: str = EXTERNAL_PREFIX, offset: float = PLACEHOLDER_OFFSET
    ):
        self.prefix = prefix.lower()
        self.offset = offset

    def is_external(self, node_id: str) -> bool:
        return node_id.lower().startswith(self.prefix)

    def resolve(self, diagram: Diagram) -> List[str]:
        """
        Materialise placeholders for every external id the edges reference.

        Existing placeholders are kept and repositioned, so repeated passes
        over an unchanged diagram give the same result.

        Args:
            diagram: Diagram whose registry receives the placeholders.

        Returns:
            Ids referenced by edges that are neither registered nor external,
            in first-reference order.
        """
        unresolved: List[str] = []
        seen: Set[str] = set()

        for edge in diagram.edges:
            for node_id in (edge.source, edge.target):
                if node_id in seen:
                    continue
                seen.add(node_id)
                if node_id in diagram.nodes:
                    continue
                if self.is_external(node_id):
                    diagram.nodes[node_id] = Node(
                        id=node_id, shape=Shape.PLACEHOLDER
                    )
                    logger.debug("Created placeholder for %r", node_id)
                else:
                    unresolved.append(node_id)

        bounds = canvas_bounds(diagram.nodes.values())
        for node in diagram.nodes.values():
            if node.is_placeholder:
                position = self.position_for(node.id, bounds)
                node.x = position.x
                node.y = position.y

        return unresolved

    def position_for(self, node_id: str, bounds: Optional[CanvasBounds]) -> Point:
        """
        Where a placeholder sits relative to the diagram.

        The id's wording picks the side: "left", "right", "top" or "bottom";
        anything else goes to the left.
        """
        if bounds is None:
            return Point(0.0, 0.0)

        name = node_id.lower()
        if "left" in name:
            return Point(bounds.left - self.offset, bounds.center_y)
        if "right" in name:
            return Point(bounds.right + self.offset, bounds.center_y)
        if "top" in name:
            return Point(bounds.center_x, bounds.top - self.offset)
        if "bottom" in name:
            return Point(bounds.center_x, bounds.bottom + self.offset)
        return Point(bounds.left - self.offset, bounds.center_y)
