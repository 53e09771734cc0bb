"""
Connector routing module.

Builds the orthogonal segment list for one connector:
- Boundary connectors (left/right/top/bottom) as one stand-off segment
- Node-to-node connectors as one straight segment or a three-segment step
- Back edges routed around the outside of the whole diagram
"""

from typing import List, Optional

from .config import (
    APPROACH_DISTANCE,
    BACK_EDGE_MARGIN,
    CONNECT_OFFSET,
    RAIL_DISTANCE,
    SAME_AXIS_THRESHOLD,
    STAND_OFF_DISTANCE,
)
from .models import Direction, EdgeKind, Node, Point, Segment
from .positioning import CanvasBounds


def distributed_offset(length: float, index: int, total: int) -> float:
    """
    Offset of the ``index``-th of ``total`` anchors along a side of ``length``.

    The side is cut into ``total + 1`` equal parts, so a single anchor lands
    in the middle and any odd count is symmetric around it.
    """
    total = max(1, total)
    index = min(max(0, index), total - 1)
    return length / (total + 1) * (index + 1)


class ConnectorRouter:
    """
    Routes connectors between nodes using axis-aligned segments.

    Attributes:
        stand_off_distance: Length of left/right boundary connectors and the
            gap between back-edge lanes.
        rail_distance: Distance of the shared top/bottom rail from the
            outermost node.
        same_axis_threshold: Vertical delta below which a connect edge is a
            single straight segment.
        connect_offset: How far below the source centre connect edges leave.
        back_edge_margin: How much higher than its source a target must sit
            for a back edge to take the bypass.
        approach_distance: How far above its target a bypass turns in.
    """

    def __init__(
        self,
        stand_off_distance: float = STAND_OFF_DISTANCE,
        rail_distance: float = RAIL_DISTANCE,
        same_axis_threshold: float = SAME_AXIS_THRESHOLD,
        connect_offset: float = CONNECT_OFFSET,
        back_edge_margin: float = BACK_EDGE_MARGIN,
        approach_distance: float = APPROACH_DISTANCE,
    ):
        self.stand_off_distance = stand_off_distance
        self.rail_distance = rail_distance
        self.same_axis_threshold = same_axis_threshold
        self.connect_offset = connect_offset
        self.back_edge_margin = back_edge_margin
        self.approach_distance = approach_distance

    def route(
        self,
        source: Optional[Node],
        target: Optional[Node],
        kind: EdgeKind,
        index_on_side: int = 0,
        total_on_side: int = 1,
        bounds: Optional[CanvasBounds] = None,
        lane: int = 0,
        ceiling: Optional[float] = None,
    ) -> List[Segment]:
        """
        Calculate the segments of one connector.

        Args:
            source: Source node, or None if it could not be resolved.
            target: Target node, or None if it could not be resolved.
            kind: Connector kind.
            index_on_side: Position among connectors sharing the anchor.
            total_on_side: Number of connectors sharing the anchor.
            bounds: Bounding box of all visible nodes, for the shared rails.
            lane: Ordinal of this connector among back edges.
            ceiling: Bottom edge of the nearest node above a back edge's
                target; the bypass turns in below it.

        Returns:
            Ordered list of segments; empty when a node is missing.
        """
        if source is None or target is None:
            return []

        if kind is EdgeKind.LEFT:
            return self._route_left(target, index_on_side, total_on_side)
        if kind is EdgeKind.RIGHT:
            return self._route_right(source, index_on_side, total_on_side)
        if kind is EdgeKind.TOP:
            return self._route_top(target, index_on_side, total_on_side, bounds)
        if kind is EdgeKind.BOTTOM:
            return self._route_bottom(target, index_on_side, total_on_side, bounds)

        if self.is_back_edge(source, target):
            return self._route_around(source, target, bounds, lane, ceiling)
        return self._route_connect(source, target, index_on_side, total_on_side)

    def is_back_edge(self, source: Node, target: Node) -> bool:
        """
        A connect edge runs backwards when the target's layer precedes the
        source's and the target actually sits above the source on the canvas.
        """
        if source.layer is None or target.layer is None:
            return False
        if target.layer >= source.layer:
            return False
        return target.center_y < source.center_y - self.back_edge_margin

    def _route_left(self, target: Node, index: int, total: int) -> List[Segment]:
        """Short boundary connector entering the target's left edge."""
        end_x = target.left
        end_y = target.top + distributed_offset(target.height, index, total)
        start = Point(end_x - self.stand_off_distance, end_y)
        return [Segment(start, Point(end_x, end_y), Direction.RIGHT)]

    def _route_right(self, source: Node, index: int, total: int) -> List[Segment]:
        """Short boundary connector leaving the source's right edge."""
        start_x = source.right
        start_y = source.top + distributed_offset(source.height, index, total)
        end = Point(start_x + self.stand_off_distance, start_y)
        return [Segment(Point(start_x, start_y), end, Direction.RIGHT)]

    def _route_top(
        self, target: Node, index: int, total: int, bounds: Optional[CanvasBounds]
    ) -> List[Segment]:
        """Vertical connector from the shared top rail down to the target."""
        top = bounds.top if bounds is not None else target.top
        x = target.left + distributed_offset(target.width, index, total)
        start = Point(x, top - self.rail_distance)
        return [Segment(start, Point(x, target.top), Direction.DOWN)]

    def _route_bottom(
        self, target: Node, index: int, total: int, bounds: Optional[CanvasBounds]
    ) -> List[Segment]:
        """Vertical connector from the shared bottom rail up to the target."""
        bottom = bounds.bottom if bounds is not None else target.bottom
        x = target.left + distributed_offset(target.width, index, total)
        start = Point(x, bottom + self.rail_distance)
        return [Segment(start, Point(x, target.bottom), Direction.UP)]

    def _route_connect(
        self, source: Node, target: Node, index: int, total: int
    ) -> List[Segment]:
        """
        Node-to-node connector from the source's right edge to the target's
        left edge.

        Nearly aligned anchors get one straight segment, provided the source's
        axis still meets the target's left edge; otherwise the path steps
        across at the horizontal midpoint.
        """
        start_x = source.right
        if total > 1:
            start_y = source.top + distributed_offset(source.height, index, total)
        else:
            # Leave slightly below centre, never outside the source
            start_y = source.center_y + min(self.connect_offset, source.height / 2)
        end_x = target.left
        end_y = target.center_y

        start = Point(start_x, start_y)

        aligned = abs(end_y - start_y) < self.same_axis_threshold
        if aligned and target.top <= start_y <= target.bottom:
            return [Segment.between(start, Point(end_x, start_y))]

        mid_x = (start_x + end_x) / 2
        turn_down = Point(mid_x, start_y)
        turn_in = Point(mid_x, end_y)
        vertical = Direction.DOWN if end_y > start_y else Direction.UP
        return [
            Segment.between(start, turn_down),
            Segment(turn_down, turn_in, vertical),
            Segment.between(turn_in, Point(end_x, end_y)),
        ]

    def _route_around(
        self,
        source: Node,
        target: Node,
        bounds: Optional[CanvasBounds],
        lane: int,
        ceiling: Optional[float] = None,
    ) -> List[Segment]:
        """
        Back edge bypass: out to a side rail beyond every node, up past the
        target, across above it and down into its top centre.

        Each back edge gets its own rail so bypasses never overlap.
        """
        outer = max(source.right, target.right)
        if bounds is not None:
            outer = max(outer, bounds.right)
        rail_x = outer + self.stand_off_distance * (lane + 1)

        start = Point(source.right, source.center_y)
        approach_y = target.top - self.approach_distance
        if ceiling is not None and approach_y <= ceiling < target.top:
            # Turn in halfway through the gap above the target
            approach_y = (ceiling + target.top) / 2
        corner_low = Point(rail_x, start.y)
        corner_high = Point(rail_x, approach_y)
        above_target = Point(target.center_x, approach_y)
        tip = Point(target.center_x, target.top)

        return [
            Segment(start, corner_low, Direction.RIGHT),
            Segment(corner_low, corner_high, Direction.UP),
            Segment(corner_high, above_target, Direction.LEFT),
            Segment(above_target, tip, Direction.DOWN),
        ]
