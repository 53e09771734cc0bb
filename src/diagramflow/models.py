"""
Data models for diagram layout and connector routing.

This module contains the dataclasses and enumerations shared by every stage of
the layout pipeline. They describe the diagram registry owned by the editor
session (nodes and edges) and the geometry produced for it (segments and
routed connectors).

Classes:
    Shape: Visible outline of a node.
    EdgeKind: Closed set of connector kinds.
    Side: Side of a node a connector attaches to.
    Direction: Direction tag of a segment or arrowhead.
    Point: Immutable 2D point.
    Node: A diagram node with position, size and shape.
    Edge: A connector between two nodes.
    Segment: One axis-aligned piece of a connector path.
    RoutedConnector: Final geometry for one edge.
    Diagram: Ordered node registry plus edge list.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class DiagramError(ValueError):
    """Raised when a diagram is built with inconsistent content."""


class Shape(Enum):
    """Visible outline of a node."""

    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    PLACEHOLDER = "placeholder"


class Side(Enum):
    """Which side of a node a connector is anchored on."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


class Direction(Enum):
    """Direction a segment travels in."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)


class EdgeKind(Enum):
    """
    Connector kind as declared by the diagram markup.

    LEFT, TOP and BOTTOM are boundary inputs entering the target, RIGHT is a
    boundary output leaving the source, and CONNECT joins two nodes.
    """

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    CONNECT = "connect"

    @classmethod
    def parse(cls, value) -> "EdgeKind":
        """Convert a markup string (case-insensitive) to an EdgeKind."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.CONNECT
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise DiagramError(f"Unknown edge kind: {value!r}") from None

    @property
    def is_fixed(self) -> bool:
        """Fixed-direction kinds represent diagram boundary inputs/outputs."""
        return self is not EdgeKind.CONNECT

    @property
    def anchors_on_target(self) -> bool:
        return self in (EdgeKind.LEFT, EdgeKind.TOP, EdgeKind.BOTTOM)

    @property
    def anchor_side(self) -> Side:
        """Side of the anchor node this kind attaches to."""
        if self is EdgeKind.CONNECT:
            return Side.RIGHT
        return Side(self.value)


@dataclass(frozen=True)
class Point:
    """An immutable point in canvas coordinates."""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class Node:
    """
    A diagram node.

    Attributes:
        id: Unique identifier within the diagram.
        x: Left edge coordinate.
        y: Top edge coordinate.
        width: Node width (0 for junctions and placeholders).
        height: Node height (0 for junctions and placeholders).
        shape: Visible outline used for endpoint clipping.
        layer: Layer index assigned by the layering engine, if any.
    """

    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    shape: Shape = Shape.RECTANGLE
    layer: Optional[int] = None

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    @property
    def is_zero_size(self) -> bool:
        return self.width <= 0 and self.height <= 0

    @property
    def is_placeholder(self) -> bool:
        return self.shape is Shape.PLACEHOLDER

    @property
    def is_junction(self) -> bool:
        """Junctions are zero-size routing hubs that take part in layering."""
        return self.is_zero_size and not self.is_placeholder


@dataclass(frozen=True)
class Edge:
    """
    A connector between two nodes.

    Attributes:
        source: Source node id.
        target: Target node id.
        label: Label text drawn near the connector.
        kind: Connector kind.
        index_on_side: Position among connectors sharing the same anchor.
        total_on_side: Number of connectors sharing the same anchor.
    """

    source: str
    target: str
    label: str = ""
    kind: EdgeKind = EdgeKind.CONNECT
    index_on_side: int = 0
    total_on_side: int = 1

    @property
    def anchor_node(self) -> str:
        """Node whose side this connector is distributed along."""
        return self.target if self.kind.anchors_on_target else self.source

    @property
    def far_node(self) -> str:
        return self.source if self.kind.anchors_on_target else self.target


# Connectors are grouped per node and kind, so boundary outputs never share
# anchor slots with node-to-node flow leaving the same side.
AnchorKey = Tuple[str, EdgeKind]


@dataclass(frozen=True)
class Segment:
    """One axis-aligned piece of a connector path."""

    start: Point
    end: Point
    direction: Direction

    @classmethod
    def between(cls, start: Point, end: Point) -> "Segment":
        """Build a segment whose direction tag follows its dominant axis."""
        dx = end.x - start.x
        dy = end.y - start.y
        if abs(dx) >= abs(dy):
            direction = Direction.RIGHT if dx >= 0 else Direction.LEFT
        else:
            direction = Direction.DOWN if dy > 0 else Direction.UP
        return cls(start, end, direction)

    @property
    def midpoint(self) -> Point:
        return Point(
            (self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2
        )

    @property
    def length(self) -> float:
        return abs(self.end.x - self.start.x) + abs(self.end.y - self.start.y)


@dataclass
class RoutedConnector:
    """
    Geometry produced for one edge by a routing pass.

    Attributes:
        edge: The edge with its anchor indices filled in.
        segments: Ordered path segments (empty when unrenderable).
        arrow_tip: Point the arrowhead sits on.
        arrow_direction: Direction the arrowhead points to.
        label_anchor: Point the label is drawn at.
        is_back_edge: Whether the connector was routed around the diagram.
    """

    edge: Edge
    segments: List[Segment] = field(default_factory=list)
    arrow_tip: Optional[Point] = None
    arrow_direction: Optional[Direction] = None
    label_anchor: Optional[Point] = None
    is_back_edge: bool = False

    @property
    def is_renderable(self) -> bool:
        return bool(self.segments)


@dataclass
class Diagram:
    """
    Node registry and edge list owned by the editor session.

    Nodes are kept in insertion order; every stage of the layout pipeline
    relies on that order for deterministic results.
    """

    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)

    def add_node(
        self,
        node_id: str,
        width: float = 0.0,
        height: float = 0.0,
        shape: Shape = Shape.RECTANGLE,
        x: float = 0.0,
        y: float = 0.0,
    ) -> Node:
        """Register a new node and return it."""
        if node_id in self.nodes:
            raise DiagramError(f"Duplicate node id: {node_id!r}")
        node = Node(id=node_id, x=x, y=y, width=width, height=height, shape=shape)
        self.nodes[node_id] = node
        return node

    def add_edge(
        self, source: str, target: str, label: str = "", kind="connect"
    ) -> Edge:
        """Append an edge. Endpoints may reference nodes not yet registered."""
        edge = Edge(
            source=source, target=target, label=label, kind=EdgeKind.parse(kind)
        )
        self.edges.append(edge)
        return edge

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self.nodes[node_id]
        node.x = x
        node.y = y

    def resize_node(self, node_id: str, width: float, height: float) -> None:
        node = self.nodes[node_id]
        node.width = width
        node.height = height

    def real_nodes(self) -> Iterator[Node]:
        """Nodes with a visible, non-zero size."""
        return (n for n in self.nodes.values() if not n.is_zero_size)

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
