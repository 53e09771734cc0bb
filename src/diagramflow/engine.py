"""
Main layout engine module.

Combines layering, placement, placeholder resolution, anchor allocation,
routing and clipping into the passes the editor runs:

- ``layout`` when a diagram is loaded (layers and node coordinates)
- ``route`` after every node move or resize (connector geometry only)
- ``recompute`` for both at once
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .anchors import AnchorAllocator
from .config import LayoutConfig
from .geometry import clip, label_anchor
from .layout import LayeringEngine, LayeringResult
from .models import Diagram, Edge, EdgeKind, Node, Point, RoutedConnector, Segment
from .placeholders import PlaceholderResolver
from .positioning import CoordinatePlanner, canvas_bounds
from .router import ConnectorRouter
from .tracer import LayoutTrace, RouteDecision

logger = logging.getLogger(__name__)


@dataclass
class RoutingResult:
    """
    Result of a routing pass.

    Attributes:
        connectors: One RoutedConnector per diagram edge, in edge order.
        skipped: Edges that could not be rendered.
        unresolved: Referenced node ids that are neither registered nor
            external anchors.
        node_positions: Final top-left position of every node.
        layering: Layering result when the pass also ran the layout.
    """

    connectors: List[RoutedConnector] = field(default_factory=list)
    skipped: List[Edge] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    node_positions: Dict[str, Point] = field(default_factory=dict)
    layering: Optional[LayeringResult] = None

    def get(self, source: str, target: str) -> Optional[RoutedConnector]:
        """First connector between two nodes, if any."""
        for connector in self.connectors:
            if connector.edge.source == source and connector.edge.target == target:
                return connector
        return None

    @property
    def back_edges(self) -> List[RoutedConnector]:
        return [c for c in self.connectors if c.is_back_edge]


class DiagramEngine:
    """
    Lay out diagrams and route their connectors.

    Example:
        >>> diagram = Diagram()
        >>> diagram.add_node("A", 120, 60)
        >>> diagram.add_node("B", 120, 60)
        >>> diagram.add_edge("A", "B", "data")
        >>> engine = DiagramEngine(layerSpacing=150)
        >>> result = engine.recompute(diagram)
        >>> result.get("A", "B").segments
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        debug: bool = False,
        **options: Any,
    ):
        """
        Initialize the engine.

        Args:
            config: Base configuration (module defaults when omitted).
            debug: Record a LayoutTrace of every pass.
            **options: Option overrides, camelCase or snake_case.
        """
        base = config if config is not None else LayoutConfig()
        self.config = base.merged(**options) if options else base
        self.debug = debug
        self._trace: Optional[LayoutTrace] = None

        cfg = self.config
        self.layering = LayeringEngine(break_cycles=cfg.break_cycles)
        self.planner = CoordinatePlanner(
            base_offset=cfg.base_offset,
            layer_spacing=cfg.layer_spacing,
            sibling_spacing=cfg.sibling_spacing,
            baseline=cfg.baseline,
        )
        self.placeholders = PlaceholderResolver(
            prefix=cfg.external_prefix, offset=cfg.placeholder_offset
        )
        self.allocator = AnchorAllocator()
        self.router = ConnectorRouter(
            stand_off_distance=cfg.stand_off_distance,
            rail_distance=cfg.rail_distance,
            same_axis_threshold=cfg.same_axis_threshold,
            connect_offset=cfg.connect_offset,
            back_edge_margin=cfg.back_edge_margin,
            approach_distance=cfg.approach_distance,
        )

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last pass, or None when debug mode is off."""
        return self._trace

    def layout(self, diagram: Diagram) -> LayeringResult:
        """Assign layers and coordinates to every internal node."""
        self._start_trace()
        return self._layout(diagram)

    def route(self, diagram: Diagram) -> RoutingResult:
        """Rebuild all connector geometry from the current node positions."""
        self._start_trace()
        return self._route(diagram)

    def recompute(self, diagram: Diagram) -> RoutingResult:
        """Full pass: layout followed by routing."""
        self._start_trace()
        layering = self._layout(diagram)
        result = self._route(diagram)
        result.layering = layering
        return result

    def _start_trace(self) -> None:
        self._trace = LayoutTrace() if self.debug else None

    def _layout(self, diagram: Diagram) -> LayeringResult:
        layering = self.layering.layer(diagram.nodes, diagram.edges)
        self._add_stage(
            "layering",
            {
                "layers": layering.layers,
                "back_edges": sorted(layering.back_edges),
                "overflow": layering.overflow,
                "has_cycles": layering.has_cycles,
            },
        )

        forward = [e for e in layering.edges if e not in layering.back_edges]
        positions = self.planner.place(layering.layers, diagram.nodes, forward)
        self._add_stage(
            "placement",
            {node_id: p.as_tuple() for node_id, p in positions.items()},
        )
        return layering

    def _route(self, diagram: Diagram) -> RoutingResult:
        result = RoutingResult()

        known = set(diagram.nodes)
        result.unresolved = self.placeholders.resolve(diagram)
        self._add_stage(
            "placeholders",
            {
                "created": [n for n in diagram.nodes if n not in known],
                "unresolved": result.unresolved,
            },
        )

        bounds = canvas_bounds(diagram.nodes.values())
        edges = self.allocator.allocate(diagram.edges, diagram.nodes)
        self._add_stage(
            "allocation",
            {
                f"{e.source}->{e.target}": f"{e.index_on_side + 1}/{e.total_on_side}"
                for e in edges
            },
        )

        lane = 0
        for edge in edges:
            source = diagram.get_node(edge.source)
            target = diagram.get_node(edge.target)

            if source is None or target is None:
                logger.debug(
                    "Skipping edge %s -> %s: unknown node", edge.source, edge.target
                )
                result.connectors.append(RoutedConnector(edge=edge))
                result.skipped.append(edge)
                self._add_decision(edge, "skipped", 0)
                continue

            is_back = edge.kind is EdgeKind.CONNECT and self.router.is_back_edge(
                source, target
            )
            ceiling = None
            if is_back:
                ceiling = _ceiling_above(diagram.nodes.values(), target)
            segments = self.router.route(
                source,
                target,
                edge.kind,
                edge.index_on_side,
                edge.total_on_side,
                bounds=bounds,
                lane=lane if is_back else 0,
                ceiling=ceiling,
            )
            if is_back:
                lane += 1
                logger.debug(
                    "Routing back edge %s -> %s around the diagram",
                    edge.source,
                    edge.target,
                )

            segments = self._clip_endpoints(segments, source, target, edge.kind)
            last = segments[-1]
            result.connectors.append(
                RoutedConnector(
                    edge=edge,
                    segments=segments,
                    arrow_tip=last.end,
                    arrow_direction=last.direction,
                    label_anchor=label_anchor(segments, self.config.label_offset),
                    is_back_edge=is_back,
                )
            )
            mode = self._mode(edge, segments, is_back)
            self._add_decision(edge, mode, len(segments))

        result.node_positions = {
            node_id: Point(node.x, node.y) for node_id, node in diagram.nodes.items()
        }
        self._add_stage(
            "routing",
            {
                "routed": len(result.connectors) - len(result.skipped),
                "skipped": [f"{e.source}->{e.target}" for e in result.skipped],
                "back_edges": len(result.back_edges),
            },
        )
        return result

    def _clip_endpoints(
        self, segments: List[Segment], source: Node, target: Node, kind: EdgeKind
    ) -> List[Segment]:
        """
        Land the path exactly on the visible outline of its nodes.

        The final segment is clipped against the target for every kind that
        enters a node; the first segment is clipped against the source for
        connectors leaving one. A line that misses the outline keeps its
        rectangular anchor.
        """
        segments = list(segments)

        if kind is not EdgeKind.RIGHT:
            last = segments[-1]
            inner = _toward_center(last, last.end, target)
            end = clip(target, last.start, inner)
            if end != inner:
                segments[-1] = Segment(last.start, end, last.direction)

        if kind in (EdgeKind.RIGHT, EdgeKind.CONNECT):
            first = segments[0]
            inner = _toward_center(first, first.start, source)
            start = clip(source, first.end, inner)
            if start != inner:
                segments[0] = Segment(start, first.end, first.direction)

        return segments

    @staticmethod
    def _mode(edge: Edge, segments: List[Segment], is_back: bool) -> str:
        if is_back:
            return "bypass"
        if edge.kind.is_fixed:
            return "boundary"
        return "straight" if len(segments) == 1 else "step"

    def _add_stage(self, name: str, data: Dict[str, Any]) -> None:
        if self._trace is not None:
            self._trace.add_stage(name, data)

    def _add_decision(self, edge: Edge, mode: str, count: int) -> None:
        if self._trace is not None:
            self._trace.add_decision(
                RouteDecision(
                    source=edge.source,
                    target=edge.target,
                    kind=edge.kind.value,
                    mode=mode,
                    segments=count,
                    index_on_side=edge.index_on_side,
                    total_on_side=edge.total_on_side,
                )
            )


def _toward_center(segment: Segment, anchor: Point, node: Node) -> Point:
    """Project ``anchor`` along the segment's axis onto the node's centre line."""
    if segment.direction.is_horizontal:
        return Point(node.center_x, anchor.y)
    return Point(anchor.x, node.center_y)


def _ceiling_above(nodes: Iterable[Node], target: Node) -> Optional[float]:
    """Bottom edge of the visible node closest above ``target``, if any."""
    bottoms = [
        node.bottom
        for node in nodes
        if node is not target
        and not node.is_zero_size
        and node.bottom <= target.top
    ]
    return max(bottoms, default=None)
