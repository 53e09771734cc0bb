"""
diagramflow - Layout and connector routing for layered diagrams

Assigns nodes to layers, places them on a canvas and routes orthogonal
connectors between them, including boundary inputs/outputs, back edges and
external anchors.

Example:
    >>> from diagramflow import Diagram, DiagramEngine
    >>> diagram = Diagram()
    >>> diagram.add_node("A", 120, 60)
    >>> diagram.add_node("B", 120, 60)
    >>> diagram.add_edge("A", "B", "request")
    >>> result = DiagramEngine().recompute(diagram)
    >>> result.get("A", "B").segments

Debug Mode Example:
    >>> engine = DiagramEngine(debug=True)
    >>> engine.recompute(diagram)
    >>> print(engine.get_trace().summary())
"""

import logging

from .anchors import AnchorAllocator
from .config import ConfigError, LayoutConfig
from .engine import DiagramEngine, RoutingResult
from .geometry import arrowhead_points, clip, clip_ellipse, clip_rectangle
from .layout import LayeringEngine, LayeringResult
from .models import (
    Diagram,
    DiagramError,
    Direction,
    Edge,
    EdgeKind,
    Node,
    Point,
    RoutedConnector,
    Segment,
    Shape,
    Side,
)
from .placeholders import PlaceholderResolver
from .positioning import CanvasBounds, CoordinatePlanner, canvas_bounds
from .preview import PreviewRenderer, render_preview
from .router import ConnectorRouter, distributed_offset
from .tracer import LayoutTrace, PipelineStage, RouteDecision

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Main API
    "DiagramEngine",
    "RoutingResult",
    "LayoutConfig",
    "ConfigError",
    # Models
    "Diagram",
    "DiagramError",
    "Node",
    "Edge",
    "EdgeKind",
    "Shape",
    "Side",
    "Direction",
    "Point",
    "Segment",
    "RoutedConnector",
    # Layout
    "LayeringEngine",
    "LayeringResult",
    "CoordinatePlanner",
    "CanvasBounds",
    "canvas_bounds",
    # Routing
    "AnchorAllocator",
    "ConnectorRouter",
    "distributed_offset",
    "PlaceholderResolver",
    # Geometry
    "clip",
    "clip_rectangle",
    "clip_ellipse",
    "arrowhead_points",
    # Preview
    "PreviewRenderer",
    "render_preview",
    # Debug/Tracing
    "LayoutTrace",
    "RouteDecision",
    "PipelineStage",
]
