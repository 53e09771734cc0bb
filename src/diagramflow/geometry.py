"""
Geometry helpers for connector endpoints.

Implements the boundary clipping used to land connectors exactly on a node's
visible outline:
- Rectangle clipping (exit point nearest the destination)
- Ellipse clipping (quadratic solution of the implicit equation)
- Arrowhead polygons and label anchors for rendering collaborators
"""

import math
from typing import List, Optional, Sequence, Tuple, Union

from .models import Direction, Node, Point, Segment, Shape

# Axis deltas at or below this are treated as parallel to that axis
PARALLEL_EPSILON = 0.01

# Intersections this close to the start of the line are ignored
MIN_T = 0.01


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def clip_rectangle(
    left: float, top: float, width: float, height: float, start: Point, end: Point
) -> Point:
    """
    Find where the line ``start -> end`` crosses a rectangle's boundary.

    Computes the parameter ``t`` at which ``start + t * (end - start)`` meets
    each of the four edges, keeps those in ``(0, 1]`` whose point lies within
    the rectangle, and returns the candidate closest to ``end``.

    Args:
        left: Rectangle left edge.
        top: Rectangle top edge.
        width: Rectangle width.
        height: Rectangle height.
        start: Line start (usually outside the rectangle).
        end: Line end (usually the rectangle's centre).

    Returns:
        The boundary point, or ``end`` if the line never crosses the boundary.
    """
    right = left + width
    bottom = top + height
    dx = end.x - start.x
    dy = end.y - start.y

    # (t, fixed x, fixed y): the crossed edge pins one coordinate exactly
    crossings: List[Tuple[float, Optional[float], Optional[float]]] = []
    if abs(dx) > PARALLEL_EPSILON:
        crossings.append(((left - start.x) / dx, left, None))
        crossings.append(((right - start.x) / dx, right, None))
    if abs(dy) > PARALLEL_EPSILON:
        crossings.append(((top - start.y) / dy, None, top))
        crossings.append(((bottom - start.y) / dy, None, bottom))

    candidates: List[Point] = []
    for t, fixed_x, fixed_y in crossings:
        if MIN_T < t <= 1:
            ix = fixed_x if fixed_x is not None else start.x + dx * t
            iy = fixed_y if fixed_y is not None else start.y + dy * t
            if _contains(left, top, right, bottom, ix, iy):
                candidates.append(Point(ix, iy))

    if not candidates:
        return end

    return min(candidates, key=lambda p: distance(p, end))


def clip_ellipse(
    left: float, top: float, width: float, height: float, start: Point, end: Point
) -> Point:
    """
    Find where the line ``start -> end`` crosses an ellipse inscribed in the
    given bounding box.

    Substitutes the parametric line into ``((x-cx)/rx)^2 + ((y-cy)/ry)^2 = 1``
    and solves the quadratic for ``t``. The root of smaller magnitude is used,
    falling back to the larger root when the smaller one sits at the line's
    origin.

    Returns:
        The boundary point, or ``end`` when the line misses the ellipse or the
        geometry is degenerate.
    """
    rx = width / 2
    ry = height / 2
    if rx <= 0 or ry <= 0:
        return end

    cx = left + rx
    cy = top + ry
    dx = end.x - start.x
    dy = end.y - start.y

    a = (dx * dx) / (rx * rx) + (dy * dy) / (ry * ry)
    if a == 0:
        return end
    b = 2 * ((start.x - cx) * dx / (rx * rx) + (start.y - cy) * dy / (ry * ry))
    c = ((start.x - cx) ** 2) / (rx * rx) + ((start.y - cy) ** 2) / (ry * ry) - 1

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return end

    root = math.sqrt(discriminant)
    t1 = (-b + root) / (2 * a)
    t2 = (-b - root) / (2 * a)
    t = t1 if abs(t1) < abs(t2) else t2
    if t < MIN_T:
        t = max(t1, t2)

    return Point(start.x + dx * t, start.y + dy * t)


def clip(shape: Union[Node, Shape], start: Point, end: Point, bounds=None) -> Point:
    """
    Clip a line against a node's visible outline.

    Args:
        shape: The node to clip against, or a Shape together with ``bounds``.
        start: Line start.
        end: Line end.
        bounds: ``(left, top, width, height)`` when ``shape`` is a Shape.

    Returns:
        Point on the outline (``end`` unchanged for placeholders and
        degenerate cases).
    """
    if isinstance(shape, Node):
        bounds = (shape.x, shape.y, shape.width, shape.height)
        shape = shape.shape
    if bounds is None:
        raise ValueError("bounds are required when clipping against a bare Shape")

    if shape is Shape.ELLIPSE:
        return clip_ellipse(*bounds, start, end)
    if shape is Shape.RECTANGLE:
        return clip_rectangle(*bounds, start, end)
    return end


def arrowhead_points(
    tip: Point, direction: Optional[Direction], length: float = 10.0, half_width=5.0
) -> Tuple[Point, Point, Point]:
    """Polygon points of an arrowhead pointing in ``direction`` at ``tip``."""
    if direction is Direction.LEFT:
        return (
            tip,
            Point(tip.x + length, tip.y - half_width),
            Point(tip.x + length, tip.y + half_width),
        )
    if direction is Direction.DOWN:
        return (
            tip,
            Point(tip.x - half_width, tip.y - length),
            Point(tip.x + half_width, tip.y - length),
        )
    if direction is Direction.UP:
        return (
            tip,
            Point(tip.x - half_width, tip.y + length),
            Point(tip.x + half_width, tip.y + length),
        )
    return (
        tip,
        Point(tip.x - length, tip.y - half_width),
        Point(tip.x - length, tip.y + half_width),
    )


def label_anchor(segments: Sequence[Segment], offset: float) -> Optional[Point]:
    """
    Label position for a path: midpoint of its middle segment, moved
    ``offset`` away from the segment (up for horizontal, right for vertical).
    """
    if not segments:
        return None

    middle = segments[len(segments) // 2]
    mid = middle.midpoint
    if middle.direction.is_horizontal:
        return Point(mid.x, mid.y - offset)
    return Point(mid.x + offset, mid.y)


def _contains(
    left: float, top: float, right: float, bottom: float, x: float, y: float
) -> bool:
    eps = 1e-9
    return left - eps <= x <= right + eps and top - eps <= y <= bottom + eps
