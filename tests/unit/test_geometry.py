"""Unit tests for the geometry module."""

import pytest

from diagramflow.geometry import (
    arrowhead_points,
    clip,
    clip_ellipse,
    clip_rectangle,
    distance,
    label_anchor,
)
from diagramflow.models import Direction, Node, Point, Segment, Shape

# Rectangle and ellipse bounding box used throughout: (0, 0) to (100, 50)
BOX = (0, 0, 100, 50)
CENTER = Point(50, 25)


class TestClipRectangle:
    """Tests for rectangle boundary clipping."""

    def test_horizontal_line_hits_left_edge(self):
        assert clip_rectangle(*BOX, Point(-50, 25), CENTER) == Point(0, 25)

    def test_diagonal_line_hits_right_edge(self):
        result = clip_rectangle(*BOX, Point(200, 40), CENTER)
        assert result.x == 100
        assert result.y == pytest.approx(30)

    def test_vertical_line_hits_top_edge(self):
        assert clip_rectangle(*BOX, Point(50, -100), CENTER) == Point(50, 0)

    @pytest.mark.parametrize(
        "start",
        [
            Point(-30, -30),
            Point(130, -10),
            Point(75, 200),
            Point(-400, 40),
            Point(51, -0.5),
            Point(300, 25),
        ],
    )
    def test_result_lies_on_an_edge(self, start):
        result = clip_rectangle(*BOX, start, CENTER)
        on_vertical_edge = result.x in (0, 100) and 0 <= result.y <= 50
        on_horizontal_edge = result.y in (0, 50) and 0 <= result.x <= 100
        assert on_vertical_edge or on_horizontal_edge

    def test_line_missing_rectangle_returns_end(self):
        end = Point(-10, -10)
        assert clip_rectangle(*BOX, Point(-50, -50), end) == end

    def test_zero_length_line_returns_end(self):
        assert clip_rectangle(*BOX, CENTER, CENTER) == CENTER

    def test_nearly_vertical_line_uses_horizontal_edges(self):
        result = clip_rectangle(*BOX, Point(50, -50), Point(50.005, 25))
        assert result.y == 0
        assert result.x == pytest.approx(50, abs=0.01)


class TestClipEllipse:
    """Tests for ellipse boundary clipping."""

    def test_horizontal_line_hits_leftmost_point(self):
        result = clip_ellipse(*BOX, Point(-50, 25), CENTER)
        assert result.x == pytest.approx(0)
        assert result.y == pytest.approx(25)

    def test_vertical_line_hits_top_point(self):
        result = clip_ellipse(*BOX, Point(50, -25), CENTER)
        assert result.x == pytest.approx(50)
        assert result.y == pytest.approx(0)

    def test_result_satisfies_ellipse_equation(self):
        result = clip_ellipse(*BOX, Point(-80, -60), CENTER)
        value = ((result.x - 50) / 50) ** 2 + ((result.y - 25) / 25) ** 2
        assert value == pytest.approx(1)

    def test_line_missing_ellipse_returns_end(self):
        end = Point(-40, -50)
        assert clip_ellipse(*BOX, Point(-50, -50), end) == end

    def test_zero_radius_returns_end(self):
        assert clip_ellipse(0, 0, 0, 50, Point(-10, 0), CENTER) == CENTER

    def test_zero_length_line_returns_end(self):
        assert clip_ellipse(*BOX, CENTER, CENTER) == CENTER

    def test_start_on_boundary_uses_far_root(self):
        result = clip_ellipse(*BOX, Point(0, 25), Point(100, 25))
        assert result.x == pytest.approx(100)
        assert result.y == pytest.approx(25)


class TestClipDispatch:
    """Tests for shape-based clipping."""

    def test_rectangle_node(self):
        node = Node(id="A", x=0, y=0, width=100, height=50)
        assert clip(node, Point(-50, 25), CENTER) == Point(0, 25)

    def test_ellipse_node(self):
        node = Node(id="A", x=0, y=0, width=100, height=50, shape=Shape.ELLIPSE)
        result = clip(node, Point(50, -25), CENTER)
        assert result.y == pytest.approx(0)

    def test_placeholder_returns_end(self):
        node = Node(id="external_in", shape=Shape.PLACEHOLDER)
        assert clip(node, Point(-50, 25), CENTER) == CENTER

    def test_bare_shape_with_bounds(self):
        assert clip(Shape.RECTANGLE, Point(-50, 25), CENTER, BOX) == Point(0, 25)

    def test_bare_shape_without_bounds_raises(self):
        with pytest.raises(ValueError):
            clip(Shape.ELLIPSE, Point(-50, 25), CENTER)


class TestArrowheadPoints:
    def test_right(self):
        tip = Point(100, 50)
        assert arrowhead_points(tip, Direction.RIGHT) == (
            tip,
            Point(90, 45),
            Point(90, 55),
        )

    def test_down(self):
        tip = Point(100, 50)
        assert arrowhead_points(tip, Direction.DOWN) == (
            tip,
            Point(95, 40),
            Point(105, 40),
        )

    def test_missing_direction_points_right(self):
        tip = Point(0, 0)
        assert arrowhead_points(tip, None) == arrowhead_points(tip, Direction.RIGHT)


class TestLabelAnchor:
    """Tests for label placement."""

    def test_empty_path_has_no_anchor(self):
        assert label_anchor([], 20) is None

    def test_horizontal_middle_segment_moves_up(self):
        segments = [Segment(Point(0, 10), Point(100, 10), Direction.RIGHT)]
        assert label_anchor(segments, 20) == Point(50, -10)

    def test_vertical_middle_segment_moves_right(self):
        segments = [
            Segment(Point(0, 0), Point(50, 0), Direction.RIGHT),
            Segment(Point(50, 0), Point(50, 100), Direction.DOWN),
            Segment(Point(50, 100), Point(100, 100), Direction.RIGHT),
        ]
        assert label_anchor(segments, 20) == Point(70, 50)

    def test_even_count_uses_upper_middle(self):
        segments = [
            Segment(Point(0, 0), Point(10, 0), Direction.RIGHT),
            Segment(Point(10, 0), Point(10, -40), Direction.UP),
        ]
        assert label_anchor(segments, 5) == Point(15, -20)


def test_distance():
    assert distance(Point(0, 0), Point(3, 4)) == 5
