"""Pytest configuration and shared fixtures for diagramflow tests."""

import pytest

from diagramflow import Diagram, DiagramEngine, Node, Shape


@pytest.fixture
def engine():
    """Default DiagramEngine instance."""
    return DiagramEngine()


@pytest.fixture
def debug_engine():
    """DiagramEngine recording a trace."""
    return DiagramEngine(debug=True)


@pytest.fixture
def linear_diagram():
    """A -> B -> C -> D."""
    diagram = Diagram()
    for node_id in "ABCD":
        diagram.add_node(node_id, 120, 60)
    diagram.add_edge("A", "B", "ab")
    diagram.add_edge("B", "C", "bc")
    diagram.add_edge("C", "D", "cd")
    return diagram


@pytest.fixture
def cyclic_diagram():
    """A -> B -> C -> D -> A."""
    diagram = Diagram()
    for node_id in "ABCD":
        diagram.add_node(node_id, 120, 60)
    diagram.add_edge("A", "B")
    diagram.add_edge("B", "C")
    diagram.add_edge("C", "D")
    diagram.add_edge("D", "A", "retry")
    return diagram


@pytest.fixture
def branching_diagram():
    """Start fans out to two processes that join in End."""
    diagram = Diagram()
    diagram.add_node("Start", 100, 50)
    diagram.add_node("Process1", 140, 50)
    diagram.add_node("Process2", 100, 50, shape=Shape.ELLIPSE)
    diagram.add_node("End", 100, 50)
    diagram.add_edge("Start", "Process1")
    diagram.add_edge("Start", "Process2")
    diagram.add_edge("Process1", "End")
    diagram.add_edge("Process2", "End")
    return diagram


@pytest.fixture
def boundary_diagram():
    """One block with boundary inputs and outputs on every side."""
    diagram = Diagram()
    diagram.add_node("Block", 160, 80)
    diagram.add_node("Next", 160, 80)
    diagram.add_edge("external_left", "Block", "input", kind="left")
    diagram.add_edge("external_top", "Block", "control", kind="top")
    diagram.add_edge("external_bottom", "Block", "mechanism", kind="bottom")
    diagram.add_edge("Block", "external_right", "output", kind="right")
    diagram.add_edge("Block", "Next", "flow")
    return diagram


@pytest.fixture
def make_node():
    """Factory for positioned nodes that live outside any diagram."""

    def factory(
        node_id, x, y, width=100, height=50, shape=Shape.RECTANGLE, layer=None
    ):
        return Node(
            id=node_id,
            x=x,
            y=y,
            width=width,
            height=height,
            shape=shape,
            layer=layer,
        )

    return factory
