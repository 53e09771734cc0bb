"""
Layering module using networkx for the diagram's directed graph.

Uses networkx for:
- Graph representation (insertion-ordered, so results are deterministic)
- In-degree bookkeeping for the breadth-first topological layering
- Back edge detection on cyclic graphs
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Set, Tuple

import networkx as nx

from .models import Edge, Node

logger = logging.getLogger(__name__)

Layer = List[str]


@dataclass
class LayeringResult:
    """Result of the layering algorithm."""

    layers: List[Layer] = field(default_factory=list)
    node_layer: Dict[str, int] = field(default_factory=dict)
    edges: List[Tuple[str, str]] = field(default_factory=list)
    back_edges: Set[Tuple[str, str]] = field(default_factory=set)
    overflow: Layer = field(default_factory=list)
    has_cycles: bool = False

    def layer_of(self, node_id: str) -> int:
        return self.node_layer[node_id]


class LayeringEngine:
    """
    Breadth-first topological layering.

    Zero in-degree nodes form the first layer; every following layer holds the
    nodes whose last incoming edge was consumed by the previous one. Nodes a
    cycle keeps from ever reaching in-degree zero end up in one trailing
    overflow layer.

    With ``break_cycles`` enabled, back edges are found first and left out of
    the layering, so a cycle A -> B -> C -> A still produces [A], [B], [C].
    A self-loop is a cycle of its own: it is reported as a back edge, or sends
    its node to the overflow layer when cycles are not broken.
    """

    def __init__(self, break_cycles: bool = True):
        self.break_cycles = break_cycles
        self.graph: nx.DiGraph = None
        self.back_edges: Set[Tuple[str, str]] = set()

    def layer(
        self, nodes: Mapping[str, Node], edges: Iterable[Edge]
    ) -> LayeringResult:
        """
        Partition the internal nodes of a diagram into ordered layers.

        Args:
            nodes: Node registry in enumeration order.
            edges: Diagram edges; only those joining two internal nodes count.

        Returns:
            LayeringResult with layers, back edges and the overflow layer.
        """
        internal = [
            node_id for node_id, node in nodes.items() if not node.is_placeholder
        ]
        internal_set = set(internal)
        connections = [
            (edge.source, edge.target)
            for edge in edges
            if edge.source in internal_set
            and edge.target in internal_set
        ]

        # Build networkx graph
        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(internal)
        self.graph.add_edges_from(connections)

        has_cycles = not nx.is_directed_acyclic_graph(self.graph)
        self.back_edges = set()

        if has_cycles and self.break_cycles:
            self._break_cycles()

        layers, overflow = self._assign_layers()

        result = LayeringResult()
        result.has_cycles = has_cycles
        result.back_edges = set(self.back_edges)
        result.edges = connections
        result.layers = layers
        result.overflow = overflow

        for layer_idx, layer in enumerate(layers):
            for node_id in layer:
                result.node_layer[node_id] = layer_idx

        if self.back_edges:
            logger.debug("Back edges left out of layering: %s", sorted(self.back_edges))
        if overflow:
            logger.debug("Overflow layer for unresolved cycle: %s", overflow)

        return result

    def _break_cycles(self) -> None:
        """
        Identify back edges with a depth-first search.

        The search starts from nodes without predecessors in enumeration
        order, then from any node not yet visited.
        """
        visited: Set[str] = set()
        on_stack: Set[str] = set()

        def dfs(start: str) -> None:
            # Iterative DFS keeps deep chains clear of the recursion limit
            visited.add(start)
            on_stack.add(start)
            stack = [(start, iter(list(self.graph.successors(start))))]
            while stack:
                node, successors = stack[-1]
                advanced = False
                for successor in successors:
                    if successor not in visited:
                        visited.add(successor)
                        on_stack.add(successor)
                        stack.append(
                            (successor, iter(list(self.graph.successors(successor))))
                        )
                        advanced = True
                        break
                    if successor in on_stack:
                        self.back_edges.add((node, successor))
                if not advanced:
                    on_stack.discard(node)
                    stack.pop()

        # A self-loop does not keep a node from starting the search
        roots = [
            n
            for n in self.graph.nodes()
            if all(p == n for p in self.graph.predecessors(n))
        ]
        for root in roots:
            if root not in visited:
                dfs(root)

        for node in self.graph.nodes():
            if node not in visited:
                dfs(node)

    def _assign_layers(self) -> Tuple[List[Layer], Layer]:
        """Kahn's algorithm processed in breadth-first batches."""
        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)

        in_degree = {node: working_graph.in_degree(node) for node in working_graph}
        queue = deque(node for node in working_graph if in_degree[node] == 0)
        placed: Set[str] = set()
        layers: List[Layer] = []

        while queue:
            current: Layer = []
            for _ in range(len(queue)):
                node = queue.popleft()
                current.append(node)
                placed.add(node)
                for successor in working_graph.successors(node):
                    in_degree[successor] -= 1
                    if in_degree[successor] == 0:
                        queue.append(successor)
            layers.append(current)

        overflow = [node for node in working_graph if node not in placed]
        if overflow:
            layers.append(overflow)

        return layers, overflow
