"""
Anchor side allocation.

Connectors that attach to the same side of the same node are spread evenly
along that side. Groups are keyed by node and connector kind, so a node's
boundary outputs and its node-to-node connectors are spread independently
even though both leave the right edge:

- Fixed-direction connectors (boundary inputs/outputs) keep the order they
  were declared in.
- Node-to-node connectors are sorted by where their far endpoint sits along
  the side, which keeps parallel connectors from crossing.
"""

import dataclasses
from typing import Dict, List, Mapping, Sequence, Tuple

from .models import AnchorKey, Edge, EdgeKind, Node, Side

UNRESOLVED_POSITION = float("-inf")


def anchor_key(edge: Edge) -> AnchorKey:
    """(node id, kind) the edge is distributed under."""
    return (edge.anchor_node, edge.kind)


def far_position(edge: Edge, side: Side, nodes: Mapping[str, Node]) -> float:
    """
    Coordinate of the edge's far endpoint along the anchor side.

    Left and right sides run vertically, so the far node's y is used; top and
    bottom sides use x. Unknown far nodes sort before everything else.
    """
    far = nodes.get(edge.far_node)
    if far is None:
        return UNRESOLVED_POSITION
    if side in (Side.LEFT, Side.RIGHT):
        return far.top
    return far.left


class AnchorAllocator:
    """Groups edges by anchor and assigns ``index_on_side``/``total_on_side``."""

    def group(
        self, edges: Sequence[Edge], nodes: Mapping[str, Node]
    ) -> Dict[AnchorKey, List[Edge]]:
        """
        Group edges by (node, kind) and order each group.

        Args:
            edges: Edges in declaration order.
            nodes: Node registry, read only.

        Returns:
            Mapping of anchor keys (in first-seen order) to ordered edges
            carrying their new indices.
        """
        return {
            key: [edge for _, edge in members]
            for key, members in self._ordered_groups(edges, nodes).items()
        }

    def allocate(
        self, edges: Sequence[Edge], nodes: Mapping[str, Node]
    ) -> List[Edge]:
        """Return the edges in declaration order with anchor indices set."""
        allocated: List[Edge] = list(edges)
        for members in self._ordered_groups(edges, nodes).values():
            for position, edge in members:
                allocated[position] = edge
        return allocated

    def _ordered_groups(
        self, edges: Sequence[Edge], nodes: Mapping[str, Node]
    ) -> Dict[AnchorKey, List[Tuple[int, Edge]]]:
        buckets: Dict[AnchorKey, List[Tuple[int, Edge]]] = {}
        for position, edge in enumerate(edges):
            buckets.setdefault(anchor_key(edge), []).append((position, edge))

        groups: Dict[AnchorKey, List[Tuple[int, Edge]]] = {}
        for key, bucket in buckets.items():
            _, kind = key
            ordered = bucket
            if kind is EdgeKind.CONNECT:
                side = kind.anchor_side
                # sorted() is stable: ties keep declaration order
                ordered = sorted(
                    bucket, key=lambda item: far_position(item[1], side, nodes)
                )
            total = max(1, len(ordered))
            groups[key] = [
                (
                    position,
                    dataclasses.replace(edge, index_on_side=idx, total_on_side=total),
                )
                for idx, (position, edge) in enumerate(ordered)
            ]

        return groups
