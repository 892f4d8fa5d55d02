"""
Traversal result shared by BFS and DFS.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pathrank.graph.model import Edge, Path


@dataclass(frozen=True)
class TraversalResult:
    """
    Outcome of exploring a graph from one start node.

    Attributes:
        start_id: Node the traversal began from
        order: Node ids in visit order (start first)
        distances: Hop distance (BFS) or discovery depth (DFS) per node
        parents: Parent id per visited node (None for the start)
        parent_edges: Edge used to reach each non-start node
    """

    start_id: str
    order: tuple[str, ...] = ()
    distances: dict[str, int] = field(default_factory=dict)
    parents: dict[str, str | None] = field(default_factory=dict)
    parent_edges: dict[str, Edge] = field(default_factory=dict)

    @property
    def visited(self) -> set[str]:
        return set(self.order)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.distances

    def path_to(self, node_id: str) -> Path | None:
        """Walk parent pointers back to the start, or None if unvisited."""
        if node_id not in self.parents:
            return None

        node_ids: list[str] = []
        edges: list[Edge] = []
        current: str | None = node_id
        while current is not None:
            node_ids.append(current)
            if current in self.parent_edges:
                edges.append(self.parent_edges[current])
            current = self.parents[current]

        return Path(tuple(reversed(node_ids)), tuple(reversed(edges)))
