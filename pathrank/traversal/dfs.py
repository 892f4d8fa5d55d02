"""
Depth-first traversal with an explicit stack.

No recursion, so deep graphs cannot exhaust the interpreter stack.
"""

from __future__ import annotations

from pathrank.graph.model import Edge, ReadableGraph
from pathrank.graph.options import TraversalOptions, traversal_edges
from pathrank.traversal.result import TraversalResult


def dfs(
    graph: ReadableGraph,
    start_id: str,
    max_depth: int | None = None,
    options: TraversalOptions | None = None,
) -> TraversalResult:
    """
    Visit every node reachable from start_id in depth-first preorder.

    Neighbours are explored in the graph's iteration order, so the first
    neighbour's subtree is finished before the second is entered.

    Returns:
        TraversalResult whose distances hold the discovery depth
    """
    if not graph.has_node(start_id):
        return TraversalResult(start_id=start_id)

    if max_depth is None and options is not None:
        max_depth = options.max_depth

    order: list[str] = []
    depths: dict[str, int] = {}
    parents: dict[str, str | None] = {}
    parent_edges: dict[str, Edge] = {}

    # (node, depth, parent, edge used to reach it)
    stack: list[tuple[str, int, str | None, Edge | None]] = [(start_id, 0, None, None)]

    while stack:
        node_id, depth, parent, via = stack.pop()
        if node_id in depths:
            continue

        depths[node_id] = depth
        parents[node_id] = parent
        if via is not None:
            parent_edges[node_id] = via
        order.append(node_id)

        if max_depth is not None and depth >= max_depth:
            continue

        # Reversed so the first neighbour is popped first
        for edge, neighbor in reversed(traversal_edges(graph, node_id, options)):
            if neighbor not in depths:
                stack.append((neighbor, depth + 1, node_id, edge))

    return TraversalResult(
        start_id=start_id,
        order=tuple(order),
        distances=depths,
        parents=parents,
        parent_edges=parent_edges,
    )
