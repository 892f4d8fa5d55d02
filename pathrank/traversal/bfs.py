"""
Breadth-first traversal over a ReadableGraph.
"""

from __future__ import annotations

import logging
from collections import deque

from pathrank.graph.model import Edge, Path, ReadableGraph
from pathrank.graph.options import PathfindingOptions, TraversalOptions, traversal_edges
from pathrank.graph.result import Err, GraphError, Ok, Result
from pathrank.traversal.result import TraversalResult

logger = logging.getLogger(__name__)


def bfs(
    graph: ReadableGraph,
    start_id: str,
    max_depth: int | None = None,
    options: TraversalOptions | None = None,
) -> TraversalResult:
    """
    Visit every node reachable from start_id in non-decreasing distance order.

    Args:
        graph: Graph to explore
        start_id: Seed node; an unknown id yields an empty result
        max_depth: Stop expanding past this many hops (None = unlimited);
            falls back to options.max_depth
        options: Direction and type filters

    Returns:
        TraversalResult with hop distances and parent pointers
    """
    if not graph.has_node(start_id):
        logger.debug(f"BFS start '{start_id}' not in graph")
        return TraversalResult(start_id=start_id)

    if max_depth is None and options is not None:
        max_depth = options.max_depth

    order = [start_id]
    distances = {start_id: 0}
    parents: dict[str, str | None] = {start_id: None}
    parent_edges: dict[str, Edge] = {}
    queue: deque[str] = deque([start_id])

    while queue:
        current = queue.popleft()
        depth = distances[current]

        if max_depth is not None and depth >= max_depth:
            continue

        for edge, neighbor in traversal_edges(graph, current, options):
            if neighbor in distances:
                continue
            distances[neighbor] = depth + 1
            parents[neighbor] = current
            parent_edges[neighbor] = edge
            order.append(neighbor)
            queue.append(neighbor)

    return TraversalResult(
        start_id=start_id,
        order=tuple(order),
        distances=distances,
        parents=parents,
        parent_edges=parent_edges,
    )


def shortest_distance(
    graph: ReadableGraph,
    source_id: str,
    target_id: str,
    options: TraversalOptions | None = None,
) -> int | None:
    """Hop count of the shortest path, or None if unreachable."""
    return bfs(graph, source_id, options=options).distances.get(target_id)


def shortest_path(graph: ReadableGraph, options: PathfindingOptions) -> Result[Path | None]:
    """
    Minimum-hop path between options.source_id and options.target_id.

    Direction, type filters and max_depth from the options apply.

    Returns:
        Ok(Path), Ok(None) if the target is unreachable, or Err(NOT_FOUND)
        for an unknown endpoint
    """
    missing = [n for n in (options.source_id, options.target_id) if not graph.has_node(n)]
    if missing:
        return Err(GraphError.not_found(*dict.fromkeys(missing)))
    return Ok(bfs(graph, options.source_id, options=options).path_to(options.target_id))
