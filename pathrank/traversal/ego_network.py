"""
Ego-network extraction: the induced subgraph within r hops of seed nodes.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

from pathrank.graph.model import Graph, ReadableGraph
from pathrank.graph.options import TraversalOptions, traversal_edges
from pathrank.graph.result import Err, ErrorKind, GraphError, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EgoNetwork:
    """
    An extracted ego network.

    Attributes:
        subgraph: Visited nodes plus every edge with both endpoints visited
        seeds: Seeds that were present in the graph
        failed_seeds: Requested seeds missing from the graph
        distances: Hop distance from the nearest seed, per visited node
        radius: Hop radius used for extraction
    """

    subgraph: Graph
    seeds: tuple[str, ...]
    failed_seeds: tuple[str, ...] = ()
    distances: dict[str, int] = field(default_factory=dict)
    radius: int = 1

    @property
    def partial(self) -> bool:
        return bool(self.failed_seeds)

    @property
    def error(self) -> GraphError | None:
        """EXTRACTION_PARTIAL_FAILURE listing missing seeds, if any."""
        if not self.failed_seeds:
            return None
        return GraphError(
            ErrorKind.EXTRACTION_PARTIAL_FAILURE,
            f"Seeds not found in graph: {', '.join(self.failed_seeds)}",
            self.failed_seeds,
        )

    @property
    def node_ids(self) -> set[str]:
        return set(self.distances)


def extract_ego_network(
    graph: ReadableGraph,
    seeds: str | Sequence[str],
    radius: int = 1,
    *,
    all_or_nothing: bool = False,
    options: TraversalOptions | None = None,
) -> Result[EgoNetwork]:
    """
    Collect every node within `radius` hops of any seed.

    All seeds start in one shared frontier, so a node equidistant from
    several seeds is visited once, at its distance from the nearest seed.

    Args:
        graph: Graph to extract from
        seeds: One seed id or a sequence of seed ids
        radius: Hop radius (0 = the seeds alone)
        all_or_nothing: Fail the whole extraction if any seed is missing
        options: Direction and type filters for the expansion

    Returns:
        Ok(EgoNetwork) (possibly partial, see EgoNetwork.failed_seeds);
        Err(NOT_FOUND) if no seed exists, or if any seed is missing and
        all_or_nothing is set; Err(INVALID_CONFIGURATION) for a negative
        radius or an empty seed list
    """
    seed_list = [seeds] if isinstance(seeds, str) else list(dict.fromkeys(seeds))
    if not seed_list:
        return Err(GraphError.invalid("At least one seed is required"))
    if radius < 0:
        return Err(GraphError.invalid(f"radius must be >= 0, got {radius}"))

    present = [s for s in seed_list if graph.has_node(s)]
    failed = tuple(s for s in seed_list if not graph.has_node(s))

    if failed:
        if not present or all_or_nothing:
            return Err(GraphError.not_found(*failed, role="Seed"))
        logger.warning(f"Ego network: {len(failed)} seed(s) missing, continuing with {len(present)}")

    distances: dict[str, int] = {seed: 0 for seed in present}
    queue: deque[str] = deque(present)

    while queue:
        current = queue.popleft()
        depth = distances[current]
        if depth >= radius:
            continue
        for _, neighbor in traversal_edges(graph, current, options):
            if neighbor not in distances:
                distances[neighbor] = depth + 1
                queue.append(neighbor)

    subgraph = _induced_subgraph(graph, distances)
    logger.debug(
        f"Ego network radius={radius}: {subgraph.node_count} nodes, {subgraph.edge_count} edges"
    )

    return Ok(
        EgoNetwork(
            subgraph=subgraph,
            seeds=tuple(present),
            failed_seeds=failed,
            distances=distances,
            radius=radius,
        )
    )


def _induced_subgraph(graph: ReadableGraph, node_ids: dict[str, int]) -> Graph:
    """Build a new Graph with the given nodes and all edges between them."""
    subgraph = Graph(directed=graph.is_directed())
    for node_id in node_ids:
        node = graph.get_node(node_id)
        if node is not None:
            subgraph.add_node(node)

    seen: set[str] = set()
    for node_id in node_ids:
        for edge in graph.get_outgoing_edges(node_id):
            if edge.id in seen or edge.source not in node_ids or edge.target not in node_ids:
                continue
            seen.add(edge.id)
            subgraph.add_edge(edge)
    return subgraph
