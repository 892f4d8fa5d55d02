"""
Path ranking by mutual information with a length penalty.

    score(path) = MI(path) - lambda_ * length(path)

MI(path) is the geometric mean of the per-edge MI values along the path,
optionally combined with the geometric mean of the edge weights. With
lambda_ = 0 the most informative paths win even when they are longer
than the shortest path; large lambda_ converges on the shortest paths.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Literal

from pathrank.config import DEFAULT_LAMBDA, DEFAULT_MAX_PATHS, MI_EPSILON
from pathrank.graph.model import Edge, Path, ReadableGraph
from pathrank.graph.options import TraversalOptions, WeightConfig, resolve_edge_weight, traversal_edges
from pathrank.graph.result import Err, GraphError, Ok, Result
from pathrank.ranking.mutual_information import MICache, MIConfig, precompute_mutual_information

logger = logging.getLogger(__name__)

WeightMode = Literal["none", "multiply", "divide"]
TraversalMode = Literal["directed", "undirected"]

WEIGHT_MODES = ("none", "multiply", "divide")
TRAVERSAL_MODES = ("directed", "undirected")


@dataclass(frozen=True)
class RankedPath:
    """
    A path with its score and the components the score was built from.

    Attributes:
        path: The ranked path
        score: Final score (higher = better)
        geometric_mean_mi: Path MI, the geometric mean of edge_mi_values
        edge_mi_values: MI of each edge, in path order
        length_penalty: lambda_ * length, or None when lambda_ is 0
        weight_factor: Geometric mean of the edge weights, or None when
            weight_mode is 'none'
        edge_weights: Resolved weight of each edge, or None when
            weight_mode is 'none'
    """

    path: Path
    score: float
    geometric_mean_mi: float
    edge_mi_values: tuple[float, ...] = ()
    length_penalty: float | None = None
    weight_factor: float | None = None
    edge_weights: tuple[float, ...] | None = None

    @property
    def node_ids(self) -> tuple[str, ...]:
        return self.path.node_ids

    @property
    def length(self) -> int:
        return self.path.length


@dataclass
class PathRankingConfig:
    """
    Options for rank_paths.

    Attributes:
        lambda_: Length-penalty weight (0 = pure MI ranking)
        max_paths: Cap on enumerated and returned paths
        shortest_only: Only consider minimum-hop paths
        max_length: Hop limit (None = unlimited); 0 means direct edges
            only and negative values are treated as 0
        weight_mode: How edge weights combine with MI
        traversal_mode: 'directed' follows edges source -> target on
            directed graphs, 'undirected' follows them both ways
            (None = the graph's own flag)
        weight: How edge weights are resolved when weight_mode is set
        mi_config: Configuration used when mi_cache must be computed
        mi_cache: Precomputed MI values (computed on demand if None)
        epsilon: Floor for MI and weight values inside logarithms
    """

    lambda_: float = DEFAULT_LAMBDA
    max_paths: int = DEFAULT_MAX_PATHS
    shortest_only: bool = True
    max_length: int | None = None
    weight_mode: WeightMode = "none"
    traversal_mode: TraversalMode | None = None
    weight: WeightConfig | None = None
    mi_config: MIConfig | None = None
    mi_cache: MICache | None = field(default=None, repr=False)
    epsilon: float = MI_EPSILON


# =============================================================================
# Enumeration
# =============================================================================

def _steps(
    graph: ReadableGraph,
    node_id: str,
    options: TraversalOptions,
) -> list[tuple[Edge, str]]:
    """Traversable (edge, neighbour) pairs, first edge per neighbour."""
    steps: dict[str, Edge] = {}
    for edge, neighbor in traversal_edges(graph, node_id, options):
        steps.setdefault(neighbor, edge)
    return [(edge, neighbor) for neighbor, edge in steps.items()]


def _all_shortest_paths(
    graph: ReadableGraph,
    source_id: str,
    target_id: str,
    max_hops: int | None,
    max_paths: int,
    options: TraversalOptions,
) -> list[Path]:
    """Every minimum-hop path, via BFS layers with predecessor lists."""
    distances = {source_id: 0}
    predecessors: dict[str, list[tuple[str, Edge]]] = {source_id: []}
    queue: deque[str] = deque([source_id])
    target_distance: int | None = None

    while queue:
        current = queue.popleft()
        depth = distances[current]
        if target_distance is not None and depth >= target_distance:
            continue
        if max_hops is not None and depth >= max_hops:
            continue

        for edge, neighbor in _steps(graph, current, options):
            known = distances.get(neighbor)
            if known is None:
                distances[neighbor] = depth + 1
                predecessors[neighbor] = [(current, edge)]
                queue.append(neighbor)
                if neighbor == target_id:
                    target_distance = depth + 1
            elif known == depth + 1:
                predecessors[neighbor].append((current, edge))

    if target_id not in distances:
        return []

    # Walk predecessor lists back from the target
    paths: list[Path] = []
    stack: list[tuple[str, tuple[str, ...], tuple[Edge, ...]]] = [(target_id, (target_id,), ())]
    while stack and len(paths) < max_paths:
        node_id, nodes, edges = stack.pop()
        if node_id == source_id:
            paths.append(Path(nodes, edges))
            continue
        for pred, edge in reversed(predecessors[node_id]):
            stack.append((pred, (pred,) + nodes, (edge,) + edges))
    return paths


def _simple_paths(
    graph: ReadableGraph,
    source_id: str,
    target_id: str,
    max_hops: int | None,
    max_paths: int,
    options: TraversalOptions,
) -> list[Path]:
    """
    Simple paths up to max_hops edges, depth-first in neighbour order.

    Stops as soon as max_paths paths are found, so the cap always yields
    the same path set for the same graph.
    """
    found: list[Path] = []
    nodes = [source_id]
    edges: list[Edge] = []
    on_path = {source_id}
    stack: list[Iterator[tuple[Edge, str]]] = [iter(_steps(graph, source_id, options))]

    while stack and len(found) < max_paths:
        step = next(stack[-1], None)
        if step is None:
            stack.pop()
            on_path.discard(nodes.pop())
            if edges:
                edges.pop()
            continue

        edge, neighbor = step
        if neighbor in on_path:
            continue
        if neighbor == target_id:
            found.append(Path(tuple(nodes) + (neighbor,), tuple(edges) + (edge,)))
            continue
        if max_hops is not None and len(edges) + 1 >= max_hops:
            continue

        nodes.append(neighbor)
        edges.append(edge)
        on_path.add(neighbor)
        stack.append(iter(_steps(graph, neighbor, options)))

    if len(found) >= max_paths:
        logger.debug(f"Path enumeration capped at {max_paths} paths")
    return found


# =============================================================================
# Scoring
# =============================================================================

def _geometric_mean(values: list[float], floor: float) -> float:
    return math.exp(sum(math.log(max(v, floor)) for v in values) / len(values))


def score_path(
    graph: ReadableGraph,
    path: Path,
    mi_cache: MICache,
    config: PathRankingConfig,
) -> RankedPath:
    """Score one path under the ranking configuration."""
    eps = config.epsilon
    k = path.length
    penalty = config.lambda_ * k if config.lambda_ else None

    if k == 0:
        return RankedPath(path=path, score=1.0, geometric_mean_mi=1.0, length_penalty=penalty)

    edge_mi = [mi_cache.get(edge.id, eps) for edge in path.edges]
    path_mi = _geometric_mean(edge_mi, eps)
    adjusted = path_mi

    weight_factor = None
    edge_weights = None
    if config.weight_mode != "none":
        weight_config = config.weight or WeightConfig()
        edge_weights = tuple(resolve_edge_weight(e, graph, weight_config) for e in path.edges)
        weight_factor = _geometric_mean(list(edge_weights), eps)
        if config.weight_mode == "multiply":
            adjusted = path_mi * weight_factor
        else:
            adjusted = path_mi / weight_factor

    return RankedPath(
        path=path,
        score=adjusted - (penalty or 0.0),
        geometric_mean_mi=path_mi,
        edge_mi_values=tuple(edge_mi),
        length_penalty=penalty,
        weight_factor=weight_factor,
        edge_weights=edge_weights,
    )


# =============================================================================
# Public API
# =============================================================================

def _validate(graph: ReadableGraph, source_id: str, target_id: str, config: PathRankingConfig) -> GraphError | None:
    missing = [node_id for node_id in (source_id, target_id) if not graph.has_node(node_id)]
    if missing:
        return GraphError.not_found(*dict.fromkeys(missing))
    if config.max_paths < 1:
        return GraphError.invalid(f"max_paths must be >= 1, got {config.max_paths}")
    if config.weight_mode not in WEIGHT_MODES:
        return GraphError.invalid(f"Unknown weight_mode '{config.weight_mode}'")
    if config.traversal_mode is not None and config.traversal_mode not in TRAVERSAL_MODES:
        return GraphError.invalid(f"Unknown traversal_mode '{config.traversal_mode}'")
    return None


def _traversal_options(config: PathRankingConfig) -> TraversalOptions:
    if config.traversal_mode == "undirected":
        return TraversalOptions(directed=False)
    if config.traversal_mode == "directed":
        return TraversalOptions(direction="outbound")
    return TraversalOptions()


def rank_paths(
    graph: ReadableGraph,
    source_id: str,
    target_id: str,
    config: PathRankingConfig | None = None,
    **overrides: Any,
) -> Result[list[RankedPath] | None]:
    """
    Enumerate candidate paths between two nodes and rank them.

    Args:
        graph: Graph to search
        source_id: Start node
        target_id: End node
        config: Ranking options (defaults to PathRankingConfig())
        **overrides: Individual PathRankingConfig fields, e.g.
            rank_paths(g, "A", "F", shortest_only=False, lambda_=0.5)

    Returns:
        Ok(list) sorted by score descending, Ok(None) if no path exists,
        Err(NOT_FOUND) for an unknown endpoint, Err(INVALID_CONFIGURATION)
        for malformed options
    """
    config = replace(config or PathRankingConfig(), **overrides)

    error = _validate(graph, source_id, target_id, config)
    if error is not None:
        return Err(error)

    max_hops = config.max_length
    if max_hops is not None:
        # 0 (and anything below) means direct edges only
        max_hops = max(max_hops, 0) or 1

    mi_cache = config.mi_cache
    if mi_cache is None:
        mi_cache = precompute_mutual_information(graph, config.mi_config)

    if source_id == target_id:
        paths = [Path((source_id,))]
    elif config.shortest_only:
        paths = _all_shortest_paths(
            graph, source_id, target_id, max_hops, config.max_paths, _traversal_options(config)
        )
    else:
        paths = _simple_paths(
            graph, source_id, target_id, max_hops, config.max_paths, _traversal_options(config)
        )

    if not paths:
        return Ok(None)

    ranked = sorted(
        (score_path(graph, path, mi_cache, config) for path in paths),
        key=lambda r: r.score,
        reverse=True,
    )
    logger.debug(f"Ranked {len(ranked)} paths '{source_id}' -> '{target_id}'")
    return Ok(ranked[: config.max_paths])


def get_best_path(
    graph: ReadableGraph,
    source_id: str,
    target_id: str,
    config: PathRankingConfig | None = None,
    **overrides: Any,
) -> Result[RankedPath | None]:
    """Highest-scoring path only; same error semantics as rank_paths."""
    result = rank_paths(graph, source_id, target_id, config, **overrides)
    if not result.ok:
        return result
    return Ok(result.value[0] if result.value else None)


class PathRanker:
    """
    Ranks paths over one graph, computing the MI cache only once.

    Usage:
        ranker = create_path_ranker(graph, lambda_=0.1)
        best = ranker.get_best("A", "F")
    """

    def __init__(self, graph: ReadableGraph, config: PathRankingConfig | None = None) -> None:
        self.graph = graph
        config = config or PathRankingConfig()
        self.mi_cache = config.mi_cache
        if self.mi_cache is None:
            self.mi_cache = precompute_mutual_information(graph, config.mi_config)
        self.config = replace(config, mi_cache=self.mi_cache)

    def rank(self, source_id: str, target_id: str, **overrides: Any) -> Result[list[RankedPath] | None]:
        return rank_paths(self.graph, source_id, target_id, self.config, **overrides)

    def get_best(self, source_id: str, target_id: str, **overrides: Any) -> Result[RankedPath | None]:
        return get_best_path(self.graph, source_id, target_id, self.config, **overrides)


def create_path_ranker(
    graph: ReadableGraph,
    config: PathRankingConfig | None = None,
    **overrides: Any,
) -> PathRanker:
    """Build a PathRanker with config fields optionally overridden."""
    return PathRanker(graph, replace(config or PathRankingConfig(), **overrides))
