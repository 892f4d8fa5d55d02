"""
Baseline path rankers for experiments.

A ranker takes a graph and candidate paths and returns ScoredPaths sorted
by score, best first. The baselines establish reference points for
MI-based ranking:
- random_ranker: lower bound
- degree_ranker: prefers hub-heavy paths
- shortest_path_ranker: prefers short paths
- weight_ranker: prefers high edge weights
- mi_ranker: MI ranking with a length penalty
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Sequence

from pathrank.graph.model import Edge, Path, ReadableGraph
from pathrank.ranking.mutual_information import MIConfig, precompute_mutual_information
from pathrank.ranking.path_ranking import PathRankingConfig, score_path


@dataclass(frozen=True)
class ScoredPath:
    path: Path
    score: float


Ranker = Callable[[ReadableGraph, Sequence[Path]], "list[ScoredPath]"]


def _sorted(scored: list[ScoredPath]) -> list[ScoredPath]:
    return sorted(scored, key=lambda s: s.score, reverse=True)


def random_ranker(seed: int | None = None) -> Ranker:
    """
    Shuffle candidates; scores descend as 1 - i/n.

    Each call reseeds, so the order depends only on the seed and input.
    """

    def rank(graph: ReadableGraph, paths: Sequence[Path]) -> list[ScoredPath]:
        shuffled = list(paths)
        random.Random(seed).shuffle(shuffled)
        n = len(shuffled)
        return [ScoredPath(path, 1.0 - i / n) for i, path in enumerate(shuffled)]

    return rank


def degree_ranker(graph: ReadableGraph, paths: Sequence[Path]) -> list[ScoredPath]:
    """Mean node degree along the path."""
    scored = []
    for path in paths:
        degrees = [graph.get_degree(node_id) for node_id in path.node_ids]
        scored.append(ScoredPath(path, sum(degrees) / len(degrees) if degrees else 0.0))
    return _sorted(scored)


def shortest_path_ranker(graph: ReadableGraph, paths: Sequence[Path]) -> list[ScoredPath]:
    """1 / (length + 1): shorter paths first."""
    return _sorted([ScoredPath(path, 1.0 / (path.length + 1)) for path in paths])


def weight_ranker(weight_fn: Callable[[Edge], float] | None = None) -> Ranker:
    """Mean edge weight (edge.weight, defaulting to 1) or a custom weight."""

    def weight_of(edge: Edge) -> float:
        if weight_fn is not None:
            return float(weight_fn(edge))
        return 1.0 if edge.weight is None else float(edge.weight)

    def rank(graph: ReadableGraph, paths: Sequence[Path]) -> list[ScoredPath]:
        scored = []
        for path in paths:
            weights = [weight_of(edge) for edge in path.edges]
            scored.append(ScoredPath(path, sum(weights) / len(weights) if weights else 0.0))
        return _sorted(scored)

    return rank


def mi_ranker(mi_config: MIConfig | None = None, lambda_: float = 0.0) -> Ranker:
    """Path MI minus lambda_ * length, with MI precomputed per graph."""
    config = PathRankingConfig(lambda_=lambda_, mi_config=mi_config)

    def rank(graph: ReadableGraph, paths: Sequence[Path]) -> list[ScoredPath]:
        cache = precompute_mutual_information(graph, mi_config)
        return _sorted(
            [ScoredPath(path, score_path(graph, path, cache, config).score) for path in paths]
        )

    return rank
