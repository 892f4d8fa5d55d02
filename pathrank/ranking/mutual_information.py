"""
Mutual-information estimation for graph edges.

Three strategies, chosen automatically from what the graph offers:
1. Attribute-based: correlation (or joint signal strength) of node features
2. Type-based: rarity of the (source type, target type) pair
3. Structural: Jaccard similarity of the endpoints' neighbourhoods

Values are precomputed once into an MICache keyed by edge id, so ranking
many paths over the same graph costs one pass over the edges.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Sequence

import numpy as np

from pathrank.config import MI_EPSILON
from pathrank.graph.model import Edge, Node, ReadableGraph

logger = logging.getLogger(__name__)

AttributeExtractor = Callable[[Node], "Sequence[float] | None"]


class MIStrategy(str, Enum):
    ATTRIBUTE = "attribute"
    TYPE = "type"
    STRUCTURAL = "structural"


@dataclass
class MIConfig:
    """
    Configuration for MI estimation.

    Attributes:
        attribute_extractor: Maps a node to a numeric feature vector;
            None (or an empty vector) falls back to type/structural MI
        epsilon: Small constant avoiding log(0) and zero division
    """

    attribute_extractor: AttributeExtractor | None = None
    epsilon: float = MI_EPSILON


@dataclass
class MICache:
    """Precomputed MI per edge id."""

    values: dict[str, float] = field(default_factory=dict)
    strategy: MIStrategy = MIStrategy.STRUCTURAL

    def get(self, edge_id: str, default: float | None = None) -> float | None:
        return self.values.get(edge_id, default)

    def keys(self) -> Iterator[str]:
        return iter(self.values)

    def __contains__(self, edge_id: object) -> bool:
        return edge_id in self.values

    def __len__(self) -> int:
        return len(self.values)


# =============================================================================
# Strategies
# =============================================================================

def _feature_vector(node: Node, extractor: AttributeExtractor) -> np.ndarray | None:
    raw = extractor(node)
    if raw is None:
        return None
    vector = np.asarray(raw, dtype=float).ravel()
    return vector if vector.size else None


def _magnitude(vector: np.ndarray) -> float:
    return float(np.mean(np.abs(vector)))


def attribute_mi(a: np.ndarray, b: np.ndarray, scale: float, epsilon: float) -> float:
    """
    MI proxy from two feature vectors.

    Vectors with at least two entries and non-zero variance use the
    absolute Pearson correlation. Scalar or constant features use the
    joint signal strength (|a| + |b|) / (2 * scale), where scale is the
    largest feature magnitude in the graph.
    """
    n = min(a.size, b.size)
    a, b = a[:n], b[:n]

    if n >= 2:
        da = a - a.mean()
        db = b - b.mean()
        denom = math.sqrt(float(np.dot(da, da)) * float(np.dot(db, db)))
        if denom >= epsilon:
            return abs(float(np.dot(da, db)) / denom) + epsilon

    if scale <= 0:
        return epsilon
    return (_magnitude(a) + _magnitude(b)) / (2 * scale) + epsilon


def type_mi(pair_count: int, total_edges: int, epsilon: float) -> float:
    """-log P(type pair), normalised by the largest attainable value."""
    probability = (pair_count + epsilon) / (total_edges + epsilon)
    max_mi = -math.log(epsilon / (total_edges + epsilon))
    return -math.log(probability) / max_mi


def structural_mi(neighbors_a: set[str], neighbors_b: set[str], epsilon: float) -> float:
    """Jaccard similarity of two neighbourhoods, plus epsilon."""
    union = len(neighbors_a | neighbors_b)
    if union == 0:
        return epsilon
    return len(neighbors_a & neighbors_b) / union + epsilon


# =============================================================================
# Public API
# =============================================================================

def _type_pair_counts(graph: ReadableGraph, edges: list[Edge]) -> dict[tuple[str, str], int]:
    counts: dict[tuple[str, str], int] = {}
    for edge in edges:
        source = graph.get_node(edge.source)
        target = graph.get_node(edge.target)
        if source is not None and target is not None:
            key = (source.type, target.type)
            counts[key] = counts.get(key, 0) + 1
    return counts


def _has_heterogeneous_types(graph: ReadableGraph) -> bool:
    return len({node.type for node in graph.get_all_nodes()}) > 1


def precompute_mutual_information(
    graph: ReadableGraph,
    config: MIConfig | None = None,
) -> MICache:
    """
    Compute MI for every edge of the graph.

    Args:
        graph: Graph to analyse
        config: Extractor and epsilon (defaults: no extractor, MI_EPSILON)

    Returns:
        MICache keyed by edge id
    """
    config = config or MIConfig()
    eps = config.epsilon
    edges = graph.get_all_edges()

    features: dict[str, np.ndarray | None] = {}
    scale = 0.0
    if config.attribute_extractor is not None:
        for node in graph.get_all_nodes():
            vector = _feature_vector(node, config.attribute_extractor)
            features[node.id] = vector
            if vector is not None:
                scale = max(scale, float(np.max(np.abs(vector))))
        strategy = MIStrategy.ATTRIBUTE
    elif _has_heterogeneous_types(graph):
        strategy = MIStrategy.TYPE
    else:
        strategy = MIStrategy.STRUCTURAL

    pair_counts = _type_pair_counts(graph, edges) if strategy is MIStrategy.TYPE else {}
    neighbor_sets: dict[str, set[str]] = {}

    def neighbors(node_id: str) -> set[str]:
        if node_id not in neighbor_sets:
            neighbor_sets[node_id] = set(graph.get_neighbors(node_id))
        return neighbor_sets[node_id]

    values: dict[str, float] = {}
    for edge in edges:
        source = graph.get_node(edge.source)
        target = graph.get_node(edge.target)
        if source is None or target is None:
            values[edge.id] = eps
            continue

        if strategy is MIStrategy.ATTRIBUTE:
            a = features.get(edge.source)
            b = features.get(edge.target)
            if a is not None and b is not None:
                values[edge.id] = attribute_mi(a, b, scale, eps)
            else:
                values[edge.id] = structural_mi(neighbors(edge.source), neighbors(edge.target), eps)
        elif strategy is MIStrategy.TYPE:
            count = pair_counts.get((source.type, target.type), 0)
            values[edge.id] = type_mi(count, len(edges), eps)
        else:
            values[edge.id] = structural_mi(neighbors(edge.source), neighbors(edge.target), eps)

    logger.debug(f"Precomputed {strategy.value} MI for {len(values)} edges")
    return MICache(values=values, strategy=strategy)


def compute_edge_mi(
    graph: ReadableGraph,
    edge: Edge,
    config: MIConfig | None = None,
) -> float:
    """
    MI for a single edge, without building a cache.

    Tries attribute-based MI first, then falls back to structural MI.
    Prefer precompute_mutual_information when scoring many paths.
    """
    config = config or MIConfig()
    eps = config.epsilon

    source = graph.get_node(edge.source)
    target = graph.get_node(edge.target)
    if source is None or target is None:
        return eps

    if config.attribute_extractor is not None:
        a = _feature_vector(source, config.attribute_extractor)
        b = _feature_vector(target, config.attribute_extractor)
        if a is not None and b is not None:
            scale = 0.0
            for node in graph.get_all_nodes():
                vector = _feature_vector(node, config.attribute_extractor)
                if vector is not None:
                    scale = max(scale, float(np.max(np.abs(vector))))
            return attribute_mi(a, b, scale, eps)

    return structural_mi(
        set(graph.get_neighbors(edge.source)),
        set(graph.get_neighbors(edge.target)),
        eps,
    )
