"""
Traversal and weight configuration shared by pathfinding operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal

if TYPE_CHECKING:
    from pathrank.graph.model import Edge, Node, ReadableGraph

WeightProperty = Literal["score", "weight"]
TraversalDirection = Literal["outbound", "inbound", "both"]
WeightFunction = Callable[["Edge", "Node", "Node"], float]


@dataclass
class WeightConfig:
    """
    How an edge's numeric weight is derived.

    Attributes:
        property: Named edge property to read ('score' or 'weight');
            takes precedence over weight_fn
        weight_fn: Custom (edge, source_node, target_node) -> weight
        invert: Use 1/weight so "highest value = best" becomes
            "lowest cost = best"
        default_weight: Weight for edges missing the property
    """

    property: WeightProperty | None = None
    weight_fn: WeightFunction | None = None
    invert: bool = False
    default_weight: float = 1.0


@dataclass
class TraversalOptions:
    """
    Filters and parameters for traversal and pathfinding.

    Attributes:
        weight: Weight configuration (None = every edge weighs 1)
        direction: Edge orientation to follow on directed graphs
            (None = outbound)
        edge_types: Only follow edges with one of these types (empty = all)
        node_types: Only visit nodes with one of these types (empty = all)
        max_depth: Hop limit from the start node (None = unlimited)
        directed: False traverses a directed graph as undirected
            (None = use the graph's own flag)
    """

    weight: WeightConfig | None = None
    direction: TraversalDirection | None = None
    edge_types: list[str] = field(default_factory=list)
    node_types: list[str] = field(default_factory=list)
    max_depth: int | None = None
    directed: bool | None = None


@dataclass
class PathfindingOptions(TraversalOptions):
    """TraversalOptions plus the two endpoints of the query."""

    source_id: str = ""
    target_id: str = ""


def resolve_edge_weight(
    edge: Edge,
    graph: ReadableGraph,
    config: WeightConfig | None,
) -> float:
    """
    Compute the effective weight of an edge under a WeightConfig.

    Unknown endpoints or missing properties fall back to default_weight;
    inverting a non-positive weight yields infinity.
    """
    if config is None:
        return 1.0

    if config.property is not None:
        raw = getattr(edge, config.property, None)
        value = config.default_weight if raw is None else float(raw)
    elif config.weight_fn is not None:
        source = graph.get_node(edge.source)
        target = graph.get_node(edge.target)
        if source is None or target is None:
            value = config.default_weight
        else:
            value = float(config.weight_fn(edge, source, target))
    else:
        value = config.default_weight if edge.weight is None else float(edge.weight)

    if config.invert:
        return float("inf") if value <= 0 else 1.0 / value
    return value


def edge_allowed(edge: Edge, graph: ReadableGraph, options: TraversalOptions | None, via: str) -> bool:
    """Check an edge and the node it leads to against the type filters."""
    if options is None:
        return True
    if options.edge_types and edge.type not in options.edge_types:
        return False
    if options.node_types:
        node = graph.get_node(via)
        if node is None or node.type not in options.node_types:
            return False
    return True


def traversal_edges(
    graph: ReadableGraph,
    node_id: str,
    options: TraversalOptions | None = None,
) -> list[tuple[Edge, str]]:
    """
    (edge, neighbour) pairs to follow from node_id under the options.

    Directed graphs follow options.direction (outbound by default);
    undirected graphs, or options.directed=False, follow edges both ways.
    """
    directed = graph.is_directed()
    if options is not None and options.directed is False:
        directed = False
    direction = options.direction if options is not None and options.direction else None
    if not directed:
        direction = "both"
    elif direction is None:
        direction = "outbound"

    pairs: dict[tuple[str, str], tuple[Edge, str]] = {}
    if direction in ("outbound", "both"):
        for edge in graph.get_outgoing_edges(node_id):
            pairs.setdefault((edge.id, edge.other(node_id)), (edge, edge.other(node_id)))
    if direction in ("inbound", "both"):
        for edge in graph.get_incoming_edges(node_id):
            pairs.setdefault((edge.id, edge.other(node_id)), (edge, edge.other(node_id)))

    return [
        (edge, neighbor)
        for edge, neighbor in pairs.values()
        if edge_allowed(edge, graph, options, neighbor)
    ]
