"""
Graph data model: nodes, edges, paths, and the read-only graph contract.

Every algorithm in pathrank works against ReadableGraph. Graph is the
in-memory implementation callers use to build snapshots.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class Node:
    """
    A graph node.

    Attributes:
        id: Unique node identifier
        type: Optional category tag (used for type-based MI)
        attributes: Arbitrary application-specific attributes
    """

    id: str
    type: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an attribute with a default."""
        return self.attributes.get(key, default)


@dataclass
class Edge:
    """
    A directed edge as stored in the graph.

    Attributes:
        id: Unique edge identifier
        source: Source node id
        target: Target node id
        weight: Optional numeric weight
        score: Optional numeric score (alternative weight property)
        type: Optional relationship type tag
        attributes: Arbitrary application-specific attributes
    """

    id: str
    source: str
    target: str
    weight: float | None = None
    score: float | None = None
    type: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def other(self, node_id: str) -> str:
        """Return the endpoint opposite to node_id."""
        return self.target if self.source == node_id else self.source


@dataclass(frozen=True)
class Path:
    """
    An ordered walk through the graph.

    Holds node ids only, never node objects, so a Path outlives the graph
    it was found in. len(edges) == len(node_ids) - 1 for non-empty paths.
    """

    node_ids: tuple[str, ...]
    edges: tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        if self.node_ids and len(self.edges) != len(self.node_ids) - 1:
            raise ValueError(
                f"Path with {len(self.node_ids)} nodes needs "
                f"{len(self.node_ids) - 1} edges, got {len(self.edges)}"
            )

    @property
    def length(self) -> int:
        """Number of edges (hops)."""
        return len(self.edges)

    @property
    def source(self) -> str:
        return self.node_ids[0]

    @property
    def target(self) -> str:
        return self.node_ids[-1]

    @property
    def key(self) -> str:
        """Stable string key identifying the node sequence."""
        return "→".join(self.node_ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self.node_ids)

    def __len__(self) -> int:
        return len(self.node_ids)


class ReadableGraph(ABC):
    """
    Minimal read interface any backing graph must implement.

    Lookups never raise for unknown ids: they return None or an empty
    list, so callers never need to pre-check existence.
    """

    @abstractmethod
    def has_node(self, node_id: str) -> bool:
        ...

    @abstractmethod
    def get_node(self, node_id: str) -> Node | None:
        ...

    @abstractmethod
    def get_neighbors(self, node_id: str) -> list[str]:
        """Neighbour ids in a fixed order (empty if node is absent)."""
        ...

    @abstractmethod
    def get_all_nodes(self) -> list[Node]:
        ...

    @abstractmethod
    def is_directed(self) -> bool:
        ...

    def get_outgoing_edges(self, node_id: str) -> list[Edge]:
        """
        Edges leaving node_id.

        Directed graphs: edges where the node is the source.
        Undirected graphs: edges touching the node in either role.

        The default derives one edge per neighbour from get_neighbors, so
        graphs that only answer neighbour queries remain traversable.
        Undirected edge ids are order-independent ("A->B" from either end).
        """
        edges = []
        for neighbor in self.get_neighbors(node_id):
            ends = (node_id, neighbor) if self.is_directed() else tuple(sorted((node_id, neighbor)))
            edges.append(Edge(id=f"{ends[0]}->{ends[1]}", source=node_id, target=neighbor))
        return edges

    def get_incoming_edges(self, node_id: str) -> list[Edge]:
        """Edges where node_id is the target (directed graphs only)."""
        return []

    def get_all_edges(self) -> list[Edge]:
        """All edges, deduplicated by id, in discovery order."""
        seen: dict[str, Edge] = {}
        for node in self.get_all_nodes():
            for edge in self.get_outgoing_edges(node.id):
                seen.setdefault(edge.id, edge)
        return list(seen.values())

    def get_degree(self, node_id: str) -> int:
        return len(self.get_neighbors(node_id))


class Graph(ReadableGraph):
    """
    In-memory adjacency-list graph.

    Neighbour and edge iteration follow insertion order, which keeps every
    traversal over a Graph deterministic.
    """

    def __init__(self, directed: bool = False) -> None:
        self._directed = directed
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Edge] = {}
        self._order: dict[str, int] = {}
        self._out: dict[str, list[Edge]] = {}
        self._in: dict[str, list[Edge]] = {}

    # =========================================================================
    # Construction
    # =========================================================================

    def add_node(self, node: Node | str, type: str = "", **attributes: Any) -> Node:
        """Add a node (or replace one with the same id) and return it."""
        if isinstance(node, str):
            node = Node(id=node, type=type, attributes=dict(attributes))
        self._nodes[node.id] = node
        self._out.setdefault(node.id, [])
        self._in.setdefault(node.id, [])
        return node

    def add_edge(
        self,
        edge: Edge | str,
        target: str | None = None,
        *,
        edge_id: str | None = None,
        weight: float | None = None,
        score: float | None = None,
        type: str | None = None,
        **attributes: Any,
    ) -> Edge:
        """
        Add an edge between two existing nodes.

        Accepts either a ready Edge or (source, target) plus keyword fields.

        Raises:
            ValueError: If an endpoint is missing or the edge id is taken
        """
        if isinstance(edge, str):
            if target is None:
                raise ValueError("add_edge(source, target) requires a target id")
            edge = Edge(
                id=edge_id or f"e{len(self._edges)}",
                source=edge,
                target=target,
                weight=weight,
                score=score,
                type=type,
                attributes=dict(attributes),
            )

        for endpoint in (edge.source, edge.target):
            if endpoint not in self._nodes:
                raise ValueError(f"Edge '{edge.id}' references unknown node '{endpoint}'")
        if edge.id in self._edges:
            raise ValueError(f"Duplicate edge id '{edge.id}'")

        self._order[edge.id] = len(self._edges)
        self._edges[edge.id] = edge
        self._out[edge.source].append(edge)
        self._in[edge.target].append(edge)
        return edge

    def copy(self) -> Graph:
        """Shallow structural copy (node/edge objects are shared)."""
        clone = Graph(directed=self._directed)
        for node in self._nodes.values():
            clone.add_node(node)
        for edge in self._edges.values():
            clone.add_edge(edge)
        return clone

    # =========================================================================
    # ReadableGraph
    # =========================================================================

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def get_neighbors(self, node_id: str) -> list[str]:
        neighbors: dict[str, None] = {}
        for edge in self.get_outgoing_edges(node_id):
            neighbors.setdefault(edge.other(node_id), None)
        return list(neighbors)

    def get_all_nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def is_directed(self) -> bool:
        return self._directed

    def get_outgoing_edges(self, node_id: str) -> list[Edge]:
        if node_id not in self._nodes:
            return []
        if self._directed:
            return list(self._out[node_id])
        return self._touching(node_id)

    def get_incoming_edges(self, node_id: str) -> list[Edge]:
        if node_id not in self._nodes:
            return []
        if self._directed:
            return list(self._in[node_id])
        return self._touching(node_id)

    def get_all_edges(self) -> list[Edge]:
        return list(self._edges.values())

    def _touching(self, node_id: str) -> list[Edge]:
        """Edges incident to node_id in insertion order, self-loops once."""
        merged = {edge.id: edge for edge in self._out[node_id]}
        for edge in self._in[node_id]:
            merged.setdefault(edge.id, edge)
        return sorted(merged.values(), key=self._edge_order)

    def _edge_order(self, edge: Edge) -> int:
        return self._order[edge.id]

    # =========================================================================
    # Utility Methods
    # =========================================================================

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return f"Graph({kind}, nodes={self.node_count}, edges={self.edge_count})"
