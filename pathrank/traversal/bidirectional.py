"""
Degree-prioritised bidirectional best-first search over a lazily expanded graph.

The graph is discovered through a GraphExpander, so the same search runs
against an in-memory snapshot, a database, or a remote API. Low-degree
(specific) nodes are expanded before high-degree hubs, which keeps the
discovered connections from being dominated by generic nodes.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pathrank.config import DEFAULT_MAX_ITERATIONS, DEFAULT_MIN_ITERATIONS, DEFAULT_TARGET_PATHS
from pathrank.graph.model import Graph, Node, ReadableGraph
from pathrank.graph.result import Err, GraphError, Ok, Result
from pathrank.traversal.priority_queue import PriorityQueue

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Neighbor:
    """A relationship returned by GraphExpander.get_neighbors."""

    target_id: str
    relationship_type: str


class GraphExpander(ABC, Generic[T]):
    """
    Source of neighbours for dynamically fetched graphs.

    get_neighbors and get_node may perform I/O; get_degree must answer from
    local knowledge because it is called once per discovered node.
    """

    @abstractmethod
    async def get_neighbors(self, node_id: str) -> list[Neighbor]:
        ...

    @abstractmethod
    def get_degree(self, node_id: str) -> int:
        """Number of relationships (higher = expanded later)."""
        ...

    @abstractmethod
    async def get_node(self, node_id: str) -> T | None:
        ...

    @abstractmethod
    def add_edge(self, source: str, target: str, relationship_type: str) -> None:
        """Record a relationship discovered during expansion."""
        ...


class GraphBackedExpander(GraphExpander[Node]):
    """
    GraphExpander over an already-materialised ReadableGraph.

    Discovered edges are copied into `output`, a Graph holding only the
    part of the source graph the search actually touched.
    """

    def __init__(self, graph: ReadableGraph) -> None:
        self._graph = graph
        self.output = Graph(directed=graph.is_directed())
        self._recorded: set[str] = set()
        self.expanded: list[str] = []

    async def get_neighbors(self, node_id: str) -> list[Neighbor]:
        self.expanded.append(node_id)
        neighbors: list[Neighbor] = []
        seen: set[str] = set()
        for edge in self._graph.get_outgoing_edges(node_id):
            other = edge.other(node_id)
            if other not in seen:
                seen.add(other)
                neighbors.append(Neighbor(other, edge.type or "related"))
        if not neighbors:
            neighbors = [Neighbor(n, "related") for n in self._graph.get_neighbors(node_id)]
        return neighbors

    def get_degree(self, node_id: str) -> int:
        return self._graph.get_degree(node_id)

    async def get_node(self, node_id: str) -> Node | None:
        return self._graph.get_node(node_id)

    def add_edge(self, source: str, target: str, relationship_type: str) -> None:
        edge_id = f"{source}->{target}:{relationship_type}"
        if edge_id in self._recorded:
            return
        self._recorded.add(edge_id)
        for node_id in (source, target):
            if node_id not in self.output:
                node = self._graph.get_node(node_id)
                self.output.add_node(node if node is not None else Node(node_id))
        self.output.add_edge(
            source,
            target,
            edge_id=edge_id,
            type=relationship_type,
        )


@dataclass(frozen=True)
class BidirectionalSearchResult:
    """
    Outcome of a bidirectional search.

    Attributes:
        paths: Node-id sequences from seed_a to seed_b, in discovery order
        visited_a: Nodes reached from seed_a
        visited_b: Nodes reached from seed_b
        iterations: Iterations actually consumed (<= max_iterations)
    """

    paths: list[list[str]]
    visited_a: set[str] = field(default_factory=set)
    visited_b: set[str] = field(default_factory=set)
    iterations: int = 0


@dataclass
class _SearchState:
    """One direction of the search."""

    visited: set[str]
    frontier: PriorityQueue[str]
    parents: dict[str, tuple[str, str]] = field(default_factory=dict)

    @classmethod
    def seeded(cls, seed: str) -> _SearchState:
        frontier: PriorityQueue[str] = PriorityQueue()
        frontier.push(seed, 0)
        return cls(visited={seed}, frontier=frontier)


class BidirectionalSearch(Generic[T]):
    """
    Find up to target_paths distinct paths between two seeds.

    Each iteration expands the whole frontier of side A, checks whether the
    frontiers met, then does the same for side B. Once target_paths paths
    exist the search keeps going for min_iterations more iterations,
    re-seeding both frontiers with the nodes of newly found paths, to
    improve path diversity.

    Usage:
        search = BidirectionalSearch(expander, "A", "B", target_paths=3, max_iterations=10)
        result = asyncio.run(search.run())
        if result.ok:
            print(result.value.paths)
    """

    def __init__(
        self,
        expander: GraphExpander[T],
        seed_a: str,
        seed_b: str,
        target_paths: int,
        max_iterations: int,
        min_iterations: int = DEFAULT_MIN_ITERATIONS,
    ) -> None:
        self._expander = expander
        self._seed_a = seed_a
        self._seed_b = seed_b
        self._target_paths = target_paths
        self._max_iterations = max_iterations
        self._min_iterations = min_iterations

        self._found: list[list[str]] = []
        self._state_a = _SearchState.seeded(seed_a)
        self._state_b = _SearchState.seeded(seed_b)

    def _validate(self) -> GraphError | None:
        if self._target_paths <= 0:
            return GraphError.invalid(f"target_paths must be positive, got {self._target_paths}")
        if self._max_iterations < 0:
            return GraphError.invalid(f"max_iterations must be >= 0, got {self._max_iterations}")
        if self._min_iterations < 0:
            return GraphError.invalid(f"min_iterations must be >= 0, got {self._min_iterations}")
        return None

    async def run(self) -> Result[BidirectionalSearchResult]:
        """Execute the search; invalid options are reported before any expansion."""
        error = self._validate()
        if error is not None:
            return Err(error)

        if self._seed_a == self._seed_b:
            return Ok(
                BidirectionalSearchResult(
                    paths=[[self._seed_a]],
                    visited_a={self._seed_a},
                    visited_b={self._seed_b},
                    iterations=0,
                )
            )

        iteration = 0
        focused_since: int | None = None

        while self._should_continue(iteration, focused_since):
            iteration += 1

            for state in (self._state_a, self._state_b):
                if state.frontier:
                    await self._expand(state)

                before = len(self._found)
                self._check_connections()

                if focused_since is None and len(self._found) >= self._target_paths:
                    focused_since = iteration
                    logger.debug(
                        f"Target of {self._target_paths} paths reached at iteration {iteration}"
                    )
                if focused_since is not None:
                    self._seed_frontiers_from_paths(before)

            logger.debug(
                f"Iteration {iteration}: frontier A={len(self._state_a.frontier)}, "
                f"frontier B={len(self._state_b.frontier)}, paths={len(self._found)}"
            )

        logger.info(
            f"Bidirectional search '{self._seed_a}' <-> '{self._seed_b}' found "
            f"{len(self._found)} paths in {iteration} iterations"
        )
        return Ok(
            BidirectionalSearchResult(
                paths=[list(p) for p in self._found],
                visited_a=set(self._state_a.visited),
                visited_b=set(self._state_b.visited),
                iterations=iteration,
            )
        )

    def _should_continue(self, iteration: int, focused_since: int | None) -> bool:
        if iteration >= self._max_iterations:
            return False
        if not self._state_a.frontier and not self._state_b.frontier:
            return False
        if len(self._found) < self._target_paths:
            return True
        return focused_since is not None and iteration - focused_since < self._min_iterations

    async def _expand(self, state: _SearchState) -> None:
        """
        Expand every node currently queued on one side.

        Neighbour fetches for the batch run concurrently; their results are
        applied in the batch's pop order so visiting stays reproducible.
        """
        batch = state.frontier.drain()
        responses = await asyncio.gather(
            *(self._expander.get_neighbors(node_id) for node_id in batch)
        )

        for node_id, neighbors in zip(batch, responses, strict=True):
            for neighbor in neighbors:
                if neighbor.target_id in state.visited:
                    continue
                self._expander.add_edge(node_id, neighbor.target_id, neighbor.relationship_type)
                state.visited.add(neighbor.target_id)
                state.parents[neighbor.target_id] = (node_id, neighbor.relationship_type)
                state.frontier.push(neighbor.target_id, self._expander.get_degree(neighbor.target_id))

    def _check_connections(self) -> None:
        """Record a path for every frontier node already visited by the other side."""
        for node_id in self._state_a.frontier:
            if node_id in self._state_b.visited:
                self._record(self._reconstruct(node_id))
        for node_id in self._state_b.frontier:
            if node_id in self._state_a.visited:
                self._record(self._reconstruct(node_id))

    def _reconstruct(self, meeting: str) -> list[str]:
        """Join the A-side parent chain and the B-side parent chain at meeting."""
        from_a: list[str] = []
        current: str | None = meeting
        while current is not None:
            from_a.append(current)
            parent = self._state_a.parents.get(current)
            current = parent[0] if parent else None
        from_a.reverse()

        to_b: list[str] = []
        current = meeting
        while current in self._state_b.parents:
            current = self._state_b.parents[current][0]
            to_b.append(current)

        return from_a + to_b

    def _record(self, path: list[str]) -> None:
        """Keep simple seed-to-seed paths not already found."""
        if not path or path[0] != self._seed_a or path[-1] != self._seed_b:
            return
        if len(set(path)) != len(path) or path in self._found:
            return
        self._found.append(path)

    def _seed_frontiers_from_paths(self, start: int) -> None:
        """
        Push nodes of paths found since `start` into both frontiers.

        A node new to a side gets its path neighbour towards that side's
        seed as parent, so later reconstructions still reach the seed.
        """
        for path in self._found[start:]:
            for prev, node_id in zip(path, path[1:]):
                self._adopt(self._state_a, node_id, prev)
            for nxt, node_id in zip(reversed(path), list(reversed(path))[1:]):
                self._adopt(self._state_b, node_id, nxt)

    def _adopt(self, state: _SearchState, node_id: str, parent: str) -> None:
        if node_id in state.visited:
            return
        state.visited.add(node_id)
        state.parents[node_id] = (parent, "path")
        state.frontier.push(node_id, self._expander.get_degree(node_id))


async def bidirectional_search(
    expander: GraphExpander[T],
    seed_a: str,
    seed_b: str,
    target_paths: int = DEFAULT_TARGET_PATHS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    min_iterations: int = DEFAULT_MIN_ITERATIONS,
) -> Result[BidirectionalSearchResult]:
    """Convenience wrapper: build a BidirectionalSearch and run it."""
    search = BidirectionalSearch(expander, seed_a, seed_b, target_paths, max_iterations, min_iterations)
    return await search.run()
