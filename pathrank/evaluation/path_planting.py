"""
Ground-truth path planting for ranking experiments.

Plants synthetic paths with known signal strength into a copy of a graph.
Signal paths run through new intermediate nodes whose 'signal' attribute
is drawn from the configured band; noise paths use the [0, 0.1] band. A
good ranker should place signal paths above noise paths.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Literal

from pathrank.graph.model import Edge, Graph, Node, Path, ReadableGraph

logger = logging.getLogger(__name__)

SignalStrength = Literal["strong", "medium", "weak"]

SIGNAL_BANDS: dict[str, tuple[float, float]] = {
    "strong": (0.7, 0.95),
    "medium": (0.4, 0.7),
    "weak": (0.1, 0.4),
}
NOISE_BAND = (0.0, 0.1)

PLANTED_NODE_TYPE = "planted"


@dataclass
class PathPlantingConfig:
    """
    What to plant.

    Attributes:
        num_paths: Number of signal paths
        path_length: (min, max) hops per planted path; planted paths
            always have at least one intermediate node, so min is raised to 2
        signal_strength: Band for intermediate node signal values
        allow_overlap: Allow several paths between the same endpoint pair
        seed: RNG seed (None = nondeterministic)
        source_nodes: Candidate start nodes (None = every node)
        target_nodes: Candidate end nodes (None = every node)
        num_noise_paths: Number of noise paths (None = num_paths)
    """

    num_paths: int = 5
    path_length: tuple[int, int] = (2, 4)
    signal_strength: SignalStrength = "medium"
    allow_overlap: bool = False
    seed: int | None = None
    source_nodes: list[str] | None = None
    target_nodes: list[str] | None = None
    num_noise_paths: int | None = None


@dataclass
class PlantedPaths:
    """
    Planting outcome.

    Attributes:
        graph: Copy of the input graph with planted nodes and edges
        ground_truth: Signal paths, most relevant first
        noise_paths: Noise paths
        relevance: Mean intermediate signal per path key (signal and noise)
        metadata: nodes_added, edges_added, avg_path_mi
    """

    graph: Graph
    ground_truth: list[Path] = field(default_factory=list)
    noise_paths: list[Path] = field(default_factory=list)
    relevance: dict[str, float] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def relevant_keys(self) -> set[str]:
        return {path.key for path in self.ground_truth}


def copy_graph(graph: ReadableGraph) -> Graph:
    """Structural copy of any ReadableGraph as an in-memory Graph."""
    if isinstance(graph, Graph):
        return graph.copy()
    clone = Graph(directed=graph.is_directed())
    for node in graph.get_all_nodes():
        clone.add_node(node)
    for edge in graph.get_all_edges():
        clone.add_edge(edge)
    return clone


class _Planter:
    """Adds planted paths to one graph, tracking ids and endpoint pairs."""

    def __init__(self, graph: Graph, config: PathPlantingConfig, rng: random.Random) -> None:
        self.graph = graph
        self.config = config
        self.rng = rng
        self.nodes_added = 0
        self.edges_added = 0
        self._used_pairs: set[tuple[str, str]] = set()

        node_ids = [node.id for node in graph.get_all_nodes()]
        self._sources = [n for n in (config.source_nodes or node_ids) if n in graph]
        self._targets = [n for n in (config.target_nodes or node_ids) if n in graph]
        self._pairs = [(s, t) for s in self._sources for t in self._targets if s != t]
        if not self._pairs:
            raise ValueError("Path planting needs at least two distinct endpoint nodes")

    def _pick_pair(self) -> tuple[str, str]:
        if not self.config.allow_overlap:
            fresh = [pair for pair in self._pairs if pair not in self._used_pairs]
            if fresh:
                pair = self.rng.choice(fresh)
                self._used_pairs.add(pair)
                return pair
            logger.warning("All endpoint pairs used; planting overlapping paths")
        pair = self.rng.choice(self._pairs)
        self._used_pairs.add(pair)
        return pair

    def _new_id(self, stem: str) -> str:
        node_id = stem
        suffix = 1
        while node_id in self.graph:
            node_id = f"{stem}-{suffix}"
            suffix += 1
        return node_id

    def plant(self, label: str, band: tuple[float, float]) -> tuple[Path, float]:
        """Plant one path; returns it with its mean intermediate signal."""
        low, high = self.config.path_length
        low = max(2, low)
        length = self.rng.randint(low, max(low, high))
        source, target = self._pick_pair()

        node_ids = [source]
        signals: list[float] = []
        for step in range(length - 1):
            signal = self.rng.uniform(*band)
            node = Node(
                id=self._new_id(f"{label}-n{step}"),
                type=PLANTED_NODE_TYPE,
                attributes={"signal": signal},
            )
            self.graph.add_node(node)
            self.nodes_added += 1
            node_ids.append(node.id)
            signals.append(signal)
        node_ids.append(target)

        edges: list[Edge] = []
        for step, (u, v) in enumerate(zip(node_ids, node_ids[1:])):
            edge = self.graph.add_edge(
                u,
                v,
                edge_id=f"{label}-e{step}",
                weight=self.rng.uniform(*band),
                type=PLANTED_NODE_TYPE,
            )
            self.edges_added += 1
            edges.append(edge)

        return Path(tuple(node_ids), tuple(edges)), sum(signals) / len(signals)


def plant_ground_truth_paths(graph: ReadableGraph, config: PathPlantingConfig) -> PlantedPaths:
    """
    Plant signal and noise paths into a copy of graph.

    Args:
        graph: Graph to plant into (left untouched)
        config: Planting configuration

    Returns:
        PlantedPaths; identical for identical graph, config, and seed

    Raises:
        ValueError: If fewer than two usable endpoint nodes exist, or
            an invalid signal strength / path count is given
    """
    if config.signal_strength not in SIGNAL_BANDS:
        raise ValueError(f"Unknown signal strength: {config.signal_strength}")
    if config.num_paths < 0:
        raise ValueError(f"num_paths must be >= 0, got {config.num_paths}")

    rng = random.Random(config.seed)
    planted = copy_graph(graph)
    planter = _Planter(planted, config, rng)

    relevance: dict[str, float] = {}
    signal_paths: list[Path] = []
    for i in range(config.num_paths):
        path, signal = planter.plant(f"planted-s{i}", SIGNAL_BANDS[config.signal_strength])
        signal_paths.append(path)
        relevance[path.key] = signal

    noise_paths: list[Path] = []
    num_noise = config.num_paths if config.num_noise_paths is None else config.num_noise_paths
    for i in range(num_noise):
        path, signal = planter.plant(f"planted-x{i}", NOISE_BAND)
        noise_paths.append(path)
        relevance[path.key] = signal

    ground_truth = sorted(signal_paths, key=lambda p: relevance[p.key], reverse=True)
    avg_mi = sum(relevance[p.key] for p in signal_paths) / len(signal_paths) if signal_paths else 0.0

    logger.debug(
        f"Planted {len(signal_paths)} signal and {len(noise_paths)} noise paths "
        f"({planter.nodes_added} nodes, {planter.edges_added} edges)"
    )
    return PlantedPaths(
        graph=planted,
        ground_truth=ground_truth,
        noise_paths=noise_paths,
        relevance=relevance,
        metadata={
            "nodes_added": planter.nodes_added,
            "edges_added": planter.edges_added,
            "avg_path_mi": avg_mi,
        },
    )
