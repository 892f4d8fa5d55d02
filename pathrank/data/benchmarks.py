"""
Benchmark dataset registry and loader.

Usage:
    from pathrank.data.benchmarks import load_benchmark_by_id

    benchmark = load_benchmark_by_id("karate")   # bundled, no files needed
    benchmark = load_benchmark_by_id("Cora")     # needs data/benchmarks/cora.msgpack

Snapshots live in BENCHMARK_DATA_DIR as <id>.msgpack or <id>.txt. The
msgpack layout is {"directed": bool, "nodes": [...], "edges": [...]};
nodes are ids or {"id", "type", ...attributes}, edges are
[source, target(, weight)] or {"source", "target", ...}. The .txt form is
a whitespace-separated edge list with '#' comments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import msgpack

from pathrank.config import BENCHMARK_COUNT_TOLERANCE, BENCHMARK_DATA_DIR, BENCHMARK_FILE_EXTENSIONS
from pathrank.graph.model import Edge, Graph, Node

logger = logging.getLogger(__name__)


# =============================================================================
# Metadata
# =============================================================================

@dataclass(frozen=True)
class BenchmarkDatasetMeta:
    """
    Static description of a benchmark dataset.

    Attributes:
        id: Lower-case identifier (also the snapshot file stem)
        name: Display name
        expected_nodes: Published node count
        expected_edges: Published edge count
        directed: Whether edges are directed
        description: One-line description
    """

    id: str
    name: str
    expected_nodes: int
    expected_edges: int
    directed: bool
    description: str = ""


CORA = BenchmarkDatasetMeta("cora", "Cora", 2708, 5429, True, "Machine-learning paper citation network")
CITESEER = BenchmarkDatasetMeta("citeseer", "CiteSeer", 3264, 4536, True, "CiteSeer paper citation network")
FACEBOOK = BenchmarkDatasetMeta("facebook", "Facebook", 4039, 88234, False, "Facebook ego-network friendships")
KARATE = BenchmarkDatasetMeta("karate", "Karate Club", 34, 78, False, "Zachary's karate club")
LESMIS = BenchmarkDatasetMeta("lesmis", "Les Misérables", 69, 279, False, "Les Misérables character co-occurrence")
DBLP = BenchmarkDatasetMeta("dblp", "DBLP", 317080, 1049866, False, "DBLP co-authorship network")

BENCHMARK_DATASETS: list[BenchmarkDatasetMeta] = [CORA, CITESEER, FACEBOOK, KARATE, LESMIS, DBLP]
DATASETS_BY_ID: dict[str, BenchmarkDatasetMeta] = {d.id: d for d in BENCHMARK_DATASETS}


@dataclass
class LoadedBenchmark:
    meta: BenchmarkDatasetMeta
    graph: Graph
    source: str = "bundled"

    @property
    def node_count(self) -> int:
        return self.graph.node_count

    @property
    def edge_count(self) -> int:
        return self.graph.edge_count


@dataclass
class BenchmarkValidation:
    valid: bool
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Bundled Data
# =============================================================================

# Zachary's karate club, 1-indexed, each undirected edge listed once
_KARATE_ADJACENCY: dict[int, tuple[int, ...]] = {
    1: (2, 3, 4, 5, 6, 7, 8, 9, 11, 12, 13, 14, 18, 20, 22, 32),
    2: (3, 4, 8, 14, 18, 20, 22, 31),
    3: (4, 8, 9, 10, 14, 28, 29, 33),
    4: (8, 13, 14),
    5: (7, 11),
    6: (7, 11, 17),
    7: (17,),
    9: (31, 33, 34),
    10: (34,),
    14: (34,),
    15: (33, 34),
    16: (33, 34),
    19: (33, 34),
    20: (34,),
    21: (33, 34),
    23: (33, 34),
    24: (26, 28, 30, 33, 34),
    25: (26, 28, 32),
    26: (32,),
    27: (30, 34),
    28: (34,),
    29: (32, 34),
    30: (33, 34),
    31: (33, 34),
    32: (33, 34),
    33: (34,),
}

# Members who followed the instructor after the split
_KARATE_MR_HI = {1, 2, 3, 4, 5, 6, 7, 8, 9, 11, 12, 13, 14, 17, 18, 20, 22}


def karate_club_graph() -> Graph:
    """Zachary's karate club (34 nodes, 78 edges); nodes carry a 'club' attribute."""
    graph = Graph(directed=False)
    for member in range(1, 35):
        graph.add_node(str(member), club="Mr. Hi" if member in _KARATE_MR_HI else "Officer")
    for source, targets in _KARATE_ADJACENCY.items():
        for target in targets:
            graph.add_edge(str(source), str(target), edge_id=f"{source}-{target}")
    return graph


# =============================================================================
# Snapshot I/O
# =============================================================================

def _parse_node(raw: Any) -> Node:
    if isinstance(raw, dict):
        attributes = {k: v for k, v in raw.items() if k not in ("id", "type")}
        return Node(id=str(raw["id"]), type=str(raw.get("type", "")), attributes=attributes)
    return Node(id=str(raw))


def _parse_edge(raw: Any, index: int) -> Edge:
    if isinstance(raw, dict):
        extra = {k: v for k, v in raw.items() if k not in ("id", "source", "target", "weight", "score", "type")}
        return Edge(
            id=str(raw.get("id", f"e{index}")),
            source=str(raw["source"]),
            target=str(raw["target"]),
            weight=raw.get("weight"),
            score=raw.get("score"),
            type=raw.get("type"),
            attributes=extra,
        )
    source, target, *rest = raw
    return Edge(
        id=f"e{index}",
        source=str(source),
        target=str(target),
        weight=float(rest[0]) if rest else None,
    )


def _build_graph(nodes: list[Node], edges: list[Edge], directed: bool) -> Graph:
    """Assemble a Graph, adding unseen endpoints and dropping repeated edges."""
    graph = Graph(directed=directed)
    for node in nodes:
        graph.add_node(node)

    seen: set[tuple[str, str]] = set()
    skipped = 0
    for edge in edges:
        pair = (edge.source, edge.target) if directed else tuple(sorted((edge.source, edge.target)))
        if pair in seen:
            skipped += 1
            continue
        seen.add(pair)
        for endpoint in (edge.source, edge.target):
            if endpoint not in graph:
                graph.add_node(endpoint)
        graph.add_edge(edge)

    if skipped:
        logger.debug(f"Dropped {skipped} repeated edges")
    return graph


def read_msgpack_snapshot(path: Path, directed: bool | None = None) -> Graph:
    """Load a msgpack graph snapshot."""
    with open(path, "rb") as f:
        data = msgpack.load(f)

    is_directed = bool(data.get("directed", False)) if directed is None else directed
    nodes = [_parse_node(raw) for raw in data.get("nodes", [])]
    edges = [_parse_edge(raw, i) for i, raw in enumerate(data.get("edges", []))]
    return _build_graph(nodes, edges, is_directed)


def read_edge_list(path: Path, directed: bool = False) -> Graph:
    """Load a whitespace-separated edge list ('source target [weight]' per line)."""
    edges: list[Edge] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"Malformed edge list line in {path}: {line!r}")
            edges.append(_parse_edge(parts[:3], len(edges)))
    return _build_graph([], edges, directed)


def write_msgpack_snapshot(graph: Graph, path: Path) -> None:
    """Write a graph in the msgpack snapshot layout."""
    data = {
        "directed": graph.is_directed(),
        "nodes": [{"id": n.id, "type": n.type, **n.attributes} for n in graph.get_all_nodes()],
        "edges": [
            {
                "id": e.id,
                "source": e.source,
                "target": e.target,
                "weight": e.weight,
                "score": e.score,
                "type": e.type,
                **e.attributes,
            }
            for e in graph.get_all_edges()
        ],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        msgpack.dump(data, f)


def find_snapshot(dataset_id: str, data_dir: Path | None = None) -> Path | None:
    """First existing snapshot file for a dataset id, or None."""
    directory = data_dir or BENCHMARK_DATA_DIR
    for ext in BENCHMARK_FILE_EXTENSIONS:
        candidate = directory / f"{dataset_id}{ext}"
        if candidate.exists():
            return candidate
    return None


# =============================================================================
# Public API
# =============================================================================

def validate_benchmark(
    benchmark: LoadedBenchmark,
    tolerance: float = BENCHMARK_COUNT_TOLERANCE,
) -> BenchmarkValidation:
    """
    Compare actual node/edge counts against the published counts.

    Differences above `tolerance` (relative) produce warnings, never errors.
    """
    warnings: list[str] = []
    meta = benchmark.meta
    for label, actual, expected in (
        ("nodes", benchmark.node_count, meta.expected_nodes),
        ("edges", benchmark.edge_count, meta.expected_edges),
    ):
        if expected and abs(actual - expected) / expected > tolerance:
            warnings.append(
                f"{meta.name}: expected {expected:,} {label}, found {actual:,} "
                f"({abs(actual - expected) / expected:.1%} off)"
            )
    return BenchmarkValidation(valid=not warnings, warnings=warnings)


def load_benchmark(meta: BenchmarkDatasetMeta, data_dir: Path | None = None) -> LoadedBenchmark:
    """
    Load a benchmark dataset.

    A snapshot file in data_dir (default BENCHMARK_DATA_DIR) takes
    precedence; Karate Club falls back to the bundled copy.

    Raises:
        FileNotFoundError: If no snapshot exists and the dataset is not bundled
    """
    snapshot = find_snapshot(meta.id, data_dir)
    if snapshot is None:
        if meta.id != KARATE.id:
            directory = data_dir or BENCHMARK_DATA_DIR
            raise FileNotFoundError(
                f"No snapshot for benchmark '{meta.id}' in {directory} "
                f"(expected one of: {', '.join(meta.id + ext for ext in BENCHMARK_FILE_EXTENSIONS)})"
            )
        benchmark = LoadedBenchmark(meta=meta, graph=karate_club_graph(), source="bundled")
    else:
        logger.info(f"Loading {meta.name} from {snapshot}...")
        if snapshot.suffix == ".msgpack":
            graph = read_msgpack_snapshot(snapshot, directed=meta.directed)
        else:
            graph = read_edge_list(snapshot, directed=meta.directed)
        benchmark = LoadedBenchmark(meta=meta, graph=graph, source=str(snapshot))

    logger.info(f"Loaded {meta.name}: {benchmark.node_count:,} nodes, {benchmark.edge_count:,} edges")
    for warning in validate_benchmark(benchmark).warnings:
        logger.warning(warning)
    return benchmark


def load_benchmark_by_id(dataset_id: str, data_dir: Path | None = None) -> LoadedBenchmark:
    """
    Load a benchmark by id (case-insensitive).

    Raises:
        ValueError: If the id is not a known dataset
        FileNotFoundError: If the snapshot is missing
    """
    meta = DATASETS_BY_ID.get(dataset_id.lower())
    if meta is None:
        raise ValueError(
            f"Unknown benchmark dataset: '{dataset_id}'. Valid: {', '.join(DATASETS_BY_ID)}"
        )
    return load_benchmark(meta, data_dir)


def get_benchmark_summary(benchmark: LoadedBenchmark) -> str:
    """One-line human-readable description of a loaded benchmark."""
    kind = "directed" if benchmark.meta.directed else "undirected"
    return (
        f"{benchmark.meta.name}: {benchmark.node_count:,} nodes, "
        f"{benchmark.edge_count:,} edges ({kind})"
    )
