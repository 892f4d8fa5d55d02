"""
pathrank: graph traversal and path-ranking evaluation engine.

Discovers, ranks, and statistically validates connection paths between
two entities in an arbitrary graph:
- Traversal: BFS, DFS, ego networks, degree-prioritised bidirectional search
- Ranking: mutual-information path scoring with a length penalty
- Evaluation: planted-path experiments, ranking metrics, multiple-comparison
  corrections, and report generation
"""

__version__ = "0.1.0"

from pathrank.graph import Edge, Err, ErrorKind, Graph, GraphError, Node, Ok, Path, ReadableGraph
from pathrank.ranking import PathRankingConfig, RankedPath, get_best_path, rank_paths
from pathrank.traversal import BidirectionalSearch, GraphExpander, bfs, dfs, extract_ego_network

__all__ = [
    "__version__",
    "Edge",
    "Err",
    "ErrorKind",
    "Graph",
    "GraphError",
    "Node",
    "Ok",
    "Path",
    "ReadableGraph",
    "PathRankingConfig",
    "RankedPath",
    "get_best_path",
    "rank_paths",
    "BidirectionalSearch",
    "GraphExpander",
    "bfs",
    "dfs",
    "extract_ego_network",
]
