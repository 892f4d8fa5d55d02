"""
Traversal module.

Breadth- and depth-first exploration, the stable priority queue used by
best-first search, bidirectional search over lazily expanded graphs, and
ego-network extraction.
"""

from pathrank.traversal.bfs import bfs, shortest_distance, shortest_path
from pathrank.traversal.bidirectional import (
    BidirectionalSearch,
    BidirectionalSearchResult,
    GraphBackedExpander,
    GraphExpander,
    Neighbor,
    bidirectional_search,
)
from pathrank.traversal.dfs import dfs
from pathrank.traversal.ego_network import EgoNetwork, extract_ego_network
from pathrank.traversal.priority_queue import PriorityQueue
from pathrank.traversal.result import TraversalResult

__all__ = [
    "bfs",
    "shortest_distance",
    "shortest_path",
    "dfs",
    "BidirectionalSearch",
    "BidirectionalSearchResult",
    "GraphBackedExpander",
    "GraphExpander",
    "Neighbor",
    "bidirectional_search",
    "EgoNetwork",
    "extract_ego_network",
    "PriorityQueue",
    "TraversalResult",
]
