"""
Graph abstraction module.

Provides the read-only graph contract every algorithm consumes, an
in-memory Graph implementation, result values, and traversal options.
"""

from pathrank.graph.model import Edge, Graph, Node, Path, ReadableGraph
from pathrank.graph.options import (
    PathfindingOptions,
    TraversalOptions,
    WeightConfig,
    resolve_edge_weight,
    traversal_edges,
)
from pathrank.graph.result import Err, ErrorKind, GraphError, Ok, Result

__all__ = [
    "Edge",
    "Graph",
    "Node",
    "Path",
    "ReadableGraph",
    "PathfindingOptions",
    "TraversalOptions",
    "WeightConfig",
    "resolve_edge_weight",
    "traversal_edges",
    "Err",
    "ErrorKind",
    "GraphError",
    "Ok",
    "Result",
]
