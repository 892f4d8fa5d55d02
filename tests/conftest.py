"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

from pathlib import Path

import pytest

from pathrank.graph import Graph


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def data_dir(project_root: Path) -> Path:
    """Return the data directory."""
    return project_root / "data"


@pytest.fixture
def diamond_graph() -> Graph:
    """
    Undirected diamond with a tail:

        A - B - D - E
         \\     /
          - C -
    """
    graph = Graph(directed=False)
    for node_id in "ABCDE":
        graph.add_node(node_id)
    graph.add_edge("A", "B", edge_id="ab")
    graph.add_edge("A", "C", edge_id="ac")
    graph.add_edge("B", "D", edge_id="bd")
    graph.add_edge("C", "D", edge_id="cd")
    graph.add_edge("D", "E", edge_id="de")
    return graph


@pytest.fixture
def directed_chain() -> Graph:
    """Directed A -> B -> C."""
    graph = Graph(directed=True)
    for node_id in "ABC":
        graph.add_node(node_id)
    graph.add_edge("A", "B", edge_id="ab")
    graph.add_edge("B", "C", edge_id="bc")
    return graph


@pytest.fixture
def lambda_graph() -> Graph:
    """
    Two routes from A to F.

    Short (3 hops) through low-value nodes:   A - B - D - F
    Long (4 hops) through high-value nodes:   A - C - G - E - F
    """
    graph = Graph(directed=False)
    values = {"A": 0, "B": 1, "C": 100, "D": 1, "E": 100, "F": 0, "G": 100}
    for node_id, value in values.items():
        graph.add_node(node_id, value=value)
    for source, target in [("A", "B"), ("B", "D"), ("D", "F"), ("A", "C"), ("C", "G"), ("G", "E"), ("E", "F")]:
        graph.add_edge(source, target, edge_id=f"{source}{target}")
    return graph


@pytest.fixture
def value_extractor():
    """Feature extractor reading the 'value' attribute."""
    return lambda node: [float(node.get("value", 0))]


@pytest.fixture
def near_complete_graph() -> Graph:
    """10-node complete graph minus the edge between n0 and n9."""
    graph = Graph(directed=False)
    ids = [f"n{i}" for i in range(10)]
    for node_id in ids:
        graph.add_node(node_id)
    for i in range(10):
        for j in range(i + 1, 10):
            if (i, j) != (0, 9):
                graph.add_edge(ids[i], ids[j])
    return graph


@pytest.fixture
def small_graph() -> Graph:
    """Three-node path n1 - n2 - n3 used as a planting base."""
    graph = Graph(directed=False)
    for node_id in ("n1", "n2", "n3"):
        graph.add_node(node_id, type="test")
    graph.add_edge("n1", "n2", edge_id="e1")
    graph.add_edge("n2", "n3", edge_id="e2")
    return graph
