"""
Unit tests for per-edge mutual-information estimation.
"""

import pytest

from pathrank.graph import Edge, Graph
from pathrank.ranking import MIConfig, MIStrategy, compute_edge_mi, precompute_mutual_information

EPS = 1e-10


class TestStrategySelection:
    """Test automatic strategy choice."""

    def test_attribute_strategy_with_extractor(self, lambda_graph, value_extractor):
        """An extractor should select attribute-based MI."""
        cache = precompute_mutual_information(lambda_graph, MIConfig(attribute_extractor=value_extractor))
        assert cache.strategy == MIStrategy.ATTRIBUTE
        assert len(cache) == lambda_graph.edge_count

    def test_type_strategy_for_heterogeneous_graph(self):
        """Several node types should select type-based MI."""
        graph = Graph()
        graph.add_node("p1", type="paper")
        graph.add_node("p2", type="paper")
        graph.add_node("a1", type="author")
        graph.add_edge("p1", "p2", edge_id="pp")
        graph.add_edge("p1", "a1", edge_id="pa1")
        cache = precompute_mutual_information(graph)
        assert cache.strategy == MIStrategy.TYPE

    def test_structural_fallback(self, diamond_graph):
        """Without attributes or types, structural MI should be used."""
        cache = precompute_mutual_information(diamond_graph)
        assert cache.strategy == MIStrategy.STRUCTURAL
        assert set(cache.keys()) == {"ab", "ac", "bd", "cd", "de"}


class TestAttributeMI:
    """Test attribute-based estimates."""

    def test_scalar_signal_strength(self, lambda_graph, value_extractor):
        """Scalar features should score by joint magnitude relative to the graph maximum."""
        cache = precompute_mutual_information(lambda_graph, MIConfig(attribute_extractor=value_extractor))
        assert cache.get("CG") == pytest.approx(1.0)
        assert cache.get("AC") == pytest.approx(0.5)
        assert cache.get("AB") == pytest.approx(0.005)

    def test_vector_correlation(self):
        """Perfectly (anti-)correlated vectors should have MI close to 1."""
        graph = Graph()
        graph.add_node("x", features=[1.0, 2.0, 3.0])
        graph.add_node("y", features=[3.0, 2.0, 1.0])
        graph.add_edge("x", "y", edge_id="xy")
        config = MIConfig(attribute_extractor=lambda n: n.get("features"))
        cache = precompute_mutual_information(graph, config)
        assert cache.get("xy") == pytest.approx(1.0)

    def test_missing_features_fall_back(self, diamond_graph):
        """Nodes without features should get structural MI."""
        cache = precompute_mutual_information(diamond_graph, MIConfig(attribute_extractor=lambda n: None))
        # N(A) = {B, C}, N(B) = {A, D}: no overlap
        assert cache.get("ab") == pytest.approx(EPS)


class TestTypeMI:
    """Test type-rarity estimates."""

    def test_rare_pairs_score_higher(self):
        """Rare type pairs should carry more information than common ones."""
        graph = Graph()
        for i in range(4):
            graph.add_node(f"p{i}", type="paper")
        graph.add_node("a", type="author")
        graph.add_edge("p0", "p1", edge_id="c1")
        graph.add_edge("p1", "p2", edge_id="c2")
        graph.add_edge("p2", "p3", edge_id="c3")
        graph.add_edge("p0", "a", edge_id="w")
        cache = precompute_mutual_information(graph)
        assert cache.get("w") > cache.get("c1")
        assert 0 <= cache.get("c1") <= 1


class TestStructuralMI:
    """Test Jaccard-based estimates."""

    def test_jaccard(self, diamond_graph):
        """Should equal neighbourhood Jaccard similarity plus epsilon."""
        cache = precompute_mutual_information(diamond_graph)
        # N(B) = {A, D}, N(D) = {B, C, E}: no overlap
        assert cache.get("bd") == pytest.approx(EPS)

    def test_shared_neighbours(self):
        """A triangle edge shares one neighbour out of three."""
        graph = Graph()
        for node_id in "ABC":
            graph.add_node(node_id)
        graph.add_edge("A", "B", edge_id="ab")
        graph.add_edge("B", "C", edge_id="bc")
        graph.add_edge("A", "C", edge_id="ac")
        cache = precompute_mutual_information(graph)
        # N(A) = {B, C}, N(B) = {A, C}: intersection {C}, union {A, B, C}
        assert cache.get("ab") == pytest.approx(1 / 3)


class TestComputeEdgeMI:
    """Test on-demand single-edge computation."""

    def test_matches_cache(self, lambda_graph, value_extractor):
        """Single-edge MI should agree with the precomputed value."""
        config = MIConfig(attribute_extractor=value_extractor)
        cache = precompute_mutual_information(lambda_graph, config)
        edge = next(e for e in lambda_graph.get_all_edges() if e.id == "GE")
        assert compute_edge_mi(lambda_graph, edge, config) == pytest.approx(cache.get("GE"))

    def test_unknown_endpoint(self, diamond_graph):
        """Edges to unknown nodes should get epsilon."""
        assert compute_edge_mi(diamond_graph, Edge("x", "A", "nope")) == EPS
