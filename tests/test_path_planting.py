"""
Unit tests for ground-truth path planting and baseline rankers.
"""

import pytest

from pathrank.evaluation.baselines import (
    degree_ranker,
    mi_ranker,
    random_ranker,
    shortest_path_ranker,
    weight_ranker,
)
from pathrank.evaluation.path_planting import (
    NOISE_BAND,
    PLANTED_NODE_TYPE,
    SIGNAL_BANDS,
    PathPlantingConfig,
    plant_ground_truth_paths,
)
from pathrank.graph import Graph
from pathrank.ranking import MIConfig


def planted_signal(node):
    return [float(node.get("signal", 0.0))]


class TestPathPlanting:
    """Test plant_ground_truth_paths."""

    def test_counts(self, diamond_graph):
        """Should plant the requested number of signal and noise paths."""
        planted = plant_ground_truth_paths(diamond_graph, PathPlantingConfig(num_paths=3, seed=1))
        assert len(planted.ground_truth) == 3
        assert len(planted.noise_paths) == 3

    def test_explicit_noise_count(self, diamond_graph):
        """num_noise_paths should override the noise count."""
        config = PathPlantingConfig(num_paths=2, num_noise_paths=0, seed=1)
        assert plant_ground_truth_paths(diamond_graph, config).noise_paths == []

    def test_input_untouched(self, diamond_graph):
        """The input graph should not be modified."""
        before = (diamond_graph.node_count, diamond_graph.edge_count)
        plant_ground_truth_paths(diamond_graph, PathPlantingConfig(seed=1))
        assert (diamond_graph.node_count, diamond_graph.edge_count) == before

    def test_deterministic(self, diamond_graph):
        """Same seed should give the same planted paths."""
        config = PathPlantingConfig(num_paths=4, seed=42)
        first = plant_ground_truth_paths(diamond_graph, config)
        second = plant_ground_truth_paths(diamond_graph, config)
        assert [p.key for p in first.ground_truth] == [p.key for p in second.ground_truth]
        assert first.relevance == second.relevance

    def test_paths_exist_in_graph(self, diamond_graph):
        """Planted paths should be walkable in the returned graph."""
        planted = plant_ground_truth_paths(diamond_graph, PathPlantingConfig(num_paths=3, seed=7))
        for path in planted.ground_truth + planted.noise_paths:
            assert path.source in diamond_graph
            assert path.target in diamond_graph
            for edge in path.edges:
                assert edge in planted.graph.get_all_edges()

    def test_length_bounds(self, diamond_graph):
        """Path lengths should respect the configured range."""
        config = PathPlantingConfig(num_paths=5, path_length=(3, 5), seed=3)
        planted = plant_ground_truth_paths(diamond_graph, config)
        assert all(3 <= p.length <= 5 for p in planted.ground_truth)

    def test_minimum_length_raised(self, diamond_graph):
        """A minimum of 1 should still plant an intermediate node."""
        config = PathPlantingConfig(num_paths=3, path_length=(1, 1), seed=3)
        planted = plant_ground_truth_paths(diamond_graph, config)
        assert all(p.length == 2 for p in planted.ground_truth)

    @pytest.mark.parametrize("strength", sorted(SIGNAL_BANDS))
    def test_signal_bands(self, diamond_graph, strength):
        """Intermediate signals should fall in the configured band."""
        config = PathPlantingConfig(num_paths=3, signal_strength=strength, seed=5)
        planted = plant_ground_truth_paths(diamond_graph, config)
        low, high = SIGNAL_BANDS[strength]
        for path in planted.ground_truth:
            for node_id in path.node_ids[1:-1]:
                node = planted.graph.get_node(node_id)
                assert node.type == PLANTED_NODE_TYPE
                assert low <= node.get("signal") <= high
        for path in planted.noise_paths:
            assert NOISE_BAND[0] <= planted.relevance[path.key] <= NOISE_BAND[1]

    def test_ground_truth_sorted_by_relevance(self, diamond_graph):
        """Ground truth should be ordered most relevant first."""
        planted = plant_ground_truth_paths(diamond_graph, PathPlantingConfig(num_paths=4, seed=9))
        scores = [planted.relevance[p.key] for p in planted.ground_truth]
        assert scores == sorted(scores, reverse=True)

    def test_metadata(self, diamond_graph):
        """Metadata should count added nodes and edges."""
        planted = plant_ground_truth_paths(diamond_graph, PathPlantingConfig(num_paths=2, seed=2))
        added_nodes = planted.graph.node_count - diamond_graph.node_count
        added_edges = planted.graph.edge_count - diamond_graph.edge_count
        assert planted.metadata["nodes_added"] == added_nodes
        assert planted.metadata["edges_added"] == added_edges
        assert 0.0 < planted.metadata["avg_path_mi"] < 1.0

    def test_restricted_endpoints(self, diamond_graph):
        """source_nodes and target_nodes should constrain endpoints."""
        config = PathPlantingConfig(num_paths=2, source_nodes=["A"], target_nodes=["E"], allow_overlap=True, seed=1)
        planted = plant_ground_truth_paths(diamond_graph, config)
        assert all(p.source == "A" and p.target == "E" for p in planted.ground_truth)

    def test_too_few_endpoints(self):
        """A single-node graph cannot host planted paths."""
        graph = Graph()
        graph.add_node("only")
        with pytest.raises(ValueError):
            plant_ground_truth_paths(graph, PathPlantingConfig(num_paths=1))

    def test_unknown_strength(self, diamond_graph):
        """Unknown signal strengths should raise ValueError."""
        with pytest.raises(ValueError, match="signal strength"):
            plant_ground_truth_paths(diamond_graph, PathPlantingConfig(signal_strength="loud"))


class TestBaselines:
    """Test the baseline rankers."""

    @pytest.fixture
    def planted(self, diamond_graph):
        return plant_ground_truth_paths(
            diamond_graph, PathPlantingConfig(num_paths=4, signal_strength="strong", seed=11)
        )

    def test_random_is_seeded(self, planted):
        """Same seed should shuffle identically on every call."""
        paths = planted.ground_truth + planted.noise_paths
        ranker = random_ranker(seed=3)
        first = [s.path.key for s in ranker(planted.graph, paths)]
        second = [s.path.key for s in ranker(planted.graph, paths)]
        assert first == second
        assert sorted(first) == sorted(p.key for p in paths)

    def test_random_scores_descend(self, planted):
        """Random ranker scores should be 1 - i/n."""
        paths = planted.ground_truth
        scored = random_ranker(seed=0)(planted.graph, paths)
        assert [s.score for s in scored] == pytest.approx([1 - i / len(paths) for i in range(len(paths))])

    def test_shortest_first(self, diamond_graph):
        """shortest_path_ranker should prefer fewer hops."""
        long_path = plant_ground_truth_paths(
            diamond_graph, PathPlantingConfig(num_paths=1, path_length=(4, 4), seed=1)
        )
        short_path = plant_ground_truth_paths(
            diamond_graph, PathPlantingConfig(num_paths=1, path_length=(2, 2), seed=1)
        )
        paths = long_path.ground_truth + short_path.ground_truth
        scored = shortest_path_ranker(diamond_graph, paths)
        assert scored[0].path.length == 2

    def test_degree_ranker_sorted(self, planted):
        """Degree ranker output should be sorted by score."""
        scored = degree_ranker(planted.graph, planted.ground_truth)
        assert [s.score for s in scored] == sorted((s.score for s in scored), reverse=True)

    def test_weight_ranker_prefers_signal(self, planted):
        """Signal edges are heavier than noise edges."""
        paths = planted.noise_paths + planted.ground_truth
        scored = weight_ranker()(planted.graph, paths)
        top = {s.path.key for s in scored[: len(planted.ground_truth)]}
        assert top == planted.relevant_keys

    def test_mi_ranker_prefers_signal(self, planted):
        """MI over planted signal should put signal paths above noise paths."""
        paths = planted.noise_paths + planted.ground_truth
        scored = mi_ranker(MIConfig(attribute_extractor=planted_signal))(planted.graph, paths)
        top = {s.path.key for s in scored[: len(planted.ground_truth)]}
        assert top == planted.relevant_keys
