"""
Unit tests for MI-based path ranking.
"""

import pytest

from pathrank.graph import ErrorKind, Graph, WeightConfig
from pathrank.ranking import (
    MIConfig,
    PathRankingConfig,
    create_path_ranker,
    get_best_path,
    precompute_mutual_information,
    rank_paths,
)
from pathrank.traversal import shortest_distance


class TestShortestOnly:
    """Test the default shortest-path mode."""

    def test_default_equals_explicit_shortest_only(self, diamond_graph):
        """Omitting options should be identical to shortest_only=True."""
        default = rank_paths(diamond_graph, "A", "E")
        explicit = rank_paths(diamond_graph, "A", "E", shortest_only=True)
        assert [p.path.key for p in default.value] == [p.path.key for p in explicit.value]
        assert [p.score for p in default.value] == [p.score for p in explicit.value]

    def test_only_shortest_lengths(self, diamond_graph):
        """Every returned path should have the true shortest length."""
        distance = shortest_distance(diamond_graph, "A", "E")
        result = rank_paths(diamond_graph, "A", "E")
        assert {p.length for p in result.value} == {distance}

    def test_all_shortest_paths_found(self, diamond_graph):
        """Both routes around the diamond should be returned."""
        result = rank_paths(diamond_graph, "A", "E")
        assert {p.path.key for p in result.value} == {"A→B→D→E", "A→C→D→E"}

    def test_paths_carry_edges(self, diamond_graph):
        """Ranked paths should include the connecting edges."""
        best = rank_paths(diamond_graph, "A", "E").value[0]
        assert len(best.path.edges) == len(best.path.node_ids) - 1


class TestResultShape:
    """Test Ok / Ok(None) / Err distinctions."""

    def test_unknown_source(self, diamond_graph):
        """Unknown endpoints should be NOT_FOUND errors."""
        result = rank_paths(diamond_graph, "missing", "E")
        assert not result.ok
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.ids == ("missing",)

    def test_unknown_target(self, diamond_graph):
        """Unknown target should also be an error."""
        assert rank_paths(diamond_graph, "A", "missing").error.kind == ErrorKind.NOT_FOUND

    def test_no_path_is_ok_none(self):
        """Disconnected endpoints should give Ok(None)."""
        graph = Graph()
        graph.add_node("A")
        graph.add_node("B")
        result = rank_paths(graph, "A", "B")
        assert result.ok
        assert result.value is None

    def test_self_path(self, diamond_graph):
        """Source == target should give the one-node path with score 1."""
        result = rank_paths(diamond_graph, "A", "A")
        assert len(result.value) == 1
        assert result.value[0].path.node_ids == ("A",)
        assert result.value[0].score == 1.0

    def test_invalid_max_paths(self, diamond_graph):
        """max_paths below 1 should be an INVALID_CONFIGURATION error."""
        result = rank_paths(diamond_graph, "A", "E", max_paths=0)
        assert result.error.kind == ErrorKind.INVALID_CONFIGURATION

    def test_sorted_descending(self, lambda_graph, value_extractor):
        """Scores should be in descending order."""
        result = rank_paths(
            lambda_graph, "A", "F", shortest_only=False, mi_config=MIConfig(value_extractor), lambda_=0.1
        )
        scores = [p.score for p in result.value]
        assert scores == sorted(scores, reverse=True)


class TestLengthBound:
    """Test max_length handling in enumeration mode."""

    @pytest.mark.parametrize("max_length", [1, 2, 3, 4, 5])
    def test_paths_within_bound(self, lambda_graph, max_length):
        """No returned path should exceed max_length edges."""
        result = rank_paths(lambda_graph, "A", "F", shortest_only=False, max_length=max_length)
        for ranked in result.value or []:
            assert ranked.length <= max_length

    def test_bound_excludes_long_route(self, lambda_graph):
        """max_length=3 should keep only the short route."""
        result = rank_paths(lambda_graph, "A", "F", shortest_only=False, max_length=3)
        assert [p.path.key for p in result.value] == ["A→B→D→F"]

    def test_zero_means_direct_edges(self, diamond_graph):
        """max_length=0 should return only direct single-edge paths."""
        direct = rank_paths(diamond_graph, "A", "B", shortest_only=False, max_length=0)
        assert [p.path.key for p in direct.value] == ["A→B"]
        assert rank_paths(diamond_graph, "A", "E", shortest_only=False, max_length=0).value is None

    def test_negative_clamped(self, diamond_graph):
        """Negative max_length should behave like 0, not error."""
        result = rank_paths(diamond_graph, "A", "B", shortest_only=False, max_length=-1)
        assert result.ok
        assert [p.length for p in result.value] == [1]


class TestLambda:
    """Test the length-penalty trade-off."""

    def _rank(self, graph, extractor, lambda_):
        return rank_paths(
            graph,
            "A",
            "F",
            shortest_only=False,
            lambda_=lambda_,
            mi_config=MIConfig(attribute_extractor=extractor),
        ).value

    def test_zero_lambda_prefers_informative_path(self, lambda_graph, value_extractor):
        """lambda_=0 should rank the long high-value route first."""
        best = self._rank(lambda_graph, value_extractor, 0.0)[0]
        assert {"C", "G", "E"} <= set(best.node_ids)
        assert best.length == 4

    def test_high_lambda_prefers_shortest(self, lambda_graph, value_extractor):
        """lambda_=2 should rank the shortest route first."""
        best = self._rank(lambda_graph, value_extractor, 2.0)[0]
        assert best.length == 3

    def test_moderate_lambda_distinct_scores(self, lambda_graph, value_extractor):
        """A moderate lambda_ should give more than one distinct score."""
        ranked = self._rank(lambda_graph, value_extractor, 0.1)
        assert len({round(p.score, 12) for p in ranked}) > 1

    def test_length_penalty_component(self, lambda_graph, value_extractor):
        """length_penalty should be lambda_ * length, or None at lambda_=0."""
        for ranked in self._rank(lambda_graph, value_extractor, 0.5):
            assert ranked.length_penalty == pytest.approx(0.5 * ranked.length)
            assert ranked.score == pytest.approx(ranked.geometric_mean_mi - ranked.length_penalty)
        assert all(p.length_penalty is None for p in self._rank(lambda_graph, value_extractor, 0.0))


class TestEnumerationCap:
    """Test max_paths."""

    def test_cap_on_dense_graph(self, near_complete_graph):
        """A near-complete 10-node graph should return at most max_paths paths."""
        result = rank_paths(near_complete_graph, "n0", "n9", shortest_only=False, max_paths=100)
        assert 0 < len(result.value) <= 100

    def test_cap_is_deterministic(self, near_complete_graph):
        """The capped path set should be the same every time."""
        first = rank_paths(near_complete_graph, "n0", "n9", shortest_only=False, max_paths=20)
        second = rank_paths(near_complete_graph, "n0", "n9", shortest_only=False, max_paths=20)
        assert [p.path.key for p in first.value] == [p.path.key for p in second.value]

    def test_cap_in_shortest_mode(self, diamond_graph):
        """max_paths should also cap shortest-path enumeration."""
        assert len(rank_paths(diamond_graph, "A", "E", max_paths=1).value) == 1


class TestTraversalMode:
    """Test directed / undirected traversal."""

    def test_directed(self, directed_chain):
        """Directed mode should follow edge direction only."""
        assert rank_paths(directed_chain, "A", "C", traversal_mode="directed").value
        assert rank_paths(directed_chain, "C", "A", traversal_mode="directed").value is None

    def test_undirected(self, directed_chain):
        """Undirected mode should allow walking edges backwards."""
        result = rank_paths(directed_chain, "C", "A", traversal_mode="undirected")
        assert [p.path.key for p in result.value] == ["C→B→A"]


class TestWeightMode:
    """Test combining edge weights with MI."""

    def test_none(self, diamond_graph):
        """weight_mode='none' should leave weight_factor unset."""
        best = rank_paths(diamond_graph, "A", "E").value[0]
        assert best.weight_factor is None
        assert best.edge_weights is None

    def test_divide(self):
        """Dividing by heavier weights should lower the score."""
        graph = Graph()
        for node_id in "ABC":
            graph.add_node(node_id)
        graph.add_edge("A", "B", edge_id="ab", weight=4.0)
        graph.add_edge("B", "C", edge_id="bc", weight=4.0)
        plain = rank_paths(graph, "A", "C").value[0]
        divided = rank_paths(graph, "A", "C", weight_mode="divide").value[0]
        assert divided.weight_factor == pytest.approx(4.0)
        assert divided.score == pytest.approx(plain.score / 4.0)

    def test_multiply_with_property(self):
        """multiply should scale the path MI by the geometric-mean weight."""
        graph = Graph()
        for node_id in "ABC":
            graph.add_node(node_id)
        graph.add_edge("A", "B", edge_id="ab", score=2.0)
        graph.add_edge("B", "C", edge_id="bc", score=8.0)
        ranked = rank_paths(
            graph, "A", "C", weight_mode="multiply", weight=WeightConfig(property="score")
        ).value[0]
        assert ranked.weight_factor == pytest.approx(4.0)
        assert ranked.edge_weights == (2.0, 8.0)
        assert ranked.score == pytest.approx(ranked.geometric_mean_mi * 4.0)

    def test_unknown_mode(self, diamond_graph):
        """An unknown weight_mode should be an INVALID_CONFIGURATION error."""
        result = rank_paths(diamond_graph, "A", "E", weight_mode="sideways")
        assert result.error.kind == ErrorKind.INVALID_CONFIGURATION


class TestBestPathAndRanker:
    """Test get_best_path and PathRanker."""

    def test_best_path(self, lambda_graph, value_extractor):
        """get_best_path should return the top-ranked path."""
        config = PathRankingConfig(shortest_only=False, mi_config=MIConfig(value_extractor))
        best = get_best_path(lambda_graph, "A", "F", config)
        assert best.value.path.key == rank_paths(lambda_graph, "A", "F", config).value[0].path.key

    def test_best_path_none(self):
        """No path should give Ok(None)."""
        graph = Graph()
        graph.add_node("A")
        graph.add_node("B")
        assert get_best_path(graph, "A", "B").value is None

    def test_best_path_error(self, diamond_graph):
        """Errors should pass through."""
        assert not get_best_path(diamond_graph, "A", "missing").ok

    def test_ranker_reuses_cache(self, lambda_graph, value_extractor):
        """A PathRanker should compute MI once and reuse it across queries."""
        ranker = create_path_ranker(lambda_graph, shortest_only=False, mi_config=MIConfig(value_extractor))
        cache = ranker.mi_cache
        ranker.rank("A", "F")
        ranker.get_best("B", "E")
        assert ranker.mi_cache is cache
        assert ranker.config.mi_cache is cache

    def test_ranker_matches_rank_paths(self, lambda_graph, value_extractor):
        """Ranker results should equal direct rank_paths calls with the same cache."""
        config = PathRankingConfig(shortest_only=False, lambda_=0.1, mi_config=MIConfig(value_extractor))
        ranker = create_path_ranker(lambda_graph, config)
        direct = rank_paths(lambda_graph, "A", "F", config)
        assert [p.score for p in ranker.rank("A", "F").value] == pytest.approx([p.score for p in direct.value])

    def test_explicit_cache(self, diamond_graph):
        """A supplied cache should be used instead of recomputing."""
        cache = precompute_mutual_information(diamond_graph)
        result = rank_paths(diamond_graph, "A", "E", mi_cache=cache)
        assert result.value[0].edge_mi_values == tuple(cache.get(e.id) for e in result.value[0].path.edges)
