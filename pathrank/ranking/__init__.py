"""
Ranking module.

Per-edge mutual-information estimation and MI-based path ranking with a
length penalty.
"""

from pathrank.ranking.mutual_information import (
    MICache,
    MIConfig,
    MIStrategy,
    compute_edge_mi,
    precompute_mutual_information,
)
from pathrank.ranking.path_ranking import (
    PathRanker,
    PathRankingConfig,
    RankedPath,
    create_path_ranker,
    get_best_path,
    rank_paths,
    score_path,
)

__all__ = [
    "MICache",
    "MIConfig",
    "MIStrategy",
    "compute_edge_mi",
    "precompute_mutual_information",
    "PathRanker",
    "PathRankingConfig",
    "RankedPath",
    "create_path_ranker",
    "get_best_path",
    "rank_paths",
    "score_path",
]
