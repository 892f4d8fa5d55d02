"""
Ranking-quality metrics comparing a predicted ranking to ground truth.

Rankings are sequences of item keys (path keys in the experiment runner),
best first. Metric identifiers accepted by compute_metric:
'spearman', 'kendall', 'ndcg', 'map', 'mrr', 'precision_at_K', 'recall_at_K'.
"""

from __future__ import annotations

import math
import re
from typing import Collection, Mapping, Sequence

from scipy import stats

_AT_K = re.compile(r"^(precision|recall)_at_(\d+)$")


def _common_positions(
    predicted: Sequence[str],
    ground_truth: Sequence[str],
) -> tuple[list[int], list[int]]:
    """Dense ranks of the shared items in each ranking, in predicted order."""
    truth_rank: dict[str, int] = {}
    for i, item in enumerate(ground_truth):
        truth_rank.setdefault(item, i)

    shared = [item for item in dict.fromkeys(predicted) if item in truth_rank]
    by_truth = {item: i for i, item in enumerate(sorted(shared, key=truth_rank.__getitem__))}
    return list(range(len(shared))), [by_truth[item] for item in shared]


def spearman_correlation(predicted: Sequence[str], ground_truth: Sequence[str]) -> float:
    """
    Spearman's rho over the items present in both rankings.

    Returns 0 when nothing is shared and 1 for a single shared item.
    """
    pred, truth = _common_positions(predicted, ground_truth)
    n = len(pred)
    if n == 0:
        return 0.0
    if n == 1:
        return 1.0
    rho, _ = stats.spearmanr(pred, truth)
    return 0.0 if math.isnan(rho) else float(rho)


def kendall_tau(predicted: Sequence[str], ground_truth: Sequence[str]) -> float:
    """Kendall's tau over shared items; 1 when fewer than two are shared."""
    pred, truth = _common_positions(predicted, ground_truth)
    n = len(pred)
    if n < 2:
        return 1.0

    tau, _ = stats.kendalltau(pred, truth)
    return 1.0 if math.isnan(tau) else float(tau)


def ndcg(predicted: Sequence[str], relevance: Mapping[str, float], k: int | None = None) -> float:
    """
    Normalised discounted cumulative gain.

    Args:
        predicted: Predicted ranking
        relevance: Graded relevance per item (missing items count as 0)
        k: Cut-off (None = whole ranking)

    Returns:
        DCG / ideal DCG; 0 for an empty prediction, 1 when nothing is relevant
    """
    if not predicted:
        return 0.0
    cutoff = len(predicted) if k is None else k
    gains = [relevance.get(item, 0.0) for item in predicted[:cutoff]]
    dcg = sum(g / math.log2(i + 2) for i, g in enumerate(gains))

    ideal = sorted(relevance.values(), reverse=True)[:cutoff]
    idcg = sum(g / math.log2(i + 2) for i, g in enumerate(ideal))
    if idcg == 0:
        return 1.0
    return dcg / idcg


def mean_average_precision(predicted: Sequence[str], relevant: Collection[str]) -> float:
    """Average precision of one ranking (averaged over runs by the caller)."""
    if not predicted or not relevant:
        return 0.0
    hits = 0
    total = 0.0
    for i, item in enumerate(predicted):
        if item in relevant:
            hits += 1
            total += hits / (i + 1)
    return total / len(relevant)


def mean_reciprocal_rank(predicted: Sequence[str], relevant: Collection[str]) -> float:
    """1 / rank of the first relevant item, 0 if none is retrieved."""
    for i, item in enumerate(predicted):
        if item in relevant:
            return 1.0 / (i + 1)
    return 0.0


def precision_at_k(predicted: Sequence[str], relevant: Collection[str], k: int) -> float:
    """Relevant items in the top k, divided by k."""
    if k <= 0:
        return 0.0
    return sum(1 for item in predicted[:k] if item in relevant) / k


def recall_at_k(predicted: Sequence[str], relevant: Collection[str], k: int) -> float:
    """Share of relevant items found in the top k."""
    if not relevant or k <= 0:
        return 0.0
    return sum(1 for item in predicted[:k] if item in relevant) / len(relevant)


def is_known_metric(name: str) -> bool:
    return name in ("spearman", "kendall", "ndcg", "map", "mrr") or bool(_AT_K.match(name))


def compute_metric(
    name: str,
    predicted: Sequence[str],
    ground_truth: Sequence[str],
    relevance: Mapping[str, float],
    relevant: Collection[str],
) -> float:
    """
    Evaluate a metric by identifier.

    Args:
        name: Metric identifier
        predicted: Predicted ranking
        ground_truth: Ideal ranking (best first)
        relevance: Graded relevance per item (for NDCG)
        relevant: Binary relevant set (for MAP, MRR, precision, recall)

    Raises:
        ValueError: For an unknown metric identifier
    """
    if name == "spearman":
        return spearman_correlation(predicted, ground_truth)
    if name == "kendall":
        return kendall_tau(predicted, ground_truth)
    if name == "ndcg":
        return ndcg(predicted, relevance)
    if name == "map":
        return mean_average_precision(predicted, relevant)
    if name == "mrr":
        return mean_reciprocal_rank(predicted, relevant)

    match = _AT_K.match(name)
    if match:
        kind, k = match.group(1), int(match.group(2))
        if kind == "precision":
            return precision_at_k(predicted, relevant, k)
        return recall_at_k(predicted, relevant, k)

    raise ValueError(f"Unknown metric: {name}")
