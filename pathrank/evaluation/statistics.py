"""
Multiple-comparison corrections and paired significance tests.

Corrections:
- bonferroni: FWER control, alpha / m per test
- holm_bonferroni: step-down FWER control, uniformly more powerful
- benjamini_hochberg: FDR control
- storey_q_values: FDR control with an estimated proportion of true nulls

All corrections accept an empty p-value list and return empty results.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Sequence

import numpy as np
from scipy import stats

from pathrank.config import DEFAULT_ALPHA, DEFAULT_FDR, STOREY_LAMBDA

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class BonferroniResult:
    corrected_alpha: float
    significant: list[bool] = field(default_factory=list)


@dataclass(frozen=True)
class AdjustedPValues:
    """Adjusted p-values and significance flags, in input order."""

    adjusted_p_values: list[float] = field(default_factory=list)
    significant: list[bool] = field(default_factory=list)


@dataclass(frozen=True)
class StoreyResult:
    """
    Storey q-values.

    Attributes:
        q_values: q-value per test, in input order
        significant: q < fdr per test
        pi0: Estimated proportion of true null hypotheses
    """

    q_values: list[float] = field(default_factory=list)
    significant: list[bool] = field(default_factory=list)
    pi0: float = 1.0


@dataclass(frozen=True)
class PairedTestResult:
    statistic: float
    p_value: float


# =============================================================================
# Corrections
# =============================================================================

def _ascending(p_values: Sequence[float]) -> list[int]:
    """Indices that sort p_values ascending (stable)."""
    return sorted(range(len(p_values)), key=lambda i: p_values[i])


def bonferroni(p_values: Sequence[float], alpha: float = DEFAULT_ALPHA) -> BonferroniResult:
    """
    Bonferroni correction.

    Args:
        p_values: Raw p-values
        alpha: Family-wise significance level

    Returns:
        BonferroniResult with corrected_alpha = alpha / m and p < corrected_alpha
        per test (corrected_alpha = alpha for an empty input)
    """
    if not p_values:
        return BonferroniResult(corrected_alpha=alpha, significant=[])

    corrected = alpha / len(p_values)
    return BonferroniResult(
        corrected_alpha=corrected,
        significant=[p < corrected for p in p_values],
    )


def benjamini_hochberg(p_values: Sequence[float], fdr: float = DEFAULT_FDR) -> AdjustedPValues:
    """
    Benjamini-Hochberg FDR correction.

    The adjusted p-value at ascending rank k (1-indexed) is
    min(1, p_k * m / k), made monotone by a running minimum taken from
    the largest rank down.
    """
    if not p_values:
        return AdjustedPValues()

    m = len(p_values)
    order = _ascending(p_values)
    adjusted = [min(1.0, p_values[i] * m / (rank + 1)) for rank, i in enumerate(order)]
    for rank in range(m - 2, -1, -1):
        adjusted[rank] = min(adjusted[rank], adjusted[rank + 1])

    out = [0.0] * m
    for rank, i in enumerate(order):
        out[i] = adjusted[rank]
    return AdjustedPValues(adjusted_p_values=out, significant=[q < fdr for q in out])


def holm_bonferroni(p_values: Sequence[float], alpha: float = DEFAULT_ALPHA) -> AdjustedPValues:
    """
    Holm-Bonferroni step-down correction.

    Ascending rank j (0-indexed) is tested against alpha / (m - j); the
    first failure stops rejection for it and every larger p-value.
    Adjusted p-values are the running maximum of p_j * (m - j), capped at 1.
    """
    if not p_values:
        return AdjustedPValues()

    m = len(p_values)
    order = _ascending(p_values)
    adjusted = [0.0] * m
    significant = [False] * m

    running = 0.0
    rejecting = True
    for rank, i in enumerate(order):
        p = p_values[i]
        running = max(running, p * (m - rank))
        adjusted[i] = min(1.0, running)
        if rejecting and p < alpha / (m - rank):
            significant[i] = True
        else:
            rejecting = False

    return AdjustedPValues(adjusted_p_values=adjusted, significant=significant)


def storey_q_values(
    p_values: Sequence[float],
    fdr: float = DEFAULT_FDR,
    lambda_: float = STOREY_LAMBDA,
) -> StoreyResult:
    """
    Storey q-values.

    pi0 = min(1, #{p > lambda_} / m / (1 - lambda_)); the q-value at
    ascending rank k (1-indexed) is min(1, p_k * m * pi0 / k), made
    monotone by a running minimum from the largest rank down.

    Args:
        p_values: Raw p-values
        fdr: Target false discovery rate
        lambda_: Tuning parameter for the pi0 estimate, in [0, 1)

    Returns:
        StoreyResult (pi0 = 1 for an empty input)
    """
    if not p_values:
        return StoreyResult()

    m = len(p_values)
    above = sum(1 for p in p_values if p > lambda_)
    pi0 = min(1.0, above / m / (1 - lambda_))

    order = _ascending(p_values)
    q_sorted = [min(1.0, p_values[i] * m * pi0 / (rank + 1)) for rank, i in enumerate(order)]
    for rank in range(m - 2, -1, -1):
        q_sorted[rank] = min(q_sorted[rank], q_sorted[rank + 1])

    q_values = [0.0] * m
    for rank, i in enumerate(order):
        q_values[i] = q_sorted[rank]

    logger.debug(f"Storey pi0 estimate: {pi0:.3f} over {m} tests")
    return StoreyResult(q_values=q_values, significant=[q < fdr for q in q_values], pi0=pi0)


CORRECTIONS = ("none", "bonferroni", "holm", "benjamini-hochberg", "storey")


def correct_p_values(
    p_values: Sequence[float],
    method: str,
    alpha: float = DEFAULT_ALPHA,
) -> tuple[list[float], list[bool]]:
    """
    Apply a named correction, returning (corrected p-values, significance).

    Bonferroni reports min(1, p * m) as the corrected p-value; 'none'
    returns the raw values with p < alpha.

    Raises:
        ValueError: If method is not one of CORRECTIONS
    """
    if method == "none":
        return list(p_values), [p < alpha for p in p_values]
    if method == "bonferroni":
        result = bonferroni(p_values, alpha)
        return [min(1.0, p * len(p_values)) for p in p_values], result.significant
    if method == "holm":
        adjusted = holm_bonferroni(p_values, alpha)
        return adjusted.adjusted_p_values, adjusted.significant
    if method == "benjamini-hochberg":
        adjusted = benjamini_hochberg(p_values, alpha)
        return adjusted.adjusted_p_values, adjusted.significant
    if method == "storey":
        storey = storey_q_values(p_values, alpha)
        return storey.q_values, storey.significant
    raise ValueError(f"Unknown correction: {method}. Valid: {', '.join(CORRECTIONS)}")


# =============================================================================
# Paired Tests
# =============================================================================

def _run_test(
    name: str,
    fn: Callable[[np.ndarray, np.ndarray], object],
    a: Sequence[float],
    b: Sequence[float],
) -> PairedTestResult:
    """Run a SciPy test, mapping degenerate inputs to (0.0, 1.0)."""
    x = np.asarray(a, dtype=float)
    y = np.asarray(b, dtype=float)
    if x.size < 2 or y.size < 2:
        return PairedTestResult(statistic=0.0, p_value=1.0)

    try:
        outcome = fn(x, y)
    except ValueError as e:
        logger.debug(f"{name} not computable: {e}")
        return PairedTestResult(statistic=0.0, p_value=1.0)

    statistic = float(outcome.statistic)
    p_value = float(outcome.pvalue)
    if math.isnan(p_value):
        return PairedTestResult(statistic=0.0, p_value=1.0)
    return PairedTestResult(
        statistic=0.0 if math.isnan(statistic) else statistic,
        p_value=p_value,
    )


def paired_t_test(a: Sequence[float], b: Sequence[float]) -> PairedTestResult:
    """Two-sided paired t-test."""
    return _run_test("paired-t", stats.ttest_rel, a, b)


def wilcoxon_test(a: Sequence[float], b: Sequence[float]) -> PairedTestResult:
    """Wilcoxon signed-rank test; all-zero differences give p = 1."""
    x = np.asarray(a, dtype=float)
    y = np.asarray(b, dtype=float)
    if x.shape == y.shape and np.allclose(x, y):
        return PairedTestResult(statistic=0.0, p_value=1.0)
    return _run_test("wilcoxon", stats.wilcoxon, a, b)


def mann_whitney_test(a: Sequence[float], b: Sequence[float]) -> PairedTestResult:
    """Two-sided Mann-Whitney U test."""
    return _run_test(
        "mann-whitney",
        lambda x, y: stats.mannwhitneyu(x, y, alternative="two-sided"),
        a,
        b,
    )


PAIRED_TESTS: dict[str, Callable[[Sequence[float], Sequence[float]], PairedTestResult]] = {
    "paired-t": paired_t_test,
    "wilcoxon": wilcoxon_test,
    "mann-whitney": mann_whitney_test,
}
