"""
Experiment runner: compare path rankers on planted ground truth.

For each repetition a fresh set of signal and noise paths is planted
(seed = config.seed + repetition), every method ranks the candidates,
and each declared metric compares the predicted order with the planted
ground truth. Results are averaged per method, a winner is picked, and
optional paired significance tests compare every pair of methods.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from itertools import combinations

import numpy as np

from pathrank.config import DEFAULT_ALPHA, DEFAULT_CV_FOLDS
from pathrank.evaluation.baselines import Ranker
from pathrank.evaluation.metrics import compute_metric, is_known_metric
from pathrank.evaluation.path_planting import PathPlantingConfig, plant_ground_truth_paths
from pathrank.evaluation.statistics import CORRECTIONS, PAIRED_TESTS, correct_p_values
from pathrank.graph.model import ReadableGraph

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class MethodConfig:
    name: str
    ranker: Ranker


@dataclass
class ExperimentConfig:
    """
    Experiment definition.

    Attributes:
        name: Experiment name (used in reports)
        methods: Rankers to compare
        path_planting: Planting configuration (its seed is replaced per
            repetition when seed is set)
        repetitions: Independent plantings to average over
        metrics: Metric identifiers (see evaluation.metrics)
        statistical_tests: Paired tests to run ('paired-t', 'wilcoxon',
            'mann-whitney')
        correction: Multiple-comparison correction applied per test type
        alpha: Significance level
        seed: Global seed; repetition r uses seed + r
        graph_spec: Identifier of the input graph, for reports
    """

    name: str
    methods: list[MethodConfig]
    path_planting: PathPlantingConfig = field(default_factory=PathPlantingConfig)
    repetitions: int = 1
    metrics: list[str] = field(default_factory=list)
    statistical_tests: list[str] = field(default_factory=list)
    correction: str = "none"
    alpha: float = DEFAULT_ALPHA
    seed: int | None = None
    graph_spec: str = "custom"


# =============================================================================
# Results
# =============================================================================

@dataclass
class MethodResult:
    """
    Per-method outcome.

    Attributes:
        method: Method name
        results: Mean value per metric
        runtime_ms: Mean ranking time per repetition
        per_repetition: Raw metric values, one per repetition
    """

    method: str
    results: dict[str, float] = field(default_factory=dict)
    runtime_ms: float = 0.0
    per_repetition: dict[str, list[float]] = field(default_factory=dict)


@dataclass
class StatisticalTestResult:
    type: str
    methods: tuple[str, str]
    metric: str
    p_value: float
    significant: bool
    statistic: float
    corrected_p_value: float | None = None


@dataclass
class ExperimentReport:
    name: str
    graph_spec: str
    timestamp: str
    methods: list[MethodResult] = field(default_factory=list)
    winner: str = ""
    statistical_tests: list[StatisticalTestResult] = field(default_factory=list)
    duration: float | None = None


@dataclass
class CrossValidationResult:
    """
    k-fold outcome.

    Attributes:
        fold_results: One report per fold
        aggregated: Mean of the fold results per method and metric
        std_dev: Population standard deviation across folds
    """

    fold_results: list[ExperimentReport]
    aggregated: ExperimentReport
    std_dev: ExperimentReport


# =============================================================================
# Helpers
# =============================================================================

def _validate(config: ExperimentConfig) -> None:
    if not config.methods:
        raise ValueError("Experiment needs at least one method")
    names = [m.name for m in config.methods]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate method names: {', '.join(duplicates)}")
    if config.repetitions < 1:
        raise ValueError(f"repetitions must be >= 1, got {config.repetitions}")
    for metric in config.metrics:
        if not is_known_metric(metric):
            raise ValueError(f"Unknown metric: {metric}")
    for test in config.statistical_tests:
        if test not in PAIRED_TESTS:
            raise ValueError(f"Unknown statistical test: {test}. Valid: {', '.join(PAIRED_TESTS)}")
    if config.correction not in CORRECTIONS:
        raise ValueError(f"Unknown correction: {config.correction}. Valid: {', '.join(CORRECTIONS)}")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def pick_winner(methods: list[MethodResult], metrics: list[str]) -> str:
    """Method with the highest mean over the declared metrics (first on ties)."""
    if not methods:
        return ""
    if not metrics:
        return methods[0].method

    best = methods[0]
    best_score = float("-inf")
    for result in methods:
        score = float(np.mean([result.results.get(m, 0.0) for m in metrics]))
        if score > best_score:
            best, best_score = result, score
    return best.method


def _run_tests(config: ExperimentConfig, methods: list[MethodResult]) -> list[StatisticalTestResult]:
    if not config.statistical_tests or len(methods) < 2:
        return []
    if not config.metrics:
        logger.warning("Statistical tests requested without metrics; skipping")
        return []

    metric = config.metrics[0]
    outcomes: list[StatisticalTestResult] = []
    for test_name in config.statistical_tests:
        family: list[StatisticalTestResult] = []
        for a, b in combinations(methods, 2):
            result = PAIRED_TESTS[test_name](a.per_repetition[metric], b.per_repetition[metric])
            family.append(
                StatisticalTestResult(
                    type=test_name,
                    methods=(a.method, b.method),
                    metric=metric,
                    p_value=result.p_value,
                    significant=result.p_value < config.alpha,
                    statistic=result.statistic,
                )
            )

        corrected, significant = correct_p_values([t.p_value for t in family], config.correction, config.alpha)
        for test, p_corr, sig in zip(family, corrected, significant):
            test.corrected_p_value = p_corr if config.correction != "none" else None
            test.significant = sig
        outcomes.extend(family)
    return outcomes


# =============================================================================
# Public API
# =============================================================================

def run_experiment(config: ExperimentConfig, graph: ReadableGraph) -> ExperimentReport:
    """
    Run every method against planted ground truth and build a report.

    Args:
        config: Experiment definition
        graph: Base graph to plant paths into (not modified)

    Returns:
        ExperimentReport with per-method means, winner, and test outcomes

    Raises:
        ValueError: For an invalid configuration
    """
    _validate(config)
    logger.info(
        f"Running experiment '{config.name}': {len(config.methods)} methods, "
        f"{config.repetitions} repetitions"
    )
    started = time.perf_counter()

    values: dict[str, dict[str, list[float]]] = {
        m.name: {metric: [] for metric in config.metrics} for m in config.methods
    }
    runtimes: dict[str, list[float]] = {m.name: [] for m in config.methods}

    base_seed = config.seed if config.seed is not None else config.path_planting.seed
    for rep in range(config.repetitions):
        seed = None if base_seed is None else base_seed + rep
        planted = plant_ground_truth_paths(graph, replace(config.path_planting, seed=seed))

        candidates = planted.ground_truth + planted.noise_paths
        random.Random(seed).shuffle(candidates)
        truth = [path.key for path in planted.ground_truth]
        relevant = planted.relevant_keys

        for method in config.methods:
            t0 = time.perf_counter()
            scored = method.ranker(planted.graph, list(candidates))
            runtimes[method.name].append((time.perf_counter() - t0) * 1000)

            predicted = [s.path.key for s in scored]
            for metric in config.metrics:
                values[method.name][metric].append(
                    compute_metric(metric, predicted, truth, planted.relevance, relevant)
                )

    results = [
        MethodResult(
            method=m.name,
            results={metric: float(np.mean(v)) for metric, v in values[m.name].items()},
            runtime_ms=float(np.mean(runtimes[m.name])),
            per_repetition=values[m.name],
        )
        for m in config.methods
    ]

    report = ExperimentReport(
        name=config.name,
        graph_spec=config.graph_spec,
        timestamp=_timestamp(),
        methods=results,
        winner=pick_winner(results, config.metrics),
        statistical_tests=_run_tests(config, results),
        duration=(time.perf_counter() - started) * 1000,
    )
    logger.info(f"Experiment '{config.name}' finished, winner: {report.winner}")
    return report


def _fold_sizes(repetitions: int, k: int) -> list[int]:
    """Split repetitions over k folds; every fold runs at least once."""
    base, extra = divmod(repetitions, k)
    return [max(1, base + (1 if i < extra else 0)) for i in range(k)]


def run_cross_validation(
    config: ExperimentConfig,
    graph: ReadableGraph,
    k: int = DEFAULT_CV_FOLDS,
) -> CrossValidationResult:
    """
    Partition repetitions into k folds and run the experiment per fold.

    Folds use disjoint seed ranges, so they are independent and the
    aggregate does not depend on the order folds run in.

    Raises:
        ValueError: If k < 1 or the configuration is invalid
    """
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    _validate(config)

    base_seed = config.seed if config.seed is not None else config.path_planting.seed
    started = time.perf_counter()

    folds: list[ExperimentReport] = []
    offset = 0
    for fold, size in enumerate(_fold_sizes(config.repetitions, k)):
        fold_config = replace(
            config,
            name=f"{config.name} (fold {fold + 1}/{k})",
            repetitions=size,
            seed=None if base_seed is None else base_seed + offset,
        )
        folds.append(run_experiment(fold_config, graph))
        offset += size

    means: list[MethodResult] = []
    stds: list[MethodResult] = []
    for i, method in enumerate(config.methods):
        per_fold = [fold.methods[i] for fold in folds]
        by_metric = {metric: [r.results[metric] for r in per_fold] for metric in config.metrics}
        runtimes = [r.runtime_ms for r in per_fold]
        means.append(
            MethodResult(
                method=method.name,
                results={m: float(np.mean(v)) for m, v in by_metric.items()},
                runtime_ms=float(np.mean(runtimes)),
                per_repetition=by_metric,
            )
        )
        stds.append(
            MethodResult(
                method=method.name,
                results={m: float(np.std(v)) for m, v in by_metric.items()},
                runtime_ms=float(np.std(runtimes)),
            )
        )

    duration = (time.perf_counter() - started) * 1000
    winner = pick_winner(means, config.metrics)
    timestamp = _timestamp()
    logger.info(f"Cross-validation '{config.name}' ({k} folds) winner: {winner}")

    return CrossValidationResult(
        fold_results=folds,
        aggregated=ExperimentReport(
            name=f"{config.name} (mean of {k} folds)",
            graph_spec=config.graph_spec,
            timestamp=timestamp,
            methods=means,
            winner=winner,
            duration=duration,
        ),
        std_dev=ExperimentReport(
            name=f"{config.name} (std dev of {k} folds)",
            graph_spec=config.graph_spec,
            timestamp=timestamp,
            methods=stds,
            winner=winner,
            duration=duration,
        ),
    )
