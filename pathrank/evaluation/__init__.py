"""
Evaluation module.

Ranking-quality metrics, multiple-comparison corrections, baseline
rankers, planted ground truth, the experiment runner, and report
serializers.
"""

from pathrank.evaluation.baselines import (
    Ranker,
    ScoredPath,
    degree_ranker,
    mi_ranker,
    random_ranker,
    shortest_path_ranker,
    weight_ranker,
)
from pathrank.evaluation.metrics import (
    compute_metric,
    kendall_tau,
    mean_average_precision,
    mean_reciprocal_rank,
    ndcg,
    precision_at_k,
    recall_at_k,
    spearman_correlation,
)
from pathrank.evaluation.path_planting import (
    PathPlantingConfig,
    PlantedPaths,
    plant_ground_truth_paths,
)
from pathrank.evaluation.reports import (
    generate_html_report,
    generate_json_summary,
    generate_latex_table,
    generate_markdown_report,
)
from pathrank.evaluation.runner import (
    CrossValidationResult,
    ExperimentConfig,
    ExperimentReport,
    MethodConfig,
    MethodResult,
    StatisticalTestResult,
    run_cross_validation,
    run_experiment,
)
from pathrank.evaluation.statistics import (
    benjamini_hochberg,
    bonferroni,
    holm_bonferroni,
    mann_whitney_test,
    paired_t_test,
    storey_q_values,
    wilcoxon_test,
)

__all__ = [
    "Ranker",
    "ScoredPath",
    "degree_ranker",
    "mi_ranker",
    "random_ranker",
    "shortest_path_ranker",
    "weight_ranker",
    "compute_metric",
    "kendall_tau",
    "mean_average_precision",
    "mean_reciprocal_rank",
    "ndcg",
    "precision_at_k",
    "recall_at_k",
    "spearman_correlation",
    "PathPlantingConfig",
    "PlantedPaths",
    "plant_ground_truth_paths",
    "generate_html_report",
    "generate_json_summary",
    "generate_latex_table",
    "generate_markdown_report",
    "CrossValidationResult",
    "ExperimentConfig",
    "ExperimentReport",
    "MethodConfig",
    "MethodResult",
    "StatisticalTestResult",
    "run_cross_validation",
    "run_experiment",
    "benjamini_hochberg",
    "bonferroni",
    "holm_bonferroni",
    "mann_whitney_test",
    "paired_t_test",
    "storey_q_values",
    "wilcoxon_test",
]
