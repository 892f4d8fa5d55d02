"""
Data module: benchmark dataset registry and snapshot loading.
"""

from pathrank.data.benchmarks import (
    BENCHMARK_DATASETS,
    CITESEER,
    CORA,
    DATASETS_BY_ID,
    DBLP,
    FACEBOOK,
    KARATE,
    LESMIS,
    BenchmarkDatasetMeta,
    BenchmarkValidation,
    LoadedBenchmark,
    get_benchmark_summary,
    karate_club_graph,
    load_benchmark,
    load_benchmark_by_id,
    validate_benchmark,
)

__all__ = [
    "BENCHMARK_DATASETS",
    "CITESEER",
    "CORA",
    "DATASETS_BY_ID",
    "DBLP",
    "FACEBOOK",
    "KARATE",
    "LESMIS",
    "BenchmarkDatasetMeta",
    "BenchmarkValidation",
    "LoadedBenchmark",
    "get_benchmark_summary",
    "karate_club_graph",
    "load_benchmark",
    "load_benchmark_by_id",
    "validate_benchmark",
]
