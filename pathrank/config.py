"""
Configuration constants for the pathrank engine.

All paths, defaults, and tunable parameters are defined here.
Environment-dependent values are read from the process environment
(optionally populated from a project-level .env file).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# =============================================================================
# Path Configuration
# =============================================================================

# Project root is parent of pathrank/
PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")

# Data directory (benchmark graph snapshots)
DATA_DIR = PROJECT_ROOT / "data"

# Benchmark snapshots (msgpack or edge-list text), one file per dataset id
BENCHMARK_DATA_DIR = Path(
    os.environ.get("PATHRANK_BENCHMARK_DIR", str(DATA_DIR / "benchmarks"))
)

# =============================================================================
# Traversal Configuration
# =============================================================================

# Bidirectional search defaults
DEFAULT_TARGET_PATHS = 5
DEFAULT_MAX_ITERATIONS = 10

# Extra iterations after the target path count is reached (path diversity)
DEFAULT_MIN_ITERATIONS = 2

# =============================================================================
# Ranking Configuration
# =============================================================================

# Maximum number of paths enumerated / returned by rank_paths
DEFAULT_MAX_PATHS = 10

# Length penalty weight: score = MI(path) - LAMBDA * length(path)
DEFAULT_LAMBDA = 0.0

# Small constant to avoid log(0) and division by zero in MI estimation
MI_EPSILON = 1e-10

# =============================================================================
# Statistics Configuration
# =============================================================================

# Significance level for FWER corrections
DEFAULT_ALPHA = 0.05

# Target false discovery rate for FDR corrections
DEFAULT_FDR = 0.05

# Storey pi0 estimation tuning parameter
STOREY_LAMBDA = 0.5

# Default number of cross-validation folds
DEFAULT_CV_FOLDS = 5

# =============================================================================
# Benchmark Configuration
# =============================================================================

# Relative tolerance for node/edge count mismatches before warning
BENCHMARK_COUNT_TOLERANCE = float(os.environ.get("PATHRANK_COUNT_TOLERANCE", "0.05"))

# Supported snapshot file extensions, in lookup order
BENCHMARK_FILE_EXTENSIONS = (".msgpack", ".txt")

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL (or an explicit level) to the root logger."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_data_files(dataset_ids: list[str]) -> dict[str, bool]:
    """Check which benchmark snapshot files exist."""
    return {
        dataset_id: any(
            (BENCHMARK_DATA_DIR / f"{dataset_id}{ext}").exists()
            for ext in BENCHMARK_FILE_EXTENSIONS
        )
        for dataset_id in dataset_ids
    }


def get_missing_data_files(dataset_ids: list[str]) -> list[str]:
    """Return list of dataset ids with no snapshot on disk."""
    status = validate_data_files(dataset_ids)
    return [name for name, exists in status.items() if not exists]
