"""Global configuration for the income analysis.

Only one external input is required: TRAIN_PATH. The test file is optional;
when it is absent the training file is split into train and test sets.
Paths can be set via environment variables or CLI arguments.
"""
from __future__ import annotations
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Tuple


RANDOM_SEED: int = 42
ROOT_DIR = Path(__file__).parent.parent

MISSING_SENTINEL: str = "?"
DEFAULT_DROP_COLUMNS: Tuple[str, ...] = ("fnlwgt", "education", "capital-gain", "capital-loss")
NUMERIC_COLUMNS: Tuple[str, ...] = ("age", "education-num", "hours-per-week")
CATEGORICAL_COLUMNS: Tuple[str, ...] = (
    "workclass",
    "marital-status",
    "occupation",
    "relationship",
    "race",
    "sex",
    "native-country",
)
DECISION_THRESHOLD: float = 0.5


@dataclass
class ProjectConfig:
    """Project-wide configuration parameters.

    Attributes:
        train_path: Path to the training CSV (train.csv / train_preprocessed.csv).
        test_path: Optional path to the test CSV (test_preprocessed.csv).
        output_dir: Directory for metric tables and ROC images.
        target_column: Binary income target column.
        positive_label: Target value treated as the positive class.
        test_size: Hold-out fraction used when no test file is given.
        strict_categories: Fail on categorical levels unseen in training.
        models: Names of the trainers to run (all six by default).
        save_plots: Whether to write ROC curve images.
    """

    train_path: str = os.environ.get("TRAIN_PATH", "")
    test_path: Optional[str] = os.environ.get("TEST_PATH") or None
    output_dir: str = os.environ.get("OUTPUT_DIR", str(ROOT_DIR / "processed"))
    target_column: str = os.environ.get("TARGET_COLUMN", "income")
    positive_label: str = os.environ.get("POSITIVE_LABEL", ">50K")
    test_size: float = 0.3
    strict_categories: bool = False
    models: Tuple[str, ...] = field(default_factory=tuple)
    save_plots: bool = True


CONFIG = ProjectConfig()


def validate_config(cfg: ProjectConfig) -> None:
    """Validate minimal config is provided and raise helpful errors.

    Args:
        cfg: ProjectConfig
    """
    if not cfg.train_path:
        raise ValueError(
            "TRAIN_PATH is not set. Set env var TRAIN_PATH or pass --train to run_analysis.py."
        )
    if not 0.0 < cfg.test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {cfg.test_size}")
