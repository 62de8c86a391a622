"""Training module: run and compare trainers on prepared data."""

from .trainer import ComparisonResult, ModelRun, compare_models, run_trainer

__all__ = [
    "ComparisonResult",
    "ModelRun",
    "compare_models",
    "run_trainer",
]
