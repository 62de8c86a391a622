"""Models module - trainers behind a single fit/predict interface.

This module provides:
- Logistic regression (plain, ridge, lasso)
- Support vector machine with kernel fallback
- Random forest
- XGBoost (fixed and cross-validated)
- Trainer registry and predictor persistence
"""

from .base import PredictionResult, Predictor, Trainer
from .classifiers import (
    LogisticTrainer,
    RandomForestPredictor,
    RandomForestTrainer,
    RegularizedLogisticTrainer,
)
from .svm import DEFAULT_STRATEGIES, SVMPredictor, SVMStrategy, SVMTrainer
from .boosting import XGBoostCVTrainer, XGBoostTrainer
from .registry import get_trainer, list_trainers, make_trainers, select_trainers
from .persistence import load_predictor, save_predictor

__all__ = [
    # Interface
    "PredictionResult",
    "Predictor",
    "Trainer",
    # Trainers
    "LogisticTrainer",
    "RegularizedLogisticTrainer",
    "RandomForestTrainer",
    "RandomForestPredictor",
    "SVMTrainer",
    "SVMPredictor",
    "SVMStrategy",
    "DEFAULT_STRATEGIES",
    "XGBoostTrainer",
    "XGBoostCVTrainer",
    # Registry
    "make_trainers",
    "list_trainers",
    "get_trainer",
    "select_trainers",
    # Persistence
    "save_predictor",
    "load_predictor",
]
