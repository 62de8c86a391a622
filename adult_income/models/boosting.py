"""Gradient-boosted tree trainers (XGBoost)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sklearn.model_selection import GridSearchCV, StratifiedKFold
from xgboost import XGBClassifier

from ..config import RANDOM_SEED
from .base import Predictor, Trainer, feature_names_of

logger = logging.getLogger(__name__)


DEFAULT_XGB_PARAMS: Dict[str, Any] = {
    "n_estimators": 100,
    "max_depth": 6,
    "learning_rate": 0.3,
    "subsample": 1.0,
    "colsample_bytree": 1.0,
}

DEFAULT_XGB_GRID: Dict[str, List[Any]] = {
    "max_depth": [3, 6],
    "learning_rate": [0.05, 0.3],
    "n_estimators": [100, 200],
}


def _make_xgb(params: Dict[str, Any], random_state: int, n_jobs: int) -> XGBClassifier:
    return XGBClassifier(
        objective="binary:logistic",
        eval_metric="logloss",
        tree_method="hist",
        random_state=random_state,
        n_jobs=n_jobs,
        **params,
    )


class XGBoostTrainer(Trainer):
    """XGBoost with fixed hyperparameters."""

    name = "xgboost"

    def __init__(
        self,
        params: Optional[Dict[str, Any]] = None,
        n_jobs: int = -1,
        random_state: int = RANDOM_SEED,
    ):
        self.params = {**DEFAULT_XGB_PARAMS, **(params or {})}
        self.n_jobs = n_jobs
        self.random_state = random_state

    def _fit(self, X, y) -> Predictor:
        model = _make_xgb(self.params, self.random_state, self.n_jobs)
        model.fit(X, y)
        return Predictor(self.name, model, feature_names=feature_names_of(X), details=dict(self.params))


class XGBoostCVTrainer(Trainer):
    """XGBoost tuned by grid search with stratified k-fold CV on AUC.

    Folds are built once per fit from ``random_state`` so every grid point
    is scored on the same partitions.
    """

    name = "xgboost_cv"

    def __init__(
        self,
        param_grid: Optional[Dict[str, List[Any]]] = None,
        cv_folds: int = 5,
        n_jobs: int = -1,
        random_state: int = RANDOM_SEED,
    ):
        self.param_grid = param_grid or dict(DEFAULT_XGB_GRID)
        self.cv_folds = cv_folds
        self.n_jobs = n_jobs
        self.random_state = random_state

    def _fit(self, X, y) -> Predictor:
        cv = StratifiedKFold(n_splits=self.cv_folds, shuffle=True, random_state=self.random_state)
        base = _make_xgb({}, self.random_state, self.n_jobs)
        search = GridSearchCV(
            base,
            param_grid=self.param_grid,
            cv=cv,
            scoring="roc_auc",
            n_jobs=1,
            refit=True,
        )
        search.fit(X, y)

        logger.info(
            "[%s] best params %s (CV AUC %.4f)",
            self.name, search.best_params_, search.best_score_,
        )
        return Predictor(
            self.name,
            search.best_estimator_,
            feature_names=feature_names_of(X),
            details={
                "best_params": dict(search.best_params_),
                "cv_auc": float(search.best_score_),
            },
        )
