"""Logistic regression and random forest trainers."""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression, LogisticRegressionCV
from sklearn.model_selection import StratifiedKFold

from ..config import RANDOM_SEED
from .base import Predictor, Trainer, feature_names_of

logger = logging.getLogger(__name__)


class LogisticTrainer(Trainer):
    """Unpenalized maximum-likelihood logistic regression."""

    name = "logistic"

    def __init__(self, max_iter: int = 1000):
        self.max_iter = max_iter

    def _fit(self, X, y) -> Predictor:
        model = LogisticRegression(C=np.inf, solver="lbfgs", max_iter=self.max_iter)
        model.fit(X, y)
        n_iter = int(np.max(model.n_iter_))
        if n_iter >= self.max_iter:
            logger.warning("[%s] stopped at the iteration cap (%d)", self.name, self.max_iter)
        return Predictor(
            self.name,
            model,
            feature_names=feature_names_of(X),
            details={"n_iter": n_iter},
        )


class RegularizedLogisticTrainer(Trainer):
    """Ridge (L2) or lasso (L1) logistic regression.

    The penalty strength is chosen by stratified k-fold cross-validation over
    ``n_penalties`` log-spaced values, keeping the one with the lowest mean
    cross-validated log loss (deviance / 2n).
    """

    def __init__(
        self,
        penalty: str = "l2",
        n_penalties: int = 20,
        cv_folds: int = 5,
        max_iter: int = 1000,
        random_state: int = RANDOM_SEED,
    ):
        if penalty not in ("l1", "l2"):
            raise ValueError(f"penalty must be 'l1' or 'l2', got {penalty!r}")
        self.penalty = penalty
        self.n_penalties = n_penalties
        self.cv_folds = cv_folds
        self.max_iter = max_iter
        self.random_state = random_state

    @property
    def name(self) -> str:
        return "ridge" if self.penalty == "l2" else "lasso"

    def _fit(self, X, y) -> Predictor:
        cv = StratifiedKFold(n_splits=self.cv_folds, shuffle=True, random_state=self.random_state)
        model = LogisticRegressionCV(
            Cs=self.n_penalties,
            cv=cv,
            penalty=self.penalty,
            solver="liblinear" if self.penalty == "l1" else "lbfgs",
            scoring="neg_log_loss",
            max_iter=self.max_iter,
            refit=True,
            random_state=self.random_state,
        )
        model.fit(X, y)

        # scores_ is keyed by the positive class: (folds, n_penalties, ...)
        fold_scores = np.asarray(next(iter(model.scores_.values())))
        mean_scores = fold_scores.reshape(fold_scores.shape[0], -1).mean(axis=0)
        best_c = float(np.ravel(model.C_)[0])
        n_nonzero = int(np.count_nonzero(model.coef_))
        logger.info(
            "[%s] selected C=%.4g (CV log loss %.4f, %d non-zero coefficients)",
            self.name, best_c, -mean_scores.max(), n_nonzero,
        )
        return Predictor(
            self.name,
            model,
            feature_names=feature_names_of(X),
            details={
                "C": best_c,
                "cv_log_loss": float(-mean_scores.max()),
                "n_nonzero_coefficients": n_nonzero,
            },
        )


class RandomForestPredictor(Predictor):
    """Random forest predictor exposing per-feature importance."""

    @property
    def feature_importances(self) -> pd.Series:
        names = self.feature_names or [f"x{i}" for i in range(len(self.estimator.feature_importances_))]
        return (
            pd.Series(self.estimator.feature_importances_, index=names, name="importance")
            .sort_values(ascending=False)
        )


class RandomForestTrainer(Trainer):
    """Bagged decision trees."""

    name = "random_forest"

    def __init__(
        self,
        n_estimators: int = 500,
        max_features: Optional[str] = "sqrt",
        n_jobs: int = -1,
        random_state: int = RANDOM_SEED,
    ):
        self.n_estimators = n_estimators
        self.max_features = max_features
        self.n_jobs = n_jobs
        self.random_state = random_state

    def _fit(self, X, y) -> Predictor:
        model = RandomForestClassifier(
            n_estimators=self.n_estimators,
            max_features=self.max_features,
            n_jobs=self.n_jobs,
            random_state=self.random_state,
        )
        model.fit(X, y)
        predictor = RandomForestPredictor(self.name, model, feature_names=feature_names_of(X))
        top = predictor.feature_importances.head(5)
        logger.info("[%s] top features: %s", self.name, top.round(4).to_dict())
        predictor.details["top_features"] = top.to_dict()
        return predictor
