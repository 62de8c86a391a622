"""Support vector machine trainer with an explicit fallback chain.

Strategies are tried in order until one fits:

1. radial kernel with probability estimates
2. linear kernel with probability estimates
3. linear kernel without probability estimates (scores from the decision
   function)

The returned predictor records which strategy succeeded and why the
earlier ones failed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.special import expit
from sklearn.calibration import CalibratedClassifierCV
from sklearn.model_selection import StratifiedKFold
from sklearn.svm import SVC
from sklearn.utils import resample

from ..config import RANDOM_SEED
from ..errors import ModelFitError
from .base import Predictor, Trainer, feature_names_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SVMStrategy:
    """One way of fitting the SVM."""
    kernel: str
    probability: bool

    @property
    def label(self) -> str:
        return f"{self.kernel}{'+prob' if self.probability else ''}"


DEFAULT_STRATEGIES: Tuple[SVMStrategy, ...] = (
    SVMStrategy(kernel="rbf", probability=True),
    SVMStrategy(kernel="linear", probability=True),
    SVMStrategy(kernel="linear", probability=False),
)


class SVMPredictor(Predictor):
    """SVM predictor that knows which strategy produced it.

    Without probability estimates the score is the logistic transform of
    the decision function: it ranks rows identically and crosses 0.5 where
    the decision function crosses 0.
    """

    def __init__(
        self,
        name: str,
        estimator: Any,
        strategy: SVMStrategy,
        attempts: Optional[List[Tuple[str, str]]] = None,
        feature_names: Optional[List[str]] = None,
    ):
        super().__init__(name, estimator, feature_names=feature_names)
        self.strategy = strategy
        self.attempts = attempts or []
        self.details.update({
            "kernel": strategy.kernel,
            "probability": strategy.probability,
            "failed_strategies": [label for label, _ in self.attempts],
        })

    @property
    def kernel(self) -> str:
        return self.strategy.kernel

    @property
    def is_probabilistic(self) -> bool:
        return self.strategy.probability

    def predict_proba(self, X) -> np.ndarray:
        self._check_features(X)
        if self.strategy.probability:
            return np.asarray(self.estimator.predict_proba(X))[:, 1]
        return expit(np.asarray(self.estimator.decision_function(X)))


def make_svc(strategy: SVMStrategy, C: float = 1.0, random_state: int = RANDOM_SEED):
    """Default estimator factory.

    Probability strategies wrap the SVC in a Platt (sigmoid) calibration
    fitted on out-of-fold decision values; the final SVC is refitted on all
    rows.
    """
    svc = SVC(kernel=strategy.kernel, C=C, gamma="scale", random_state=random_state)
    if not strategy.probability:
        return svc
    return CalibratedClassifierCV(
        svc,
        method="sigmoid",
        cv=StratifiedKFold(n_splits=5, shuffle=True, random_state=random_state),
        ensemble=False,
    )


class SVMTrainer(Trainer):
    """SVM with graceful degradation.

    Args:
        strategies: Ordered fallback chain
        C: Regularisation parameter
        max_samples: Stratified subsample size for fitting (SVM cost grows
            quadratically with rows). None uses every row
        estimator_factory: Builds an unfitted estimator for a strategy
        random_state: Seed for subsampling and probability calibration
    """

    name = "svm"

    def __init__(
        self,
        strategies: Sequence[SVMStrategy] = DEFAULT_STRATEGIES,
        C: float = 1.0,
        max_samples: Optional[int] = 5000,
        estimator_factory: Optional[Callable[[SVMStrategy], Any]] = None,
        random_state: int = RANDOM_SEED,
    ):
        if not strategies:
            raise ValueError("At least one SVM strategy is required")
        self.strategies = tuple(strategies)
        self.C = C
        self.max_samples = max_samples
        self.estimator_factory = estimator_factory
        self.random_state = random_state

    def _make_estimator(self, strategy: SVMStrategy):
        if self.estimator_factory is not None:
            return self.estimator_factory(strategy)
        return make_svc(strategy, C=self.C, random_state=self.random_state)

    def _subsample(self, X, y):
        if self.max_samples is None or len(X) <= self.max_samples:
            return X, y
        y_arr = np.asarray(y)
        stratify = y_arr if len(np.unique(y_arr)) > 1 else None
        logger.info("[%s] fitting on a stratified sample of %d / %d rows", self.name, self.max_samples, len(X))
        return resample(
            X, y,
            n_samples=self.max_samples,
            replace=False,
            stratify=stratify,
            random_state=self.random_state,
        )

    def _fit(self, X, y) -> Predictor:
        X_fit, y_fit = self._subsample(X, y)
        attempts: List[Tuple[str, str]] = []

        for strategy in self.strategies:
            estimator = self._make_estimator(strategy)
            try:
                estimator.fit(X_fit, y_fit)
            except Exception as e:
                attempts.append((strategy.label, f"{type(e).__name__}: {e}"))
                logger.warning("[%s] %s fit failed (%s); trying next strategy", self.name, strategy.label, e)
                continue

            if attempts:
                logger.info("[%s] fell back to %s", self.name, strategy.label)
            return SVMPredictor(
                self.name,
                estimator,
                strategy=strategy,
                attempts=attempts,
                feature_names=feature_names_of(X),
            )

        summary = "; ".join(f"{label}: {err}" for label, err in attempts)
        raise ModelFitError(self.name, f"all SVM strategies failed ({summary})")
