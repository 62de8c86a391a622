"""Trainer/Predictor interface shared by all models.

Every model is fitted through ``Trainer.fit`` and queried through the
``Predictor`` it returns, so evaluation code never depends on the library
behind a model.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from ..config import DECISION_THRESHOLD
from ..errors import ModelFitError, SchemaError


@dataclass
class PredictionResult:
    """Row-aligned predicted labels and scores for one model on one dataset."""
    model_name: str
    labels: np.ndarray
    scores: np.ndarray

    def __post_init__(self):
        if len(self.labels) != len(self.scores):
            raise ValueError(
                f"labels and scores differ in length: {len(self.labels)} != {len(self.scores)}"
            )

    def __len__(self) -> int:
        return len(self.labels)


class Predictor:
    """A fitted model.

    Attributes:
        name: Name of the trainer that produced it
        estimator: Underlying fitted library estimator
        feature_names: Training columns, in order
        details: Fit information (selected hyperparameters, CV scores, ...)
    """

    threshold: float = DECISION_THRESHOLD

    def __init__(
        self,
        name: str,
        estimator: Any,
        feature_names: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.estimator = estimator
        self.feature_names = feature_names
        self.details = details or {}

    def _check_features(self, X: pd.DataFrame | np.ndarray) -> None:
        if self.feature_names is None or not isinstance(X, pd.DataFrame):
            return
        if list(X.columns) != self.feature_names:
            missing = [c for c in self.feature_names if c not in X.columns]
            raise SchemaError(
                f"[{self.name}] feature columns differ from training "
                f"(missing: {missing[:5]}, or order changed)",
                columns=missing,
            )

    def predict_proba(self, X: pd.DataFrame | np.ndarray) -> np.ndarray:
        """Probability of the positive class for each row."""
        self._check_features(X)
        return np.asarray(self.estimator.predict_proba(X))[:, 1]

    def predict(self, X: pd.DataFrame | np.ndarray) -> np.ndarray:
        """Hard 0/1 labels at the fixed 0.5 threshold."""
        return (self.predict_proba(X) >= self.threshold).astype(int)

    def predict_result(self, X: pd.DataFrame | np.ndarray) -> PredictionResult:
        scores = self.predict_proba(X)
        labels = (scores >= self.threshold).astype(int)
        return PredictionResult(model_name=self.name, labels=labels, scores=scores)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, estimator={type(self.estimator).__name__})"


class Trainer(ABC):
    """Fits one kind of model.

    Subclasses implement ``_fit``. Any library exception raised while
    fitting is re-raised as ``ModelFitError``.
    """

    name: str = "model"

    def fit(self, X: pd.DataFrame, y: pd.Series | np.ndarray) -> Predictor:
        try:
            return self._fit(X, y)
        except ModelFitError:
            raise
        except Exception as e:
            raise ModelFitError(self.name, f"{type(e).__name__}: {e}") from e

    @abstractmethod
    def _fit(self, X: pd.DataFrame, y: pd.Series | np.ndarray) -> Predictor:
        pass

    def predict(self, predictor: Predictor, X: pd.DataFrame | np.ndarray) -> np.ndarray:
        """Positive-class probabilities from a fitted predictor."""
        return predictor.predict_proba(X)

    def get_params(self) -> Dict[str, Any]:
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"{type(self).__name__}({params})"


def feature_names_of(X: pd.DataFrame | np.ndarray) -> Optional[List[str]]:
    return list(X.columns) if isinstance(X, pd.DataFrame) else None
