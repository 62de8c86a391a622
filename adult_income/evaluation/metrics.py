"""Metrics computation for binary classifiers.

Works on any (labels, predictions, scores) triple; nothing here depends on
which model produced the scores.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import auc, confusion_matrix, roc_curve

from ..models.base import PredictionResult


@dataclass(frozen=True)
class EvaluationReport:
    """Confusion counts and derived metrics for one model on one dataset.

    Sensitivity, specificity and AUC are NaN when the class they need is
    absent from the ground truth.
    """
    tn: int
    fp: int
    fn: int
    tp: int
    accuracy: float
    sensitivity: float
    specificity: float
    auc: float

    @property
    def n(self) -> int:
        return self.tn + self.fp + self.fn + self.tp

    @property
    def confusion_matrix(self) -> np.ndarray:
        """2x2 counts, rows = actual (0, 1), columns = predicted (0, 1)."""
        return np.array([[self.tn, self.fp], [self.fn, self.tp]])

    def confusion_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.confusion_matrix,
            index=pd.Index(["<=50K", ">50K"], name="actual"),
            columns=pd.Index(["<=50K", ">50K"], name="predicted"),
        )

    def to_dict(self) -> Dict[str, float]:
        return {**asdict(self), "n": self.n}


def _as_1d(values, name: str) -> np.ndarray:
    arr = np.asarray(values).ravel()
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional")
    return arr


def roc_points(y_true, y_score) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """ROC curve over every distinct score threshold (fpr, tpr, thresholds)."""
    return roc_curve(_as_1d(y_true, "y_true").astype(int), _as_1d(y_score, "y_score"), drop_intermediate=False)


def compute_auc(y_true, y_score) -> float:
    """Trapezoidal area under the ROC curve; NaN when only one class is present."""
    y_true = _as_1d(y_true, "y_true").astype(int)
    if len(np.unique(y_true)) < 2:
        return float("nan")
    fpr, tpr, _ = roc_points(y_true, y_score)
    return float(auc(fpr, tpr))


def _ratio(num: int, den: int) -> float:
    return num / den if den > 0 else float("nan")


def evaluate(y_true, y_pred, y_score) -> EvaluationReport:
    """Evaluate predicted labels and scores against ground truth.

    Args:
        y_true: True 0/1 labels
        y_pred: Predicted 0/1 labels
        y_score: Continuous scores (higher means more likely positive)

    Returns:
        EvaluationReport

    Raises:
        ValueError: If inputs are empty or differ in length
    """
    y_true = _as_1d(y_true, "y_true").astype(int)
    y_pred = _as_1d(y_pred, "y_pred").astype(int)
    y_score = _as_1d(y_score, "y_score").astype(float)

    if len(y_true) == 0:
        raise ValueError("Cannot evaluate an empty set of predictions")
    if not len(y_true) == len(y_pred) == len(y_score):
        raise ValueError(
            f"Length mismatch: y_true={len(y_true)}, y_pred={len(y_pred)}, y_score={len(y_score)}"
        )
    for name, values in (("y_true", y_true), ("y_pred", y_pred)):
        if not np.isin(values, (0, 1)).all():
            raise ValueError(f"{name} must contain only 0/1 labels")

    tn, fp, fn, tp = (int(v) for v in confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel())

    return EvaluationReport(
        tn=tn,
        fp=fp,
        fn=fn,
        tp=tp,
        accuracy=(tp + tn) / len(y_true),
        sensitivity=_ratio(tp, tp + fn),
        specificity=_ratio(tn, tn + fp),
        auc=compute_auc(y_true, y_score),
    )


def evaluate_prediction(result: PredictionResult, y_true) -> EvaluationReport:
    """Evaluate a PredictionResult against ground truth."""
    return evaluate(y_true, result.labels, result.scores)
