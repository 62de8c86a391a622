"""Evaluation module for model assessment.

This module provides confusion-matrix metrics, AUC, ROC plots and report
generation for any set of labels and scores.
"""

from .metrics import (
    EvaluationReport,
    compute_auc,
    evaluate,
    evaluate_prediction,
    roc_points,
)
from .reporters import (
    format_report,
    plot_confusion_matrix,
    generate_evaluation_report,
    metrics_table,
    plot_feature_importance,
    plot_roc_comparison,
    plot_roc_curve,
)

__all__ = [
    "EvaluationReport",
    "compute_auc",
    "evaluate",
    "evaluate_prediction",
    "roc_points",
    "format_report",
    "plot_confusion_matrix",
    "generate_evaluation_report",
    "metrics_table",
    "plot_feature_importance",
    "plot_roc_comparison",
    "plot_roc_curve",
]
