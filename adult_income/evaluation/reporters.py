"""Evaluation report generation utilities."""
from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .metrics import EvaluationReport, roc_points

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return "undefined" if value is None or math.isnan(value) else f"{value:.4f}"


def format_report(name: str, report: EvaluationReport) -> str:
    """Render one model's evaluation as a console text block."""
    cm = report.confusion_frame()
    lines = [
        f"=== {name} ===",
        "Confusion matrix (rows = actual, columns = predicted):",
        cm.to_string(),
        "",
        f"  Accuracy:    {_fmt(report.accuracy)}",
        f"  Sensitivity: {_fmt(report.sensitivity)}",
        f"  Specificity: {_fmt(report.specificity)}",
        f"  AUC:         {_fmt(report.auc)}",
        f"  N:           {report.n}",
    ]
    return "\n".join(lines)


def plot_confusion_matrix(
    report: EvaluationReport,
    name: str = "model",
    save_path: Optional[Union[str, Path]] = None,
) -> Union[go.Figure, str]:
    """Plot a report's confusion matrix as an interactive Plotly heatmap.

    Args:
        report: Evaluation of one model
        name: Model name for the title
        save_path: Optional HTML path

    Returns:
        Plotly Figure object (or path if save_path provided)
    """
    cm = report.confusion_matrix
    classes = ["<=50K", ">50K"]
    row_totals = cm.sum(axis=1)

    z_text = [
        [
            f"{cm[i, j]}<br>({cm[i, j] / row_totals[i] * 100:.1f}%)" if row_totals[i] else f"{cm[i, j]}"
            for j in range(2)
        ]
        for i in range(2)
    ]

    fig = go.Figure(go.Heatmap(
        z=cm,
        x=classes,
        y=classes,
        text=z_text,
        texttemplate="%{text}",
        colorscale="Blues",
        showscale=True,
        hovertemplate="True: %{y}<br>Predicted: %{x}<br>Count: %{z}<extra></extra>",
    ))

    fig.update_layout(
        title=f"Confusion Matrix: {name}",
        xaxis=dict(title="Predicted label", side="bottom"),
        yaxis=dict(title="True label", autorange="reversed"),
        width=600,
        height=550,
        template="plotly_white",
    )

    if save_path:
        fig.write_html(str(save_path))
        return str(save_path)
    return fig


def plot_roc_curve(
    y_true: np.ndarray,
    y_score: np.ndarray,
    name: str = "model",
    auc_value: Optional[float] = None,
    save_path: Optional[Union[str, Path]] = None,
) -> Union[plt.Figure, str]:
    """Plot a single ROC curve with matplotlib.

    Args:
        y_true: True labels
        y_score: Predicted scores
        name: Model name for the title
        auc_value: AUC shown in the legend (if known)
        save_path: Optional PNG path. The figure is closed after saving

    Returns:
        matplotlib Figure (or the path if save_path provided)
    """
    fpr, tpr, _ = roc_points(y_true, y_score)

    fig, ax = plt.subplots(figsize=(6, 6))
    label = "ROC curve" if auc_value is None else f"ROC curve (AUC = {auc_value:.3f})"
    ax.plot(fpr, tpr, color="darkorange", lw=2, label=label)
    ax.plot([0, 1], [0, 1], color="navy", lw=2, linestyle="--", label="Random")
    ax.set_xlim(0.0, 1.0)
    ax.set_ylim(0.0, 1.05)
    ax.set_xlabel("False Positive Rate")
    ax.set_ylabel("True Positive Rate")
    ax.set_title(f"ROC Curve: {name}")
    ax.legend(loc="lower right")
    ax.grid(alpha=0.3)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        return str(save_path)
    return fig


def plot_roc_comparison(
    curves: Mapping[str, tuple],
    save_path: Optional[Union[str, Path]] = None,
) -> Union[go.Figure, str]:
    """Overlay ROC curves of several models in one interactive Plotly figure.

    Args:
        curves: model name -> (y_true, y_score, auc)
        save_path: Optional HTML path

    Returns:
        Plotly Figure (or path if save_path provided)
    """
    fig = go.Figure()

    for name, (y_true, y_score, auc_value) in curves.items():
        fpr, tpr, thresholds = roc_points(y_true, y_score)
        fig.add_trace(go.Scatter(
            x=fpr,
            y=tpr,
            mode="lines",
            name=f"{name} (AUC = {_fmt(auc_value)})",
            line=dict(width=2),
            customdata=thresholds,
            hovertemplate=(
                "FPR: %{x:.3f}<br>"
                "TPR: %{y:.3f}<br>"
                "Threshold: %{customdata:.3f}<br>"
                "<extra></extra>"
            ),
        ))

    fig.add_trace(go.Scatter(
        x=[0, 1],
        y=[0, 1],
        mode="lines",
        name="Random",
        line=dict(color="navy", width=2, dash="dash"),
        hoverinfo="skip",
    ))

    fig.update_layout(
        title="ROC Curves",
        xaxis=dict(title="False Positive Rate", range=[0, 1], gridcolor="lightgray"),
        yaxis=dict(title="True Positive Rate", range=[0, 1.05], gridcolor="lightgray"),
        width=750,
        height=600,
        template="plotly_white",
        legend=dict(x=0.55, y=0.05),
        hovermode="closest",
    )

    if save_path:
        fig.write_html(str(save_path))
        return str(save_path)
    return fig


def plot_feature_importance(
    importances: pd.Series,
    name: str = "random_forest",
    top_n: int = 20,
    save_path: Optional[Union[str, Path]] = None,
) -> Union[plt.Figure, str]:
    """Horizontal bar chart of the largest feature importances."""
    top = importances.sort_values(ascending=False).head(top_n)[::-1]

    fig, ax = plt.subplots(figsize=(8, max(3, 0.3 * len(top))))
    ax.barh(top.index.astype(str), top.values, color="steelblue")
    ax.set_xlabel("Mean decrease in impurity")
    ax.set_title(f"Feature importance: {name}")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        return str(save_path)
    return fig


def metrics_table(reports: Mapping[str, EvaluationReport]) -> pd.DataFrame:
    """One row per model with confusion counts and metrics."""
    rows = [{"model": name, **report.to_dict()} for name, report in reports.items()]
    columns = ["model", "accuracy", "sensitivity", "specificity", "auc", "tn", "fp", "fn", "tp", "n"]
    return pd.DataFrame(rows, columns=columns)


def generate_evaluation_report(
    reports: Mapping[str, EvaluationReport],
    output_dir: Union[str, Path],
    failures: Optional[Dict[str, str]] = None,
    plot_paths: Optional[Dict[str, str]] = None,
) -> str:
    """Write a metrics CSV and a markdown summary.

    Args:
        reports: model name -> EvaluationReport
        output_dir: Destination directory (created if needed)
        failures: model name -> error message for models that failed to fit
        plot_paths: model name -> ROC image path

    Returns:
        Path to saved metrics CSV
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    table = metrics_table(reports)
    csv_path = os.path.join(output_dir, "evaluation_metrics.csv")
    table.to_csv(csv_path, index=False)

    report_lines = ["# Evaluation Report: adult income", "", "## Metrics", ""]
    for name, report in reports.items():
        report_lines.append(f"### {name}")
        report_lines.append("")
        report_lines.append("```")
        report_lines.append(format_report(name, report))
        report_lines.append("```")
        if plot_paths and name in plot_paths:
            report_lines.append(f"- ROC curve: `{plot_paths[name]}`")
        report_lines.append("")

    if failures:
        report_lines.extend(["## Failed models", ""])
        for name, message in failures.items():
            report_lines.append(f"- **{name}**: {message}")

    md_path = os.path.join(output_dir, "evaluation_report.md")
    with open(md_path, "w", encoding="utf-8") as f:
        f.write("\n".join(report_lines))

    logger.info("Evaluation report written to %s", md_path)
    return csv_path
