"""Model comparison workflow.

Fits each trainer on its own copy of the prepared matrices, predicts the
test set and evaluates it. A model that fails at any step is logged and
recorded; the remaining models still run.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union

from ..errors import ModelFitError
from ..evaluation import (
    EvaluationReport,
    evaluate_prediction,
    plot_confusion_matrix,
    plot_feature_importance,
    plot_roc_curve,
)
from ..models import PredictionResult, Predictor, RandomForestPredictor, Trainer, save_predictor
from ..preprocessing import PreparedData

logger = logging.getLogger(__name__)


@dataclass
class ModelRun:
    """Outcome of one trainer."""
    name: str
    predictor: Predictor
    prediction: PredictionResult
    report: EvaluationReport
    roc_path: Optional[str] = None


@dataclass
class ComparisonResult:
    """Outcome of a comparison run."""
    runs: Dict[str, ModelRun] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def reports(self) -> Dict[str, EvaluationReport]:
        return {name: run.report for name, run in self.runs.items()}

    @property
    def plot_paths(self) -> Dict[str, str]:
        return {name: run.roc_path for name, run in self.runs.items() if run.roc_path}

    def best_model(self, metric: str = "auc") -> Optional[str]:
        """Name of the model with the highest value of ``metric`` (NaN ignored)."""
        scored = {
            name: getattr(report, metric)
            for name, report in self.reports.items()
            if not math.isnan(getattr(report, metric))
        }
        return max(scored, key=scored.get) if scored else None


def run_trainer(
    trainer: Trainer,
    data: PreparedData,
    output_dir: Optional[Union[str, Path]] = None,
    save_plots: bool = True,
    save_model: bool = False,
) -> ModelRun:
    """Fit, predict and evaluate a single trainer.

    Raises:
        ModelFitError: If the trainer cannot fit
    """
    local = data.copy()
    logger.info("Training %s on %d rows x %d features", trainer.name, *local.X_train.shape)

    predictor = trainer.fit(local.X_train, local.y_train)
    prediction = predictor.predict_result(local.X_test)
    report = evaluate_prediction(prediction, local.y_test)
    run = ModelRun(trainer.name, predictor, prediction, report)

    if output_dir is not None:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        if save_plots:
            run.roc_path = plot_roc_curve(
                local.y_test.values,
                prediction.scores,
                name=trainer.name,
                auc_value=None if math.isnan(report.auc) else report.auc,
                save_path=out / f"roc_{trainer.name}.png",
            )
            plot_confusion_matrix(report, name=trainer.name, save_path=out / f"confusion_{trainer.name}.html")
        if save_plots and isinstance(predictor, RandomForestPredictor):
            plot_feature_importance(
                predictor.feature_importances,
                name=trainer.name,
                save_path=out / f"importance_{trainer.name}.png",
            )
        if save_model:
            save_predictor(predictor, out / "models" / f"{trainer.name}.joblib")

    logger.info(
        "%s: accuracy=%.4f auc=%.4f", trainer.name, report.accuracy, report.auc,
    )
    return run


def compare_models(
    trainers: Mapping[str, Trainer],
    data: PreparedData,
    output_dir: Optional[Union[str, Path]] = None,
    save_plots: bool = True,
    save_models: bool = False,
    progress_callback: Optional[Callable[[str, float], None]] = None,
) -> ComparisonResult:
    """Run every trainer, isolating per-model failures.

    Args:
        trainers: name -> Trainer, run in order
        data: Prepared train/test matrices (not modified)
        output_dir: Where ROC images, confusion matrices and models are written; None to skip
        save_plots: Write ROC (and feature importance) images
        save_models: Persist fitted predictors under ``output_dir/models``
        progress_callback: Optional callback(message, fraction_done)

    Returns:
        ComparisonResult with successful runs and failure messages
    """
    result = ComparisonResult()
    total = max(len(trainers), 1)

    for idx, (name, trainer) in enumerate(trainers.items(), 1):
        if progress_callback:
            progress_callback(f"Training {name}...", (idx - 1) / total)
        try:
            result.runs[name] = run_trainer(
                trainer, data, output_dir, save_plots=save_plots, save_model=save_models,
            )
        except ModelFitError as e:
            logger.error("Model '%s' failed and is skipped: %s", name, e)
            result.failures[name] = str(e)
        except Exception as e:
            # prediction, evaluation or output writing failed after the fit
            logger.exception("Model '%s' failed after fitting and is skipped", name)
            result.failures[name] = f"{type(e).__name__}: {e}"

    if progress_callback:
        progress_callback("Done", 1.0)
    return result
