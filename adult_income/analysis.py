"""End-to-end income analysis.

load -> clean -> (split) -> prepare -> train/evaluate every model -> report

Usage:
    python run_analysis.py --train data/train.csv --test data/test_preprocessed.csv
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .cleaning import DataCleaner
from .config import CONFIG, RANDOM_SEED, ProjectConfig, validate_config
from .data_load import data_audit, load_dataset, train_test_split
from .errors import AnalysisError
from .evaluation import format_report, generate_evaluation_report, plot_roc_comparison
from .models import list_trainers, select_trainers
from .preprocessing import PreprocessingConfig, prepare_features
from .training import ComparisonResult, compare_models

logger = logging.getLogger(__name__)


def run_analysis(cfg: ProjectConfig = CONFIG, save_models: bool = False) -> ComparisonResult:
    """Run the full analysis described by ``cfg``.

    Preprocessing errors propagate and end the run. Model fit failures are
    collected in the returned result.
    """
    validate_config(cfg)

    cleaner = DataCleaner()
    train_raw = load_dataset(cfg.train_path, target_column=cfg.target_column)
    audit = data_audit(train_raw)
    if audit["full_missing"]:
        logger.warning("Columns with every value missing: %s", audit["full_missing"])
    if audit["constant"]:
        logger.warning("Constant columns: %s", audit["constant"])
    train_df, _ = cleaner.clean(train_raw)

    if cfg.test_path:
        test_raw = load_dataset(cfg.test_path, target_column=cfg.target_column)
        test_df, _ = cleaner.clean(test_raw)
    else:
        logger.info("No test file given; holding out %.0f%% of the training data", cfg.test_size * 100)
        train_df, test_df = train_test_split(
            train_df,
            test_size=cfg.test_size,
            stratify_column=cfg.target_column,
            random_state=RANDOM_SEED,
        )

    data = prepare_features(
        train_df,
        test_df,
        PreprocessingConfig(
            target_column=cfg.target_column,
            positive_label=cfg.positive_label,
            strict_categories=cfg.strict_categories,
        ),
    )

    output_dir = Path(cfg.output_dir)
    trainers = select_trainers(cfg.models)
    result = compare_models(
        trainers,
        data,
        output_dir=output_dir,
        save_plots=cfg.save_plots,
        save_models=save_models,
    )

    if result.runs:
        if cfg.save_plots:
            plot_roc_comparison(
                {
                    name: (data.y_test.values, run.prediction.scores, run.report.auc)
                    for name, run in result.runs.items()
                },
                save_path=output_dir / "roc_comparison.html",
            )
        generate_evaluation_report(
            result.reports,
            output_dir,
            failures=result.failures,
            plot_paths=result.plot_paths,
        )

    return result


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train and evaluate income classifiers on the UCI Adult data.")
    parser.add_argument("--train", type=str, default=CONFIG.train_path, help="Training CSV")
    parser.add_argument("--test", type=str, default=CONFIG.test_path, help="Test CSV (optional)")
    parser.add_argument("--output", type=str, default=CONFIG.output_dir, help="Output directory")
    parser.add_argument(
        "--models",
        nargs="+",
        choices=list_trainers(),
        default=None,
        help="Models to run (default: all)",
    )
    parser.add_argument("--test-size", type=float, default=CONFIG.test_size)
    parser.add_argument("--strict", action="store_true", help="Fail on categories unseen in training")
    parser.add_argument("--no-plots", action="store_true", help="Do not write ROC images")
    parser.add_argument("--save-models", action="store_true", help="Persist fitted models with joblib")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = replace(
        CONFIG,
        train_path=args.train or "",
        test_path=args.test or None,
        output_dir=args.output,
        test_size=args.test_size,
        strict_categories=args.strict,
        models=tuple(args.models or ()),
        save_plots=not args.no_plots,
    )

    try:
        result = run_analysis(cfg, save_models=args.save_models)
    except FileNotFoundError as e:
        logger.error("Input file missing: %s", e)
        return 2
    except AnalysisError as e:
        logger.error("Analysis aborted: %s", e)
        return 3

    for name, run in result.runs.items():
        print(format_report(name, run.report))
        if run.predictor.details:
            print(f"  Details:     {run.predictor.details}")
        print()

    for name, message in result.failures.items():
        print(f"!!! {name} failed: {message}")

    best = result.best_model()
    if best:
        print(f"Best model by AUC: {best}")
    return 0 if result.runs else 1


if __name__ == "__main__":
    sys.exit(main())
