"""Tests for evaluation metrics and reports."""

import math

import numpy as np
import pandas as pd
import pytest
from scipy.stats import rankdata

from adult_income.evaluation import (
    compute_auc,
    evaluate,
    evaluate_prediction,
    format_report,
    generate_evaluation_report,
    metrics_table,
    plot_confusion_matrix,
    plot_feature_importance,
    plot_roc_comparison,
    plot_roc_curve,
    roc_points,
)
from adult_income.models import PredictionResult


def rank_auc(y_true, y_score):
    """Mann-Whitney AUC with average ranks for ties."""
    y_true = np.asarray(y_true)
    ranks = rankdata(y_score)
    n_pos = y_true.sum()
    n_neg = len(y_true) - n_pos
    return (ranks[y_true == 1].sum() - n_pos * (n_pos + 1) / 2) / (n_pos * n_neg)


@pytest.fixture
def scored_sample(random_seed):
    rng = np.random.default_rng(random_seed)
    y_true = rng.integers(0, 2, 200)
    y_score = np.clip(0.3 * y_true + rng.random(200) * 0.7, 0, 1)
    y_pred = (y_score >= 0.5).astype(int)
    return y_true, y_pred, y_score


class TestEvaluate:
    """Test confusion matrix and derived metrics."""

    def test_known_confusion_matrix(self):
        y_true = [1, 1, 1, 0, 0, 0, 0, 1]
        y_pred = [1, 0, 1, 0, 1, 0, 0, 1]
        y_score = [0.9, 0.4, 0.8, 0.1, 0.6, 0.2, 0.3, 0.7]

        report = evaluate(y_true, y_pred, y_score)

        assert (report.tn, report.fp, report.fn, report.tp) == (3, 1, 1, 3)
        assert report.accuracy == pytest.approx(0.75)
        assert report.sensitivity == pytest.approx(0.75)
        assert report.specificity == pytest.approx(0.75)

    def test_cells_sum_to_n(self, scored_sample):
        report = evaluate(*scored_sample)

        assert report.n == len(scored_sample[0])
        assert report.confusion_matrix.sum() == report.n

    def test_metrics_in_unit_interval(self, scored_sample):
        report = evaluate(*scored_sample)

        for value in (report.accuracy, report.sensitivity, report.specificity, report.auc):
            assert 0.0 <= value <= 1.0

    def test_confusion_frame_labels(self, scored_sample):
        frame = evaluate(*scored_sample).confusion_frame()

        assert list(frame.index) == ["<=50K", ">50K"]
        assert list(frame.columns) == ["<=50K", ">50K"]

    def test_no_positives_sensitivity_undefined(self):
        report = evaluate([0, 0, 0], [0, 1, 0], [0.1, 0.7, 0.2])

        assert math.isnan(report.sensitivity)
        assert report.specificity == pytest.approx(2 / 3)
        assert math.isnan(report.auc)

    def test_no_negatives_specificity_undefined(self):
        report = evaluate([1, 1], [1, 1], [0.9, 0.8])

        assert math.isnan(report.specificity)
        assert report.sensitivity == 1.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="Length mismatch"):
            evaluate([0, 1], [0, 1, 1], [0.1, 0.9])

    def test_empty_input(self):
        with pytest.raises(ValueError, match="empty"):
            evaluate([], [], [])

    def test_non_binary_labels(self):
        with pytest.raises(ValueError, match="0/1"):
            evaluate([0, 2], [0, 1], [0.1, 0.9])

    def test_evaluate_prediction(self):
        result = PredictionResult("m", labels=np.array([0, 1, 1]), scores=np.array([0.2, 0.7, 0.9]))
        report = evaluate_prediction(result, pd.Series([0, 1, 0]))

        assert (report.tn, report.fp, report.fn, report.tp) == (1, 1, 0, 1)

    def test_to_dict(self, scored_sample):
        d = evaluate(*scored_sample).to_dict()

        assert d["n"] == 200
        assert set(d) >= {"tn", "fp", "fn", "tp", "accuracy", "sensitivity", "specificity", "auc"}


class TestAUC:
    """Test area under the ROC curve."""

    def test_perfect_separation(self):
        assert compute_auc([0, 0, 1, 1], [0.1, 0.2, 0.8, 0.9]) == pytest.approx(1.0)

    def test_perfectly_wrong(self):
        assert compute_auc([0, 0, 1, 1], [0.9, 0.8, 0.2, 0.1]) == pytest.approx(0.0)

    def test_constant_scores(self):
        assert compute_auc([0, 1, 0, 1, 1], [0.5] * 5) == pytest.approx(0.5)

    def test_matches_rank_statistic(self, scored_sample):
        y_true, _, y_score = scored_sample

        assert compute_auc(y_true, y_score) == pytest.approx(rank_auc(y_true, y_score))

    def test_matches_rank_statistic_with_ties(self, random_seed):
        rng = np.random.default_rng(random_seed)
        y_true = rng.integers(0, 2, 100)
        y_score = rng.integers(0, 5, 100) / 4.0

        assert compute_auc(y_true, y_score) == pytest.approx(rank_auc(y_true, y_score))

    def test_single_class_is_nan(self):
        assert math.isnan(compute_auc([1, 1, 1], [0.2, 0.5, 0.9]))

    def test_invariant_to_monotone_transform(self, scored_sample):
        y_true, _, y_score = scored_sample

        assert compute_auc(y_true, np.log(y_score + 1e-3)) == pytest.approx(compute_auc(y_true, y_score))

    def test_roc_points_span_unit_square(self, scored_sample):
        y_true, _, y_score = scored_sample
        fpr, tpr, _ = roc_points(y_true, y_score)

        assert fpr[0] == 0.0 and tpr[0] == 0.0
        assert fpr[-1] == 1.0 and tpr[-1] == 1.0
        assert np.all(np.diff(fpr) >= 0)


class TestReports:
    """Test text, table and file outputs."""

    def test_format_report(self, scored_sample):
        text = format_report("logistic", evaluate(*scored_sample))

        assert "=== logistic ===" in text
        assert "Sensitivity" in text
        assert "AUC" in text

    def test_format_report_undefined(self):
        text = format_report("m", evaluate([0, 0], [0, 0], [0.1, 0.2]))

        assert "undefined" in text

    def test_metrics_table(self, scored_sample):
        report = evaluate(*scored_sample)
        table = metrics_table({"a": report, "b": report})

        assert table["model"].tolist() == ["a", "b"]
        assert table.loc[0, "n"] == 200

    def test_generate_evaluation_report(self, scored_sample, tmp_path):
        report = evaluate(*scored_sample)
        csv_path = generate_evaluation_report(
            {"logistic": report},
            tmp_path / "out",
            failures={"svm": "[svm] all SVM strategies failed"},
        )

        table = pd.read_csv(csv_path)
        assert table["model"].tolist() == ["logistic"]
        md = (tmp_path / "out" / "evaluation_report.md").read_text()
        assert "### logistic" in md
        assert "svm" in md

    def test_plot_roc_curve_saves_png(self, scored_sample, tmp_path):
        y_true, _, y_score = scored_sample
        path = plot_roc_curve(y_true, y_score, name="m", auc_value=0.8, save_path=tmp_path / "roc.png")

        assert path == str(tmp_path / "roc.png")
        assert (tmp_path / "roc.png").stat().st_size > 0

    def test_plot_roc_comparison_html(self, scored_sample, tmp_path):
        y_true, _, y_score = scored_sample
        path = plot_roc_comparison(
            {"a": (y_true, y_score, 0.7), "b": (y_true, 1 - y_score, 0.3)},
            save_path=tmp_path / "roc.html",
        )

        assert "<html>" in (tmp_path / "roc.html").read_text().lower()
        assert path.endswith("roc.html")

    def test_plot_roc_comparison_figure(self, scored_sample):
        y_true, _, y_score = scored_sample
        fig = plot_roc_comparison({"a": (y_true, y_score, 0.7)})

        # one model trace plus the chance diagonal
        assert len(fig.data) == 2

    def test_plot_feature_importance(self, tmp_path):
        importances = pd.Series({"age": 0.5, "sex_Male": 0.3, "race_White": 0.2})
        path = plot_feature_importance(importances, save_path=tmp_path / "imp.png")

        assert (tmp_path / "imp.png").exists()
        assert path.endswith("imp.png")

    def test_plot_confusion_matrix(self, scored_sample, tmp_path):
        report = evaluate(*scored_sample)
        fig = plot_confusion_matrix(report, name="m")

        np.testing.assert_array_equal(np.asarray(fig.data[0].z), report.confusion_matrix)

        path = plot_confusion_matrix(report, name="m", save_path=tmp_path / "cm.html")
        assert (tmp_path / "cm.html").exists()
        assert path.endswith("cm.html")
