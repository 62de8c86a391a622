"""Preprocessing pipeline shared by every model.

Separates the target, scales numeric columns with training statistics and
one-hot encodes categoricals on the training schema, so that train and test
matrices have identical columns in identical order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..data_load import encode_target, select_feature_target
from ..features import FeatureAligner, FeatureSchema
from .scaler import ScalingParameters, apply_scaling, fit_scaling

logger = logging.getLogger(__name__)


@dataclass
class PreprocessingConfig:
    """Configuration for the preprocessing pipeline.

    Attributes:
        target_column: Income target column
        positive_label: Target value mapped to 1
        negative_label: Target value mapped to 0
        numeric_columns: Numeric features. Inferred from dtypes if None
        categorical_columns: Categorical features. Remaining columns if None
        strict_categories: Fail on levels unseen in training
    """
    target_column: str = CONFIG.target_column
    positive_label: str = CONFIG.positive_label
    negative_label: str = "<=50K"
    numeric_columns: Optional[Sequence[str]] = None
    categorical_columns: Optional[Sequence[str]] = None
    strict_categories: bool = False


@dataclass
class PreparedData:
    """Scaled, aligned model matrices and the parameters used to build them."""
    X_train: pd.DataFrame
    X_test: pd.DataFrame
    y_train: pd.Series
    y_test: pd.Series
    schema: FeatureSchema
    scaling: ScalingParameters

    @property
    def feature_names(self) -> List[str]:
        return list(self.X_train.columns)

    def copy(self) -> "PreparedData":
        """Independent copy of the matrices, one per trainer."""
        return PreparedData(
            X_train=self.X_train.copy(),
            X_test=self.X_test.copy(),
            y_train=self.y_train.copy(),
            y_test=self.y_test.copy(),
            schema=self.schema,
            scaling=self.scaling,
        )


def prepare_features(
    train_df: pd.DataFrame,
    test_df: pd.DataFrame,
    config: Optional[PreprocessingConfig] = None,
) -> PreparedData:
    """Build model-ready train and test matrices.

    Scaling parameters and the feature schema come from ``train_df`` only.

    Args:
        train_df: Cleaned training data including the target column
        test_df: Cleaned test data including the target column
        config: Preprocessing configuration

    Returns:
        PreparedData with float feature matrices and 0/1 targets
    """
    if config is None:
        config = PreprocessingConfig()

    X_train, y_train_raw = select_feature_target(train_df, config.target_column)
    X_test, y_test_raw = select_feature_target(test_df, config.target_column)

    y_train = encode_target(y_train_raw, config.positive_label, config.negative_label)
    y_test = encode_target(y_test_raw, config.positive_label, config.negative_label)

    numeric_columns = config.numeric_columns
    if numeric_columns is None:
        numeric_columns = X_train.select_dtypes(include=[np.number]).columns.tolist()

    scaling = fit_scaling(X_train, numeric_columns)
    X_train_scaled = apply_scaling(X_train, scaling)
    X_test_scaled = apply_scaling(X_test, scaling)

    aligner = FeatureAligner(
        numeric_columns=numeric_columns,
        categorical_columns=config.categorical_columns,
        strict=config.strict_categories,
    ).fit(X_train_scaled)

    X_train_enc = aligner.transform(X_train_scaled).astype(float)
    X_test_enc = aligner.transform(X_test_scaled).astype(float)

    logger.info(
        "Prepared features: train %s, test %s, positive rate train=%.3f test=%.3f",
        X_train_enc.shape, X_test_enc.shape, y_train.mean(), y_test.mean(),
    )

    return PreparedData(
        X_train=X_train_enc,
        X_test=X_test_enc,
        y_train=y_train,
        y_test=y_test,
        schema=aligner.schema_,
        scaling=scaling,
    )
