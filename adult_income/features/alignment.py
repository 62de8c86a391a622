"""Train/test feature alignment.

Test data is made to match the training feature space in two stages:

1. Categorical levels are conformed to the training schema. A level never
   seen in training raises ``UnseenCategoryError`` in strict mode; in
   lenient mode it becomes missing, which encodes as an all-zero indicator
   block for that column.
2. After one-hot encoding each dataset on its own, the test columns are
   aligned to the training columns: columns missing from test are added as
   0, extra columns are dropped, and the order is forced to match training.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import UnseenCategoryError
from .schema import FeatureSchema

logger = logging.getLogger(__name__)


def conform_categories(
    df: pd.DataFrame,
    schema: FeatureSchema,
    strict: bool = False,
) -> pd.DataFrame:
    """Restrict categorical columns to the levels recorded in the schema.

    Args:
        df: Features to conform (not modified)
        schema: Schema built from the training data
        strict: Raise instead of coercing unseen levels to missing

    Returns:
        Copy of df with unseen levels replaced by NaN

    Raises:
        SchemaError: If df lacks a schema column
        UnseenCategoryError: If strict and an unseen level is present
    """
    schema.check_columns(df)
    result = df.copy()

    for col, levels in schema.categorical_levels.items():
        values = result[col]
        unseen = values.notna() & ~values.astype(str).isin(levels)
        if not unseen.any():
            continue

        unseen_levels = sorted(values[unseen].astype(str).unique().tolist())
        if strict:
            raise UnseenCategoryError(col, unseen_levels)

        logger.warning(
            "Column '%s': %d rows with unseen levels %s set to missing",
            col, int(unseen.sum()), unseen_levels,
        )
        result[col] = values.where(~unseen, np.nan)

    return result


def encode_dummies(df: pd.DataFrame, schema: FeatureSchema) -> pd.DataFrame:
    """One-hot encode the schema's categorical columns of a single dataset.

    Only schema features are kept: numeric columns first, then one indicator
    column per observed level named ``<column>_<level>``. Missing values
    produce no indicator.
    """
    schema.check_columns(df)
    features = df[list(schema.feature_columns)].copy()
    for col in schema.categorical_columns:
        # levels are compared as strings, matching FeatureSchema
        features[col] = features[col].map(lambda v: v if pd.isna(v) else str(v))

    return pd.get_dummies(
        features,
        columns=list(schema.categorical_columns),
        prefix_sep="_",
        dummy_na=False,
        dtype=int,
    )


def align_dummy_columns(encoded: pd.DataFrame, reference_columns: Sequence[str]) -> pd.DataFrame:
    """Force an encoded frame onto the reference (training) columns.

    Add-missing-as-zero, drop-extra, reorder. Applying it to an already
    aligned frame returns an identical frame.
    """
    reference = list(reference_columns)
    result = encoded.copy()

    missing = [c for c in reference if c not in result.columns]
    for col in missing:
        result[col] = 0

    extra = [c for c in result.columns if c not in set(reference)]
    if extra:
        result = result.drop(columns=extra)

    if missing or extra:
        logger.debug("Alignment added %d and dropped %d columns", len(missing), len(extra))

    return result[reference]


class FeatureAligner:
    """Builds the feature schema from training data and conforms other data to it.

    Example:
        >>> aligner = FeatureAligner(strict=False).fit(X_train)
        >>> X_train_enc = aligner.transform(X_train)
        >>> X_test_enc = aligner.transform(X_test)
        >>> list(X_test_enc.columns) == list(X_train_enc.columns)
        True
    """

    def __init__(
        self,
        numeric_columns: Optional[Sequence[str]] = None,
        categorical_columns: Optional[Sequence[str]] = None,
        strict: bool = False,
    ):
        self.numeric_columns = numeric_columns
        self.categorical_columns = categorical_columns
        self.strict = strict
        self.schema_: Optional[FeatureSchema] = None
        self.columns_: Optional[List[str]] = None

    def fit(self, df: pd.DataFrame) -> "FeatureAligner":
        self.schema_ = FeatureSchema.from_training(
            df,
            numeric_columns=self.numeric_columns,
            categorical_columns=self.categorical_columns,
        )
        self.columns_ = encode_dummies(df, self.schema_).columns.tolist()
        logger.info(
            "Feature schema: %d numeric, %d categorical -> %d encoded columns",
            len(self.schema_.numeric_columns),
            len(self.schema_.categorical_columns),
            len(self.columns_),
        )
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        if self.schema_ is None or self.columns_ is None:
            raise ValueError("FeatureAligner must be fitted before transform")

        conformed = conform_categories(df, self.schema_, strict=self.strict)
        encoded = encode_dummies(conformed, self.schema_)
        return align_dummy_columns(encoded, self.columns_)

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)
