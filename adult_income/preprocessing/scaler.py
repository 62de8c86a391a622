"""Standardisation of numeric columns with training-only statistics.

``fit_scaling`` computes mean and sample standard deviation (ddof=1) from
training rows. ``apply_scaling`` applies those fixed parameters to any
dataset; it never looks at the statistics of the data it transforms.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import DataIntegrityError, DivideByZeroError, SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalingParameters:
    """Per-column mean and sample standard deviation."""
    means: Mapping[str, float] = field(default_factory=dict)
    stds: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "means", MappingProxyType(dict(self.means)))
        object.__setattr__(self, "stds", MappingProxyType(dict(self.stds)))

    def __reduce__(self):
        return (type(self), (dict(self.means), dict(self.stds)))

    @property
    def columns(self) -> list:
        return list(self.means)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"mean": dict(self.means), "std": dict(self.stds)})


def _check_columns(df: pd.DataFrame, columns: Sequence[str]) -> None:
    absent = [c for c in columns if c not in df.columns]
    if absent:
        raise SchemaError(f"Numeric columns not found: {absent}", columns=absent)


def fit_scaling(df: pd.DataFrame, columns: Optional[Sequence[str]] = None) -> ScalingParameters:
    """Compute scaling parameters from training data.

    Args:
        df: Training DataFrame
        columns: Numeric columns to scale. All numeric columns if None

    Returns:
        ScalingParameters with mean and sample std per column

    Raises:
        SchemaError: If a column is absent
        DataIntegrityError: If fewer than two rows or a column has no values
        DivideByZeroError: If a column is constant
    """
    if columns is None:
        columns = df.select_dtypes(include=[np.number]).columns.tolist()
    _check_columns(df, columns)

    if len(df) < 2:
        raise DataIntegrityError(
            f"At least two training rows are needed to estimate a standard deviation, got {len(df)}"
        )

    means: Dict[str, float] = {}
    stds: Dict[str, float] = {}
    for col in columns:
        values = pd.to_numeric(df[col], errors="coerce").astype(float)
        if values.isna().all():
            raise DataIntegrityError(f"Numeric column '{col}' has no values")
        std = float(values.std(ddof=1))
        if not np.isfinite(std) or std == 0.0:
            raise DivideByZeroError(col)
        means[col] = float(values.mean())
        stds[col] = std

    logger.debug("Scaling parameters: %s", {c: (means[c], stds[c]) for c in means})
    return ScalingParameters(means=means, stds=stds)


def apply_scaling(df: pd.DataFrame, params: ScalingParameters) -> pd.DataFrame:
    """Subtract the training mean and divide by the training std per column.

    Other columns are passed through unchanged.
    """
    _check_columns(df, params.columns)
    result = df.copy()
    for col in params.columns:
        result[col] = (result[col].astype(float) - params.means[col]) / params.stds[col]
    return result


class NumericScaler:
    """Object wrapper around fit_scaling/apply_scaling."""

    def __init__(self, columns: Optional[Sequence[str]] = None):
        self.columns = columns
        self.params_: Optional[ScalingParameters] = None

    def fit(self, df: pd.DataFrame) -> "NumericScaler":
        self.params_ = fit_scaling(df, self.columns)
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        if self.params_ is None:
            raise ValueError("NumericScaler must be fitted before transform")
        return apply_scaling(df, self.params_)

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)
