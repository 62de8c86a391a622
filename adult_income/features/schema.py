"""Feature schema derived from the training data.

The schema fixes the numeric columns and, for every categorical column,
the levels observed in training (in first-encounter order). Test data is
conformed to it, never the reverse.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..errors import SchemaError


@dataclass(frozen=True)
class FeatureSchema:
    """Immutable description of the model feature space.

    Attributes:
        numeric_columns: Numeric feature names, in model order
        categorical_levels: Categorical column -> allowed levels
    """
    numeric_columns: Tuple[str, ...]
    categorical_levels: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        levels = {col: tuple(vals) for col, vals in self.categorical_levels.items()}
        object.__setattr__(self, "numeric_columns", tuple(self.numeric_columns))
        object.__setattr__(self, "categorical_levels", MappingProxyType(levels))

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from a plain dict
        return (type(self), (self.numeric_columns, dict(self.categorical_levels)))

    @property
    def categorical_columns(self) -> Tuple[str, ...]:
        return tuple(self.categorical_levels)

    @property
    def feature_columns(self) -> Tuple[str, ...]:
        return self.numeric_columns + self.categorical_columns

    def levels(self, column: str) -> Tuple[str, ...]:
        if column not in self.categorical_levels:
            raise SchemaError(f"'{column}' is not a categorical column of the schema", columns=[column])
        return self.categorical_levels[column]

    def check_columns(self, df: pd.DataFrame) -> None:
        """Raise SchemaError if df lacks any schema column."""
        absent = [c for c in self.feature_columns if c not in df.columns]
        if absent:
            raise SchemaError(f"Dataset is missing feature columns: {absent}", columns=absent)

    @classmethod
    def from_training(
        cls,
        df: pd.DataFrame,
        numeric_columns: Optional[Sequence[str]] = None,
        categorical_columns: Optional[Sequence[str]] = None,
    ) -> "FeatureSchema":
        """Build the schema from a training DataFrame.

        Args:
            df: Training features (target already removed)
            numeric_columns: Numeric features. Inferred from dtypes if None
            categorical_columns: Categorical features. Every non-numeric
                column if None

        Raises:
            SchemaError: If a listed column is absent
        """
        if numeric_columns is None:
            numeric_columns = df.select_dtypes(include=[np.number]).columns.tolist()
        if categorical_columns is None:
            categorical_columns = [c for c in df.columns if c not in set(numeric_columns)]

        absent = [c for c in list(numeric_columns) + list(categorical_columns) if c not in df.columns]
        if absent:
            raise SchemaError(f"Training data is missing columns: {absent}", columns=absent)

        levels: Dict[str, Tuple[str, ...]] = {}
        for col in categorical_columns:
            # pd.unique keeps encounter order
            observed = pd.unique(df[col].dropna())
            levels[col] = tuple(str(v) for v in observed)

        return cls(numeric_columns=tuple(numeric_columns), categorical_levels=levels)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "numeric_columns": list(self.numeric_columns),
            **{f"levels:{col}": list(vals) for col, vals in self.categorical_levels.items()},
        }
