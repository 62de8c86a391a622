"""Main data cleaning class.

This module provides the DataCleaner class that removes low-value columns,
drops rows carrying the missing-value sentinel and coerces numeric columns,
tracking what was removed at each step.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..config import DEFAULT_DROP_COLUMNS, MISSING_SENTINEL, NUMERIC_COLUMNS
from ..errors import DataIntegrityError, SchemaError

logger = logging.getLogger(__name__)


@dataclass
class CleaningConfig:
    """Configuration for the cleaning step.

    Attributes:
        sentinel: Literal marking a missing cell
        drop_columns: Columns removed before modelling
        numeric_columns: Columns that must parse as numbers
        drop_nan_rows: Also drop rows with empty (NaN) cells
    """
    sentinel: str = MISSING_SENTINEL
    drop_columns: Tuple[str, ...] = DEFAULT_DROP_COLUMNS
    numeric_columns: Tuple[str, ...] = NUMERIC_COLUMNS
    drop_nan_rows: bool = True

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return asdict(self)


@dataclass
class CleaningReport:
    """Row and column counts recorded while cleaning one dataset."""
    rows_before: int
    rows_after: int = 0
    columns_dropped: List[str] = field(default_factory=list)
    sentinel_counts: Dict[str, int] = field(default_factory=dict)
    rows_with_sentinel: int = 0
    rows_unparseable: int = 0

    @property
    def rows_removed(self) -> int:
        return self.rows_before - self.rows_after

    def to_dict(self) -> Dict:
        return asdict(self)


class DataCleaner:
    """Removes missing-value rows and low-value columns.

    ``clean`` never modifies its input and keeps no state between calls, so
    one cleaner can be applied to the train and test files in turn.
    """

    def __init__(self, config: Optional[CleaningConfig] = None):
        self.config = config or CleaningConfig()

    def clean(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, CleaningReport]:
        """Apply the cleaning steps to a DataFrame.

        Args:
            df: Raw DataFrame as returned by ``load_dataset``

        Returns:
            Tuple of (cleaned DataFrame, CleaningReport)

        Raises:
            SchemaError: If a drop column or numeric column is absent
            DataIntegrityError: If no rows survive, or a numeric column
                has no parseable value
        """
        report = CleaningReport(rows_before=len(df))

        df_clean = self._drop_columns(df, report)
        df_clean = self._drop_missing_rows(df_clean, report)
        df_clean = self._coerce_numeric(df_clean, report)

        report.rows_after = len(df_clean)
        logger.info(
            "Cleaning: %d -> %d rows (%d with '%s', %d unparseable), dropped columns %s",
            report.rows_before,
            report.rows_after,
            report.rows_with_sentinel,
            self.config.sentinel,
            report.rows_unparseable,
            report.columns_dropped,
        )
        return df_clean, report

    def _drop_columns(self, df: pd.DataFrame, report: CleaningReport) -> pd.DataFrame:
        """Remove the configured columns, all of which must exist."""
        absent = [c for c in self.config.drop_columns if c not in df.columns]
        if absent:
            raise SchemaError(f"Cannot drop missing columns: {absent}", columns=absent)

        report.columns_dropped = list(self.config.drop_columns)
        return df.drop(columns=list(self.config.drop_columns))

    def _drop_missing_rows(self, df: pd.DataFrame, report: CleaningReport) -> pd.DataFrame:
        """Remove every row where some field equals the sentinel."""
        is_missing = df == self.config.sentinel
        report.sentinel_counts = {
            col: int(n) for col, n in is_missing.sum().items() if n > 0
        }
        if self.config.drop_nan_rows:
            is_missing = is_missing | df.isna()

        bad_rows = is_missing.any(axis=1)
        report.rows_with_sentinel = int(bad_rows.sum())
        df_clean = df.loc[~bad_rows].reset_index(drop=True)

        if df_clean.empty:
            raise DataIntegrityError(
                f"No rows left after removing '{self.config.sentinel}' "
                f"values ({report.rows_before} rows before)"
            )
        return df_clean

    def _coerce_numeric(self, df: pd.DataFrame, report: CleaningReport) -> pd.DataFrame:
        """Parse numeric columns, dropping rows that do not parse."""
        absent = [c for c in self.config.numeric_columns if c not in df.columns]
        if absent:
            raise SchemaError(f"Required numeric columns not found: {absent}", columns=absent)

        df_clean = df.copy()
        unparseable = pd.Series(False, index=df_clean.index)
        for col in self.config.numeric_columns:
            values = pd.to_numeric(df_clean[col], errors="coerce")
            if values.isna().all():
                raise DataIntegrityError(f"Numeric column '{col}' has no usable values")
            unparseable |= values.isna()
            df_clean[col] = values

        report.rows_unparseable = int(unparseable.sum())
        if report.rows_unparseable:
            df_clean = df_clean.loc[~unparseable].reset_index(drop=True)

        if df_clean.empty:
            raise DataIntegrityError("No rows left after numeric coercion")
        return df_clean


def clean_dataset(
    df: pd.DataFrame,
    config: Optional[CleaningConfig] = None,
) -> Tuple[pd.DataFrame, CleaningReport]:
    """Clean one dataset with the given (or default) configuration."""
    return DataCleaner(config).clean(df)


def quick_clean(df: pd.DataFrame, **kwargs) -> Tuple[pd.DataFrame, CleaningReport]:
    """Quick convenience function for data cleaning.

    Args:
        df: DataFrame to clean
        **kwargs: Arguments for CleaningConfig

    Returns:
        Tuple of (cleaned_df, report)
    """
    return DataCleaner(CleaningConfig(**kwargs)).clean(df)
