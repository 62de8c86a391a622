"""Dataset loading utilities.

This module handles loading the census CSV files with robust error
handling, header detection and whitespace normalisation.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from ..config import CONFIG, MISSING_SENTINEL, ProjectConfig
from ..errors import DataIntegrityError, SchemaError

logger = logging.getLogger(__name__)


ADULT_COLUMNS: List[str] = [
    "age",
    "workclass",
    "fnlwgt",
    "education",
    "education-num",
    "marital-status",
    "occupation",
    "relationship",
    "race",
    "sex",
    "capital-gain",
    "capital-loss",
    "hours-per-week",
    "native-country",
    "income",
]

SUPPORTED_FORMATS = {".csv", ".data", ".test", ".txt"}


@dataclass
class DatasetInfo:
    """Container with dataset metadata and information.

    Attributes:
        columns: List of column names
        n_rows: Number of rows
        target_col: Target column name if available
        missing_counts: Sentinel/NaN count per column (only columns with any)
    """
    columns: List[str]
    n_rows: int
    target_col: Optional[str]
    missing_counts: Dict[str, int] = field(default_factory=dict)


def _read_csv(path: str, header: Optional[int] = 0, names: Optional[List[str]] = None) -> pd.DataFrame:
    # '|' only appears in the comment line heading the UCI test file
    return pd.read_csv(
        path,
        header=header,
        names=names,
        skipinitialspace=True,
        comment="|",
    )


def _strip_strings(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    for col in df.columns:
        if not pd.api.types.is_numeric_dtype(df[col]):
            df[col] = df[col].str.strip()
    return df


def load_dataset(path: Optional[str] = None, target_column: Optional[str] = None) -> pd.DataFrame:
    """Load a census CSV file.

    Files with a header row are read as-is. Header-less raw UCI files
    (``adult.data``/``adult.test``) are detected by their column count and
    given the canonical column names. String cells are trimmed; the missing
    value sentinel ``"?"`` is preserved for the cleaning step.

    Args:
        path: Path to the CSV file. If None, uses CONFIG.train_path
        target_column: Target column used for header detection

    Returns:
        pandas DataFrame with loaded data

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If file format is not supported
        RuntimeError: If file cannot be parsed
    """
    if path is None:
        from ..config import validate_config
        validate_config(CONFIG)
        path = CONFIG.train_path
    target_column = target_column or CONFIG.target_column

    if not path or not os.path.exists(path):
        raise FileNotFoundError(f"Dataset not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported file format '{ext}'. "
            f"Supported formats: {sorted(SUPPORTED_FORMATS)}"
        )

    try:
        df = _read_csv(path)
        header_names = [str(c).strip() for c in df.columns]
        if target_column not in header_names and len(header_names) == len(ADULT_COLUMNS):
            logger.info("No header found in %s; using UCI Adult column names", path)
            df = _read_csv(path, header=None, names=ADULT_COLUMNS)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise RuntimeError(
            f"Failed to parse {path}. Check file format and encoding. Error: {e}"
        ) from e

    df = _strip_strings(df)

    missing = missing_value_counts(df)
    logger.info("Loaded %s: %d rows x %d columns", path, df.shape[0], df.shape[1])
    if missing.any():
        logger.info("Missing values per column: %s", missing[missing > 0].to_dict())

    return df


def missing_value_counts(df: pd.DataFrame, sentinel: str = MISSING_SENTINEL) -> pd.Series:
    """Count sentinel or NaN cells per column."""
    return ((df == sentinel) | df.isna()).sum()


def get_dataset_info(df: pd.DataFrame, cfg: ProjectConfig = CONFIG) -> DatasetInfo:
    """Extract metadata information from DataFrame.

    Args:
        df: Input DataFrame
        cfg: Project configuration with the target column name

    Returns:
        DatasetInfo object with metadata
    """
    missing = missing_value_counts(df)
    return DatasetInfo(
        columns=list(df.columns),
        n_rows=len(df),
        target_col=cfg.target_column if cfg.target_column in df.columns else None,
        missing_counts={k: int(v) for k, v in missing.items() if v > 0},
    )


def summarize_dataframe(df: pd.DataFrame, cfg: ProjectConfig = CONFIG) -> dict:
    """Compute summary tables for a loaded dataset.

    Returns:
        Dictionary with summary DataFrames:
        - shape: (rows, columns)
        - describe: Descriptive statistics
        - missing: Sentinel/NaN counts and rates
        - dtypes: Data types
        - class_balance: Target distribution (if target present)
    """
    missing = missing_value_counts(df)
    summary = {
        "shape": df.shape,
        "describe": df.describe(include="all").T,
        "missing": pd.DataFrame({
            "missing_count": missing,
            "missing_rate": missing / max(len(df), 1),
        }).sort_values("missing_count", ascending=False),
        "dtypes": df.dtypes.astype(str).to_frame("dtype"),
    }

    if cfg.target_column in df.columns:
        vc = df[cfg.target_column].value_counts(dropna=False)
        summary["class_balance"] = pd.DataFrame({"count": vc, "fraction": vc / vc.sum()})

    return summary


def select_feature_target(df: pd.DataFrame, target_col: str) -> tuple[pd.DataFrame, pd.Series]:
    """Separate features and target, dropping target from features.

    Raises:
        SchemaError: If target column not found
    """
    if target_col not in df.columns:
        raise SchemaError(
            f"Required target column '{target_col}' not found in dataset.",
            columns=[target_col],
        )

    X = df.drop(columns=[target_col])
    y = df[target_col]
    return X, y


def encode_target(
    series: pd.Series,
    positive_label: str = ">50K",
    negative_label: str = "<=50K",
) -> pd.Series:
    """Map income labels to 1 (positive) / 0 (negative).

    Labels are trimmed and a trailing period is removed, since the UCI test
    file writes ``>50K.``.

    Raises:
        DataIntegrityError: If a label is neither positive nor negative
    """
    labels = series.astype(str).str.strip().str.rstrip(".")
    known = labels.isin([positive_label, negative_label])
    if not known.all():
        unexpected = sorted(labels[~known].unique().tolist())
        raise DataIntegrityError(
            f"Target '{series.name}' has unexpected labels: {unexpected[:10]}"
        )
    return (labels == positive_label).astype(int).rename(series.name)


def data_audit(df: pd.DataFrame, feature_cols: Optional[List[str]] = None, top_n: int = 30) -> dict:
    """Early audit of missing values and feature quality.

    Returns:
        Dictionary with:
        - head: First rows of features
        - nan_summary: count and fraction of missing cells per column
        - full_missing: List of columns with every cell missing
        - constant: List of columns with <=1 distinct value
    """
    if feature_cols is None:
        feature_cols = list(df.columns)

    X = df[feature_cols]
    missing = missing_value_counts(X)
    nan_summary = (
        pd.DataFrame({"nan_count": missing, "nan_fraction": missing / max(len(X), 1)})
        .sort_values("nan_fraction", ascending=False)
        .head(top_n)
    )

    return {
        "head": X.head(10),
        "nan_summary": nan_summary,
        "full_missing": [c for c in feature_cols if len(X) and missing[c] == len(X)],
        "constant": [c for c in feature_cols if X[c].nunique(dropna=True) <= 1],
    }
