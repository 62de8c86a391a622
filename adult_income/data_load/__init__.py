"""Data loading and I/O module.

This module provides utilities for:
- Loading the census CSV files (headered or raw UCI format)
- Missing value reporting and dataset summaries
- Target encoding
- Train/test splitting when no test file is supplied
"""

from .loaders import (
    ADULT_COLUMNS,
    load_dataset,
    missing_value_counts,
    get_dataset_info,
    DatasetInfo,
    summarize_dataframe,
    select_feature_target,
    encode_target,
    data_audit,
)
from .splitters import train_test_split

__all__ = [
    "ADULT_COLUMNS",
    "load_dataset",
    "missing_value_counts",
    "get_dataset_info",
    "DatasetInfo",
    "summarize_dataframe",
    "select_feature_target",
    "encode_target",
    "data_audit",
    "train_test_split",
]
