"""Train/test splitting.

Used when only a training file is supplied: the cleaned frame is split
into train and test sets before any statistics are computed.
"""
from __future__ import annotations

from typing import Optional, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split as sk_split

from ..config import RANDOM_SEED


def train_test_split(
    df: pd.DataFrame,
    test_size: float = 0.3,
    stratify_column: Optional[str] = None,
    random_state: int = RANDOM_SEED,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split dataset into train and test sets.

    Args:
        df: Input DataFrame
        test_size: Fraction of data to use for testing (0.0 to 1.0)
        stratify_column: Column name for stratification. Ensures balanced
                        class distribution in train/test splits
        random_state: Random seed for reproducibility

    Returns:
        Tuple of (train_df, test_df), each with a fresh RangeIndex
    """
    stratify = None
    if stratify_column and stratify_column in df.columns:
        counts = df[stratify_column].value_counts()
        # sklearn needs at least two members per class to stratify
        if len(counts) > 1 and counts.min() >= 2:
            stratify = df[stratify_column]

    train_df, test_df = sk_split(
        df,
        test_size=test_size,
        random_state=random_state,
        shuffle=True,
        stratify=stratify,
    )
    return train_df.reset_index(drop=True), test_df.reset_index(drop=True)
