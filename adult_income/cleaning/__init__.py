"""Data cleaning module.

Removes rows carrying the ``"?"`` missing-value sentinel, drops the
columns excluded from modelling and parses numeric columns.
"""

from .cleaner import (
    CleaningConfig,
    CleaningReport,
    DataCleaner,
    clean_dataset,
    quick_clean,
)

__all__ = [
    "CleaningConfig",
    "CleaningReport",
    "DataCleaner",
    "clean_dataset",
    "quick_clean",
]
