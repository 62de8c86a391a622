"""Feature schema and train/test alignment."""

from .schema import FeatureSchema
from .alignment import (
    FeatureAligner,
    align_dummy_columns,
    conform_categories,
    encode_dummies,
)

__all__ = [
    "FeatureSchema",
    "FeatureAligner",
    "align_dummy_columns",
    "conform_categories",
    "encode_dummies",
]
