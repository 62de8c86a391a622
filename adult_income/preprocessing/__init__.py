"""Preprocessing module: numeric scaling and the shared feature pipeline."""

from .scaler import (
    NumericScaler,
    ScalingParameters,
    apply_scaling,
    fit_scaling,
)
from .pipelines import PreparedData, PreprocessingConfig, prepare_features

__all__ = [
    "NumericScaler",
    "ScalingParameters",
    "apply_scaling",
    "fit_scaling",
    "PreparedData",
    "PreprocessingConfig",
    "prepare_features",
]
