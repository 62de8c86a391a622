"""Exception types raised by the analysis pipeline.

Preprocessing errors (schema, integrity, unseen categories, constant
columns) abort a run. ``ModelFitError`` only aborts the model that raised it.
"""
from __future__ import annotations

from typing import Sequence


class AnalysisError(Exception):
    """Base class for all pipeline errors."""


class SchemaError(AnalysisError, KeyError):
    """An expected column is absent."""

    def __init__(self, message: str, columns: Sequence[str] = ()):
        super().__init__(message)
        self.columns = list(columns)

    def __str__(self) -> str:
        # KeyError quotes its message otherwise
        return str(self.args[0])


class DataIntegrityError(AnalysisError, ValueError):
    """Data is unusable: empty after cleaning or a required column has no values."""


class UnseenCategoryError(AnalysisError, ValueError):
    """A categorical level was not observed in the training data."""

    def __init__(self, column: str, levels: Sequence[str]):
        self.column = column
        self.levels = list(levels)
        super().__init__(
            f"Column '{column}' has levels not seen in training: {self.levels}"
        )


class DivideByZeroError(AnalysisError, ZeroDivisionError):
    """A numeric column has zero standard deviation and cannot be scaled."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' is constant in training data; cannot scale")


class ModelFitError(AnalysisError):
    """The underlying library failed to fit a model."""

    def __init__(self, model_name: str, message: str):
        self.model_name = model_name
        super().__init__(f"[{model_name}] {message}")


class ModelPersistenceError(AnalysisError):
    """A fitted predictor could not be saved or loaded."""
