"""Saving and loading fitted predictors.

A predictor is stored as a single joblib file next to a small JSON manifest
with its name, class and fit details.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

import joblib

from ..errors import ModelPersistenceError
from .base import Predictor


PERSISTENCE_VERSION = "1.0.0"


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def save_predictor(predictor: Predictor, path: Union[str, Path]) -> Path:
    """Save a fitted predictor.

    Args:
        predictor: Fitted predictor
        path: Target ``.joblib`` file. A ``.json`` manifest is written beside it

    Returns:
        Path of the joblib file

    Raises:
        ModelPersistenceError: If serialisation fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    manifest: Dict[str, Any] = {
        "version": PERSISTENCE_VERSION,
        "saved_at": datetime.now().isoformat(),
        "name": predictor.name,
        "class": type(predictor).__name__,
        "estimator": type(predictor.estimator).__name__,
        "n_features": len(predictor.feature_names or []),
        "details": _json_safe(predictor.details),
    }

    try:
        joblib.dump(predictor, path)
        with open(path.with_suffix(".json"), "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2)
    except Exception as e:
        raise ModelPersistenceError(f"Failed to save predictor '{predictor.name}': {e}") from e

    return path


def load_predictor(path: Union[str, Path]) -> Predictor:
    """Load a predictor saved with ``save_predictor``.

    Raises:
        FileNotFoundError: If the file does not exist
        ModelPersistenceError: If the file does not hold a Predictor
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")

    try:
        obj = joblib.load(path)
    except Exception as e:
        raise ModelPersistenceError(f"Failed to load model: {e}") from e

    if not isinstance(obj, Predictor):
        raise ModelPersistenceError(f"{path} does not contain a Predictor (got {type(obj).__name__})")
    return obj
