"""Model registry for easy access to all trainers."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..config import RANDOM_SEED
from .base import Trainer
from .boosting import XGBoostCVTrainer, XGBoostTrainer
from .classifiers import LogisticTrainer, RandomForestTrainer, RegularizedLogisticTrainer
from .svm import SVMTrainer


def make_trainers(random_state: int = RANDOM_SEED, n_estimators: int = 500) -> Dict[str, Trainer]:
    """Create every trainer, keyed by name, in run order.

    Args:
        random_state: Seed shared by every trainer
        n_estimators: Tree count for the random forest
    """
    trainers: List[Trainer] = [
        LogisticTrainer(),
        RegularizedLogisticTrainer(penalty="l2", random_state=random_state),
        RegularizedLogisticTrainer(penalty="l1", random_state=random_state),
        SVMTrainer(random_state=random_state),
        RandomForestTrainer(n_estimators=n_estimators, random_state=random_state),
        XGBoostTrainer(random_state=random_state),
        XGBoostCVTrainer(random_state=random_state),
    ]
    return {t.name: t for t in trainers}


def list_trainers() -> List[str]:
    """List all available trainer names."""
    return list(make_trainers())


def get_trainer(name: str, **kwargs) -> Trainer:
    """Get a single trainer by name.

    Raises:
        KeyError: If name not found
    """
    trainers = make_trainers(**kwargs)
    if name not in trainers:
        raise KeyError(f"Trainer '{name}' not found. Available: {list(trainers)}")
    return trainers[name]


def select_trainers(names: Optional[Sequence[str]] = None, **kwargs) -> Dict[str, Trainer]:
    """Trainers for the given names (all when empty), preserving run order."""
    trainers = make_trainers(**kwargs)
    if not names:
        return trainers
    unknown = [n for n in names if n not in trainers]
    if unknown:
        raise KeyError(f"Unknown trainers {unknown}. Available: {list(trainers)}")
    return {n: t for n, t in trainers.items() if n in set(names)}
