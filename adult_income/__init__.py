"""Adult Income Analysis - Source Code Package

This package trains and compares classifiers predicting whether an
individual's income exceeds $50K/year from the UCI Adult census data.

## Module Structure

- **data_load**: CSV loading, missing value reporting, target encoding, splitting
- **cleaning**: Sentinel row removal and column dropping
- **features**: Feature schema and train/test one-hot alignment
- **preprocessing**: Training-only scaling and the shared feature pipeline
- **models**: Trainers (logistic, ridge, lasso, SVM, random forest, XGBoost)
- **evaluation**: Confusion matrix, sensitivity/specificity, AUC, ROC plots
- **training**: Model comparison with per-model failure isolation

## Quick Start

```python
from adult_income.data_load import load_dataset
from adult_income.cleaning import clean_dataset
from adult_income.preprocessing import prepare_features
from adult_income.models import make_trainers
from adult_income.training import compare_models

train, _ = clean_dataset(load_dataset("train.csv"))
test, _ = clean_dataset(load_dataset("test_preprocessed.csv"))
data = prepare_features(train, test)
result = compare_models(make_trainers(), data)
```
"""

from .config import CONFIG, ProjectConfig, RANDOM_SEED
from .errors import (
    AnalysisError,
    DataIntegrityError,
    DivideByZeroError,
    ModelFitError,
    ModelPersistenceError,
    SchemaError,
    UnseenCategoryError,
)
from .data_load import load_dataset, encode_target, train_test_split
from .cleaning import DataCleaner, CleaningConfig, clean_dataset
from .features import FeatureAligner, FeatureSchema
from .preprocessing import prepare_features, fit_scaling, apply_scaling
from .models import make_trainers, Trainer, Predictor
from .evaluation import evaluate, EvaluationReport
from .training import compare_models

__all__ = [
    # Config
    "CONFIG",
    "ProjectConfig",
    "RANDOM_SEED",
    # Errors
    "AnalysisError",
    "DataIntegrityError",
    "DivideByZeroError",
    "ModelFitError",
    "ModelPersistenceError",
    "SchemaError",
    "UnseenCategoryError",
    # Pipeline
    "load_dataset",
    "encode_target",
    "train_test_split",
    "DataCleaner",
    "CleaningConfig",
    "clean_dataset",
    "FeatureAligner",
    "FeatureSchema",
    "prepare_features",
    "fit_scaling",
    "apply_scaling",
    "make_trainers",
    "Trainer",
    "Predictor",
    "evaluate",
    "EvaluationReport",
    "compare_models",
]

__version__ = "0.1.0"
