"""
Shared pytest fixtures and configuration for all tests.
"""

import warnings

import matplotlib
import numpy as np
import pandas as pd
import pytest

matplotlib.use("Agg")

from adult_income.data_load import ADULT_COLUMNS  # noqa: E402


def pytest_configure(config):
    """Configure pytest with custom settings."""
    warnings.filterwarnings('ignore', category=UserWarning)
    warnings.filterwarnings('ignore', category=DeprecationWarning)
    warnings.filterwarnings('ignore', category=FutureWarning)
    config.addinivalue_line("markers", "integration: end-to-end tests that fit several models")


# ============================================================================
# Data generators
# ============================================================================

WORKCLASSES = ["Private", "Self-emp-not-inc", "Local-gov", "State-gov"]
MARITAL = ["Never-married", "Married-civ-spouse", "Divorced"]
OCCUPATIONS = ["Tech-support", "Craft-repair", "Sales", "Exec-managerial", "Adm-clerical"]
RELATIONSHIPS = ["Husband", "Wife", "Own-child", "Not-in-family"]
RACES = ["White", "Black", "Asian-Pac-Islander"]
COUNTRIES = ["United-States", "Mexico", "India"]


def make_adult_frame(n_samples=200, random_state=42, missing_rate=0.0):
    """Synthetic frame with the UCI Adult columns and a learnable income label."""
    rng = np.random.default_rng(random_state)

    age = rng.integers(18, 80, n_samples)
    education_num = rng.integers(1, 17, n_samples)
    hours = rng.integers(10, 80, n_samples)
    sex = rng.choice(["Male", "Female"], n_samples)

    logit = 0.05 * (age - 40) + 0.45 * (education_num - 10) + 0.03 * (hours - 40) + 0.6 * (sex == "Male") - 0.8
    income = np.where(rng.random(n_samples) < 1 / (1 + np.exp(-logit)), ">50K", "<=50K")

    df = pd.DataFrame({
        "age": age,
        "workclass": rng.choice(WORKCLASSES, n_samples),
        "fnlwgt": rng.integers(20000, 500000, n_samples),
        "education": rng.choice(["Bachelors", "HS-grad", "Masters"], n_samples),
        "education-num": education_num,
        "marital-status": rng.choice(MARITAL, n_samples),
        "occupation": rng.choice(OCCUPATIONS, n_samples),
        "relationship": rng.choice(RELATIONSHIPS, n_samples),
        "race": rng.choice(RACES, n_samples),
        "sex": sex,
        "capital-gain": rng.choice([0, 0, 0, 5000], n_samples),
        "capital-loss": rng.choice([0, 0, 0, 1500], n_samples),
        "hours-per-week": hours,
        "native-country": rng.choice(COUNTRIES, n_samples),
        "income": income,
    })[ADULT_COLUMNS]

    if missing_rate > 0:
        for col in ["workclass", "occupation", "native-country"]:
            mask = rng.random(n_samples) < missing_rate
            df.loc[mask, col] = "?"

    return df


@pytest.fixture(scope='session')
def random_seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def adult_generator():
    """Factory fixture for generating Adult-like frames."""
    return make_adult_frame


@pytest.fixture
def raw_adult(random_seed):
    """Raw frame with '?' cells and the columns the cleaner drops."""
    return make_adult_frame(n_samples=300, random_state=random_seed, missing_rate=0.05)


@pytest.fixture
def clean_train_test(random_seed):
    """Cleaned train and test frames (drop columns removed, no sentinels)."""
    from adult_income.cleaning import clean_dataset

    train, _ = clean_dataset(make_adult_frame(240, random_state=random_seed))
    test, _ = clean_dataset(make_adult_frame(120, random_state=random_seed + 1))
    return train, test


@pytest.fixture
def prepared_data(clean_train_test):
    """Scaled, aligned train/test matrices."""
    from adult_income.preprocessing import prepare_features

    train, test = clean_train_test
    return prepare_features(train, test)


@pytest.fixture
def adult_csv_files(tmp_path, random_seed):
    """Train/test CSVs written the way the UCI files are (', ' separators)."""
    train_path = tmp_path / "train.csv"
    test_path = tmp_path / "test_preprocessed.csv"

    for path, n, seed in [(train_path, 240, random_seed), (test_path, 120, random_seed + 1)]:
        df = make_adult_frame(n, random_state=seed, missing_rate=0.03)
        with open(path, "w") as f:
            f.write(", ".join(df.columns) + "\n")
            for row in df.itertuples(index=False):
                f.write(", ".join(str(v) for v in row) + "\n")

    return train_path, test_path


# ============================================================================
# Marks
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their names."""
    for item in items:
        if 'integration' in item.nodeid or 'end_to_end' in item.nodeid:
            item.add_marker(pytest.mark.integration)
