"""Setup configuration for adult-income-analysis package."""
from setuptools import setup, find_packages

setup(
    name="adult-income-analysis",
    version="0.1.0",
    description="Census income (>50K) classification: cleaning, train/test alignment and model comparison",
    packages=find_packages(where=".", include=["adult_income", "adult_income.*"]),
    package_dir={"": "."},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas>=1.5",
        "scikit-learn>=1.2,<1.10",
        "scipy",
        "xgboost>=1.6",
        "joblib",
        "matplotlib",
        "plotly",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
