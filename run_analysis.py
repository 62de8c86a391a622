"""Command-line entry point for the income analysis.

Example:
    python run_analysis.py --train data/train.csv --test data/test_preprocessed.csv --output processed
"""
import sys

from adult_income.analysis import main


if __name__ == "__main__":
    sys.exit(main())
