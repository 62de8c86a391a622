"""Tests for the feature schema and train/test dummy alignment."""

import pickle

import numpy as np
import pandas as pd
import pytest

from adult_income.errors import SchemaError, UnseenCategoryError
from adult_income.features import (
    FeatureAligner,
    FeatureSchema,
    align_dummy_columns,
    conform_categories,
    encode_dummies,
)


@pytest.fixture
def small_train():
    """Ten training rows with two categorical columns."""
    return pd.DataFrame({
        "age": [25.0, 32.0, 47.0, 51.0, 62.0, 38.0, 29.0, 44.0, 36.0, 58.0],
        "color": ["red", "blue", "red", "green", "blue", "red", "green", "blue", "red", "green"],
        "size": ["S", "M", "L", "M", "S", "L", "M", "S", "L", "M"],
    })


@pytest.fixture
def small_test():
    """Test rows with an unseen color and without size 'L'."""
    return pd.DataFrame({
        "age": [30.0, 40.0, 50.0],
        "color": ["red", "purple", "blue"],
        "size": ["M", "M", "S"],
    })


class TestFeatureSchema:
    """Test FeatureSchema."""

    def test_from_training_infers_columns(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        assert schema.numeric_columns == ("age",)
        assert schema.categorical_columns == ("color", "size")
        assert schema.feature_columns == ("age", "color", "size")

    def test_levels_in_encounter_order(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        assert schema.levels("color") == ("red", "blue", "green")
        assert schema.levels("size") == ("S", "M", "L")

    def test_unknown_categorical_column(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        with pytest.raises(SchemaError):
            schema.levels("age")

    def test_check_columns(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        with pytest.raises(SchemaError) as exc_info:
            schema.check_columns(small_train.drop(columns=["size"]))
        assert exc_info.value.columns == ["size"]

    def test_listed_column_absent(self, small_train):
        with pytest.raises(SchemaError):
            FeatureSchema.from_training(small_train, numeric_columns=["age", "height"])

    def test_schema_is_immutable(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        with pytest.raises(AttributeError):
            schema.numeric_columns = ("other",)
        column = schema.categorical_columns[0]
        with pytest.raises(TypeError):
            schema.categorical_levels[column] = ("purple",)
        with pytest.raises(TypeError):
            del schema.categorical_levels[column]
        assert column in schema.categorical_levels

    def test_schema_picklable(self, small_train):
        schema = FeatureSchema.from_training(small_train)

        assert pickle.loads(pickle.dumps(schema)) == schema

    def test_to_dict(self, small_train):
        d = FeatureSchema.from_training(small_train).to_dict()

        assert d["numeric_columns"] == ["age"]
        assert d["levels:color"] == ["red", "blue", "green"]


class TestConformCategories:
    """Test unseen level handling."""

    def test_lenient_sets_missing(self, small_train, small_test):
        schema = FeatureSchema.from_training(small_train)
        conformed = conform_categories(small_test, schema)

        assert pd.isna(conformed.loc[1, "color"])
        assert conformed.loc[0, "color"] == "red"
        assert small_test.loc[1, "color"] == "purple"

    def test_strict_raises(self, small_train, small_test):
        schema = FeatureSchema.from_training(small_train)

        with pytest.raises(UnseenCategoryError) as exc_info:
            conform_categories(small_test, schema, strict=True)
        assert exc_info.value.column == "color"
        assert exc_info.value.levels == ["purple"]

    def test_seen_levels_unchanged(self, small_train):
        schema = FeatureSchema.from_training(small_train)
        conformed = conform_categories(small_train, schema, strict=True)

        pd.testing.assert_frame_equal(conformed, small_train)


class TestAlignDummyColumns:
    """Test add-missing, drop-extra, reorder."""

    def test_column_set_and_order(self):
        encoded = pd.DataFrame({"b_x": [1, 0], "extra": [5, 6], "a": [0.5, 1.5]})
        reference = ["a", "b_x", "b_y"]

        aligned = align_dummy_columns(encoded, reference)

        assert list(aligned.columns) == reference
        assert aligned["b_y"].tolist() == [0, 0]
        assert aligned["a"].tolist() == [0.5, 1.5]
        assert aligned["b_x"].tolist() == [1, 0]

    def test_idempotent(self):
        encoded = pd.DataFrame({"b_x": [1, 0], "extra": [5, 6], "a": [0.5, 1.5]})
        reference = ["a", "b_x", "b_y"]

        once = align_dummy_columns(encoded, reference)
        twice = align_dummy_columns(once, reference)

        pd.testing.assert_frame_equal(once, twice)

    def test_input_not_modified(self):
        encoded = pd.DataFrame({"b_x": [1, 0]})
        align_dummy_columns(encoded, ["a", "b_x"])

        assert list(encoded.columns) == ["b_x"]


class TestFeatureAligner:
    """Test the full fit/transform alignment."""

    def test_train_test_columns_identical(self, small_train, small_test):
        aligner = FeatureAligner(numeric_columns=["age"]).fit(small_train)
        X_train = aligner.transform(small_train)
        X_test = aligner.transform(small_test)

        assert list(X_test.columns) == list(X_train.columns) == aligner.columns_
        assert len(X_test) == len(small_test)

    def test_unseen_level_gives_zero_block(self, small_train, small_test):
        X_test = FeatureAligner(numeric_columns=["age"]).fit(small_train).transform(small_test)
        color_cols = [c for c in X_test.columns if c.startswith("color_")]

        assert X_test.loc[1, color_cols].sum() == 0
        assert X_test.loc[0, "color_red"] == 1
        assert X_test.loc[2, "color_blue"] == 1

    def test_level_absent_from_test_added_as_zero(self, small_train, small_test):
        X_test = FeatureAligner(numeric_columns=["age"]).fit(small_train).transform(small_test)

        assert "size_L" in X_test.columns
        assert (X_test["size_L"] == 0).all()

    def test_one_indicator_per_seen_level(self, small_train):
        X_train = FeatureAligner(numeric_columns=["age"]).fit_transform(small_train)
        color_cols = [c for c in X_train.columns if c.startswith("color_")]

        assert set(color_cols) == {"color_red", "color_blue", "color_green"}
        assert (X_train[color_cols].sum(axis=1) == 1).all()

    def test_strict_aligner_raises(self, small_train, small_test):
        aligner = FeatureAligner(numeric_columns=["age"], strict=True).fit(small_train)

        with pytest.raises(UnseenCategoryError):
            aligner.transform(small_test)

    def test_numeric_values_passed_through(self, small_train, small_test):
        X_test = FeatureAligner(numeric_columns=["age"]).fit(small_train).transform(small_test)

        np.testing.assert_array_equal(X_test["age"].values, small_test["age"].values)

    def test_transform_before_fit(self, small_test):
        with pytest.raises(ValueError, match="fitted"):
            FeatureAligner().transform(small_test)

    def test_encode_dummies_drops_non_schema_columns(self, small_train):
        schema = FeatureSchema.from_training(small_train)
        extended = small_train.assign(note="x")

        encoded = encode_dummies(extended, schema)

        assert "note" not in encoded.columns
        assert not any(c.startswith("note_") for c in encoded.columns)
