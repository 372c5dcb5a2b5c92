"""Tests for splitting and R² scoring."""
import math

import numpy as np
import pytest
from sklearn.metrics import r2_score as sklearn_r2

from crop_yield.errors import ValidationError
from crop_yield.evaluation import split_dataset, r2_score, evaluate_yield_prediction, is_scorable


class TestR2:
    def test_perfect_fit(self):
        assert r2_score([10.0, 20.0, 30.0], [10.0, 20.0, 30.0]) == 1.0

    def test_mean_predictor_scores_zero(self):
        actual = [1.0, 2.0, 3.0, 4.0]
        assert r2_score(actual, [2.5] * 4) == 0.0

    def test_matches_sklearn(self):
        rng = np.random.default_rng(0)
        actual = rng.uniform(5, 80, 50)
        predicted = actual + rng.normal(0, 5, 50)
        assert r2_score(actual, predicted) == pytest.approx(sklearn_r2(actual, predicted))

    def test_can_be_negative(self):
        assert r2_score([1.0, 2.0, 3.0], [3.0, 2.0, 1.0]) == pytest.approx(-3.0)

    def test_zero_variance_fails_explicitly(self):
        with pytest.raises(ValidationError):
            r2_score([40.0, 40.0, 40.0], [39.0, 40.0, 41.0])

    def test_empty(self):
        with pytest.raises(ValidationError):
            r2_score([], [])

    def test_length_mismatch(self):
        with pytest.raises(ValidationError):
            r2_score([1.0, 2.0], [1.0])

    def test_is_scorable(self):
        assert is_scorable([1.0, 2.0])
        assert not is_scorable([3.0, 3.0])
        assert not is_scorable([])


class TestRegressionMetrics:
    def test_keys_and_values(self):
        m = evaluate_yield_prediction([1.0, 2.0, 3.0], [1.0, 2.0, 4.0])
        assert set(m) == {"r2", "rmse", "mae", "mape"}
        assert m["rmse"] == pytest.approx(math.sqrt(1 / 3))
        assert m["mae"] == pytest.approx(1 / 3)
        assert m["r2"] == pytest.approx(0.5)


class TestSplit:
    def test_ten_records_split_8_2(self):
        records = list(range(10))
        train, test = split_dataset(records)
        assert train == [0, 1, 2, 3, 4, 5, 6, 7]
        assert test == [8, 9]
        assert not set(train) & set(test)

    def test_floor_of_train_size(self):
        train, test = split_dataset(list(range(7)))
        assert (len(train), len(test)) == (5, 2)

    def test_input_not_reordered(self):
        records = [5, 3, 9, 1, 7]
        train, test = split_dataset(records)
        assert train + test == records

    def test_custom_fraction(self):
        train, test = split_dataset(list(range(10)), train_fraction=0.5)
        assert train == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize("fraction", [0.0, -0.2, 1.5])
    def test_bad_fraction(self, fraction):
        with pytest.raises(ValidationError):
            split_dataset(list(range(10)), train_fraction=fraction)
