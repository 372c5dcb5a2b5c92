"""Single-split regression tree used as the boosting weak learner."""
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .errors import ValidationError


@dataclass(frozen=True)
class RegressionStump:
    feature_index: int
    threshold: float
    left_value: float
    right_value: float

    def predict_row(self, features: Sequence[float]) -> float:
        if features[self.feature_index] <= self.threshold:
            return self.left_value
        return self.right_value

    def predict(self, X: np.ndarray) -> np.ndarray:
        column = np.asarray(X, dtype=float)[:, self.feature_index]
        return np.where(column <= self.threshold, self.left_value, self.right_value)


# Scores closer than this (relative) count as equal, so rounding in the
# running sums cannot break ties out of feature or threshold order.
TIE_TOLERANCE = 1e-9


def _tie_margin(score: float) -> float:
    return TIE_TOLERANCE * max(1.0, abs(score))


def _beats(score: float, best: float) -> bool:
    if np.isinf(best):
        return score < best
    return score < best - _tie_margin(best)


def _best_split_for_column(column: np.ndarray, residuals: np.ndarray) -> Tuple[float, float]:
    """
    Lowest (score, threshold) for one column, or (inf, nan) when the column
    has fewer than two distinct values.

    Candidates are midpoints between consecutive distinct sorted values.
    Score is left SSE + right SSE, i.e. the size-weighted sum of
    within-partition variances.
    """
    order = np.argsort(column, kind="stable")
    xs = column[order]
    rs = residuals[order] - residuals.mean()
    n = xs.size

    # split after position i (0-based) where the value changes
    boundaries = np.nonzero(xs[1:] != xs[:-1])[0]
    if boundaries.size == 0:
        return float("inf"), float("nan")

    cum = np.cumsum(rs)
    cum_sq = np.cumsum(rs ** 2)
    total, total_sq = cum[-1], cum_sq[-1]

    n_left = boundaries + 1
    n_right = n - n_left
    left_sum, left_sq = cum[boundaries], cum_sq[boundaries]
    right_sum, right_sq = total - left_sum, total_sq - left_sq

    scores = (left_sq - left_sum ** 2 / n_left) + (right_sq - right_sum ** 2 / n_right)
    lowest = float(scores.min())
    # first near-minimum = lowest threshold
    best = int(np.flatnonzero(scores <= lowest + _tie_margin(lowest))[0])
    i = boundaries[best]
    return float(scores[best]), float((xs[i] + xs[i + 1]) / 2)


def _leaf_values(column: np.ndarray, residuals: np.ndarray, threshold: float) -> Tuple[float, float]:
    left = residuals[column <= threshold]
    right = residuals[column > threshold]
    left_value = float(left.mean()) if left.size else 0.0
    right_value = float(right.mean()) if right.size else 0.0
    return left_value, right_value


def fit_stump(X: np.ndarray, residuals: Sequence[float]) -> RegressionStump:
    """
    Exhaustive threshold search over every feature.

    Ties go to the earliest feature, then the lowest threshold. If no column
    has two distinct values, every row goes left on feature 0 and the left
    leaf carries the mean residual.
    """
    X = np.asarray(X, dtype=float)
    r = np.asarray(residuals, dtype=float)
    if X.ndim != 2:
        raise ValidationError(f"X must be 2-dimensional, got shape {X.shape}")
    if X.shape[0] != r.shape[0]:
        raise ValidationError(f"X has {X.shape[0]} rows but residuals has {r.shape[0]}")
    if X.shape[0] < 2:
        raise ValidationError(f"Need at least 2 rows to split, got {X.shape[0]}")
    if X.shape[1] == 0:
        raise ValidationError("X has no feature columns")

    best_score, best_feature, best_threshold = float("inf"), None, None
    for j in range(X.shape[1]):
        score, threshold = _best_split_for_column(X[:, j], r)
        if _beats(score, best_score):
            best_score, best_feature, best_threshold = score, j, threshold

    if best_feature is None:
        return RegressionStump(0, float(X[0, 0]), float(r.mean()), 0.0)

    left_value, right_value = _leaf_values(X[:, best_feature], r, best_threshold)
    return RegressionStump(best_feature, best_threshold, left_value, right_value)
