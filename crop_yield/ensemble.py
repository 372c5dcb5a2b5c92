"""Gradient-boosted ensemble of regression stumps."""
import logging
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .config import MODEL, YIELD_RANGE, INFERENCE_BASE_PREDICTION
from .errors import ValidationError, InvalidStateError
from .stump import RegressionStump, fit_stump

log = logging.getLogger(__name__)

ProgressHook = Callable[[float], None]


def _as_matrix(X) -> np.ndarray:
    """Validate row lengths and return a 2-D float array."""
    if isinstance(X, np.ndarray):
        if X.ndim != 2:
            raise ValidationError(f"Feature matrix must be 2-dimensional, got shape {X.shape}")
        return X.astype(float)

    rows = list(X)
    lengths = {len(row) for row in rows}
    if len(lengths) > 1:
        raise ValidationError(f"Inconsistent feature vector lengths: {sorted(lengths)}")
    if not rows:
        return np.empty((0, 0), dtype=float)
    return np.array(rows, dtype=float)


class GradientBoostingEnsemble:
    """
    Additive stump ensemble trained on squared-error residuals.

    Training starts from the mean target. Prediction starts from
    ``base_prediction`` (``INFERENCE_BASE_PREDICTION`` by default), which is
    a fixed literal and not ``training_mean_`` (see DESIGN.md).

    Lifecycle: untrained until ``train`` succeeds, then frozen. Calling
    ``train`` a second time raises ``InvalidStateError``.
    """

    def __init__(
        self,
        round_count: int = MODEL.round_count,
        learning_rate: float = MODEL.learning_rate,
        base_prediction: float = INFERENCE_BASE_PREDICTION,
    ):
        if round_count < 0:
            raise ValidationError(f"round_count must be >= 0, got {round_count}")
        if not learning_rate > 0:
            raise ValidationError(f"learning_rate must be > 0, got {learning_rate}")
        self.round_count = int(round_count)
        self.learning_rate = float(learning_rate)
        self.base_prediction = float(base_prediction)

        self._stumps: List[RegressionStump] = []
        self._trained = False
        self.training_mean_: Optional[float] = None
        self.n_features_: Optional[int] = None
        self.training_loss_: List[float] = []
        self.loss_reduction_: List[float] = []

    @property
    def is_trained(self) -> bool:
        return self._trained

    @property
    def stumps(self) -> tuple:
        return tuple(self._stumps)

    def train(self, X, y: Sequence[float], progress: Optional[ProgressHook] = None) -> "GradientBoostingEnsemble":
        """Fit ``round_count`` stumps to successive residuals."""
        if self._trained:
            raise InvalidStateError("Ensemble is already trained; build a new one to retrain")

        X = _as_matrix(X)
        y = np.asarray(y, dtype=float)
        if X.shape[0] == 0:
            raise ValidationError("Cannot train on an empty dataset")
        if X.shape[0] != y.shape[0]:
            raise ValidationError(f"X has {X.shape[0]} rows but y has {y.shape[0]}")

        mean = float(y.mean())
        predictions = np.full(y.shape[0], mean)
        loss = float(np.mean((y - predictions) ** 2))

        stumps, losses, reductions = [], [], []
        for i in range(self.round_count):
            residuals = y - predictions
            stump = fit_stump(X, residuals)
            predictions = predictions + self.learning_rate * stump.predict(X)
            stumps.append(stump)

            new_loss = float(np.mean((y - predictions) ** 2))
            reductions.append(loss - new_loss)
            losses.append(new_loss)
            loss = new_loss

            log.debug(f"Round {i + 1}/{self.round_count}: mse={new_loss:.4f}")
            if progress is not None:
                progress((i + 1) * 100.0 / self.round_count)

        self._stumps = stumps
        self.training_loss_ = losses
        self.loss_reduction_ = reductions
        self.training_mean_ = mean
        self.n_features_ = X.shape[1]
        self._trained = True
        return self

    def _check_trained(self):
        if not self._trained:
            raise InvalidStateError("Model not trained. Call train() first.")

    def predict_row(self, features: Sequence[float]) -> float:
        self._check_trained()
        if len(features) != self.n_features_:
            raise ValidationError(
                f"Expected {self.n_features_} features per row, got {len(features)}"
            )
        prediction = self.base_prediction
        for stump in self._stumps:
            prediction += self.learning_rate * stump.predict_row(features)
        low, high = YIELD_RANGE
        return max(low, min(high, prediction))

    def predict(self, X) -> np.ndarray:
        self._check_trained()
        X = _as_matrix(X)
        if X.shape[0] == 0:
            return np.empty(0, dtype=float)
        if X.shape[1] != self.n_features_:
            raise ValidationError(
                f"Expected {self.n_features_} features per row, got {X.shape[1]}"
            )
        predictions = np.full(X.shape[0], self.base_prediction)
        for stump in self._stumps:
            predictions = predictions + self.learning_rate * stump.predict(X)
        return np.clip(predictions, *YIELD_RANGE)

    def feature_importances(self, feature_names: Optional[Sequence[str]] = None) -> Dict:
        """
        Training-loss reduction attributed to each feature, normalized to 1.

        Keys are feature indices, or names when ``feature_names`` is given.
        """
        self._check_trained()
        totals = np.zeros(self.n_features_)
        for stump, gain in zip(self._stumps, self.loss_reduction_):
            totals[stump.feature_index] += max(gain, 0.0)
        if totals.sum() > 0:
            totals = totals / totals.sum()
        keys = list(feature_names) if feature_names is not None else range(self.n_features_)
        return {k: float(v) for k, v in zip(keys, totals)}

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZATION
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict:
        return {
            "round_count": self.round_count,
            "learning_rate": self.learning_rate,
            "base_prediction": self.base_prediction,
            "training_mean": self.training_mean_,
            "n_features": self.n_features_,
            "stumps": [
                {
                    "feature_index": s.feature_index,
                    "threshold": s.threshold,
                    "left_value": s.left_value,
                    "right_value": s.right_value,
                }
                for s in self._stumps
            ],
            "training_loss": list(self.training_loss_),
            "loss_reduction": list(self.loss_reduction_),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "GradientBoostingEnsemble":
        """Rebuild a trained ensemble from ``to_dict`` output."""
        instance = cls(
            round_count=data["round_count"],
            learning_rate=data["learning_rate"],
            base_prediction=data["base_prediction"],
        )
        instance._stumps = [RegressionStump(**s) for s in data["stumps"]]
        instance.training_mean_ = data.get("training_mean")
        instance.n_features_ = data.get("n_features")
        instance.training_loss_ = list(data.get("training_loss", []))
        instance.loss_reduction_ = list(data.get("loss_reduction", []))
        instance._trained = True
        return instance
