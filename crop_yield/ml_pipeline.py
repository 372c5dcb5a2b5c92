"""Training pipeline: algorithm dispatch, model descriptors, predict/evaluate, persistence."""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import joblib
import numpy as np

from .baseline import RuleBasedYieldModel
from .config import MODEL, MODELS_DIR
from .data import generate_sample_dataset, shuffle_dataset  # noqa: F401
from .ensemble import GradientBoostingEnsemble, ProgressHook
from .errors import ValidationError, UnsupportedAlgorithmError
from .evaluation import split_dataset, r2_score, evaluate_yield_prediction, is_scorable
from .features import FEATURE_NAMES, encode_dataset, encode_features  # noqa: F401
from .schema import ObservationRecord, ModelDescriptorSchema

log = logging.getLogger(__name__)


class Algorithm(str, Enum):
    GRADIENT_BOOSTING = "gradient_boosting"
    RANDOM_FOREST = "random_forest"
    LINEAR_REGRESSION = "linear_regression"
    NEURAL_NETWORK = "neural_network"

    @classmethod
    def parse(cls, value: Union[str, "Algorithm"]) -> "Algorithm":
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAlgorithmError(f"Unknown algorithm: {value!r}") from None

    @property
    def display_name(self) -> str:
        return f"{self.value.replace('_', ' ').upper()} Model"


@dataclass
class AlgorithmConfig:
    algorithm: Union[str, Algorithm] = MODEL.algorithm
    round_count: int = MODEL.round_count
    learning_rate: float = MODEL.learning_rate
    train_fraction: float = MODEL.train_fraction
    shuffle_seed: Optional[int] = None  # shuffle before splitting when set


# ─────────────────────────────────────────────────────────────────────────────
# MODEL DESCRIPTOR
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ModelDescriptor:
    """A trained model plus the metadata reported to callers."""
    id: str
    name: str
    algorithm: Algorithm
    ensemble: GradientBoostingEnsemble
    training_size: int
    accuracy: Optional[float]  # R² on the test split
    trained_at: str
    metrics: Dict[str, Optional[float]] = field(default_factory=dict)
    feature_names: List[str] = field(default_factory=lambda: list(FEATURE_NAMES))
    feature_importance: Dict[str, float] = field(default_factory=dict)

    @property
    def accuracy_pct(self) -> Optional[int]:
        """Accuracy as a rounded percentage, for display."""
        return None if self.accuracy is None else round(self.accuracy * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "algorithm": self.algorithm.value,
            "training_size": self.training_size,
            "accuracy": self.accuracy,
            "metrics": dict(self.metrics),
            "feature_names": list(self.feature_names),
            "feature_importance": dict(self.feature_importance),
            "trained_at": self.trained_at,
            "ensemble": self.ensemble.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelDescriptor":
        data = ModelDescriptorSchema.model_validate(data).model_dump()
        return cls(
            id=data["id"],
            name=data["name"],
            algorithm=Algorithm.parse(data["algorithm"]),
            ensemble=GradientBoostingEnsemble.from_dict(data["ensemble"]),
            training_size=data["training_size"],
            accuracy=data["accuracy"],
            trained_at=data["trained_at"],
            metrics=data["metrics"],
            feature_names=data["feature_names"],
            feature_importance=data["feature_importance"],
        )

    def to_json(self) -> str:
        return ModelDescriptorSchema.model_validate(self.to_dict()).model_dump_json()

    @classmethod
    def from_json(cls, payload: str) -> "ModelDescriptor":
        return cls.from_dict(ModelDescriptorSchema.model_validate_json(payload).model_dump())


# ─────────────────────────────────────────────────────────────────────────────
# TRAINING
# ─────────────────────────────────────────────────────────────────────────────

def _targets(records: Sequence[ObservationRecord]) -> np.ndarray:
    unlabeled = sum(1 for r in records if r.crop_yield is None)
    if unlabeled:
        raise ValidationError(f"{unlabeled} record(s) have no yield target")
    return np.array([r.crop_yield for r in records], dtype=float)


def _train_gradient_boosting(X: np.ndarray, y: np.ndarray, config: AlgorithmConfig,
                             progress: Optional[ProgressHook]) -> GradientBoostingEnsemble:
    ensemble = GradientBoostingEnsemble(
        round_count=config.round_count,
        learning_rate=config.learning_rate,
    )
    return ensemble.train(X, y, progress=progress)


TRAINERS: Dict[Algorithm, Callable[..., GradientBoostingEnsemble]] = {
    Algorithm.GRADIENT_BOOSTING: _train_gradient_boosting,
}


def train(
    dataset: Sequence[ObservationRecord],
    config: Optional[AlgorithmConfig] = None,
    progress: Optional[ProgressHook] = None,
) -> ModelDescriptor:
    """
    Train a model on ``dataset`` and score it on a held-out split.

    The dataset is split contiguously (``config.train_fraction`` in front),
    optionally after an explicit shuffle. The ensemble is fit on the front
    part and R² is computed on the back part.
    """
    config = config or AlgorithmConfig()
    algorithm = Algorithm.parse(config.algorithm)
    trainer = TRAINERS.get(algorithm)
    if trainer is None:
        raise UnsupportedAlgorithmError(f"Algorithm {algorithm.value} not implemented yet")

    if not dataset:
        raise ValidationError("No training data available")

    records = list(dataset)
    if config.shuffle_seed is not None:
        records = shuffle_dataset(records, seed=config.shuffle_seed)

    train_records, test_records = split_dataset(records, config.train_fraction)
    if not train_records:
        raise ValidationError(
            f"Training split is empty ({len(records)} records, fraction {config.train_fraction})"
        )
    log.info(f"Training {algorithm.value} on {len(records)} records "
             f"(train: {len(train_records)}, test: {len(test_records)}, "
             f"features: {len(FEATURE_NAMES)})")

    X_train, y_train = encode_dataset(train_records), _targets(train_records)
    ensemble = trainer(X_train, y_train, config, progress)

    metrics: Dict[str, Optional[float]] = {
        "train_mse": ensemble.training_loss_[-1] if ensemble.training_loss_ else None,
        "test_size": float(len(test_records)),
    }
    accuracy = None
    y_test = _targets(test_records)
    if is_scorable(y_test):
        y_pred = ensemble.predict(encode_dataset(test_records))
        metrics.update({f"test_{k}": v for k, v in evaluate_yield_prediction(y_test, y_pred).items()})
        metrics["baseline_r2"] = r2_score(y_test, RuleBasedYieldModel().predict(test_records))
        accuracy = metrics["test_r2"]
    else:
        log.warning(f"Test split has {len(test_records)} row(s) and no target variance; "
                    f"R² is undefined and accuracy is left unset")

    descriptor = ModelDescriptor(
        id=uuid.uuid4().hex[:9],
        name=algorithm.display_name,
        algorithm=algorithm,
        ensemble=ensemble,
        training_size=len(train_records),
        accuracy=accuracy,
        trained_at=datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        metrics=metrics,
        feature_importance=ensemble.feature_importances(FEATURE_NAMES),
    )
    if accuracy is not None:
        log.info(f"Model {descriptor.id} trained: R²={accuracy:.4f} ({descriptor.accuracy_pct}%)")
    return descriptor


# ─────────────────────────────────────────────────────────────────────────────
# INFERENCE & EVALUATION
# ─────────────────────────────────────────────────────────────────────────────

def _ensemble_of(model: Union[ModelDescriptor, GradientBoostingEnsemble]) -> GradientBoostingEnsemble:
    return model.ensemble if isinstance(model, ModelDescriptor) else model


def predict(model: Union[ModelDescriptor, GradientBoostingEnsemble],
            records: Sequence[ObservationRecord]) -> List[float]:
    """Predict yields (t/ha); targets on the records are ignored."""
    ensemble = _ensemble_of(model)
    return [float(v) for v in ensemble.predict(encode_dataset(records))]


def evaluate(model: Union[ModelDescriptor, GradientBoostingEnsemble],
             test_records: Sequence[ObservationRecord]) -> float:
    """R² of the model on labeled records."""
    if not test_records:
        raise ValidationError("Cannot evaluate on an empty dataset")
    actual = _targets(test_records)
    return r2_score(actual, predict(model, test_records))


# ─────────────────────────────────────────────────────────────────────────────
# PERSISTENCE
# ─────────────────────────────────────────────────────────────────────────────

def save_model(model: ModelDescriptor, path: Optional[Union[str, Path]] = None) -> Path:
    """Save model to disk."""
    if path is None:
        MODELS_DIR.mkdir(parents=True, exist_ok=True)
        path = MODELS_DIR / f"{model.algorithm.value}_{model.id}.joblib"
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model.to_dict(), path)
    log.info(f"Saved model to {path}")
    return path


def load_model(path: Union[str, Path]) -> ModelDescriptor:
    """Load model from disk."""
    model = ModelDescriptor.from_dict(joblib.load(path))
    log.info(f"Loaded model: {model.name} ({model.id})")
    return model
