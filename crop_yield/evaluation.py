"""Train/test splitting and goodness-of-fit metrics."""
import math
from typing import Dict, List, Sequence, Tuple, TypeVar

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error

from .config import MODEL
from .errors import ValidationError

T = TypeVar("T")


def split_dataset(
    records: Sequence[T], train_fraction: float = MODEL.train_fraction
) -> Tuple[List[T], List[T]]:
    """
    Contiguous split: the first ``floor(n * train_fraction)`` records train,
    the rest test. Order is preserved; shuffle beforehand with
    ``data.shuffle_dataset`` if the input order carries bias.
    """
    if not 0 < train_fraction <= 1:
        raise ValidationError(f"train_fraction must be in (0, 1], got {train_fraction}")
    train_size = math.floor(len(records) * train_fraction)
    return list(records[:train_size]), list(records[train_size:])


def _paired(actual: Sequence[float], predicted: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(actual, dtype=float)
    p = np.asarray(predicted, dtype=float)
    if a.shape != p.shape:
        raise ValidationError(f"actual has {a.size} values but predicted has {p.size}")
    if a.size == 0:
        raise ValidationError("Cannot score an empty set")
    return a, p


def is_scorable(actual: Sequence[float]) -> bool:
    """True when R² is defined: at least one value and non-zero variance."""
    a = np.asarray(actual, dtype=float)
    return a.size > 0 and float(np.sum((a - a.mean()) ** 2)) > 0


def r2_score(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Coefficient of determination, 1 - SSR/SST."""
    a, p = _paired(actual, predicted)
    ss_tot = float(np.sum((a - a.mean()) ** 2))
    if ss_tot == 0:
        raise ValidationError("R² is undefined when actual values have zero variance")
    ss_res = float(np.sum((a - p) ** 2))
    return 1 - ss_res / ss_tot


def evaluate_yield_prediction(actual: Sequence[float], predicted: Sequence[float]) -> Dict[str, float]:
    """Regression metrics for yield predictions."""
    a, p = _paired(actual, predicted)
    return {
        "r2": r2_score(a, p),
        "rmse": float(np.sqrt(mean_squared_error(a, p))),
        "mae": float(mean_absolute_error(a, p)),
        "mape": float(np.mean(np.abs((a - p) / (a + 1e-8))) * 100),
    }
