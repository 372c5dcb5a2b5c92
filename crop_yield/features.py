"""Feature encoding: continuous passthrough plus one-hot categorical blocks."""
from typing import List, Sequence

import numpy as np

from .config import CONTINUOUS_FIELDS, CATEGORY_DOMAINS, CATEGORY_PREFIXES
from .errors import EncodingError
from .schema import ObservationRecord


def _feature_names() -> List[str]:
    names = list(CONTINUOUS_FIELDS)
    for field_name, domain in CATEGORY_DOMAINS.items():
        prefix = CATEGORY_PREFIXES[field_name]
        names.extend(f"{prefix}_{value}" for value in domain)
    return names


FEATURE_NAMES = _feature_names()
N_FEATURES = len(FEATURE_NAMES)


class FeatureEncoder:
    """
    Maps an observation record to a fixed-length numeric vector.

    Layout: the six continuous fields verbatim, then one one-hot block per
    categorical field in ``CATEGORY_DOMAINS`` order. A value outside its
    domain encodes as an all-zero block unless ``strict`` is set, in which
    case ``EncodingError`` is raised.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.feature_names = FEATURE_NAMES
        self.n_features = N_FEATURES

    def _one_hot(self, field_name: str, value: str) -> List[float]:
        domain = CATEGORY_DOMAINS[field_name]
        if self.strict and value not in domain:
            raise EncodingError(
                f"{field_name}={value!r} not in {list(domain)}"
            )
        return [1.0 if value == option else 0.0 for option in domain]

    def encode(self, record: ObservationRecord) -> List[float]:
        vector = [float(getattr(record, name)) for name in CONTINUOUS_FIELDS]
        for field_name in CATEGORY_DOMAINS:
            vector.extend(self._one_hot(field_name, getattr(record, field_name)))
        return vector

    def encode_many(self, records: Sequence[ObservationRecord]) -> np.ndarray:
        """Encode records into an (n, n_features) float array."""
        if not records:
            return np.empty((0, self.n_features), dtype=float)
        return np.array([self.encode(r) for r in records], dtype=float)


_DEFAULT_ENCODER = FeatureEncoder()


def encode_features(record: ObservationRecord) -> List[float]:
    """Encode one record with the default (lossy) encoder."""
    return _DEFAULT_ENCODER.encode(record)


def encode_dataset(records: Sequence[ObservationRecord]) -> np.ndarray:
    return _DEFAULT_ENCODER.encode_many(records)
