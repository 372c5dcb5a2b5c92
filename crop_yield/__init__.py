"""
Crop Yield - Model Training Core
Version: 1.0.0
"""

__version__ = "1.0.0"

# Core modules
from . import config
from . import errors
from . import schema
from . import features
from . import data
from . import stump
from . import ensemble
from . import evaluation

# Pipeline modules
from . import baseline
from . import ml_pipeline

from .errors import (
    CropYieldError, ValidationError, InvalidStateError,
    UnsupportedAlgorithmError, EncodingError,
)
from .schema import ObservationRecord
from .features import FeatureEncoder, encode_features
from .data import DatasetGenerator, generate_sample_dataset, shuffle_dataset
from .stump import RegressionStump, fit_stump
from .ensemble import GradientBoostingEnsemble
from .evaluation import r2_score, split_dataset
from .ml_pipeline import Algorithm, AlgorithmConfig, ModelDescriptor, train, predict, evaluate

__all__ = [
    # Core
    'config', 'errors', 'schema', 'features', 'data', 'stump', 'ensemble', 'evaluation',
    # Pipeline
    'baseline', 'ml_pipeline',
    # Public API
    'CropYieldError', 'ValidationError', 'InvalidStateError',
    'UnsupportedAlgorithmError', 'EncodingError',
    'ObservationRecord', 'FeatureEncoder', 'encode_features',
    'DatasetGenerator', 'generate_sample_dataset', 'shuffle_dataset',
    'RegressionStump', 'fit_stump', 'GradientBoostingEnsemble',
    'r2_score', 'split_dataset',
    'Algorithm', 'AlgorithmConfig', 'ModelDescriptor', 'train', 'predict', 'evaluate',
]
