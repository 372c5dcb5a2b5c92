"""Project configuration: feature domains, generator constants, and model defaults."""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Tuple

# ─────────────────────────────────────────────────────────────────────────────
# FEATURE DOMAINS
# ─────────────────────────────────────────────────────────────────────────────
CONTINUOUS_FIELDS = [
    "temperature", "rainfall", "humidity",
    "pesticide_amount", "farm_size", "fertilizer",
]

# Order of fields and of values inside each field fixes the one-hot layout.
CATEGORY_DOMAINS: Dict[str, Tuple[str, ...]] = {
    "season": ("spring", "summer", "fall", "winter"),
    "crop_type": ("wheat", "corn", "rice", "soybean", "cotton", "potato"),
    "soil_type": ("clay", "sandy", "loam", "silt"),
    "pesticide_type": ("organic", "synthetic", "biological", "none"),
    "irrigation_type": ("drip", "sprinkler", "flood", "rain-fed"),
}

# Prefixes used for one-hot column names
CATEGORY_PREFIXES = {
    "season": "season",
    "crop_type": "crop",
    "soil_type": "soil",
    "pesticide_type": "pesticide",
    "irrigation_type": "irrigation",
}

# ─────────────────────────────────────────────────────────────────────────────
# SYNTHETIC DATA
# ─────────────────────────────────────────────────────────────────────────────
# (low, high) for uniform draws
CONTINUOUS_RANGES = {
    "temperature": (5.0, 40.0),      # °C
    "rainfall": (20.0, 320.0),       # mm
    "humidity": (30.0, 90.0),        # %
    "pesticide_amount": (0.0, 8.0),  # kg/ha
    "farm_size": (1.0, 101.0),       # ha
    "fertilizer": (50.0, 250.0),     # kg/ha
}

BASE_YIELD = 30.0  # t/ha before any factor

# optimum, tolerance, floor for penalty-shaped factors
OPTIMA = {
    "temperature": {"optimal": 22.5, "spread": 30.0, "floor": 0.3},
    "rainfall": {"optimal": 150.0, "spread": 200.0, "floor": 0.4},
    "humidity": {"optimal": 65.0, "spread": 50.0, "floor": 0.5},
}

CROP_MULTIPLIERS = {
    "wheat": 1.0, "corn": 1.2, "rice": 0.9,
    "soybean": 0.8, "cotton": 0.7, "potato": 1.4,
}
SOIL_MULTIPLIERS = {"clay": 0.9, "sandy": 0.8, "loam": 1.1, "silt": 1.0}
IRRIGATION_MULTIPLIERS = {"drip": 1.2, "sprinkler": 1.1, "flood": 1.0, "rain-fed": 0.8}

NO_PESTICIDE_FACTOR = 0.8
PESTICIDE_GAIN_PER_KG = 0.05
PESTICIDE_CAP = 1.3
FERTILIZER_SCALE = 300.0
FERTILIZER_CAP = 1.4
NOISE_BAND = (0.8, 1.2)

# ─────────────────────────────────────────────────────────────────────────────
# PREDICTION RANGE
# ─────────────────────────────────────────────────────────────────────────────
YIELD_RANGE = (5.0, 80.0)  # t/ha

# Inference starts from this literal, not from the training mean (see DESIGN.md).
INFERENCE_BASE_PREDICTION = 35.0

# ─────────────────────────────────────────────────────────────────────────────
# PATHS
# ─────────────────────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("CROP_YIELD_DATA_DIR", str(BASE_DIR / "data")))
MODELS_DIR = Path(os.getenv("CROP_YIELD_MODELS_DIR", str(BASE_DIR / "models")))

# ─────────────────────────────────────────────────────────────────────────────
# MODEL CONFIG
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class ModelConfig:
    algorithm: str = "gradient_boosting"
    round_count: int = int(os.getenv("CROP_YIELD_ROUNDS", "100"))
    learning_rate: float = float(os.getenv("CROP_YIELD_LEARNING_RATE", "0.1"))
    train_fraction: float = 0.8
    random_state: int = int(os.getenv("CROP_YIELD_SEED", "42"))

MODEL = ModelConfig()

# ─────────────────────────────────────────────────────────────────────────────
# BASELINE (rule-based fallback)
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class BaselineConfig:
    base_yield: float = 35.0
    temperature_floor: float = 0.5
    rainfall_floor: float = 0.6
    yield_range: Tuple[float, float] = field(default_factory=lambda: (10.0, 70.0))

BASELINE = BaselineConfig()
