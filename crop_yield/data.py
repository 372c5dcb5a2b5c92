"""Synthetic dataset generation, shuffling, and CSV load/save."""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import (
    CONTINUOUS_FIELDS, CATEGORY_DOMAINS, CONTINUOUS_RANGES, BASE_YIELD, OPTIMA,
    CROP_MULTIPLIERS, SOIL_MULTIPLIERS, IRRIGATION_MULTIPLIERS,
    NO_PESTICIDE_FACTOR, PESTICIDE_GAIN_PER_KG, PESTICIDE_CAP,
    FERTILIZER_SCALE, FERTILIZER_CAP, NOISE_BAND, YIELD_RANGE,
)
from .errors import ValidationError
from .schema import ObservationRecord

log = logging.getLogger(__name__)

TARGET_COL = "yield"
COLUMNS = [
    "temperature", "rainfall", "humidity", "season", "crop_type", "soil_type",
    "pesticide_type", "pesticide_amount", "farm_size", "irrigation_type",
    "fertilizer", TARGET_COL,
]

# camelCase headers written by earlier CSV exports
COLUMN_ALIASES = {
    "cropType": "crop_type",
    "soilType": "soil_type",
    "pesticideType": "pesticide_type",
    "pesticideAmount": "pesticide_amount",
    "farmSize": "farm_size",
    "irrigationType": "irrigation_type",
}

# Substituted for blank or unparsable CSV cells
CSV_DEFAULTS = {
    "temperature": 0.0,
    "rainfall": 0.0,
    "humidity": 0.0,
    "pesticide_amount": 0.0,
    "farm_size": 1.0,
    "fertilizer": 0.0,
    "season": "spring",
    "crop_type": "wheat",
    "soil_type": "loam",
    "pesticide_type": "none",
    "irrigation_type": "rain-fed",
}


# ─────────────────────────────────────────────────────────────────────────────
# YIELD MODEL
# ─────────────────────────────────────────────────────────────────────────────

def _penalty(value: float, name: str) -> float:
    """Linear penalty around the field's optimum, floored."""
    params = OPTIMA[name]
    effect = 1 - abs(value - params["optimal"]) / params["spread"]
    return max(params["floor"], effect)


def pesticide_effect(pesticide_type: str, amount: float) -> float:
    if pesticide_type == "none":
        return NO_PESTICIDE_FACTOR
    return min(PESTICIDE_CAP, 1 + amount * PESTICIDE_GAIN_PER_KG)


def fertilizer_effect(amount: float) -> float:
    return min(FERTILIZER_CAP, 1 + amount / FERTILIZER_SCALE)


def expected_yield(
    temperature: float, rainfall: float, humidity: float,
    crop_type: str, soil_type: str, pesticide_type: str,
    pesticide_amount: float, irrigation_type: str, fertilizer: float,
) -> float:
    """Noise-free yield in t/ha before rounding and clamping."""
    y = BASE_YIELD
    y *= _penalty(temperature, "temperature")
    y *= _penalty(rainfall, "rainfall")
    y *= _penalty(humidity, "humidity")
    y *= CROP_MULTIPLIERS[crop_type]
    y *= SOIL_MULTIPLIERS[soil_type]
    y *= pesticide_effect(pesticide_type, pesticide_amount)
    y *= IRRIGATION_MULTIPLIERS[irrigation_type]
    y *= fertilizer_effect(fertilizer)
    return y


def clamp_yield(value: float) -> float:
    low, high = YIELD_RANGE
    return max(low, min(high, value))


# ─────────────────────────────────────────────────────────────────────────────
# GENERATOR
# ─────────────────────────────────────────────────────────────────────────────

class DatasetGenerator:
    """Synthesizes labeled observation records from a seedable source."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform(self, name: str) -> float:
        low, high = CONTINUOUS_RANGES[name]
        return float(self.rng.uniform(low, high))

    def _choice(self, name: str) -> str:
        domain = CATEGORY_DOMAINS[name]
        return domain[int(self.rng.integers(len(domain)))]

    def _record(self) -> ObservationRecord:
        temperature = self._uniform("temperature")
        rainfall = self._uniform("rainfall")
        humidity = self._uniform("humidity")
        season = self._choice("season")
        crop_type = self._choice("crop_type")
        soil_type = self._choice("soil_type")
        pesticide_type = self._choice("pesticide_type")
        pesticide_amount = self._uniform("pesticide_amount")
        farm_size = self._uniform("farm_size")
        irrigation_type = self._choice("irrigation_type")
        fertilizer = self._uniform("fertilizer")

        y = expected_yield(
            temperature, rainfall, humidity, crop_type, soil_type,
            pesticide_type, pesticide_amount, irrigation_type, fertilizer,
        )
        y *= float(self.rng.uniform(*NOISE_BAND))

        return ObservationRecord(
            temperature=round(temperature, 2),
            rainfall=round(rainfall, 2),
            humidity=round(humidity, 2),
            season=season,
            crop_type=crop_type,
            soil_type=soil_type,
            pesticide_type=pesticide_type,
            pesticide_amount=round(pesticide_amount, 2),
            farm_size=round(farm_size, 2),
            irrigation_type=irrigation_type,
            fertilizer=round(fertilizer, 2),
            crop_yield=clamp_yield(round(y, 2)),
        )

    def generate(self, count: int) -> List[ObservationRecord]:
        if count <= 0:
            raise ValidationError(f"count must be positive, got {count}")
        records = [self._record() for _ in range(count)]
        log.debug(f"Generated {count} synthetic records")
        return records


def generate_sample_dataset(count: int = 1000, seed: Optional[int] = None) -> List[ObservationRecord]:
    return DatasetGenerator(seed=seed).generate(count)


def shuffle_dataset(
    records: Sequence[ObservationRecord],
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[ObservationRecord]:
    """Return a shuffled copy; the input sequence is left untouched."""
    rng = rng if rng is not None else np.random.default_rng(seed)
    order = rng.permutation(len(records))
    return [records[i] for i in order]


# ─────────────────────────────────────────────────────────────────────────────
# DATAFRAME / CSV
# ─────────────────────────────────────────────────────────────────────────────

def records_to_frame(records: Sequence[ObservationRecord]) -> pd.DataFrame:
    rows = []
    for r in records:
        row = r.to_dict()
        row[TARGET_COL] = row.pop("crop_yield")
        rows.append(row)
    return pd.DataFrame(rows, columns=COLUMNS)


def frame_to_records(df: pd.DataFrame) -> List[ObservationRecord]:
    """Convert a DataFrame to records, filling blank or bad cells with defaults."""
    df = df.rename(columns=COLUMN_ALIASES)
    missing = [c for c in COLUMNS if c != TARGET_COL and c not in df.columns]
    if missing:
        raise ValidationError(f"Missing columns: {missing}")

    for c in CONTINUOUS_FIELDS:
        df[c] = pd.to_numeric(df[c], errors="coerce").fillna(CSV_DEFAULTS[c])
    for c in CATEGORY_DOMAINS:
        df[c] = df[c].fillna(CSV_DEFAULTS[c]).astype(str).str.strip()
        df.loc[df[c] == "", c] = CSV_DEFAULTS[c]

    if TARGET_COL in df.columns:
        target = pd.to_numeric(df[TARGET_COL], errors="coerce")
    else:
        target = pd.Series([np.nan] * len(df), index=df.index)

    records = []
    for (_, row), y in zip(df.iterrows(), target):
        records.append(ObservationRecord(
            temperature=float(row["temperature"]),
            rainfall=float(row["rainfall"]),
            humidity=float(row["humidity"]),
            season=row["season"],
            crop_type=row["crop_type"],
            soil_type=row["soil_type"],
            pesticide_type=row["pesticide_type"],
            pesticide_amount=float(row["pesticide_amount"]),
            farm_size=float(row["farm_size"]),
            irrigation_type=row["irrigation_type"],
            fertilizer=float(row["fertilizer"]),
            crop_yield=None if pd.isna(y) else float(y),
        ))
    return records


def load_dataset(path: Union[str, Path]) -> List[ObservationRecord]:
    """Load a CSV dataset. Raises ValidationError if it holds no rows."""
    try:
        df = pd.read_csv(path, skip_blank_lines=True, float_precision="round_trip")
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ValidationError(f"Could not parse {path}: {e}") from e
    df.columns = [c.strip() for c in df.columns]
    if df.empty:
        raise ValidationError(f"No valid data found in {path}")
    records = frame_to_records(df)
    log.info(f"Loaded {len(records)} records from {path}")
    return records


def save_dataset(records: Sequence[ObservationRecord], path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records_to_frame(records).to_csv(path, index=False)
    log.info(f"Saved {len(records)} records to {path}")
    return path
