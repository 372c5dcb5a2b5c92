"""Rule-based yield heuristic for callers that need a prediction without a model."""
from typing import List, Sequence

import numpy as np

from .config import BASELINE, OPTIMA
from .schema import ObservationRecord


class RuleBasedYieldModel:
    """Interpretable weather-only yield estimate, deterministic."""

    def __init__(self, config=BASELINE):
        self.config = config

    def _effects(self, record: ObservationRecord):
        temp = OPTIMA["temperature"]
        rain = OPTIMA["rainfall"]
        temp_effect = 1 - abs(record.temperature - temp["optimal"]) / temp["spread"]
        rain_effect = 1 - abs(record.rainfall - rain["optimal"]) / rain["spread"]
        return (
            max(self.config.temperature_floor, temp_effect),
            max(self.config.rainfall_floor, rain_effect),
        )

    def predict_one(self, record: ObservationRecord) -> float:
        temp_effect, rain_effect = self._effects(record)
        value = self.config.base_yield * temp_effect * rain_effect
        low, high = self.config.yield_range
        return round(max(low, min(high, value)), 2)

    def predict(self, records: Sequence[ObservationRecord]) -> np.ndarray:
        return np.array([self.predict_one(r) for r in records], dtype=float)

    def explain(self, record: ObservationRecord) -> str:
        """Explain prediction for a single record."""
        temp_effect, rain_effect = self._effects(record)
        parts: List[str] = []
        if temp_effect < 1:
            parts.append(f"temperature {record.temperature:.1f}°C (x{temp_effect:.2f})")
        if rain_effect < 1:
            parts.append(f"rainfall {record.rainfall:.0f}mm (x{rain_effect:.2f})")
        if not parts:
            return f"Estimate {self.predict_one(record):.2f} t/ha: conditions near optimal"
        return f"Estimate {self.predict_one(record):.2f} t/ha, limited by " + ", ".join(parts)
