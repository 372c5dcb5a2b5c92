"""Record and model descriptor schemas."""
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# OBSERVATION RECORD
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ObservationRecord:
    # weather
    temperature: float  # °C
    rainfall: float  # mm
    humidity: float  # %
    season: str

    # farm
    crop_type: str
    soil_type: str

    # practice
    pesticide_type: str
    pesticide_amount: float  # kg/ha
    farm_size: float  # ha
    irrigation_type: str
    fertilizer: float  # kg/ha

    # target (t/ha), None on inference-only records
    crop_yield: Optional[float] = None

    @property
    def is_labeled(self) -> bool:
        return self.crop_yield is not None

    def without_target(self) -> "ObservationRecord":
        return replace(self, crop_yield=None)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObservationRecord":
        """Build a record from a mapping; accepts ``yield`` as the target key."""
        target = data.get("crop_yield", data.get("yield"))
        return cls(
            temperature=float(data["temperature"]),
            rainfall=float(data["rainfall"]),
            humidity=float(data["humidity"]),
            season=str(data["season"]),
            crop_type=str(data["crop_type"]),
            soil_type=str(data["soil_type"]),
            pesticide_type=str(data["pesticide_type"]),
            pesticide_amount=float(data["pesticide_amount"]),
            farm_size=float(data["farm_size"]),
            irrigation_type=str(data["irrigation_type"]),
            fertilizer=float(data["fertilizer"]),
            crop_yield=None if target is None else float(target),
        )


# ─────────────────────────────────────────────────────────────────────────────
# WIRE FORMAT
# ─────────────────────────────────────────────────────────────────────────────

class StumpSchema(BaseModel):
    feature_index: int = Field(..., ge=0)
    threshold: float
    left_value: float
    right_value: float


class EnsembleSchema(BaseModel):
    round_count: int = Field(..., ge=0)
    learning_rate: float = Field(..., gt=0)
    base_prediction: float
    training_mean: Optional[float] = None
    n_features: Optional[int] = None
    stumps: List[StumpSchema] = Field(default_factory=list)
    training_loss: List[float] = Field(default_factory=list)
    loss_reduction: List[float] = Field(default_factory=list)


class ModelDescriptorSchema(BaseModel):
    id: str
    name: str
    algorithm: str
    training_size: int = Field(..., ge=0)
    accuracy: Optional[float] = None
    metrics: Dict[str, Optional[float]] = Field(default_factory=dict)
    feature_names: List[str] = Field(default_factory=list)
    feature_importance: Dict[str, float] = Field(default_factory=dict)
    trained_at: str
    ensemble: EnsembleSchema
