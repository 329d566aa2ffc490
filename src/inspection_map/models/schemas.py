# src/inspection_map/models/schemas.py
import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MetricSelection(str, Enum):
    """Which neighborhood aggregate drives the boundary colors."""

    INSPECTIONS = "inspections"
    VIOLATIONS = "violations"

    @property
    def field_name(self) -> str:
        return _METRIC_FIELDS[self]

    @property
    def label(self) -> str:
        return _METRIC_LABELS[self]


_METRIC_FIELDS = {
    MetricSelection.INSPECTIONS: "avg_inspection_score",
    MetricSelection.VIOLATIONS: "avg_violation_score",
}

_METRIC_LABELS = {
    MetricSelection.INSPECTIONS: "Average inspection score",
    MetricSelection.VIOLATIONS: "Average violation score",
}


class InspectionEntry(BaseModel):
    """One inspection of a business. A missing Score means not yet scored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    date: float  # epoch timestamp; only the ordering matters
    score: Optional[float] = Field(default=None, alias="Score")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        """Accept datetimes and ISO strings as well as numeric timestamps"""
        if isinstance(v, datetime):
            return v.timestamp()
        if isinstance(v, str):
            try:
                return float(v)
            except ValueError:
                return datetime.fromisoformat(v).timestamp()
        return v

    @field_validator("score", mode="before")
    @classmethod
    def normalize_missing_score(cls, v):
        """Treat empty strings and NaN (pandas exports) as unscored"""
        if v == "":
            return None
        if isinstance(v, float) and math.isnan(v):
            return None
        return v


class BusinessData(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    neighborhood: str


class BusinessRecord(BaseModel):
    """Static business info plus its inspection history."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    business_data: BusinessData
    inspection_data: List[InspectionEntry] = []


class NeighborhoodAggregate(BaseModel):
    """Precomputed per-neighborhood averages."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    avg_inspection_score: float
    avg_violation_score: float

    @field_validator("avg_inspection_score", "avg_violation_score")
    @classmethod
    def require_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"aggregate score must be finite, got {v}")
        return v

    def value_for(self, metric: MetricSelection) -> float:
        return getattr(self, MetricSelection(metric).field_name)


class ScoredInspection(BaseModel):
    """A business's representative scored inspection, as listed in the tooltip."""

    model_config = ConfigDict(frozen=True)

    business_id: str
    business_name: str
    score: float
    date: float


class Datasets(BaseModel):
    """The three inputs the map is drawn from, loaded once and never mutated."""

    model_config = ConfigDict(frozen=True)

    businesses: Dict[str, BusinessRecord] = {}
    aggregates: Dict[str, NeighborhoodAggregate] = {}
    boundaries: Dict[str, Any] = {"type": "FeatureCollection", "features": []}

    @field_validator("boundaries")
    @classmethod
    def check_feature_collection(cls, v):
        """Boundaries must be a GeoJSON FeatureCollection"""
        if v.get("type") != "FeatureCollection" or not isinstance(v.get("features"), list):
            raise ValueError("boundaries must be a GeoJSON FeatureCollection")
        return v

    @classmethod
    def from_json(
        cls,
        businesses: Dict[str, Any],
        aggregates: Dict[str, Any],
        boundaries: Dict[str, Any],
    ) -> "Datasets":
        """Validate already-decoded JSON objects into typed datasets."""
        return cls.model_validate(
            {
                "businesses": businesses,
                "aggregates": aggregates,
                "boundaries": boundaries,
            }
        )

    @property
    def boundary_features(self) -> List[Dict[str, Any]]:
        return self.boundaries.get("features", [])
