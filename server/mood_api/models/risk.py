"""Risk assessment models."""
from pydantic import BaseModel, Field
from typing import Literal

RiskLevelName = Literal["low", "medium", "high", "critical"]
FactorType = Literal["mood", "language", "sleep", "social", "stress"]


class RiskFactorModel(BaseModel):
    """Contribution of one dimension to the composite risk."""

    type: FactorType
    name: str
    score: float = Field(ge=0, le=100)
    description: str
    concerns: list[str] = []
    has_data: bool


class RiskAssessmentModel(BaseModel):
    """Composite risk assessment, recomputed on every request."""

    score: float = Field(ge=0, le=100)
    risk_level: RiskLevelName
    factors: list[RiskFactorModel]
    weights: dict[str, float]
    language_available: bool
    has_data: bool
    assessed_at: str
