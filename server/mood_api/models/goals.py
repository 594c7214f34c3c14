"""Goal models."""
from pydantic import BaseModel, Field
from typing import Optional, Literal

GoalTypeName = Literal["mood", "sleep", "activity", "social"]
GoalStatusName = Literal["active", "completed", "abandoned"]


class GoalModel(BaseModel):
    """A user goal with its latest progress."""

    goal_id: str
    title: str
    description: str = ""
    type: GoalTypeName
    target: float
    status: GoalStatusName
    progress: float = Field(ge=0, le=100)
    created_at: Optional[str] = None
    completed_at: Optional[str] = None
    deadline: Optional[str] = None


class GoalRecommendationModel(BaseModel):
    type: str
    message: str
    priority: Literal["high", "medium"]


class GoalsResponse(BaseModel):
    """Stored goals plus recommendations for the ones falling short."""

    goals: list[GoalModel]
    recommendations: list[GoalRecommendationModel]


class GoalProgressModel(BaseModel):
    """Goal re-evaluated against the latest entries (not persisted)."""

    goal: GoalModel
    current_average: Optional[float] = None
    has_data: bool
    completed_now: bool
