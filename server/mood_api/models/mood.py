"""Mood entry and series data models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal

MoodValue = Literal["Very Sad", "Sad", "Neutral", "Happy", "Very Happy"]
ScaleName = Literal["risk", "wellbeing", "rating"]


class ActivityModel(BaseModel):
    """Activity logged with a mood entry."""

    name: str
    duration: float = Field(ge=0)


class MoodEntryModel(BaseModel):
    """Mood entry with defaults already applied to missing fields."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    entry_id: Optional[str] = None
    timestamp: str
    mood: MoodValue
    sleep_quality: int = Field(ge=1, le=5)
    energy_level: int = Field(ge=1, le=5)
    stress_level: int = Field(ge=1, le=5)
    social_interaction_count: int = Field(ge=0)
    activities: list[ActivityModel] = []
    notes: str = ""


class WeeklyBucketModel(BaseModel):
    """Per-week averages (mood on the requested scale)."""

    week: str
    count: int
    average_mood: float
    activities: dict[str, float]
    average_sleep_quality: float
    average_energy_level: float
    average_social_interaction_count: float
    average_stress_level: float


class SeriesSummaryModel(BaseModel):
    """Derived series statistics for a lookback window."""

    window_days: Optional[int] = None
    scale: ScaleName
    entry_count: int
    has_data: bool
    mood_values: list[float]
    average_mood: float
    volatility: float
    normalized_volatility: float
    weekly_buckets: list[WeeklyBucketModel]
    average_sleep_quality: float
    average_energy_level: float
    average_stress_level: float
    average_social_interaction_count: float
    average_activity_count: float
