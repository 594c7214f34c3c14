"""Mood analytics and insight models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal

InsightType = Literal["volatility", "trend", "activity", "sleep", "social", "stress"]


class WeeklyTrend(BaseModel):
    """Average metrics for one Monday-start week (mood on 0-4)."""

    model_config = ConfigDict(populate_by_name=True)

    week: str
    average_mood: float = Field(serialization_alias="averageMood")
    activities: dict[str, float]
    average_sleep_quality: float = Field(serialization_alias="averageSleepQuality")
    average_energy_level: float = Field(serialization_alias="averageEnergyLevel")
    average_social_interaction_count: float = Field(serialization_alias="averageSocialInteractionCount")
    average_stress_level: float = Field(serialization_alias="averageStressLevel")


class ActivityCorrelationModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    activity: str
    average_mood: float = Field(serialization_alias="averageMood")
    frequency: int


class LevelImpactModel(BaseModel):
    """Average mood at one exact level of sleep, social count or stress."""

    model_config = ConfigDict(populate_by_name=True)

    level: int
    average_mood: float = Field(serialization_alias="averageMood")
    frequency: int


class AnalyticsMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_entries: int = Field(serialization_alias="totalEntries")
    average_mood: float = Field(serialization_alias="averageMood")
    mood_volatility: float = Field(serialization_alias="moodVolatility")
    weekly_trends: list[WeeklyTrend] = Field(serialization_alias="weeklyTrends")
    activity_correlations: list[ActivityCorrelationModel] = Field(serialization_alias="activityCorrelations")
    sleep_impact: list[LevelImpactModel] = Field(serialization_alias="sleepImpact")
    social_impact: list[LevelImpactModel] = Field(serialization_alias="socialImpact")
    stress_impact: list[LevelImpactModel] = Field(serialization_alias="stressImpact")


class InsightModel(BaseModel):
    type: InsightType
    title: str
    description: str
    recommendation: str


class AnalyticsResponse(BaseModel):
    """Metrics and templated insights for a user's mood history."""

    model_config = ConfigDict(populate_by_name=True)

    has_data: bool = Field(serialization_alias="hasData")
    metrics: AnalyticsMetrics
    insights: list[InsightModel]
