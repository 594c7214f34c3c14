"""Pydantic models for mood analytics API responses."""
from .mood import ActivityModel, MoodEntryModel, SeriesSummaryModel, WeeklyBucketModel
from .risk import RiskAssessmentModel, RiskFactorModel
from .goals import GoalModel, GoalProgressModel, GoalRecommendationModel, GoalsResponse
from .analytics import AnalyticsResponse, InsightModel

__all__ = [
    "ActivityModel",
    "MoodEntryModel",
    "SeriesSummaryModel",
    "WeeklyBucketModel",
    "RiskAssessmentModel",
    "RiskFactorModel",
    "GoalModel",
    "GoalProgressModel",
    "GoalRecommendationModel",
    "GoalsResponse",
    "AnalyticsResponse",
    "InsightModel",
]
