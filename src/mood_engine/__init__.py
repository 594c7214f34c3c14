"""
Mood Analytics Engine.

Deterministic scoring over a user's mood history: series aggregation,
composite risk scoring, goal progress and templated insights.
"""

from .errors import GoalTransitionError, MoodEngineError
from .goal_evaluator import (
    Goal,
    GoalProgressEvaluator,
    GoalRecommendation,
    GoalStatus,
    GoalType,
    GoalUpdate,
    abandon_goal,
    complete_goal,
    evaluate_goals,
    goal_progress_evaluator,
)
from .insights import AnalyticsReport, Insight, InsightSummarizer, summarize_insights
from .language_analysis import LanguageAnalysis, LanguageAnalysisClient
from .mood_series import (
    Activity,
    MoodEntry,
    MoodLabel,
    MoodScale,
    MoodSeriesAggregator,
    SeriesSummary,
    WeeklyBucket,
    calculate_volatility,
    detect_downward_trend,
    parse_entries,
    summarize_series,
)
from .risk_scorer import (
    RiskAssessment,
    RiskFactor,
    RiskLevel,
    RiskScorer,
    assess_risk,
    composite_score,
    get_risk_level,
)

__all__ = [
    "Activity",
    "AnalyticsReport",
    "Goal",
    "GoalProgressEvaluator",
    "GoalRecommendation",
    "GoalStatus",
    "GoalTransitionError",
    "GoalType",
    "GoalUpdate",
    "Insight",
    "InsightSummarizer",
    "LanguageAnalysis",
    "LanguageAnalysisClient",
    "MoodEngineError",
    "MoodEntry",
    "MoodLabel",
    "MoodScale",
    "MoodSeriesAggregator",
    "RiskAssessment",
    "RiskFactor",
    "RiskLevel",
    "RiskScorer",
    "SeriesSummary",
    "WeeklyBucket",
    "abandon_goal",
    "assess_risk",
    "calculate_volatility",
    "complete_goal",
    "composite_score",
    "detect_downward_trend",
    "evaluate_goals",
    "get_risk_level",
    "goal_progress_evaluator",
    "parse_entries",
    "summarize_insights",
    "summarize_series",
]
