"""
Mood Correlation and Insight Module.

Post-processes a user's mood history into correlation tables (activity,
sleep, social and stress versus mood) and a ranked list of templated
insights. All mood numbers here use the WELLBEING scale (0-4, higher is
better).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .mood_series import (
    MoodEntry,
    MoodScale,
    MoodSeriesAggregator,
    WeeklyBucket,
    mood_series_aggregator,
)

logger = logging.getLogger(__name__)

SCALE = MoodScale.WELLBEING

HIGH_VOLATILITY_THRESHOLD = 1.5
TREND_THRESHOLD = 0.5
TREND_WEEKS = 4
TOP_ACTIVITY_COUNT = 3


@dataclass
class ActivityCorrelation:
    activity: str
    average_mood: float
    frequency: int

    def to_dict(self) -> dict:
        return {
            "activity": self.activity,
            "average_mood": self.average_mood,
            "frequency": self.frequency,
        }


@dataclass
class LevelImpact:
    """Average mood observed at one exact level of a metric."""

    level: int
    average_mood: float
    frequency: int

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "average_mood": self.average_mood,
            "frequency": self.frequency,
        }


@dataclass
class Insight:
    """A templated insight record."""

    type: str  # volatility, trend, activity, sleep, social, stress
    title: str
    description: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "recommendation": self.recommendation,
        }


@dataclass
class AnalyticsReport:
    """Metrics and insights for a user's full mood history."""

    total_entries: int = 0
    average_mood: float = 0.0
    mood_volatility: float = 0.0
    weekly_trends: List[WeeklyBucket] = field(default_factory=list)
    activity_correlations: List[ActivityCorrelation] = field(default_factory=list)
    sleep_impact: List[LevelImpact] = field(default_factory=list)
    social_impact: List[LevelImpact] = field(default_factory=list)
    stress_impact: List[LevelImpact] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.total_entries > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "has_data": self.has_data,
            "metrics": {
                "total_entries": self.total_entries,
                "average_mood": self.average_mood,
                "mood_volatility": self.mood_volatility,
                "weekly_trends": [w.to_dict() for w in self.weekly_trends],
                "activity_correlations": [a.to_dict() for a in self.activity_correlations],
                "sleep_impact": [i.to_dict() for i in self.sleep_impact],
                "social_impact": [i.to_dict() for i in self.social_impact],
                "stress_impact": [i.to_dict() for i in self.stress_impact],
            },
            "insights": [i.to_dict() for i in self.insights],
        }


def activity_correlations(entries: Iterable[MoodEntry]) -> List[ActivityCorrelation]:
    """Average mood per activity, highest first (ties keep first-seen order)."""
    totals: Dict[str, List[float]] = {}
    for entry in entries:
        mood = SCALE.value_of(entry.mood)
        for activity in entry.activities:
            totals.setdefault(activity.name, []).append(mood)

    correlations = [
        ActivityCorrelation(activity=name, average_mood=sum(moods) / len(moods), frequency=len(moods))
        for name, moods in totals.items()
    ]
    return sorted(correlations, key=lambda c: c.average_mood, reverse=True)


def level_impact(entries: Iterable[MoodEntry], metric: str) -> List[LevelImpact]:
    """
    Average mood grouped by the exact integer level of `metric`.

    Args:
        entries: Mood entries
        metric: sleep_quality, social_interaction_count or stress_level

    Returns:
        One LevelImpact per observed level, lowest level first
    """
    totals: Dict[int, List[float]] = {}
    for entry in entries:
        totals.setdefault(entry.metric(metric), []).append(SCALE.value_of(entry.mood))

    return [
        LevelImpact(level=level, average_mood=sum(moods) / len(moods), frequency=len(moods))
        for level, moods in sorted(totals.items())
    ]


def best_level(impacts: List[LevelImpact]) -> Optional[LevelImpact]:
    """Level with the highest average mood (lowest level wins ties)."""
    if not impacts:
        return None
    return sorted(impacts, key=lambda i: i.average_mood, reverse=True)[0]


def worst_level(impacts: List[LevelImpact]) -> Optional[LevelImpact]:
    """Level with the lowest average mood (lowest level wins ties)."""
    if not impacts:
        return None
    return sorted(impacts, key=lambda i: i.average_mood)[0]


def trend_insight(weekly: List[WeeklyBucket]) -> Optional[Insight]:
    """Compare the first and last of the most recent four weeks."""
    recent = weekly[-TREND_WEEKS:]
    if len(recent) < 2:
        return None

    delta = recent[-1].average_mood - recent[0].average_mood
    if abs(delta) <= TREND_THRESHOLD:
        return None

    improving = delta > 0
    return Insight(
        type="trend",
        title="Improving Mood Trend" if improving else "Declining Mood Trend",
        description=(
            f"Your mood has been {'improving' if improving else 'declining'} "
            f"over the past few weeks."
        ),
        recommendation=(
            "Keep up the positive activities that are contributing to your improved mood."
            if improving
            else "Consider reaching out to a mental health professional or trusted friend for support."
        ),
    )


class InsightSummarizer:
    """Builds AnalyticsReports with ranked, templated insights."""

    def __init__(self, aggregator: Optional[MoodSeriesAggregator] = None):
        self.aggregator = aggregator or mood_series_aggregator

    def summarize(self, entries: Iterable[MoodEntry]) -> AnalyticsReport:
        """
        Compute metrics and insights over the full history.

        Returns:
            AnalyticsReport; empty (has_data False) when there are no entries
        """
        ordered = self.aggregator.window(entries)
        summary = self.aggregator.summarize(ordered, scale=SCALE)
        if not summary.has_data:
            logger.debug("[INSIGHTS] No entries, returning empty report")
            return AnalyticsReport()

        report = AnalyticsReport(
            total_entries=summary.entry_count,
            average_mood=summary.average_mood,
            mood_volatility=summary.volatility,
            weekly_trends=summary.weekly_buckets,
            activity_correlations=activity_correlations(ordered),
            sleep_impact=level_impact(ordered, "sleep_quality"),
            social_impact=level_impact(ordered, "social_interaction_count"),
            stress_impact=level_impact(ordered, "stress_level"),
        )
        report.insights = self.generate_insights(report)

        logger.info(
            f"[INSIGHTS] {report.total_entries} entries -> {len(report.insights)} insights"
        )
        return report

    def generate_insights(self, report: AnalyticsReport) -> List[Insight]:
        insights = []

        if report.mood_volatility > HIGH_VOLATILITY_THRESHOLD:
            insights.append(
                Insight(
                    type="volatility",
                    title="High Mood Volatility",
                    description=(
                        "Your mood has been showing significant fluctuations. This might "
                        "indicate increased stress or emotional sensitivity."
                    ),
                    recommendation=(
                        "Consider practicing mindfulness or stress-reduction techniques "
                        "to help stabilize your mood."
                    ),
                )
            )

        trend = trend_insight(report.weekly_trends)
        if trend:
            insights.append(trend)

        top_activities = report.activity_correlations[:TOP_ACTIVITY_COUNT]
        if top_activities:
            insights.append(
                Insight(
                    type="activity",
                    title="Mood-Boosting Activities",
                    description=(
                        "Your mood tends to be highest when you engage in: "
                        f"{', '.join(a.activity for a in top_activities)}."
                    ),
                    recommendation="Try to incorporate these activities more regularly into your routine.",
                )
            )

        sleep = best_level(report.sleep_impact)
        if sleep:
            insights.append(
                Insight(
                    type="sleep",
                    title="Sleep Quality Impact",
                    description=f"Your mood is best when your sleep quality is at level {sleep.level}.",
                    recommendation=(
                        "Focus on maintaining consistent sleep habits and creating a "
                        "relaxing bedtime routine."
                    ),
                )
            )

        social = best_level(report.social_impact)
        if social:
            insights.append(
                Insight(
                    type="social",
                    title="Social Connection Impact",
                    description=(
                        f"Your mood tends to be better when you have {social.level} "
                        "social interactions."
                    ),
                    recommendation="Try to maintain this level of social engagement regularly.",
                )
            )

        stress = worst_level(report.stress_impact)
        if stress:
            insights.append(
                Insight(
                    type="stress",
                    title="Stress Level Impact",
                    description=f"Your mood is most affected when stress levels reach {stress.level}.",
                    recommendation=(
                        "Consider implementing stress management techniques when you "
                        "notice stress levels approaching this point."
                    ),
                )
            )

        return insights


# Global shared instance
insight_summarizer = InsightSummarizer()


def summarize_insights(entries: Iterable[MoodEntry]) -> AnalyticsReport:
    """Convenience function to build a report with the shared summarizer."""
    return insight_summarizer.summarize(entries)
