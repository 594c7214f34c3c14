"""
Goal Progress Module.

Recomputes user goal progress from the most recent mood entries and
generates recommendations when active goals are falling short.

Goals are never mutated here; every change is returned as a new Goal.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .errors import GoalTransitionError
from .mood_series import MoodEntry, MoodScale, as_utc, mean, sort_entries

logger = logging.getLogger(__name__)

RECENT_ENTRY_COUNT = 7


class GoalType(str, Enum):
    """Which derived average a goal is measured against."""

    MOOD = "mood"
    SLEEP = "sleep"
    ACTIVITY = "activity"
    SOCIAL = "social"


class GoalStatus(str, Enum):
    """Status of a goal. Only ACTIVE goals can change."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class Goal:
    """A user-defined numeric target over a mood-derived metric."""

    goal_id: str
    title: str
    type: GoalType
    target: float
    description: str = ""
    status: GoalStatus = GoalStatus.ACTIVE
    progress: float = 0.0
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    deadline: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "goal_id": self.goal_id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "target": self.target,
            "status": self.status.value,
            "progress": self.progress,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }


@dataclass
class GoalUpdate:
    """Result of re-evaluating one goal."""

    goal: Goal
    current_average: Optional[float] = None
    has_data: bool = False
    completed_now: bool = False

    def to_dict(self) -> dict:
        return {
            "goal": self.goal.to_dict(),
            "current_average": self.current_average,
            "has_data": self.has_data,
            "completed_now": self.completed_now,
        }


@dataclass
class GoalRecommendation:
    """Suggestion generated for a goal that is below target."""

    type: str  # mood, sleep, social, activity, general
    message: str
    priority: str  # high, medium

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message, "priority": self.priority}


def recent_entries(entries: Iterable[MoodEntry], count: int = RECENT_ENTRY_COUNT) -> List[MoodEntry]:
    """The last `count` entries by timestamp."""
    ordered = sort_entries(entries)
    return ordered[-count:] if count > 0 else []


def current_average(goal_type: GoalType, entries: Sequence[MoodEntry]) -> Optional[float]:
    """
    Average of the metric selected by `goal_type`, or None without entries.

    Mood uses the 1-5 RATING scale (Very Happy = 5).
    """
    if not entries:
        return None
    if goal_type is GoalType.MOOD:
        return mean([MoodScale.RATING.value_of(e.mood) for e in entries])
    if goal_type is GoalType.SLEEP:
        return mean([e.resolved_sleep_quality for e in entries])
    if goal_type is GoalType.SOCIAL:
        return mean([e.resolved_social_interaction_count for e in entries])
    return mean([len(e.activities) for e in entries])


class GoalProgressEvaluator:
    """
    Evaluates goal progress against a rolling window of recent entries.

    Progress = clamp(average / target * 100, 0, 100). Reaching 100 moves
    an active goal to completed; that transition is never reversed.
    """

    # Recommendation text per goal type, and its priority
    RECOMMENDATIONS = {
        GoalType.MOOD: (
            "Your mood has been lower than your target. Try incorporating more "
            "activities you enjoy and practicing self-care.",
            "high",
        ),
        GoalType.SLEEP: (
            "Your sleep quality is below your goal. Consider establishing a "
            "consistent bedtime routine and limiting screen time before bed.",
            "high",
        ),
        GoalType.SOCIAL: (
            "You're below your social interaction goal. Try reaching out to "
            "friends or joining group activities.",
            "medium",
        ),
        GoalType.ACTIVITY: (
            "You're not meeting your activity target. Consider scheduling "
            "regular activities throughout your day.",
            "medium",
        ),
    }

    def __init__(self, window: int = RECENT_ENTRY_COUNT):
        self.window = window

    def evaluate(
        self,
        goal: Goal,
        entries: Iterable[MoodEntry],
        now: Optional[datetime] = None,
    ) -> GoalUpdate:
        """
        Recompute a goal's progress.

        Args:
            goal: The goal to evaluate (not mutated)
            entries: The user's mood entries
            now: Timestamp used for completed_at (defaults to now, UTC)

        Returns:
            GoalUpdate holding the (possibly) updated goal
        """
        if goal.status is not GoalStatus.ACTIVE:
            logger.debug(f"[GOALS] Skipping {goal.goal_id}: status {goal.status.value}")
            return GoalUpdate(goal=goal)

        recent = recent_entries(entries, self.window)
        average = current_average(goal.type, recent)

        if average is None:
            logger.debug(f"[GOALS] {goal.goal_id}: no recent entries, progress unchanged")
            return GoalUpdate(goal=goal)

        if goal.target <= 0:
            logger.warning(f"[GOALS] {goal.goal_id}: non-positive target {goal.target}, skipping")
            return GoalUpdate(goal=goal, current_average=average)

        progress = max(0.0, min(100.0, (average / goal.target) * 100))
        updated = replace(goal, progress=progress)
        completed_now = False

        if progress >= 100 and goal.completed_at is None:
            stamp = as_utc(now) if now else datetime.now(timezone.utc)
            updated = replace(updated, status=GoalStatus.COMPLETED, completed_at=stamp)
            completed_now = True
            logger.info(f"[GOALS] {goal.title} COMPLETED: {average:.2f}/{goal.target}")

        logger.debug(
            f"[GOALS] {goal.title}: {average:.2f}/{goal.target} "
            f"({progress:.0f}%) - {updated.status.value}"
        )

        return GoalUpdate(
            goal=updated,
            current_average=average,
            has_data=True,
            completed_now=completed_now,
        )

    def evaluate_all(
        self,
        goals: Iterable[Goal],
        entries: Iterable[MoodEntry],
        now: Optional[datetime] = None,
    ) -> List[GoalUpdate]:
        """Evaluate every goal against the same entries."""
        entries = list(entries)
        return [self.evaluate(goal, entries, now) for goal in goals]

    def generate_recommendations(
        self,
        goals: Iterable[Goal],
        entries: Iterable[MoodEntry],
    ) -> List[GoalRecommendation]:
        """
        Recommendations for active goals whose recent average is below
        target, plus general advice for low mood or poor sleep.
        """
        recent = recent_entries(entries, self.window)
        if not recent:
            return []

        recommendations = []
        for goal in goals:
            if goal.status is not GoalStatus.ACTIVE:
                continue
            average = current_average(goal.type, recent)
            if average < goal.target:
                message, priority = self.RECOMMENDATIONS[goal.type]
                recommendations.append(
                    GoalRecommendation(type=goal.type.value, message=message, priority=priority)
                )

        if current_average(GoalType.MOOD, recent) <= 2:
            recommendations.append(
                GoalRecommendation(
                    type="general",
                    message=(
                        "Your mood has been consistently low. Consider speaking "
                        "with a mental health professional."
                    ),
                    priority="high",
                )
            )

        if current_average(GoalType.SLEEP, recent) <= 3:
            recommendations.append(
                GoalRecommendation(
                    type="general",
                    message=(
                        "Poor sleep can significantly impact mood. Focus on "
                        "improving your sleep hygiene."
                    ),
                    priority="high",
                )
            )

        return recommendations


def complete_goal(goal: Goal, now: Optional[datetime] = None) -> Goal:
    """Manually mark an active goal as completed."""
    if goal.status is not GoalStatus.ACTIVE:
        raise GoalTransitionError(goal.goal_id, goal.status.value, GoalStatus.COMPLETED.value)
    stamp = as_utc(now) if now else datetime.now(timezone.utc)
    logger.info(f"[GOALS] {goal.title} marked completed")
    return replace(goal, status=GoalStatus.COMPLETED, completed_at=stamp)


def abandon_goal(goal: Goal) -> Goal:
    """Manually abandon an active goal."""
    if goal.status is not GoalStatus.ACTIVE:
        raise GoalTransitionError(goal.goal_id, goal.status.value, GoalStatus.ABANDONED.value)
    logger.info(f"[GOALS] {goal.title} abandoned")
    return replace(goal, status=GoalStatus.ABANDONED)


# Global shared instance
goal_progress_evaluator = GoalProgressEvaluator()


def evaluate_goals(
    goals: Iterable[Goal],
    entries: Iterable[MoodEntry],
    now: Optional[datetime] = None,
) -> List[GoalUpdate]:
    """Convenience function to evaluate goals with the shared evaluator."""
    return goal_progress_evaluator.evaluate_all(goals, entries, now)
