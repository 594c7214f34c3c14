"""Goal progress API routes."""
from typing import Optional

from fastapi import APIRouter, Query

from mood_engine import evaluate_goals, goal_progress_evaluator

from ..models.goals import GoalModel, GoalProgressModel, GoalsResponse
from .helpers import load_entries, load_goals, reference_time

router = APIRouter(prefix="/api/mood", tags=["Goals"])


@router.get("/goals", response_model=GoalsResponse)
async def get_goals(
    user_id: str = Query(..., description="User whose goals to load"),
):
    """Get stored goals with recommendations for active goals below target."""
    goals = load_goals(user_id)
    entries = load_entries(user_id)
    recommendations = goal_progress_evaluator.generate_recommendations(goals, entries)

    return GoalsResponse(
        goals=[GoalModel(**goal.to_dict()) for goal in goals],
        recommendations=[r.to_dict() for r in recommendations],
    )


@router.get("/goals/progress", response_model=list[GoalProgressModel])
async def get_goal_progress(
    user_id: str = Query(..., description="User whose goals to evaluate"),
    as_of: Optional[str] = Query(default=None, description="Timestamp recorded if a goal completes"),
):
    """
    Re-evaluate every goal against the latest seven entries.

    Results are not persisted; the caller stores any progress or status
    change it wants to keep.
    """
    entries = load_entries(user_id)
    now = reference_time(entries, as_of)
    updates = evaluate_goals(load_goals(user_id), entries, now)
    return [GoalProgressModel.model_validate(update.to_dict()) for update in updates]
