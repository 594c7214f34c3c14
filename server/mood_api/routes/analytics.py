"""Mood analytics and insight API routes."""
from fastapi import APIRouter, Query

from mood_engine import summarize_insights

from ..models.analytics import AnalyticsResponse
from .helpers import load_entries

router = APIRouter(prefix="/api/mood", tags=["Mood Analytics"])


@router.get("/analytics", response_model=AnalyticsResponse, response_model_by_alias=True)
async def get_mood_analytics(
    user_id: str = Query(..., description="User whose entries to analyze"),
):
    """
    Get statistical metrics and templated insights over the full history.

    Covers mood volatility, weekly trends and activity/sleep/social/stress
    correlations. Returns an empty report when the user has no entries.
    """
    report = summarize_insights(load_entries(user_id))
    return AnalyticsResponse.model_validate(report.to_dict())
