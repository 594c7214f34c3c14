"""Mood entry and series API routes."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from mood_engine import MoodScale, summarize_series
from mood_engine.mood_series import filter_window

from ..models.mood import MoodEntryModel, SeriesSummaryModel
from .helpers import load_entries, reference_time

router = APIRouter(prefix="/api/mood", tags=["Mood Entries"])


@router.get("/entries", response_model=list[MoodEntryModel])
async def get_mood_entries(
    user_id: str = Query(..., description="User whose entries to load"),
    days: int = Query(default=30, ge=1, le=365, description="Number of days of history"),
    as_of: Optional[str] = Query(default=None, description="ISO timestamp to measure the window from"),
):
    """Get mood entries for the specified number of days, oldest first."""
    entries = load_entries(user_id)
    now = reference_time(entries, as_of)
    if now is None:
        return []
    return [MoodEntryModel(**entry.to_dict()) for entry in filter_window(entries, days, now)]


@router.get("/series", response_model=SeriesSummaryModel)
async def get_mood_series(
    user_id: str = Query(..., description="User whose entries to load"),
    days: Optional[int] = Query(default=None, ge=1, le=365, description="Lookback window; all history if omitted"),
    scale: str = Query(default="wellbeing", description="Mood scale: wellbeing, risk or rating"),
    as_of: Optional[str] = Query(default=None),
):
    """Get derived series statistics (averages, volatility, weekly buckets)."""
    try:
        mood_scale = MoodScale(scale)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid scale '{scale}'. Must be one of: {[s.value for s in MoodScale]}",
        )

    entries = load_entries(user_id)
    now = reference_time(entries, as_of)
    summary = summarize_series(entries, days, mood_scale, now)
    return SeriesSummaryModel.model_validate(summary.to_dict())
