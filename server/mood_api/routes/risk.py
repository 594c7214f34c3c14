"""Risk assessment API routes."""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mood_engine import LanguageAnalysisClient, assess_risk
from mood_engine.mood_series import filter_window

from ..config import get_settings
from ..models.risk import RiskAssessmentModel
from .helpers import load_entries, reference_time

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mood", tags=["Risk Assessment"])

# Notes sent for language analysis
LANGUAGE_WINDOW_DAYS = 30


@lru_cache
def get_language_client() -> LanguageAnalysisClient:
    settings = get_settings()
    return LanguageAnalysisClient(
        api_url=settings.language_api_url,
        api_key=settings.language_api_key or "",
        model=settings.language_model,
        timeout=settings.language_timeout,
    )


@router.get("/risk", response_model=RiskAssessmentModel)
async def get_risk_assessment(
    user_id: str = Query(..., description="User to assess"),
    include_language: bool = Query(default=True, description="Ask the language provider about recent notes"),
    as_of: Optional[str] = Query(default=None, description="ISO timestamp to measure windows from"),
    language_client: LanguageAnalysisClient = Depends(get_language_client),
):
    """
    Get a composite risk assessment recomputed from the current entries.

    The language term is optional: when the provider is not configured or
    fails, it contributes zero and language_available is false.
    """
    entries = load_entries(user_id)
    now = reference_time(entries, as_of)

    language = None
    if include_language and entries:
        recent = filter_window(entries, LANGUAGE_WINDOW_DAYS, now)
        language = await language_client.analyze([entry.notes for entry in recent])

    assessment = assess_risk(entries, language, now)
    if assessment.risk_level.value in ("high", "critical"):
        log.warning(f"[RISK] {user_id} assessed at {assessment.risk_level.value} ({assessment.score:.1f})")

    return RiskAssessmentModel.model_validate(assessment.to_dict())
